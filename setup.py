"""Setup script for smartlife_cloud package."""

from setuptools import setup, find_packages

setup(
    name="smartlife-cloud",
    version="0.1.0",
    description="Tuya OpenAPI control panel core for Smart Life devices",
    packages=find_packages(include=["smartlife_cloud", "smartlife_cloud.*"]),
    python_requires=">=3.11",
    install_requires=[
        "aiohttp",
        "voluptuous",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "pytest-aiohttp",
        ],
    },
    entry_points={
        "console_scripts": [
            "smartlife=smartlife_cloud.cli:main",
        ],
    },
)
