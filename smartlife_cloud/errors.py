"""Error taxonomy and vendor error translation."""

from __future__ import annotations

import asyncio
import re
from typing import Any

import aiohttp


class SmartLifeError(Exception):
    """Base class for all SmartLife cloud errors."""

    hint = "An unexpected error occurred while talking to the Tuya cloud."


class NotConfiguredError(SmartLifeError):
    """API credentials are missing."""

    hint = (
        "Tuya API credentials are not configured. "
        "Set the Access ID and Access Secret first."
    )


class FetchError(SmartLifeError):
    """No device listing strategy returned any devices."""

    hint = (
        "No devices were returned. Check that the Access ID and Secret are "
        "correct, that your Smart Life app account is linked to the cloud "
        "project, and that the project has the device management API enabled."
    )


class CommandRejectedError(SmartLifeError):
    """The cloud accepted a command request but reported failure."""

    hint = "The device rejected the command."

    def __init__(self, message: str, code: Any = None) -> None:
        """Init CommandRejectedError."""
        super().__init__(message)
        self.code = code


class TransportError(SmartLifeError):
    """The cloud could not be reached."""

    hint = (
        "Could not reach the Tuya cloud. Check your internet connection "
        "and the API endpoint address."
    )


class SmartLifeAPIError(SmartLifeError):
    """Vendor API reported a failure."""

    vendor_code: int | None = None

    def __init__(self, message: str, code: Any = None) -> None:
        """Init SmartLifeAPIError."""
        super().__init__(message)
        self.code = code if code is not None else self.vendor_code


class VendorSignatureError(SmartLifeAPIError):
    """Request signature invalid (bad key or secret)."""

    vendor_code = 1004
    hint = "Invalid signature. Double-check the Access ID and Access Secret."


class VendorPermissionError(SmartLifeAPIError):
    """Cloud project lacks the required API scope."""

    vendor_code = 1106
    hint = (
        "Permission denied. Make sure the required API services are "
        "authorized for your cloud project."
    )


class VendorRegionError(SmartLifeAPIError):
    """Endpoint does not match the project's data center."""

    vendor_code = 1010
    hint = (
        "The request was rejected by this data center. Check that the "
        "endpoint matches your cloud project's region."
    )


class VendorRateLimitError(SmartLifeAPIError):
    """Request quota exceeded."""

    vendor_code = 28841105
    hint = "Too many requests. Wait a moment and try again."


VENDOR_ERRORS: dict[int, type[SmartLifeAPIError]] = {
    cls.vendor_code: cls
    for cls in (
        VendorSignatureError,
        VendorPermissionError,
        VendorRegionError,
        VendorRateLimitError,
    )
}

_VENDOR_CODE_RE = re.compile(
    r"(?<!\d)(" + "|".join(str(code) for code in VENDOR_ERRORS) + r")(?!\d)"
)
_TRANSPORT_RE = re.compile(
    r"ENOTFOUND|ECONNREFUSED|ECONNRESET|ETIMEDOUT|EAI_AGAIN|getaddrinfo|"
    r"Name or service not known|nodename nor servname|timed out",
    re.IGNORECASE,
)
_TRANSPORT_CODES = {"ENOTFOUND", "ECONNREFUSED", "ECONNRESET", "ETIMEDOUT", "EAI_AGAIN"}


def _as_vendor_code(code: Any) -> int | None:
    try:
        return int(code)
    except (TypeError, ValueError):
        return None


def error_for_code(code: Any, msg: str | None = None) -> SmartLifeAPIError:
    """Build the most specific vendor error for a response code."""
    message = f"{msg or 'Unknown error'} (code: {code if code is not None else 'N/A'})"
    cls = VENDOR_ERRORS.get(_as_vendor_code(code), SmartLifeAPIError)
    return cls(message, code)


def error_for_response(response: dict[str, Any]) -> SmartLifeAPIError:
    """Build a vendor error from a failed response envelope."""
    return error_for_code(response.get("code"), response.get("msg"))


def translate_error(exc: BaseException) -> BaseException:
    """Rewrite an arbitrary exception into the error taxonomy.

    Errors that are already part of the taxonomy are returned as is, except
    generic vendor errors whose code is recognized. Unrecognized errors pass
    through unchanged.
    """
    if isinstance(exc, SmartLifeAPIError) and type(exc) is SmartLifeAPIError:
        code = _as_vendor_code(exc.code)
        if code in VENDOR_ERRORS:
            return VENDOR_ERRORS[code](str(exc), exc.code)
        return exc
    if isinstance(exc, SmartLifeError):
        return exc

    code = getattr(exc, "code", None)
    if _as_vendor_code(code) in VENDOR_ERRORS:
        return error_for_code(code, str(exc))
    if isinstance(code, str) and code.upper() in _TRANSPORT_CODES:
        return TransportError(f"{exc} ({code})")

    if isinstance(exc, (aiohttp.ClientError, asyncio.TimeoutError, OSError)):
        return TransportError(str(exc) or type(exc).__name__)

    message = str(exc)
    if match := _VENDOR_CODE_RE.search(message):
        return error_for_code(int(match.group(1)), message)
    if _TRANSPORT_RE.search(message):
        return TransportError(message)
    return exc
