"""Run the SmartLife command line."""

import sys

from .cli import main

sys.exit(main())
