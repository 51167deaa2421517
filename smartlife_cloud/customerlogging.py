"""Package logger."""

import logging

logger = logging.getLogger("smartlife_cloud")
