"""Collect command output ("facts") from a fleet of hosts over SSH."""

import logging

__version__ = "0.1.0"

# Silent unless the application configures a handler
logging.getLogger(__name__).addHandler(logging.NullHandler())
