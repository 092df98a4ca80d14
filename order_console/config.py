"""
config.py — Runtime Configuration for the Order Console

All settings are read from environment variables with sensible defaults,
so the console runs unchanged against a local mock backend or a deployed one.

Settings:
    • Backend base URL and bearer token (session storage stand-in)
    • HTTP timeouts applied to every backend call
    • Pricing rates (tax, service charge)
    • Logging destination and level
"""

import os
from decimal import Decimal

# Backend address (normally injected by the deployment)
API_BASE_URL = os.environ.get("CONSOLE_API_BASE_URL", "http://localhost:8000")
API_TOKEN = os.environ.get("CONSOLE_API_TOKEN", "")

# Every backend call is bounded; a call that runs past these limits is a failure of that call.
HTTP_CONNECT_TIMEOUT = float(os.environ.get("CONSOLE_HTTP_CONNECT_TIMEOUT", "5.0"))
HTTP_READ_TIMEOUT = float(os.environ.get("CONSOLE_HTTP_READ_TIMEOUT", "8.0"))

TAX_RATE = Decimal(os.environ.get("CONSOLE_TAX_RATE", "0.18"))
SERVICE_CHARGE_RATE = Decimal(os.environ.get("CONSOLE_SERVICE_CHARGE_RATE", "0.10"))

LOG_FILE = os.environ.get("CONSOLE_LOG_FILE", "order_console.log")
LOG_LEVEL = os.environ.get("CONSOLE_LOG_LEVEL", "INFO")
