"""Runtime configuration defaults for persistence, loyalty and printing."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("POSDASH_DB_PATH", "data/posdash.db")
DEBUG_LOG_PATH = os.environ.get("POSDASH_DEBUG_LOG", "/tmp/posdash-debug.log")

# Loyalty rules.
LOYALTY_MIN_REDEEM_BALANCE = 30
LOYALTY_MAX_REDEEM_FRACTION = 0.3
LOYALTY_REGISTRATION_BONUS = 10

ACCOUNTING_SALES_CATEGORY = "Sales"
WALK_IN_CUSTOMER_NAME = "Guest"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 24
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 8
LOG_PATH = os.environ.get("POSDASH_LOG", "data/posdash.log")
LOG_LEVEL = os.environ.get("POSDASH_LOG_LEVEL", "INFO").upper()
