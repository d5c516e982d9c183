"""Thermal receipt printing for settled orders."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

from posdash.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from posdash.models import Order, Settings
from posdash.pricing import line_total

_FONT_OVERRIDE_ENV = "RECEIPT_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)
_RIGHT_GUTTER_PX = 8
_ROW_PADDING_PX = 6
_SECTION_GAP_PX = 14
_TAIL_SPACER_PX = 70
_RULE = "__RULE__"


def format_money(amount: float, currency_symbol: str) -> str:
    return f"{currency_symbol}{amount:,.2f}"


def receipt_rows(order: Order, settings: Settings, branch_name: str | None = None) -> list[tuple[str, str]]:
    """Build ``(left, right)`` text rows for a receipt; ``_RULE`` rows draw a separator."""
    def money(amount: float) -> str:
        return format_money(amount, settings.currency_symbol)

    placed = datetime.fromtimestamp(order.created_at / 1000).strftime("%Y-%m-%d %H:%M")

    rows: list[tuple[str, str]] = [(settings.app_name, "")]
    if branch_name:
        rows.append((branch_name, ""))
    rows.append((order.order_id, placed))
    rows.append((_RULE, ""))

    for line in order.lines:
        rows.append((f"{line.quantity}x {line.name}", money(line_total(line))))
        for add_on in line.add_ons:
            rows.append((f"   + {add_on.name}", ""))

    rows.append((_RULE, ""))
    rows.append(("Subtotal", money(order.subtotal)))
    rows.append(("VAT", money(order.vat)))
    if order.discount > 0:
        rows.append(("Discount", f"-{money(order.discount)}"))
    rows.append(("TOTAL", money(order.total)))
    rows.append(("Paid by", order.payment_method.value))

    if order.customer_phone:
        rows.append((_RULE, ""))
        rows.append((order.customer_name or "Customer", order.customer_phone))
    return rows


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. RECEIPT_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _render_row(left: str, right: str, font: object) -> object:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    probe_draw = ImageDraw.Draw(probe)
    left_bbox = probe_draw.textbbox((0, 0), left or " ", font=font)
    text_height = left_bbox[3] - left_bbox[1]
    canvas_height = max(12, text_height + 2 * _ROW_PADDING_PX)

    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - left_bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), left, font=font, fill=0)
    if right:
        right_bbox = draw.textbbox((0, 0), right, font=font)
        right_x = PRINTER_WIDTH_PX - _RIGHT_GUTTER_PX - (right_bbox[2] - right_bbox[0]) - right_bbox[0]
        draw.text((right_x, y), right, font=font, fill=0)
    return img


def _render_rule() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _SECTION_GAP_PX), color=1)
    draw = ImageDraw.Draw(img)
    mid = _SECTION_GAP_PX // 2
    draw.line(
        (PRINTER_LEFT_INDENT_PX, mid, PRINTER_WIDTH_PX - _RIGHT_GUTTER_PX, mid),
        fill=0,
        width=2,
    )
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def print_receipt(order: Order, settings: Settings, branch_name: str | None = None) -> None:
    """Print a customer receipt for ``order`` and cut the ticket."""
    if not order.lines:
        raise ValueError("Cannot print a receipt without lines")

    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)

    for left, right in receipt_rows(order, settings, branch_name):
        if left == _RULE:
            printer.image(_render_rule())
            continue
        printer.image(_render_row(left, right, font))

    printer.image(_render_spacer(_TAIL_SPACER_PX))
    printer.cut()
