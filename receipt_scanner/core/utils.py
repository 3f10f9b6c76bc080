"""
Utility functions and constants for receipt processing.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

# File type constants
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp"}
PDF_EXTS = {".pdf"}
TEXT_EXTS = {".txt"}

# Pattern constants for parsing
# OCR glues dates to neighbouring text, so only a leading digit blocks a match
DATE_PATTERNS = [
    r"(?<!\d)\d{4}[-/]\d{1,2}[-/]\d{1,2}",            # YYYY-MM-DD or YYYY/MM/DD
    r"(?<!\d)\d{1,2}[-/]\d{1,2}[-/](?:\d{4}|\d{2})",  # DD/MM/YYYY, MM-DD-YY, ...
]

TOTAL_LABELS = ("total", "amount", "balance", "grand total", "subtotal")

# digits followed by any number of ",ddd" / ".dd" groups
AMOUNT_RE = re.compile(r"\d+(?:[.,]\d+)*")
# same, but at least one separator group is required
DECIMAL_AMOUNT_RE = re.compile(r"\d+(?:[.,]\d+)+")

# Plausible receipt total range for unlabeled amounts
MIN_FALLBACK_AMOUNT = Decimal("1")
MAX_FALLBACK_AMOUNT = Decimal("1000")

# Longest second line still treated as part of the merchant name
MERCHANT_SUFFIX_MAX_LEN = 30


def normalize_amount(s: str) -> Optional[Decimal]:
    """Normalize amount string to Decimal."""
    if not s:
        return None
    s = s.replace(",", "").replace(" ", "")
    try:
        return Decimal(s)
    except InvalidOperation:
        return None


def money_fmt(v: Optional[float]) -> str:
    """Format amount as currency."""
    return f"${v:,.2f}" if v is not None else ""
