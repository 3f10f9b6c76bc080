"""
Parsers for extracting information from receipt text.
"""

import re
from typing import Sequence, Tuple

from .utils import (DATE_PATTERNS, TOTAL_LABELS, AMOUNT_RE, DECIMAL_AMOUNT_RE,
                    MIN_FALLBACK_AMOUNT, MAX_FALLBACK_AMOUNT, MERCHANT_SUFFIX_MAX_LEN,
                    normalize_amount)

DATE_RE = re.compile("|".join(DATE_PATTERNS))


def normalize_lines(text: str) -> Tuple[str, ...]:
    """Split raw OCR text into trimmed, non-empty lines (layout order kept)."""
    if not text:
        return ()
    return tuple(ln.strip() for ln in text.splitlines() if ln.strip())


def parse_total(lines: Sequence[str]) -> str:
    """
    Extract the total amount from receipt lines.

    A line carrying a total/amount/balance label wins: the last number on
    the first such line that has one is returned as written. Without a
    labeled line, the largest decimal figure between 1 and 1000 anywhere on
    the receipt is used, formatted with two decimals.

    Returns:
        Amount as text, or "" if nothing plausible was found
    """
    for ln in lines:
        lower = ln.lower()
        if not any(label in lower for label in TOTAL_LABELS):
            continue
        # Amount usually follows the label
        matches = AMOUNT_RE.findall(ln)
        if matches:
            return matches[-1]

    candidates = []
    for ln in lines:
        for raw in DECIMAL_AMOUNT_RE.findall(ln):
            val = normalize_amount(raw)
            if val is not None and MIN_FALLBACK_AMOUNT <= val <= MAX_FALLBACK_AMOUNT:
                candidates.append(val)

    if not candidates:
        return ""
    return f"{max(candidates):.2f}"


def parse_date(lines: Sequence[str]) -> str:
    """Return the first date-shaped token, verbatim, or ""."""
    for ln in lines:
        m = DATE_RE.search(ln)
        if m:
            return m.group(0)
    return ""


def parse_merchant(lines: Sequence[str]) -> str:
    """
    Extract merchant name from the top of the receipt.

    The first line is the name. A short second line (store number, branch)
    is appended; a long one is most likely an address and is left out.
    """
    if not lines:
        return ""
    merchant = lines[0]
    if len(lines) > 1 and len(lines[1]) < MERCHANT_SUFFIX_MAX_LEN:
        merchant = f"{merchant} {lines[1]}"
    return merchant
