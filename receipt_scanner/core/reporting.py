"""
CSV export, category totals and PDF summary for saved receipts.
"""

import csv
import datetime as dt
import re
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Sequence

from .models import DEFAULT_CATEGORY, ExtractedReceipt
from .utils import money_fmt

CSV_FIELDS = ["merchant", "date", "total", "category"]


def parse_amount_value(total: str) -> float:
    """Parse a total string for arithmetic; anything unparseable counts as 0."""
    if not total:
        return 0.0
    cleaned = re.sub(r"[^\d.\-]", "", total)
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def category_totals(receipts: Sequence[ExtractedReceipt]) -> Dict[str, float]:
    """Sum receipt totals per category, in first-seen order."""
    totals = defaultdict(float)
    for r in receipts:
        totals[r.category or DEFAULT_CATEGORY] += parse_amount_value(r.total)
    return dict(totals)


def write_csv(receipts: Sequence[ExtractedReceipt], out_csv: Path):
    """Write receipts to CSV file."""
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        w.writeheader()
        for r in receipts:
            w.writerow(r.to_dict())


def build_summary_pdf(receipts: List[ExtractedReceipt], out_pdf: Path,
                      title: str = "Receipt Summary"):
    """Build a summary PDF with category totals followed by every receipt."""
    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas
    from reportlab.lib.units import inch

    c = canvas.Canvas(out_pdf.as_posix(), pagesize=letter)
    width, height = letter

    def next_line(y, step=0.2 * inch, font_size=10):
        y -= step
        if y < 1.2 * inch:
            c.showPage()
            c.setFont("Helvetica", font_size)
            y = height - 1 * inch
        return y

    # Title page
    y = height - 1 * inch
    c.setFont("Helvetica-Bold", 16)
    c.drawString(1 * inch, y, title)
    y -= 0.3 * inch
    c.setFont("Helvetica", 10)
    timestamp = dt.datetime.now().isoformat(timespec='seconds')
    c.drawString(1 * inch, y, f"Generated: {timestamp}")
    y -= 0.4 * inch

    # Category Totals
    c.setFont("Helvetica-Bold", 12)
    c.drawString(1 * inch, y, "Category Totals")
    y -= 0.25 * inch
    c.setFont("Helvetica", 10)
    for cat, amt in sorted(category_totals(receipts).items()):
        c.drawString(1.1 * inch, y, f"{cat}: {money_fmt(amt)}")
        y = next_line(y)

    # Line items
    y -= 0.2 * inch
    c.setFont("Helvetica-Bold", 12)
    c.drawString(1 * inch, y, "Receipts")
    y -= 0.25 * inch
    c.setFont("Helvetica", 9)
    for r in receipts:
        merchant = (r.merchant or "(unknown)")[:45]
        c.drawString(1.1 * inch, y, r.date or "-")
        c.drawString(2.1 * inch, y, merchant)
        c.drawString(5.2 * inch, y, r.category)
        c.drawRightString(width - 1 * inch, y, r.total or "-")
        y = next_line(y, 0.18 * inch, 9)

    c.showPage()
    c.save()
