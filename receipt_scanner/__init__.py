"""
Receipt Scanner

Pulls merchant, date, total and a spending category out of raw receipt OCR
text, with keyword rules and an optional remote classifier for the category.
"""

__version__ = "1.0.0"
__author__ = "Receipt Scanner Contributors"

from receipt_scanner.core.models import ExtractedReceipt
from receipt_scanner.core.processor import ReceiptExtractor

__all__ = ["ExtractedReceipt", "ReceiptExtractor"]
