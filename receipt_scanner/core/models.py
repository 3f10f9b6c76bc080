"""
Data models for receipt processing.
"""

from dataclasses import dataclass, asdict
from typing import Tuple

DEFAULT_CATEGORY = "Other"

# Labels produced by the keyword rules
RULE_CATEGORIES: Tuple[str, ...] = (
    "Travel",
    "Food & Drink",
    "Groceries",
    "Lodging",
    "Pharmacy/Health",
    "Shopping",
    "Gas/Transport",
    "Utilities",
    DEFAULT_CATEGORY,
)

# Labels offered to the remote classifier. Kept worded as the classifier
# prompt has always had them (Health, Gas), answers are taken verbatim.
REMOTE_CATEGORIES: Tuple[str, ...] = (
    "Travel",
    "Food & Drink",
    "Groceries",
    "Lodging",
    "Health",
    "Shopping",
    "Gas",
    "Utilities",
    DEFAULT_CATEGORY,
)


@dataclass(frozen=True)
class ExtractedReceipt:
    """Structured fields pulled out of one receipt's OCR text.

    Fields that could not be found are empty strings, never None.
    ``category`` is never empty.
    """
    merchant: str = ""
    date: str = ""
    total: str = ""
    category: str = DEFAULT_CATEGORY

    @classmethod
    def empty(cls) -> "ExtractedReceipt":
        return cls()

    def to_dict(self):
        """Convert to dictionary."""
        return asdict(self)
