"""
Categorization logic for receipts based on keyword rules.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .exceptions import ConfigError
from .models import DEFAULT_CATEGORY


@dataclass(frozen=True)
class KeywordRule:
    """One keyword group; matches when any keyword appears as a word."""
    name: str
    category: str
    keywords: Sequence[str]
    pattern: "re.Pattern" = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "keywords", tuple(self.keywords))
        if not self.keywords:
            raise ConfigError(f"Rule {self.name!r} has no keywords")
        # keywords are regex fragments, so "restaurants?" or "mcdonald'?s" work
        rx = re.compile(r"\b(?:" + "|".join(self.keywords) + r")\b", re.IGNORECASE)
        object.__setattr__(self, "pattern", rx)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


# Evaluated top to bottom; the first match wins, so transport words are
# checked before food words and so on.
DEFAULT_RULES: List[KeywordRule] = [
    KeywordRule("Ride/transit/flight", "Travel", [
        "uber", "lyft", "taxi", "cab", "airlines?", "airways", "flights?",
        "airport", "amtrak", "train", "rail", "metro", "transit", "subway",
        "bus", "greyhound", "boarding pass",
    ]),
    KeywordRule("Food/drink", "Food & Drink", [
        "restaurants?", "cafe", "café", "coffee", "starbucks", "dunkin",
        "mcdonald'?s", "burger", "pizza", "diner", "grill", "bistro", "bar",
        "pub", "tavern", "bakery", "kitchen", "sushi", "taco",
        "chipotle", "espresso", "latte", "brewery", "dine in", "take ?out",
    ]),
    KeywordRule("Grocery", "Groceries", [
        "grocery", "groceries", "supermarket", "market", "whole foods",
        "trader joe'?s", "safeway", "kroger", "aldi", "publix", "wegmans",
        "produce",
    ]),
    KeywordRule("Lodging", "Lodging", [
        "hotel", "motel", "inn", "resort", "lodge", "hostel", "airbnb",
        "suites", "marriott", "hilton", "hyatt", "room rate",
    ]),
    KeywordRule("Pharmacy/health", "Pharmacy/Health", [
        "pharmacy", "cvs", "walgreens", "rite aid", "drug ?store", "rx",
        "clinic", "hospital", "medical", "dental", "health", "prescription",
    ]),
    KeywordRule("Retail", "Shopping", [
        "walmart", "target", "amazon", "costco", "best buy", "ikea", "mall",
        "store", "boutique", "outlet", "apparel", "clothing", "electronics",
    ]),
    KeywordRule("Fuel", "Gas/Transport", [
        "gas", "gasoline", "fuel", "petrol", "diesel", "shell", "chevron",
        "exxon", "mobil", "texaco", "unleaded", "gallons?", "parking", "toll",
    ]),
    KeywordRule("Utilities/billing", "Utilities", [
        "electric", "electricity", "water bill", "utility", "utilities",
        "internet", "comcast", "verizon", "at&t", "phone bill", "energy",
        "billing period", "account number",
    ]),
]


def load_rules(path: Path) -> List[KeywordRule]:
    """
    Load categorization rules from JSON file.

    Format:
        {
          "matchers": [
            {"name": "Ride share", "category": "Travel", "keywords": ["uber", "lyft"]},
            {"name": "Coffee", "category": "Food & Drink", "keywords": ["starbucks"]}
          ]
        }

    A missing file means the built-in rules are used.
    """
    if not path.exists():
        return list(DEFAULT_RULES)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not read rules file {path}: {e}") from e
    return rules_from_dict(data)


def rules_from_dict(data: Dict) -> List[KeywordRule]:
    """Build an ordered rule table from a parsed rules document."""
    if not isinstance(data, dict):
        raise ConfigError("Rules document must be a JSON object")
    matchers = data.get("matchers", [])
    if not isinstance(matchers, list):
        raise ConfigError("\"matchers\" must be a list")
    rules = []
    for i, m in enumerate(matchers):
        try:
            keywords = m["keywords"]
            if isinstance(keywords, str):
                raise ConfigError(f"Matcher #{i + 1}: \"keywords\" must be a list, not a string")
            rules.append(KeywordRule(
                name=m.get("name") or f"rule-{i + 1}",
                category=m["category"],
                keywords=list(keywords),
            ))
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigError(f"Malformed matcher #{i + 1}: {e!r}") from e
        except re.error as e:
            raise ConfigError(f"Bad keyword pattern in matcher #{i + 1}: {e}") from e
    return rules


def find_matching_rule(merchant: str, text: str,
                       rules: Optional[Sequence[KeywordRule]] = None) -> Optional[KeywordRule]:
    """Return the first rule matching merchant + text, or None."""
    rules = DEFAULT_RULES if rules is None else rules
    combined = f"{merchant or ''} {text or ''}".lower()
    for rule in rules:
        if rule.matches(combined):
            return rule
    return None


def categorize(merchant: str, text: str,
               rules: Optional[Sequence[KeywordRule]] = None) -> str:
    """
    Categorize a receipt based on merchant and text content.

    Args:
        merchant: Merchant name
        text: Full receipt text
        rules: Ordered keyword rules (built-in table when None)

    Returns:
        Category label, "Other" when no rule matches
    """
    rule = find_matching_rule(merchant, text, rules)
    return rule.category if rule else DEFAULT_CATEGORY
