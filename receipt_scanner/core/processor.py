"""
Main receipt extraction orchestration.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .categorization import KeywordRule, categorize
from .config import ExtractionConfig
from .exceptions import ReceiptScannerError
from .llm import RemoteCategorizer
from .models import DEFAULT_CATEGORY, ExtractedReceipt
from .ocr import extract_text
from .parsers import normalize_lines, parse_date, parse_merchant, parse_total


class TextClassifier(Protocol):
    def classify(self, text: str) -> str:
        ...


class ResolutionState(str, Enum):
    """Where category resolution ended up."""
    RULE_ONLY = "rule-only"
    REMOTE_PENDING = "remote-pending"
    REMOTE_RESOLVED = "remote-resolved"
    REMOTE_FAILED = "remote-failed"


@dataclass(frozen=True)
class CategoryResolution:
    category: str
    rule_category: str
    state: ResolutionState
    detail: str = ""


class CategoryResolver:
    """
    Two-stage category lookup.

    The keyword rules always run first. When a remote classifier is present
    its answer replaces the rule label, unless the call fails or comes back
    empty, in which case the rule label stands.
    """

    def __init__(self, rules: Optional[Sequence[KeywordRule]] = None,
                 remote: Optional[TextClassifier] = None):
        self.rules = rules
        self.remote = remote

    def resolve(self, merchant: str, text: str) -> CategoryResolution:
        rule_category = categorize(merchant, text, self.rules) or DEFAULT_CATEGORY
        if self.remote is None or not (text or "").strip():
            return CategoryResolution(rule_category, rule_category, ResolutionState.RULE_ONLY)

        state = ResolutionState.REMOTE_PENDING
        detail = ""
        try:
            label = (self.remote.classify(text) or "").strip()
        except Exception as e:  # any classifier failure means "no remote label"
            state, detail = ResolutionState.REMOTE_FAILED, str(e)
        else:
            if label:
                state = ResolutionState.REMOTE_RESOLVED
            else:
                state, detail = ResolutionState.REMOTE_FAILED, "empty label"

        category = label if state == ResolutionState.REMOTE_RESOLVED else rule_category
        return CategoryResolution(category, rule_category, state, detail)


class ReceiptExtractor:
    """Turns raw receipt OCR text into an ExtractedReceipt."""

    def __init__(self, config: Optional[ExtractionConfig] = None,
                 remote: Optional[TextClassifier] = None,
                 verbose: bool = False):
        """
        Initialize receipt extractor.

        Args:
            config: Engine settings (defaults when None)
            remote: Classifier overriding the keyword category. Built from
                the config when omitted and config.use_remote is set.
            verbose: Whether to show verbose debugging output
        """
        self.config = config or ExtractionConfig()
        self.verbose = verbose
        if remote is None and self.config.use_remote:
            remote = RemoteCategorizer.from_config(self.config)
        self.resolver = CategoryResolver(self.config.keyword_rules, remote)

    def extract(self, text: str) -> ExtractedReceipt:
        """Extract merchant, date, total and category. Never raises."""
        try:
            return self._extract(text)
        except Exception as e:
            if self.verbose:
                print(f"  [WARN] Extraction failed, returning empty receipt: {e}")
            return ExtractedReceipt.empty()

    def _extract(self, text: str) -> ExtractedReceipt:
        lines = normalize_lines(text)

        merchant = parse_merchant(lines)
        date = parse_date(lines)
        total = parse_total(lines)
        resolution = self.resolver.resolve(merchant, text or "")

        if self.verbose:
            print(f"  [DEBUG] Merchant: '{merchant or '(none)'}'")
            print(f"  [DEBUG] Date: {date or '(none)'}")
            print(f"  [DEBUG] Total: {total or '(none)'}")
            print(f"  [DEBUG] Category: {resolution.category} ({resolution.state.value}, "
                  f"rules said {resolution.rule_category})")
            if resolution.state == ResolutionState.REMOTE_FAILED:
                print(f"  [WARN] Remote categorizer unavailable: {resolution.detail}")
            if not lines:
                print(f"  [WARN] No text to parse. Check OCR quality.")

        return ExtractedReceipt(merchant=merchant, date=date, total=total,
                                category=resolution.category)

    def scan_file(self, path: Path) -> ExtractedReceipt:
        """OCR a receipt file and extract it; OCR failures give an empty receipt."""
        try:
            text = extract_text(path)
        except ReceiptScannerError as e:
            if self.verbose:
                print(f"  [WARN] Could not read {path.name}, returning empty receipt: {e}")
            return ExtractedReceipt.empty()
        return self.extract(text)
