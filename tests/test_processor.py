"""Tests for category resolution and the extraction orchestrator."""

from unittest.mock import patch

import requests

from receipt_scanner.core.categorization import categorize, rules_from_dict
from receipt_scanner.core.config import ExtractionConfig
from receipt_scanner.core.llm import RemoteCategorizer
from receipt_scanner.core.models import ExtractedReceipt
from receipt_scanner.core.processor import (CategoryResolver, ReceiptExtractor,
                                            ResolutionState)

RULES_ONLY = ExtractionConfig(use_remote=False)


class TestCategoryResolver:
    """Tests for CategoryResolver."""

    def test_rule_only_without_remote(self) -> None:
        res = CategoryResolver().resolve("Starbucks", "latte")
        assert res.state == ResolutionState.RULE_ONLY
        assert res.category == "Food & Drink"
        assert res.rule_category == "Food & Drink"

    def test_remote_overrides_rules(self, stub_classifier) -> None:
        res = CategoryResolver(remote=stub_classifier("Health")).resolve("Starbucks", "latte")
        assert res.state == ResolutionState.REMOTE_RESOLVED
        assert res.category == "Health"
        assert res.rule_category == "Food & Drink"

    def test_remote_label_is_trimmed(self, stub_classifier) -> None:
        res = CategoryResolver(remote=stub_classifier("  Gas \n")).resolve("Shell", "fuel")
        assert res.category == "Gas"

    def test_remote_failure_falls_back(self, stub_classifier) -> None:
        remote = stub_classifier(error=RuntimeError("down"))
        res = CategoryResolver(remote=remote).resolve("Starbucks", "latte")
        assert res.state == ResolutionState.REMOTE_FAILED
        assert res.category == "Food & Drink"
        assert "down" in res.detail

    def test_empty_remote_label_falls_back(self, stub_classifier) -> None:
        res = CategoryResolver(remote=stub_classifier("   ")).resolve("ACME", "widget")
        assert res.state == ResolutionState.REMOTE_FAILED
        assert res.category == "Other"

    def test_remote_not_called_for_blank_text(self, stub_classifier) -> None:
        remote = stub_classifier("Travel")
        res = CategoryResolver(remote=remote).resolve("", "  \n ")
        assert res.state == ResolutionState.RULE_ONLY
        assert res.category == "Other"
        assert remote.calls == []


class TestReceiptExtractor:
    """Tests for ReceiptExtractor.extract."""

    def test_sample_receipt(self, sample_receipt) -> None:
        receipt = ReceiptExtractor(RULES_ONLY).extract(sample_receipt)
        assert receipt == ExtractedReceipt(
            merchant="STARBUCKS COFFEE Store #1234",
            date="03/14/2024",
            total="8.90",
            category="Food & Drink",
        )

    def test_empty_text(self, stub_classifier) -> None:
        expected = {"merchant": "", "date": "", "total": "", "category": "Other"}
        assert ReceiptExtractor(RULES_ONLY).extract("").to_dict() == expected
        assert ReceiptExtractor(remote=stub_classifier("Travel")).extract("").to_dict() == expected

    def test_none_text(self) -> None:
        assert ReceiptExtractor(RULES_ONLY).extract(None) == ExtractedReceipt.empty()

    def test_category_never_empty(self, stub_classifier) -> None:
        extractor = ReceiptExtractor(remote=stub_classifier(""))
        for text in ["", "ACME", "\n\n", "TOTAL 3.00", "????"]:
            assert extractor.extract(text).category

    def test_remote_success_overrides(self, sample_receipt, stub_classifier) -> None:
        receipt = ReceiptExtractor(remote=stub_classifier("Coffee")).extract(sample_receipt)
        assert receipt.category == "Coffee"
        assert receipt.total == "8.90"

    def test_remote_network_failure_uses_rules(self, sample_receipt) -> None:
        extractor = ReceiptExtractor(ExtractionConfig())
        assert isinstance(extractor.resolver.remote, RemoteCategorizer)

        with patch("receipt_scanner.core.llm.requests.post",
                   side_effect=requests.ConnectionError("refused")):
            receipt = extractor.extract(sample_receipt)

        assert receipt.category == categorize(receipt.merchant, sample_receipt)

    def test_remote_receives_full_text(self, sample_receipt, stub_classifier) -> None:
        remote = stub_classifier("Food & Drink")
        ReceiptExtractor(remote=remote).extract(sample_receipt)
        assert remote.calls == [sample_receipt]

    def test_idempotent(self, sample_receipt, stub_classifier) -> None:
        extractor = ReceiptExtractor(remote=stub_classifier("Food & Drink"))
        assert extractor.extract(sample_receipt) == extractor.extract(sample_receipt)

    def test_unexpected_failure_gives_empty_receipt(self, sample_receipt, monkeypatch) -> None:
        def boom(lines):
            raise RuntimeError("parser bug")

        monkeypatch.setattr("receipt_scanner.core.processor.parse_total", boom)
        assert ReceiptExtractor(RULES_ONLY).extract(sample_receipt) == ExtractedReceipt.empty()

    def test_custom_rules_from_config(self) -> None:
        rules = rules_from_dict({"matchers": [
            {"name": "Books", "category": "Education", "keywords": ["textbook"]},
        ]})
        extractor = ReceiptExtractor(RULES_ONLY.with_rules(rules))
        assert extractor.extract("Campus Shop\nTextbook 89.00").category == "Education"
        assert extractor.extract("Starbucks\nLatte 4.00").category == "Other"

    def test_verbose_output(self, sample_receipt, stub_classifier, capsys) -> None:
        remote = stub_classifier(error=RuntimeError("refused"))
        ReceiptExtractor(remote=remote, verbose=True).extract(sample_receipt)
        out = capsys.readouterr().out
        assert "[DEBUG] Total: 8.90" in out
        assert "[WARN] Remote categorizer unavailable: refused" in out


class TestScanFile:
    """Tests for ReceiptExtractor.scan_file."""

    def test_text_file(self, tmp_path, sample_receipt) -> None:
        path = tmp_path / "receipt.txt"
        path.write_text(sample_receipt, encoding="utf-8")
        receipt = ReceiptExtractor(RULES_ONLY).scan_file(path)
        assert receipt.total == "8.90"
        assert receipt.date == "03/14/2024"

    def test_unsupported_file_gives_empty_receipt(self, tmp_path) -> None:
        path = tmp_path / "receipt.docx"
        path.write_bytes(b"PK")
        assert ReceiptExtractor(RULES_ONLY).scan_file(path) == ExtractedReceipt.empty()

    def test_unreadable_image_gives_empty_receipt(self, tmp_path, capsys) -> None:
        receipt = ReceiptExtractor(RULES_ONLY).scan_file(tmp_path / "missing.png")
        assert receipt == ExtractedReceipt.empty()
        assert capsys.readouterr().out == ""

    def test_unreadable_file_warns_when_verbose(self, tmp_path, capsys) -> None:
        receipt = ReceiptExtractor(RULES_ONLY, verbose=True).scan_file(tmp_path / "missing.png")
        assert receipt == ExtractedReceipt.empty()
        out = capsys.readouterr().out
        assert "[WARN] Could not read missing.png" in out
        assert "[ERROR]" not in out
