#!/usr/bin/env python3
"""
Main CLI entrypoint for the receipt scanner.
"""

import argparse
import os
import sys
from pathlib import Path

from receipt_scanner.core.config import ExtractionConfig
from receipt_scanner.core.exceptions import ConfigError
from receipt_scanner.core.llm import LLMProvider
from receipt_scanner.core.processor import ReceiptExtractor
from receipt_scanner.core.reporting import build_summary_pdf, category_totals, write_csv
from receipt_scanner.core.utils import money_fmt


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receipt-scan",
        description="Extract merchant, date, total and category from receipt scans",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan receipts using the local Ollama model for categories
  receipt-scan scans/*.jpg

  # Keyword rules only, export results
  receipt-scan --no-llm --csv receipts.csv --summary-pdf summary.pdf scans/*

  # Already OCR'd text with a hosted model
  receipt-scan --llm-provider openai receipt.txt
        """
    )
    parser.add_argument("files", nargs="+",
                        help="Receipt images, PDFs or .txt files with OCR output")
    parser.add_argument("--rules", default="./rules.json",
                        help="rules.json with keyword matchers (default: ./rules.json, built-in rules if missing)")
    parser.add_argument("--csv", help="Write extracted receipts to this CSV file")
    parser.add_argument("--summary-pdf", help="Write a category summary PDF to this path")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show detailed parsing information for debugging")

    # LLM configuration
    parser.add_argument("--llm-provider",
                        choices=[p.value for p in LLMProvider],
                        help="LLM provider to use (default: ollama, or LLM_PROVIDER env var)")
    parser.add_argument("--llm-model",
                        help="LLM model to use (uses provider default if not specified, or LLM_MODEL env var)")
    parser.add_argument("--llm-endpoint",
                        help="Generate endpoint for the ollama provider (or LLM_ENDPOINT env var)")
    parser.add_argument("--llm-timeout", type=float,
                        help="Seconds to wait for the categorizer (or LLM_TIMEOUT env var)")
    parser.add_argument("--no-llm", action="store_true",
                        help="Disable remote categorization, use only keyword rules")
    return parser


def main(argv=None):
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)

    try:
        config = ExtractionConfig.from_env(
            rules_path=Path(args.rules),
            provider=args.llm_provider,
            model_name=args.llm_model,
            remote_endpoint=args.llm_endpoint,
            request_timeout=args.llm_timeout,
            use_remote=False if args.no_llm else None,
        )
    except ConfigError as e:
        print(f"[ERROR] {e}")
        return 1

    if Path(args.rules).exists():
        print(f"[INFO] Using {len(config.keyword_rules)} keyword rule(s) from {args.rules}")

    if config.use_remote:
        env_source = ""
        if not args.llm_provider and os.getenv("LLM_PROVIDER"):
            env_source = " [from LLM_PROVIDER env]"
        elif not args.llm_model and os.getenv("LLM_MODEL"):
            env_source = " [from LLM_MODEL env]"
        print(f"[INFO] LLM: {config.provider} ({config.model_name}){env_source}")

    extractor = ReceiptExtractor(config, verbose=args.verbose)

    # Saved receipts, in scan order
    receipts = []
    for name in args.files:
        path = Path(name)
        print(f"[INFO] Processing {path.name}")
        receipt = extractor.scan_file(path)
        receipts.append(receipt)
        print(f"  {receipt.merchant or '(no merchant)'} | {receipt.date or '-'} | "
              f"{receipt.total or '-'} | {receipt.category}")

    print("[INFO] Category totals:")
    for cat, amt in category_totals(receipts).items():
        print(f"  {cat}: {money_fmt(amt)}")

    if args.csv:
        write_csv(receipts, Path(args.csv))
        print(f"[OK] Wrote {args.csv}")
    if args.summary_pdf:
        build_summary_pdf(receipts, Path(args.summary_pdf))
        print(f"[OK] Wrote {args.summary_pdf}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
