"""
Exceptions raised inside the receipt scanner.
"""


class ReceiptScannerError(Exception):
    """Base class for receipt scanner errors."""


class ConfigError(ReceiptScannerError):
    """Invalid configuration (unknown provider, malformed rules file)."""


class RemoteClassificationError(ReceiptScannerError):
    """The remote categorizer could not produce a label."""


class OCRError(ReceiptScannerError):
    """Text could not be obtained from a receipt file."""
