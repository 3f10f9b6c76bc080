"""Shared fixtures for receipt scanner tests."""

import pytest

LLM_ENV_VARS = ("LLM_PROVIDER", "LLM_MODEL", "LLM_ENDPOINT", "LLM_TIMEOUT")

SAMPLE_RECEIPT = """
    STARBUCKS COFFEE
  Store #1234

123 Main Street, Springfield, IL 62701 United States
Date: 03/14/2024   08:12 AM
Caffe Latte Grande        4.95
Blueberry Muffin          3.25

Tax                       0.70
TOTAL                     8.90
VISA ************4242
"""


@pytest.fixture(autouse=True)
def clean_llm_env(monkeypatch):
    """Keep the developer's LLM_* settings out of the tests."""
    for name in LLM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_receipt() -> str:
    return SAMPLE_RECEIPT


class StubClassifier:
    """Remote classifier double that answers with a fixed label or error."""

    def __init__(self, label: str = "", error: Exception = None):
        self.label = label
        self.error = error
        self.calls = []

    def classify(self, text: str) -> str:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.label


@pytest.fixture
def stub_classifier():
    return StubClassifier
