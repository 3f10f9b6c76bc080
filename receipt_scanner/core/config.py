"""
Configuration for the extraction engine.
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

from .categorization import DEFAULT_RULES, KeywordRule, load_rules
from .exceptions import ConfigError
from .llm import LLMProvider, DEFAULT_ENDPOINT, DEFAULT_MODELS

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ExtractionConfig:
    """Settings handed to the extractor and the remote categorizer at construction."""
    remote_endpoint: str = DEFAULT_ENDPOINT
    model_name: Optional[str] = None
    request_timeout: Optional[float] = DEFAULT_TIMEOUT
    keyword_rules: List[KeywordRule] = field(default_factory=lambda: list(DEFAULT_RULES))
    provider: str = LLMProvider.OLLAMA.value
    use_remote: bool = True

    def __post_init__(self):
        valid = [p.value for p in LLMProvider]
        if self.provider not in valid:
            raise ConfigError(f"Invalid LLM provider: {self.provider} (must be one of: {', '.join(valid)})")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigError(f"Request timeout must be positive, got {self.request_timeout}")
        if self.model_name is None:
            object.__setattr__(self, "model_name", DEFAULT_MODELS[LLMProvider(self.provider)])

    @classmethod
    def from_env(cls, rules_path: Optional[Path] = None, **overrides) -> "ExtractionConfig":
        """
        Build a config from LLM_* environment variables.

        Keyword arguments that are not None take precedence over the
        environment (CLI flags are passed this way).
        """
        values = {}
        if os.getenv("LLM_PROVIDER"):
            values["provider"] = os.environ["LLM_PROVIDER"]
        if os.getenv("LLM_MODEL"):
            values["model_name"] = os.environ["LLM_MODEL"]
        if os.getenv("LLM_ENDPOINT"):
            values["remote_endpoint"] = os.environ["LLM_ENDPOINT"]
        if os.getenv("LLM_TIMEOUT"):
            try:
                values["request_timeout"] = float(os.environ["LLM_TIMEOUT"])
            except ValueError as e:
                raise ConfigError(f"LLM_TIMEOUT is not a number: {os.environ['LLM_TIMEOUT']!r}") from e
        if rules_path is not None:
            values["keyword_rules"] = load_rules(rules_path)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_rules(self, rules: List[KeywordRule]) -> "ExtractionConfig":
        return replace(self, keyword_rules=list(rules))
