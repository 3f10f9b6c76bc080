"""
Remote receipt categorization via a text-generation service.

The default provider is a locally reachable Ollama-style ``/api/generate``
endpoint spoken to over plain HTTP. Hosted OpenAI and Anthropic models can be
used instead through their SDKs.
"""

from enum import Enum
from typing import Dict, Optional, Sequence

import requests

from .exceptions import RemoteClassificationError
from .models import REMOTE_CATEGORIES


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    OLLAMA = "ollama"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


DEFAULT_ENDPOINT = "http://localhost:11434/api/generate"

# Default models for each provider
DEFAULT_MODELS = {
    LLMProvider.OLLAMA: "llama3",
    LLMProvider.OPENAI: "gpt-4o-mini",
    LLMProvider.ANTHROPIC: "claude-3-5-haiku-20241022",
}

# Lazy import clients
_clients: Dict[tuple, object] = {}


def build_prompt(text: str, categories: Sequence[str] = REMOTE_CATEGORIES) -> str:
    """Instruction asking for exactly one category label for the receipt."""
    return (
        "Categorize this receipt into exactly one of these categories: "
        f"{', '.join(categories)}.\n"
        "Respond with the category name only, no extra text.\n\n"
        f"Receipt text:\n{text}"
    )


def _get_openai_client(timeout: Optional[float]):
    """Get or create OpenAI client (lazy initialization)."""
    key = ("openai", timeout)
    if key not in _clients:
        import openai
        _clients[key] = openai.OpenAI(timeout=timeout)  # Uses OPENAI_API_KEY env var
    return _clients[key]


def _get_anthropic_client(timeout: Optional[float]):
    """Get or create Anthropic client (lazy initialization)."""
    key = ("anthropic", timeout)
    if key not in _clients:
        import anthropic
        _clients[key] = anthropic.Anthropic(timeout=timeout)  # Uses ANTHROPIC_API_KEY env var
    return _clients[key]


def _call_ollama(prompt: str, model: str, endpoint: str, timeout: Optional[float]) -> str:
    """POST the prompt to a generate endpoint and return the generated text."""
    try:
        response = requests.post(
            endpoint,
            json={"model": model, "prompt": prompt, "stream": False},
            timeout=timeout,
        )
        response.raise_for_status()
        body = response.json()
    except requests.RequestException as e:
        raise RemoteClassificationError(f"Request to {endpoint} failed: {e}") from e
    except ValueError as e:
        raise RemoteClassificationError(f"Response from {endpoint} is not JSON") from e

    if not isinstance(body, dict) or not isinstance(body.get("response"), str):
        raise RemoteClassificationError(f"Response from {endpoint} has no generated text")
    return body["response"]


def _call_openai(prompt: str, model: str, timeout: Optional[float]) -> str:
    """Call OpenAI API."""
    client = _get_openai_client(timeout)
    response = client.chat.completions.create(
        model=model,
        messages=[{"role": "user", "content": prompt}],
        max_tokens=20,
        temperature=0.0,
    )
    return response.choices[0].message.content or ""


def _call_anthropic(prompt: str, model: str, timeout: Optional[float]) -> str:
    """Call Anthropic API."""
    client = _get_anthropic_client(timeout)
    response = client.messages.create(
        model=model,
        max_tokens=20,
        temperature=0.0,
        messages=[{"role": "user", "content": prompt}]
    )
    return response.content[0].text


class RemoteCategorizer:
    """
    Single-attempt category lookup against a text-generation service.

    ``classify`` returns the trimmed label exactly as the model wrote it; it is
    not checked against any label set. Every failure (transport, HTTP status,
    unusable body, empty answer) surfaces as RemoteClassificationError.
    """

    def __init__(self, provider: str = LLMProvider.OLLAMA.value,
                 model: Optional[str] = None,
                 endpoint: str = DEFAULT_ENDPOINT,
                 timeout: Optional[float] = None,
                 categories: Sequence[str] = REMOTE_CATEGORIES):
        self.provider = LLMProvider(provider)
        self.model = model or DEFAULT_MODELS[self.provider]
        self.endpoint = endpoint
        self.timeout = timeout
        self.categories = tuple(categories)

    @classmethod
    def from_config(cls, config) -> "RemoteCategorizer":
        return cls(provider=config.provider, model=config.model_name,
                   endpoint=config.remote_endpoint, timeout=config.request_timeout)

    def classify(self, text: str) -> str:
        prompt = build_prompt(text, self.categories)

        if self.provider == LLMProvider.OLLAMA:
            raw = _call_ollama(prompt, self.model, self.endpoint, self.timeout)
        else:
            try:
                if self.provider == LLMProvider.OPENAI:
                    raw = _call_openai(prompt, self.model, self.timeout)
                else:
                    raw = _call_anthropic(prompt, self.model, self.timeout)
            except Exception as e:
                # SDK errors, missing API keys and odd payloads all mean "no label"
                raise RemoteClassificationError(f"{self.provider.value} call failed: {e}") from e

        label = raw.strip()
        if not label:
            raise RemoteClassificationError("Remote categorizer returned an empty label")
        return label
