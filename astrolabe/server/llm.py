# server/llm.py
# ---------------------------------------------------------
# Provider layer for the ASTROLABE backend.
#
# A PromptProvider takes (system_prompt, user_prompt) and returns the
# model's raw text. Two implementations:
#   - ChatCompletionsProvider: OpenAI and Groq (same chat.completions API)
#   - AnthropicProvider:       Claude messages API
#
# build_provider(settings) picks one and creates the SDK client. It is
# called once per process by planner.build_service; nothing here runs
# at import time.
# ---------------------------------------------------------

from typing import Any, Dict, List, Protocol

from anthropic import Anthropic
from groq import Groq
from openai import OpenAI

from .config import Settings
from .errors import ProviderCredentialMissing


class PromptProvider(Protocol):
    """Anything that can turn a system + user prompt into text."""

    def complete(self, system_prompt: str, user_prompt: str) -> str: ...


class ChatCompletionsProvider:
    """
    Wraps an OpenAI-compatible client (openai.OpenAI or groq.Groq).
    With json_mode=True the request sets response_format=json_object.
    """

    def __init__(
        self,
        client: Any,
        model: str,
        temperature: float = 0.7,
        json_mode: bool = True,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.json_mode = json_mode

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        resp = self.client.chat.completions.create(**kwargs)
        return resp.choices[0].message.content or ""


class AnthropicProvider:
    """Claude via the anthropic SDK; JSON is requested by the prompt only."""

    def __init__(
        self,
        client: Anthropic,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1500,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        message = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        # anthropic python sdk returns a list of content blocks
        return message.content[0].text if message.content else ""


def build_provider(settings: Settings) -> PromptProvider:
    """Create the SDK client for the configured variant."""
    variant = settings.variant
    if not settings.api_key:
        raise ProviderCredentialMissing(variant.key_env)

    prefix = settings.api_key[:8] + "..." if len(settings.api_key) >= 8 else "(short key)"
    print(f"[llm] {variant.provider} client for {variant.name}; key prefix: {prefix}")
    print("[llm] Using model:", settings.model)

    if variant.provider == "anthropic":
        return AnthropicProvider(
            Anthropic(api_key=settings.api_key),
            model=settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    if variant.provider == "groq":
        client: Any = Groq(api_key=settings.api_key)
    elif variant.provider == "openai":
        client = OpenAI(api_key=settings.api_key)
    else:
        raise ValueError(f"Unknown provider: {variant.provider}")

    return ChatCompletionsProvider(
        client,
        model=settings.model,
        temperature=settings.temperature,
        json_mode=variant.json_mode,
    )
