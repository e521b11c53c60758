# server/config.py
# ---------------------------------------------------------
# Runtime configuration for the ASTROLABE backend.
#
# Which provider / prompt / parser combination runs is picked by
# ASTROLABE_VARIANT; everything else comes from the environment
# (plus .env files, loaded with python-dotenv).
# ---------------------------------------------------------

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

# .../astrolabe/server
BASE_DIR = Path(__file__).resolve().parent
# repo root
ROOT_DIR = BASE_DIR.parent.parent

TEMPERATURE = 0.7
DEFAULT_VARIANT = "openai-json"
DEFAULT_MAX_TOKENS = 1500


@dataclass(frozen=True)
class Variant:
    name: str
    provider: str  # "openai" | "groq" | "anthropic"
    model: str
    key_env: str
    json_mode: bool
    parser: str  # "strict" | "split"
    prompt: str  # "framework" | "legacy"


VARIANTS: Dict[str, Variant] = {
    v.name: v
    for v in (
        Variant(
            name="openai-json",
            provider="openai",
            model="gpt-4o-mini",
            key_env="OPENAI_API_KEY",
            json_mode=True,
            parser="strict",
            prompt="framework",
        ),
        Variant(
            name="groq-json",
            provider="groq",
            model="llama-3.3-70b-versatile",
            key_env="GROQ_API_KEY",
            json_mode=True,
            parser="strict",
            prompt="framework",
        ),
        Variant(
            name="anthropic-json",
            provider="anthropic",
            model="claude-sonnet-4-5-20250929",
            key_env="ANTHROPIC_API_KEY",
            # no native JSON switch; the prompt asks for it
            json_mode=False,
            parser="strict",
            prompt="framework",
        ),
        Variant(
            name="openai-legacy",
            provider="openai",
            model="gpt-4o-mini",
            key_env="OPENAI_API_KEY",
            json_mode=False,
            parser="split",
            prompt="legacy",
        ),
    )
}


@dataclass(frozen=True)
class Settings:
    variant: Variant
    model: str
    api_key: Optional[str]
    temperature: float = TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `env` (defaults to os.environ after loading .env).

    Raises ValueError for an unknown ASTROLABE_VARIANT. A missing API key is
    NOT an error here; the provider factory reports it per request.
    """
    if env is None:
        load_dotenv(ROOT_DIR / ".env")
        load_dotenv()
        env = os.environ

    name = (env.get("ASTROLABE_VARIANT") or DEFAULT_VARIANT).strip()
    variant = VARIANTS.get(name)
    if variant is None:
        raise ValueError(
            f"Unknown ASTROLABE_VARIANT {name!r}; "
            f"expected one of: {', '.join(sorted(VARIANTS))}"
        )

    raw_max = env.get("ASTROLABE_MAX_TOKENS")
    try:
        max_tokens = int(raw_max) if raw_max else DEFAULT_MAX_TOKENS
    except ValueError:
        print("[config] ignoring bad ASTROLABE_MAX_TOKENS:", repr(raw_max))
        max_tokens = DEFAULT_MAX_TOKENS

    return Settings(
        variant=variant,
        model=env.get("ASTROLABE_MODEL") or variant.model,
        api_key=env.get(variant.key_env) or None,
        max_tokens=max_tokens,
    )
