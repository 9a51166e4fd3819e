"""Configuration constants and environment settings for outline-translate."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Ledger file, relative to the working directory unless LEDGER_PATH is set.
DEFAULT_LEDGER_PATH = Path("translated_docs.json")

DEFAULT_MODEL = "gpt-4o"

# Outline returns at most this many documents per documents.list page.
PAGE_LIMIT = 100

# Fixed pause between documents, keeps us under the OpenAI rate limits.
DOCUMENT_DELAY_SECONDS = 1.0

# gpt-4o pricing, USD per token.
INPUT_COST_PER_TOKEN = 2.50 / 1_000_000
OUTPUT_COST_PER_TOKEN = 10.00 / 1_000_000

# Rough token estimation for cost previews.
CHARS_PER_TOKEN = 4
SYSTEM_PROMPT_TOKENS = 100
TRANSLATION_OVERHEAD_TOKENS = 50


class ConfigError(RuntimeError):
    """Raised when a required setting is missing or malformed."""


@dataclass(frozen=True)
class OutlineSettings:
    """Connection settings for the Outline API."""

    api_url: str
    api_key: str


@dataclass(frozen=True)
class Settings:
    """Everything a translation run needs."""

    outline: OutlineSettings
    openai_api_key: str
    source_collection_id: str
    target_collection_id: str
    max_spending_usd: float | None = None
    batch_size: int | None = None
    dry_run: bool = False
    model: str = DEFAULT_MODEL
    ledger_path: Path = DEFAULT_LEDGER_PATH


def _environ(env: Mapping[str, str] | None) -> Mapping[str, str]:
    if env is not None:
        return env
    load_dotenv()
    return os.environ


def _require(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        msg = f"{name} environment variable is required"
        raise ConfigError(msg)
    return value


def _optional_float(env: Mapping[str, str], name: str) -> float | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        msg = f"{name} must be a number, got {raw!r}"
        raise ConfigError(msg) from None
    if value < 0:
        msg = f"{name} must not be negative, got {raw!r}"
        raise ConfigError(msg)
    return value


def _optional_positive_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ConfigError(msg) from None
    if value < 1:
        msg = f"{name} must be at least 1, got {raw!r}"
        raise ConfigError(msg)
    return value


def load_outline_settings(env: Mapping[str, str] | None = None) -> OutlineSettings:
    """Read the Outline connection settings.

    Args:
        env: Variables to read from. Defaults to the process environment,
            after loading a ``.env`` file from the working directory.
    """
    env = _environ(env)
    return OutlineSettings(
        api_url=_require(env, "OUTLINE_API_URL").rstrip("/"),
        api_key=_require(env, "OUTLINE_API_KEY"),
    )


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Read and validate all settings for a translation run.

    Raises:
        ConfigError: If a required variable is missing or a value is malformed.
    """
    env = _environ(env)
    return Settings(
        outline=load_outline_settings(env),
        openai_api_key=_require(env, "OPENAI_API_KEY"),
        source_collection_id=_require(env, "SOURCE_COLLECTION_ID"),
        target_collection_id=_require(env, "TARGET_COLLECTION_ID"),
        max_spending_usd=_optional_float(env, "MAX_SPENDING_USD"),
        batch_size=_optional_positive_int(env, "BATCH_SIZE"),
        dry_run=env.get("DRY_RUN", "").strip().lower() == "true",
        model=env.get("OPENAI_MODEL", "").strip() or DEFAULT_MODEL,
        ledger_path=resolve_ledger_path(env),
    )


def resolve_ledger_path(env: Mapping[str, str] | None = None) -> Path:
    """Ledger location: LEDGER_PATH if set, else the default in the working directory."""
    env = _environ(env)
    raw = env.get("LEDGER_PATH", "").strip()
    return Path(raw).expanduser() if raw else DEFAULT_LEDGER_PATH
