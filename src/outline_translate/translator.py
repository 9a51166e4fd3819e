"""Translate titles and markdown bodies to English with the OpenAI API."""

import re
import threading
from dataclasses import dataclass

from loguru import logger
from openai import OpenAI, OpenAIError

from outline_translate.config import DEFAULT_MODEL
from outline_translate.core.cost import calculate_actual_cost

BODY_SYSTEM_PROMPT = (
    "You are a professional translator specializing in technical documentation. "
    "Translate the given markdown content to English while preserving ALL formatting, "
    "structure, links, and markdown syntax exactly as they are. Only translate the "
    "actual text content, not markdown syntax, URLs, or code blocks."
)

TITLE_SYSTEM_PROMPT = (
    "You are a professional translator. Translate the given title to English. "
    "Return only the translated title without any quotes, formatting, or additional text."
)

BODY_PROMPT_TEMPLATE = """\
Please translate the following markdown content to English.

IMPORTANT RULES:
1. Preserve ALL markdown formatting exactly (headers, lists, links, code blocks, etc.)
2. Do not translate URLs, code snippets, or markdown syntax
3. Only translate the actual readable text content
4. Maintain the exact same structure and spacing
5. If content is already in English, return it unchanged

Content to translate:

{content}"""

DRY_RUN_PREFIX = "[DRY RUN] Translated: "

_ENGLISH_WORDS = frozenset(
    "the and or but in on at to for of with by from up about into over after this that "
    "these those is are was were be been being have has had do does did will would could "
    "should may might must can".split()
)

_WORD_RE = re.compile(r"\b[a-z]+\b")


class TranslationError(RuntimeError):
    """Raised when a body translation cannot be produced."""


def looks_english(text: str) -> bool:
    """Guess whether ``text`` is already English.

    True when more than 30% of its latin words are common English function words.
    """
    words = _WORD_RE.findall(text.lower())
    if not words:
        return False
    hits = sum(1 for word in words if word in _ENGLISH_WORDS)
    return hits / len(words) > 0.3


@dataclass
class TranslationUsage:
    """Token counts accumulated from completed API calls."""

    input_tokens: int = 0
    output_tokens: int = 0
    requests: int = 0

    @property
    def cost_usd(self) -> float:
        return calculate_actual_cost(self.input_tokens, self.output_tokens)


class OpenAITranslator:
    """Chat-completions translator with dry-run support and usage accounting.

    Title and body of one document are translated from two threads at once,
    so usage updates are serialized with a lock.
    """

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        dry_run: bool = False,
        client: OpenAI | None = None,
    ) -> None:
        self.model = model
        self.dry_run = dry_run
        self.client = client or OpenAI(api_key=api_key)
        self.usage = TranslationUsage()
        self._usage_lock = threading.Lock()

    def _complete(self, system_prompt: str, user_prompt: str, *, max_tokens: int) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=0.3,
            max_tokens=max_tokens,
        )
        if response.usage is not None:
            self._track(response.usage.prompt_tokens, response.usage.completion_tokens)
        content = response.choices[0].message.content if response.choices else None
        return (content or "").strip()

    def _track(self, input_tokens: int, output_tokens: int) -> None:
        with self._usage_lock:
            self.usage.input_tokens += input_tokens
            self.usage.output_tokens += output_tokens
            self.usage.requests += 1
        logger.debug(
            "Translation cost: ${:.6f} ({} tokens)",
            calculate_actual_cost(input_tokens, output_tokens),
            input_tokens + output_tokens,
        )

    def translate_body(self, text: str, title_hint: str, *, force: bool = False) -> str:
        """Translate a markdown body.

        Args:
            text: Markdown to translate.
            title_hint: Title of the document, used in log messages.
            force: Make a real call even in dry-run mode.

        Raises:
            TranslationError: If the API call fails or returns nothing.
        """
        logger.info("Translating document: {!r}", title_hint)

        if self.dry_run and not force:
            logger.info("DRY RUN: would translate {} characters", len(text))
            return f"{DRY_RUN_PREFIX}{text[:100]}..."

        if looks_english(text):
            logger.info("{!r} already appears to be English, keeping it", title_hint)
            return text

        try:
            translated = self._complete(
                BODY_SYSTEM_PROMPT, BODY_PROMPT_TEMPLATE.format(content=text), max_tokens=4000
            )
        except OpenAIError as e:
            msg = f"Translation failed for {title_hint!r}: {e}"
            raise TranslationError(msg) from e

        if not translated:
            msg = f"OpenAI returned an empty translation for {title_hint!r}"
            raise TranslationError(msg)
        return translated

    def translate_title(self, text: str, *, force: bool = False) -> str:
        """Translate a title, keeping it unchanged on any API failure."""
        if self.dry_run and not force:
            logger.debug("DRY RUN: would translate title {!r}", text)
            return f"{DRY_RUN_PREFIX}{text}"

        if looks_english(text):
            return text

        try:
            translated = self._complete(
                TITLE_SYSTEM_PROMPT, f"Translate this title to English: {text}", max_tokens=100
            )
        except OpenAIError as e:
            logger.warning("Could not translate title {!r}, keeping it: {}", text, e)
            return text
        return translated or text

    def actual_cost_usd(self) -> float:
        with self._usage_lock:
            return self.usage.cost_usd
