"""Tests for OpenAITranslator with a mocked OpenAI client."""

from unittest.mock import MagicMock

import pytest
from openai import OpenAIError

from outline_translate.translator import (
    DRY_RUN_PREFIX,
    OpenAITranslator,
    TranslationError,
    looks_english,
)


def _completion(content: str | None, *, prompt_tokens: int = 100, completion_tokens: int = 50):
    """Create a mock chat completion response."""
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    return response


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


def _translator(client: MagicMock, *, dry_run: bool = False) -> OpenAITranslator:
    return OpenAITranslator("sk-test", model="gpt-4o", dry_run=dry_run, client=client)


class TestLooksEnglish:
    def test_english_sentence(self) -> None:
        assert looks_english("The history of the kingdom and its people")

    def test_french_sentence(self) -> None:
        assert not looks_english("L'histoire du royaume et de son peuple")

    def test_text_without_words(self) -> None:
        assert not looks_english("1234 !!")


class TestTranslateBody:
    def test_returns_stripped_translation(self, client: MagicMock) -> None:
        client.chat.completions.create.return_value = _completion("  Hello world \n")
        translator = _translator(client)

        assert translator.translate_body("Bonjour le monde", "Accueil") == "Hello world"

    def test_sends_model_and_content(self, client: MagicMock) -> None:
        client.chat.completions.create.return_value = _completion("Hello")
        translator = _translator(client)

        translator.translate_body("# Bonjour", "Accueil")

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"][0]["role"] == "system"
        assert "# Bonjour" in kwargs["messages"][1]["content"]

    def test_dry_run_returns_placeholder_without_calling_api(self, client: MagicMock) -> None:
        translator = _translator(client, dry_run=True)

        result = translator.translate_body("x" * 150, "Accueil")

        assert result == f"{DRY_RUN_PREFIX}{'x' * 100}..."
        client.chat.completions.create.assert_not_called()

    def test_force_overrides_dry_run(self, client: MagicMock) -> None:
        client.chat.completions.create.return_value = _completion("Hello")
        translator = _translator(client, dry_run=True)

        assert translator.translate_body("Bonjour", "Accueil", force=True) == "Hello"

    def test_english_text_is_kept(self, client: MagicMock) -> None:
        translator = _translator(client)
        text = "This is the guide for the team and it should be read"

        assert translator.translate_body(text, "Guide") == text
        client.chat.completions.create.assert_not_called()

    def test_api_error_raises_translation_error(self, client: MagicMock) -> None:
        client.chat.completions.create.side_effect = OpenAIError("rate limited")
        translator = _translator(client)

        with pytest.raises(TranslationError, match="rate limited"):
            translator.translate_body("Bonjour", "Accueil")

    def test_empty_result_raises_translation_error(self, client: MagicMock) -> None:
        client.chat.completions.create.return_value = _completion("")
        translator = _translator(client)

        with pytest.raises(TranslationError, match="empty"):
            translator.translate_body("Bonjour", "Accueil")


class TestTranslateTitle:
    def test_returns_translation(self, client: MagicMock) -> None:
        client.chat.completions.create.return_value = _completion("Characters")
        translator = _translator(client)

        assert translator.translate_title("Personnages") == "Characters"

    def test_dry_run_prefixes_title(self, client: MagicMock) -> None:
        translator = _translator(client, dry_run=True)

        assert translator.translate_title("Personnages") == f"{DRY_RUN_PREFIX}Personnages"
        client.chat.completions.create.assert_not_called()

    def test_api_error_keeps_untranslated_title(self, client: MagicMock) -> None:
        client.chat.completions.create.side_effect = OpenAIError("timeout")
        translator = _translator(client)

        assert translator.translate_title("Personnages") == "Personnages"

    def test_empty_result_keeps_untranslated_title(self, client: MagicMock) -> None:
        client.chat.completions.create.return_value = _completion(None)
        translator = _translator(client)

        assert translator.translate_title("Personnages") == "Personnages"


class TestUsage:
    def test_usage_accumulates_across_calls(self, client: MagicMock) -> None:
        client.chat.completions.create.side_effect = [
            _completion("Characters", prompt_tokens=1_000_000, completion_tokens=0),
            _completion("Hello", prompt_tokens=0, completion_tokens=1_000_000),
        ]
        translator = _translator(client)

        translator.translate_title("Personnages")
        translator.translate_body("Bonjour", "Accueil")

        assert translator.usage.requests == 2
        assert translator.usage.input_tokens == 1_000_000
        assert translator.usage.output_tokens == 1_000_000
        assert translator.actual_cost_usd() == pytest.approx(12.50)

    def test_dry_run_costs_nothing(self, client: MagicMock) -> None:
        translator = _translator(client, dry_run=True)

        translator.translate_title("Personnages")
        translator.translate_body("Bonjour", "Accueil")

        assert translator.actual_cost_usd() == 0
