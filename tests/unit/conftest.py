"""Shared test fixtures."""

from pathlib import Path

import pytest

from outline_translate.config import OutlineSettings, Settings
from outline_translate.core.ledger import TranslationLedger
from outline_translate.models.document import Document
from tests.unit.fakes import make_document

# Lore > Characters > {Arthur, Merlin}, plus a standalone root page.
LORE_DOCUMENTS = [
    make_document("A", "Lore", text="Le monde et son histoire"),
    make_document("B", "Characters", parent="A", text="Les personnages"),
    make_document("C", "Arthur", parent="B", text="Le roi Arthur"),
    make_document("D", "Merlin", parent="B", text="Le magicien"),
    make_document("E", "Glossaire", text="Termes et définitions"),
]


@pytest.fixture
def lore_documents() -> list[Document]:
    return list(LORE_DOCUMENTS)


@pytest.fixture
def ledger_path(tmp_path: Path) -> Path:
    return tmp_path / "ledger.json"


@pytest.fixture
def ledger(ledger_path: Path) -> TranslationLedger:
    return TranslationLedger(ledger_path)


def make_settings(**overrides: object) -> Settings:
    """Create Settings for the fake collections ``src`` and ``dst``."""
    values: dict[str, object] = {
        "outline": OutlineSettings(api_url="https://docs.example.com", api_key="ol-key"),
        "openai_api_key": "sk-test",
        "source_collection_id": "src",
        "target_collection_id": "dst",
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]
