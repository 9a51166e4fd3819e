"""Persistent record of which source documents were translated, and into what."""

import json
import os
from datetime import UTC, datetime
from pathlib import Path

from loguru import logger

from outline_translate.models.document import Document, LedgerEntry, LedgerSummary


class LedgerError(RuntimeError):
    """Raised when the ledger file cannot be read or written."""


class TranslationLedger:
    """Source document id -> LedgerEntry, kept in a JSON file.

    The file is read once at construction and rewritten in full after every
    mutation, so whatever was recorded before an interruption is on disk.
    In-memory entries only change once the write succeeded.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser().resolve()
        self._entries: dict[str, LedgerEntry] = self._load()
        logger.debug("Ledger ready: {} ({} entries)", self.path, len(self._entries))

    def _load(self) -> dict[str, LedgerEntry]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return {key: LedgerEntry.from_json(value) for key, value in raw.items()}
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            msg = f"Cannot load translation ledger {str(self.path)!r}: {e}"
            raise LedgerError(msg) from e

    def _save(self, entries: dict[str, LedgerEntry]) -> None:
        data = {key: entry.to_json() for key, entry in entries.items()}
        contents = json.dumps(data, sort_keys=True, indent=2, ensure_ascii=False) + "\n"
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(contents, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            msg = f"Cannot write translation ledger {str(self.path)!r}: {e}"
            raise LedgerError(msg) from e

    def is_translated(self, document_id: str) -> bool:
        return document_id in self._entries

    def get(self, document_id: str) -> LedgerEntry | None:
        return self._entries.get(document_id)

    def add(self, source: Document, destination: Document) -> LedgerEntry:
        """Record that ``source`` was translated into ``destination``, then persist.

        Replaces any previous entry for the same source document.
        """
        entry = LedgerEntry(
            source_id=source.id,
            destination_id=destination.id,
            source_title=source.title,
            destination_title=destination.title,
            source_updated_at=source.updated_at,
            translated_at=datetime.now(UTC),
        )
        entries = {**self._entries, source.id: entry}
        self._save(entries)
        self._entries = entries
        logger.info("Recorded translation: {!r} -> {!r}", source.title, destination.title)
        return entry

    def remove(self, document_id: str) -> bool:
        """Forget a source document. Returns False if it was not recorded."""
        if document_id not in self._entries:
            return False
        entries = {key: e for key, e in self._entries.items() if key != document_id}
        self._save(entries)
        self._entries = entries
        logger.info("Removed translation record for {}", document_id)
        return True

    def needs_update(self, document: Document) -> bool:
        """True if ``document`` was translated before and edited since.

        A document that was never translated has nothing to update.
        """
        entry = self._entries.get(document.id)
        if entry is None:
            return False
        return document.updated_at > entry.translated_at

    def list_all(self) -> dict[str, LedgerEntry]:
        return dict(self._entries)

    def summary(self) -> LedgerSummary:
        if not self._entries:
            return LedgerSummary(total=0)
        times = [entry.translated_at for entry in self._entries.values()]
        return LedgerSummary(total=len(times), oldest=min(times), newest=max(times))

    def __len__(self) -> int:
        return len(self._entries)
