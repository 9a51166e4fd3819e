"""Domain models for Outline documents and translation bookkeeping."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp as returned by Outline (``...Z`` suffix).

    Naive timestamps are taken to be UTC so that comparisons never mix
    aware and naive values.
    """
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class Document:
    """An Outline document."""

    id: str
    title: str
    text: str
    collection_id: str
    updated_at: datetime
    parent_document_id: str | None = None
    emoji: str | None = None
    url: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Document":
        """Build a Document from a documents.* API payload."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            text=data.get("text") or "",
            collection_id=data.get("collectionId") or "",
            updated_at=parse_timestamp(data["updatedAt"]),
            parent_document_id=data.get("parentDocumentId") or None,
            emoji=data.get("emoji") or None,
            url=data.get("url") or "",
        )


@dataclass(frozen=True)
class Collection:
    """An Outline collection."""

    id: str
    name: str
    description: str = ""
    url: str = ""
    document_count: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Collection":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            description=data.get("description") or "",
            url=data.get("url") or "",
            document_count=len(data.get("documents") or []),
        )


@dataclass(frozen=True)
class LedgerEntry:
    """Record of a source document that was translated into the destination."""

    source_id: str
    destination_id: str
    source_title: str
    destination_title: str
    source_updated_at: datetime
    translated_at: datetime

    def to_json(self) -> dict[str, str]:
        return {
            "source_id": self.source_id,
            "destination_id": self.destination_id,
            "source_title": self.source_title,
            "destination_title": self.destination_title,
            "source_updated_at": self.source_updated_at.isoformat(),
            "translated_at": self.translated_at.isoformat(),
        }

    @classmethod
    def from_json(cls, data: dict[str, str]) -> "LedgerEntry":
        return cls(
            source_id=data["source_id"],
            destination_id=data["destination_id"],
            source_title=data["source_title"],
            destination_title=data["destination_title"],
            source_updated_at=parse_timestamp(data["source_updated_at"]),
            translated_at=parse_timestamp(data["translated_at"]),
        )


@dataclass(frozen=True)
class LedgerSummary:
    """Aggregate view of the ledger."""

    total: int
    oldest: datetime | None = None
    newest: datetime | None = None


@dataclass(frozen=True)
class FolderMapping:
    """A source folder resolved to a destination folder during this run."""

    source_id: str
    destination_id: str
    source_name: str
    destination_name: str


@dataclass(frozen=True)
class CostEstimate:
    """Projected token usage and spend for a batch of documents."""

    total_documents: int
    estimated_tokens: int
    estimated_cost_usd: float
    cost_per_document: float
    model: str
