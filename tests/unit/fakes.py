"""Fake implementations for testing the translation pipeline."""

import itertools
from datetime import UTC, datetime
from typing import Any

from outline_translate.api import OutlineApiError
from outline_translate.models.document import Collection, Document
from outline_translate.translator import TranslationError

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


def make_document(
    doc_id: str,
    title: str = "",
    *,
    parent: str | None = None,
    text: str = "Contenu du document",
    collection_id: str = "src",
    updated_at: datetime = BASE_TIME,
    emoji: str | None = None,
) -> Document:
    """Create a Document with sensible defaults."""
    return Document(
        id=doc_id,
        title=title or f"Titre {doc_id}",
        text=text,
        collection_id=collection_id,
        updated_at=updated_at,
        parent_document_id=parent,
        emoji=emoji,
    )


class FakeApi:
    """In-memory fake for OutlineApi.

    Stores predefined responses per endpoint and records all calls. A list of
    responses is served one per call, in order.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def add_response(self, endpoint: str, *responses: dict[str, Any]) -> None:
        self.responses.setdefault(endpoint, []).extend(responses)

    def call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((endpoint, payload))
        queued = self.responses.get(endpoint)
        if not queued:
            msg = f"FakeApi: no response registered for {endpoint!r}"
            raise KeyError(msg)
        if len(queued) > 1:
            return queued.pop(0)
        return queued[0]


class FakeDocumentStore:
    """In-memory fake for OutlineDocumentStore.

    Documents live in a single dict keyed by id; created documents get ids
    ``dst-1``, ``dst-2``, ... and are visible to later searches.
    """

    def __init__(self, documents: list[Document] | None = None) -> None:
        self.documents: dict[str, Document] = {doc.id: doc for doc in documents or []}
        self.created: list[Document] = []
        self.searches: list[tuple[str, str, str | None]] = []
        self.fail_search = False
        self.fail_create_titles: set[str] = set()
        self._ids = itertools.count(1)

    def list_documents(self, collection_id: str) -> list[Document]:
        return [doc for doc in self.documents.values() if doc.collection_id == collection_id]

    def get_document(self, document_id: str) -> Document:
        if document_id not in self.documents:
            msg = f"Outline API error (404) on 'documents.info': {document_id}"
            raise OutlineApiError(msg, status_code=404)
        return self.documents[document_id]

    def create_document(
        self,
        title: str,
        text: str,
        collection_id: str,
        *,
        parent_document_id: str | None = None,
        emoji: str | None = None,
    ) -> Document:
        if title in self.fail_create_titles:
            msg = f"Outline API error (500) on 'documents.create': {title}"
            raise OutlineApiError(msg, status_code=500)
        doc = Document(
            id=f"dst-{next(self._ids)}",
            title=title,
            text=text,
            collection_id=collection_id,
            updated_at=datetime.now(UTC),
            parent_document_id=parent_document_id,
            emoji=emoji,
        )
        self.documents[doc.id] = doc
        self.created.append(doc)
        return doc

    def find_by_title(
        self,
        title: str,
        collection_id: str,
        parent_document_id: str | None = None,
    ) -> Document | None:
        self.searches.append((title, collection_id, parent_document_id))
        if self.fail_search:
            msg = "Outline API request failed: 'documents.list': connection reset"
            raise OutlineApiError(msg)
        for doc in self.list_documents(collection_id):
            if doc.title == title and doc.parent_document_id == parent_document_id:
                return doc
        return None

    def list_collections(self) -> list[Collection]:
        ids = sorted({doc.collection_id for doc in self.documents.values()})
        return [Collection(id=cid, name=cid) for cid in ids]

    def created_in(self, collection_id: str) -> list[Document]:
        return [doc for doc in self.created if doc.collection_id == collection_id]


class FakeTranslator:
    """Deterministic translator: prefixes text with ``EN `` and records calls."""

    def __init__(self, *, cost_per_call: float = 0.001) -> None:
        self.title_calls: list[tuple[str, bool]] = []
        self.body_calls: list[tuple[str, bool]] = []
        self.fail_bodies: set[str] = set()
        self.cost_per_call = cost_per_call

    def translate_title(self, text: str, *, force: bool = False) -> str:
        self.title_calls.append((text, force))
        return f"EN {text}"

    def translate_body(self, text: str, title_hint: str, *, force: bool = False) -> str:
        self.body_calls.append((title_hint, force))
        if title_hint in self.fail_bodies:
            msg = f"Translation failed for {title_hint!r}: rate limited"
            raise TranslationError(msg)
        return f"EN {text}"

    def actual_cost_usd(self) -> float:
        return self.cost_per_call * (len(self.title_calls) + len(self.body_calls))

    @property
    def call_count(self) -> int:
        return len(self.title_calls) + len(self.body_calls)
