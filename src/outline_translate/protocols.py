"""Protocols for dependency injection in the translation pipeline."""

from typing import Any, Protocol, runtime_checkable

from outline_translate.models.document import Collection, Document


@runtime_checkable
class ApiProtocol(Protocol):
    """Protocol for Outline API transports."""

    def call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke an API endpoint and return the JSON response."""
        ...


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Protocol for the document store the pipeline reads from and writes to."""

    def list_documents(self, collection_id: str) -> list[Document]:
        """Return every document in a collection."""
        ...

    def get_document(self, document_id: str) -> Document:
        """Fetch a single document with its full text."""
        ...

    def create_document(
        self,
        title: str,
        text: str,
        collection_id: str,
        *,
        parent_document_id: str | None = None,
        emoji: str | None = None,
    ) -> Document:
        """Create and publish a document."""
        ...

    def find_by_title(
        self,
        title: str,
        collection_id: str,
        parent_document_id: str | None = None,
    ) -> Document | None:
        """Find a document by exact title under the given parent."""
        ...

    def list_collections(self) -> list[Collection]:
        """Return every collection visible to the API token."""
        ...


@runtime_checkable
class TranslatorProtocol(Protocol):
    """Protocol for translation engines."""

    def translate_body(self, text: str, title_hint: str, *, force: bool = False) -> str:
        """Translate markdown body text."""
        ...

    def translate_title(self, text: str, *, force: bool = False) -> str:
        """Translate a document title."""
        ...

    def actual_cost_usd(self) -> float:
        """Return the spend recorded from real API usage so far."""
        ...
