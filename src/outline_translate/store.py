"""Typed document operations on top of the Outline API."""

from typing import Any

from loguru import logger

from outline_translate.config import PAGE_LIMIT
from outline_translate.models.document import Collection, Document
from outline_translate.protocols import ApiProtocol


class OutlineDocumentStore:
    """Read and create documents in Outline collections."""

    def __init__(self, api: ApiProtocol, *, page_limit: int = PAGE_LIMIT) -> None:
        self.api = api
        self.page_limit = page_limit

    def _paginate(self, endpoint: str, payload: dict[str, Any]) -> list[dict[str, Any]]:
        """Collect ``data`` items from an offset/limit endpoint until a short page."""
        items: list[dict[str, Any]] = []
        offset = 0
        while True:
            response = self.api.call(
                endpoint, {**payload, "offset": offset, "limit": self.page_limit}
            )
            page = response.get("data") or []
            items.extend(page)
            logger.debug(
                "Retrieved {} items from {} (total: {})", len(page), endpoint, len(items)
            )
            if len(page) < self.page_limit:
                return items
            offset += self.page_limit

    def list_documents(self, collection_id: str) -> list[Document]:
        """Return every published document in a collection, in API order."""
        logger.info("Fetching documents from collection {}", collection_id)
        raw = self._paginate("documents.list", {"collectionId": collection_id})
        documents = [Document.from_api(item) for item in raw]
        logger.info("Retrieved {} documents from collection {}", len(documents), collection_id)
        return documents

    def get_document(self, document_id: str) -> Document:
        logger.debug("Fetching document info for {}", document_id)
        response = self.api.call("documents.info", {"id": document_id})
        return Document.from_api(response["data"])

    def create_document(
        self,
        title: str,
        text: str,
        collection_id: str,
        *,
        parent_document_id: str | None = None,
        emoji: str | None = None,
    ) -> Document:
        """Create a published document.

        Args:
            title: Document title.
            text: Markdown body.
            collection_id: Collection to create the document in.
            parent_document_id: Optional parent; omitted places it at the collection root.
            emoji: Optional document icon.
        """
        payload: dict[str, Any] = {
            "title": title,
            "text": text,
            "collectionId": collection_id,
            "publish": True,
        }
        if parent_document_id:
            payload["parentDocumentId"] = parent_document_id
        if emoji:
            payload["emoji"] = emoji

        logger.info("Creating document: {}", title)
        response = self.api.call("documents.create", payload)
        created = Document.from_api(response["data"])
        logger.debug("Created document with id {}", created.id)
        return created

    def find_by_title(
        self,
        title: str,
        collection_id: str,
        parent_document_id: str | None = None,
    ) -> Document | None:
        """Find a document with exactly this title directly under the given parent."""
        for doc in self.list_documents(collection_id):
            if doc.title == title and doc.parent_document_id == parent_document_id:
                return doc
        return None

    def list_collections(self) -> list[Collection]:
        raw = self._paginate("collections.list", {})
        return [Collection.from_api(item) for item in raw]
