"""Rebuild the document tree of a collection from parent pointers."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from outline_translate.models.document import Document


@dataclass
class Node:
    """A document in the rebuilt tree.

    Children are owned by their parent node. The parent is referenced by id
    only and resolved through the builder's index, so the tree holds no
    reference cycles.
    """

    document: Document
    children: list["Node"] = field(default_factory=list)
    parent_id: str | None = None

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


def _is_ancestor_or_self(index: dict[str, Node], document_id: str, start: Node) -> bool:
    """Walk linked parents upward from ``start``, looking for ``document_id``."""
    current: Node | None = start
    while current is not None:
        if current.id == document_id:
            return True
        current = index.get(current.parent_id) if current.parent_id else None
    return False


@dataclass(frozen=True)
class HierarchyStats:
    """Shape of a built forest."""

    total_documents: int
    root_documents: int
    max_depth: int


class HierarchyBuilder:
    """Builds a forest of Nodes and answers root-to-node path queries."""

    def __init__(self) -> None:
        self._index: dict[str, Node] = {}

    def build(self, documents: Iterable[Document]) -> list[Node]:
        """Link documents into a forest and return its roots in input order.

        A document whose parent is not part of ``documents`` becomes a root.
        Building again replaces the previous index.
        """
        docs = list(documents)
        index = {doc.id: Node(document=doc) for doc in docs}

        roots: list[Node] = []
        for doc in docs:
            node = index[doc.id]
            parent_id = doc.parent_document_id
            if parent_id is None:
                roots.append(node)
                continue
            parent = index.get(parent_id)
            if parent is None:
                # Parent lives outside the fetched set (other collection, deleted, ...)
                logger.warning(
                    "Parent {} of {!r} ({}) is not in the collection, treating as root",
                    parent_id,
                    doc.title,
                    doc.id,
                )
                roots.append(node)
                continue
            if _is_ancestor_or_self(index, doc.id, parent):
                logger.warning(
                    "Parent link {} -> {} would close a cycle, treating {!r} as root",
                    doc.id,
                    parent_id,
                    doc.title,
                )
                roots.append(node)
                continue
            node.parent_id = parent_id
            parent.children.append(node)

        self._index = index
        logger.info("Built hierarchy with {} root documents", len(roots))
        return roots

    def get(self, document_id: str) -> Node | None:
        return self._index.get(document_id)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def path(self, document_id: str) -> list[Node]:
        """Return the nodes from the root down to ``document_id`` inclusive.

        Returns an empty list for unknown ids.
        """
        path: list[Node] = []
        current = self._index.get(document_id)
        while current is not None:
            path.append(current)
            current = self._index.get(current.parent_id) if current.parent_id else None
        path.reverse()
        return path

    def stats(self, roots: list[Node]) -> HierarchyStats:
        """Count documents and measure depth (a lone root has depth 1)."""
        total = 0
        max_depth = 0
        stack = [(root, 1) for root in roots]
        while stack:
            node, depth = stack.pop()
            total += 1
            max_depth = max(max_depth, depth)
            stack.extend((child, depth + 1) for child in node.children)
        return HierarchyStats(
            total_documents=total, root_documents=len(roots), max_depth=max_depth
        )

    def reset(self) -> None:
        self._index.clear()
