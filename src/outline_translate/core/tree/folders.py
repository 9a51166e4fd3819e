"""Recreate the ancestor folders of a document in the destination collection."""

from loguru import logger

from outline_translate.api import OutlineApiError
from outline_translate.core.ledger import TranslationLedger
from outline_translate.core.tree.hierarchy import HierarchyBuilder, Node
from outline_translate.models.document import Document, FolderMapping
from outline_translate.protocols import DocumentStoreProtocol, TranslatorProtocol


class FolderResolver:
    """Make sure every ancestor of a document exists in the destination.

    Each source folder is resolved at most once per run. Lookups go, in order,
    through the in-memory mappings of this run, the ledger of earlier runs, and
    finally a title search in the destination collection. Only when all three
    miss is a new folder created. Folders found by title search are recorded in
    the ledger like the ones created here.
    """

    def __init__(
        self,
        hierarchy: HierarchyBuilder,
        store: DocumentStoreProtocol,
        translator: TranslatorProtocol,
        ledger: TranslationLedger,
    ) -> None:
        self.hierarchy = hierarchy
        self.store = store
        self.translator = translator
        self.ledger = ledger
        self._mappings: dict[str, FolderMapping] = {}

    def ensure_folder_structure(
        self,
        document_id: str,
        destination_collection_id: str,
        *,
        force_translate: bool = False,
    ) -> str | None:
        """Create missing ancestor folders of ``document_id``.

        Args:
            document_id: Source document about to be translated.
            destination_collection_id: Collection receiving the translations.
            force_translate: Translate for real even when the translator is in dry-run mode.

        Returns:
            Destination id of the immediate parent folder, or None when the
            document sits at the collection root.
        """
        ancestors = self.hierarchy.path(document_id)[:-1]
        if not ancestors:
            return None

        logger.info(
            "Ensuring folder structure: {}", " > ".join(n.document.title for n in ancestors)
        )

        current_parent_id: str | None = None
        for node in ancestors:
            current_parent_id = self._resolve(
                node, destination_collection_id, current_parent_id, force_translate
            )
        return current_parent_id

    def _resolve(
        self,
        node: Node,
        destination_collection_id: str,
        parent_id: str | None,
        force_translate: bool,
    ) -> str:
        source = node.document

        mapping = self._mappings.get(source.id)
        if mapping is not None:
            return mapping.destination_id

        entry = self.ledger.get(source.id)
        if entry is not None:
            logger.info(
                "Found translated folder: {!r} -> {!r}", source.title, entry.destination_title
            )
            self._remember(source, entry.destination_id, entry.destination_title)
            return entry.destination_id

        title = self.translator.translate_title(source.title, force=force_translate)
        logger.debug("Translated folder name: {!r} -> {!r}", source.title, title)

        existing = self._find_existing(title, destination_collection_id, parent_id)
        if existing is not None:
            logger.info("Found existing folder: {!r}", title)
            # Recorded so the main loop and later runs do not create it again.
            self.ledger.add(source, existing)
            self._remember(source, existing.id, title)
            return existing.id

        text = ""
        if source.text.strip():
            text = self.translator.translate_body(
                source.text, source.title, force=force_translate
            )

        created = self.store.create_document(
            title,
            text,
            destination_collection_id,
            parent_document_id=parent_id,
            emoji=source.emoji,
        )
        self.ledger.add(source, created)
        self._remember(source, created.id, title)
        logger.info("Created folder: {!r}", title)
        return created.id

    def _find_existing(
        self, title: str, collection_id: str, parent_id: str | None
    ) -> Document | None:
        try:
            return self.store.find_by_title(title, collection_id, parent_id)
        except OutlineApiError as e:
            logger.warning("Could not search for folder {!r}, creating it: {}", title, e)
            return None

    def _remember(self, source: Document, destination_id: str, destination_name: str) -> None:
        self._mappings[source.id] = FolderMapping(
            source_id=source.id,
            destination_id=destination_id,
            source_name=source.title,
            destination_name=destination_name,
        )

    def mappings(self) -> dict[str, FolderMapping]:
        return dict(self._mappings)

    def reset(self) -> None:
        self._mappings.clear()
