"""Run one translation pass from the source collection into the target collection."""

import asyncio
from dataclasses import dataclass

from loguru import logger

from outline_translate.config import DOCUMENT_DELAY_SECONDS, Settings
from outline_translate.core.cost import check_budget, estimate_batch_cost, log_cost_estimate
from outline_translate.core.ledger import LedgerError, TranslationLedger
from outline_translate.core.tree.folders import FolderResolver
from outline_translate.core.tree.hierarchy import HierarchyBuilder
from outline_translate.models.document import Document
from outline_translate.protocols import DocumentStoreProtocol, TranslatorProtocol


@dataclass
class RunStats:
    """Counters for one run."""

    total: int = 0
    pending: int = 0
    translated: int = 0
    skipped: int = 0
    errors: int = 0
    estimated_cost_usd: float = 0.0
    actual_cost_usd: float = 0.0
    budget_rejected: bool = False


def select_pending(documents: list[Document], ledger: TranslationLedger) -> list[Document]:
    """Keep documents that were never translated or were edited since."""
    pending: list[Document] = []
    for doc in documents:
        if not ledger.is_translated(doc.id):
            pending.append(doc)
        elif ledger.needs_update(doc):
            logger.info("{!r} was modified since its last translation", doc.title)
            pending.append(doc)
        else:
            logger.debug("Skipping {!r}, already translated and up to date", doc.title)
    return pending


async def _translate_document(
    doc: Document,
    settings: Settings,
    store: DocumentStoreProtocol,
    translator: TranslatorProtocol,
    ledger: TranslationLedger,
    folders: FolderResolver,
    *,
    force_translate: bool,
) -> bool:
    """Translate one document. Returns False if it was skipped."""
    if ledger.is_translated(doc.id) and not ledger.needs_update(doc):
        # Created as a folder earlier in this run.
        logger.info("Translation already exists and is up to date, skipping")
        return False

    full_doc = store.get_document(doc.id)
    if not full_doc.text.strip():
        logger.info("Document has no content, skipping")
        return False

    parent_id = folders.ensure_folder_structure(
        doc.id, settings.target_collection_id, force_translate=force_translate
    )

    text, title = await asyncio.gather(
        asyncio.to_thread(
            translator.translate_body, full_doc.text, full_doc.title, force=force_translate
        ),
        asyncio.to_thread(translator.translate_title, full_doc.title, force=force_translate),
    )

    created = store.create_document(
        title,
        text,
        settings.target_collection_id,
        parent_document_id=parent_id,
        emoji=full_doc.emoji,
    )
    ledger.add(full_doc, created)
    return True


async def run_translation(
    settings: Settings,
    store: DocumentStoreProtocol,
    translator: TranslatorProtocol,
    ledger: TranslationLedger,
    *,
    delay_seconds: float = DOCUMENT_DELAY_SECONDS,
) -> RunStats:
    """Translate pending documents of the source collection into the target collection.

    Documents are processed one at a time in fetch order; a failing document
    is counted and the batch continues. A ledger write failure aborts the run.

    Args:
        settings: Collections, batch size, spending limit and dry-run flag.
        store: Outline document store.
        translator: Translation engine.
        ledger: Translation ledger, shared with the folder resolver.
        delay_seconds: Pause between documents.

    Returns:
        RunStats with the counters of this run.
    """
    stats = RunStats()

    if settings.dry_run:
        logger.info("DRY RUN: only the first document will be translated")

    documents = store.list_documents(settings.source_collection_id)
    if not documents:
        logger.info("No documents found in source collection {}", settings.source_collection_id)
        return stats

    hierarchy = HierarchyBuilder()
    roots = hierarchy.build(documents)
    shape = hierarchy.stats(roots)
    logger.info(
        "Hierarchy: {} documents, {} roots, maximum depth {}",
        shape.total_documents,
        shape.root_documents,
        shape.max_depth,
    )

    pending = select_pending(documents, ledger)
    stats.pending = len(pending)
    logger.info(
        "{} documents, {} to translate, {} already translated",
        len(documents),
        len(pending),
        len(documents) - len(pending),
    )
    if not pending:
        logger.success("All documents are already translated and up to date")
        return stats

    batch = pending[: settings.batch_size] if settings.batch_size else pending
    if len(batch) < len(pending):
        logger.info("Batch: translating {} of {} documents", len(batch), len(pending))

    full_estimate = estimate_batch_cost(batch, settings.model)
    if settings.dry_run:
        estimate = estimate_batch_cost(batch[:1], settings.model)
        logger.info(
            "DRY RUN cost: first document ${:.4f}, all {} documents would cost ${:.4f}",
            estimate.estimated_cost_usd,
            len(batch),
            full_estimate.estimated_cost_usd,
        )
    else:
        estimate = full_estimate
        log_cost_estimate(estimate)

    if not check_budget(estimate, settings.max_spending_usd):
        logger.error("Translation cancelled due to the spending limit")
        stats.budget_rejected = True
        return stats

    stats.total = len(batch)
    stats.estimated_cost_usd = full_estimate.estimated_cost_usd

    folders = FolderResolver(hierarchy, store, translator, ledger)
    for i, doc in enumerate(batch):
        is_first = i == 0
        logger.info("[{}/{}] Processing: {!r}", i + 1, len(batch), doc.title)

        if settings.dry_run and not is_first:
            logger.info("DRY RUN: skipping, only the first document is translated")
            stats.skipped += 1
            continue

        try:
            done = await _translate_document(
                doc,
                settings,
                store,
                translator,
                ledger,
                folders,
                force_translate=settings.dry_run and is_first,
            )
        except LedgerError:
            raise
        except Exception as e:
            logger.opt(exception=e).debug("Traceback for {!r}", doc.title)
            logger.error("Failed to translate {!r} ({}): {}", doc.title, doc.id, e)
            stats.errors += 1
        else:
            if done:
                stats.translated += 1
                logger.success("Translated {!r}", doc.title)
            else:
                stats.skipped += 1

        if i < len(batch) - 1 and delay_seconds > 0:
            await asyncio.sleep(delay_seconds)

    stats.actual_cost_usd = translator.actual_cost_usd()
    log_summary(stats)
    return stats


def log_summary(stats: RunStats) -> None:
    logger.info(
        "Translation finished: {} translated, {} skipped, {} errors, {} total",
        stats.translated,
        stats.skipped,
        stats.errors,
        stats.total,
    )
    logger.info(
        "Estimated cost ${:.4f}, actual cost ${:.6f}",
        stats.estimated_cost_usd,
        stats.actual_cost_usd,
    )
    if stats.errors:
        logger.warning("Some documents failed to translate, see the log above for details")
