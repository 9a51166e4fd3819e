"""Token and spend estimation, and the spending-limit gate."""

import math
from collections.abc import Sequence

from loguru import logger

from outline_translate.config import (
    CHARS_PER_TOKEN,
    DEFAULT_MODEL,
    INPUT_COST_PER_TOKEN,
    OUTPUT_COST_PER_TOKEN,
    SYSTEM_PROMPT_TOKENS,
    TRANSLATION_OVERHEAD_TOKENS,
)
from outline_translate.models.document import CostEstimate, Document


def _content_tokens(document: Document) -> int:
    return math.ceil((len(document.text) + len(document.title)) / CHARS_PER_TOKEN)


def estimate_input_tokens(document: Document) -> int:
    return _content_tokens(document) + SYSTEM_PROMPT_TOKENS + TRANSLATION_OVERHEAD_TOKENS


def estimate_output_tokens(document: Document) -> int:
    # A translation is about as long as its source.
    return _content_tokens(document)


def calculate_actual_cost(input_tokens: int, output_tokens: int) -> float:
    return input_tokens * INPUT_COST_PER_TOKEN + output_tokens * OUTPUT_COST_PER_TOKEN


def estimate_document_cost(document: Document) -> float:
    return calculate_actual_cost(
        estimate_input_tokens(document), estimate_output_tokens(document)
    )


def estimate_batch_cost(documents: Sequence[Document], model: str = DEFAULT_MODEL) -> CostEstimate:
    """Estimate tokens and USD for translating ``documents``."""
    total_cost = sum(estimate_document_cost(doc) for doc in documents)
    total_tokens = sum(
        estimate_input_tokens(doc) + estimate_output_tokens(doc) for doc in documents
    )
    return CostEstimate(
        total_documents=len(documents),
        estimated_tokens=total_tokens,
        estimated_cost_usd=total_cost,
        cost_per_document=total_cost / len(documents) if documents else 0.0,
        model=model,
    )


def log_cost_estimate(estimate: CostEstimate) -> None:
    logger.info(
        "Cost estimate ({}): {} documents, {:,} tokens, ${:.4f} (${:.4f} per document)",
        estimate.model,
        estimate.total_documents,
        estimate.estimated_tokens,
        estimate.estimated_cost_usd,
        estimate.cost_per_document,
    )
    if estimate.estimated_cost_usd > 10:
        logger.warning("High cost detected, consider translating in smaller batches")
    elif estimate.estimated_cost_usd > 1:
        logger.warning("Moderate cost, monitor your usage")


def check_budget(estimate: CostEstimate, max_spending_usd: float | None) -> bool:
    """Return True if the estimated spend is within the configured ceiling.

    No ceiling means unlimited. An estimate equal to the ceiling passes.
    """
    cost = estimate.estimated_cost_usd
    if cost == 0:
        return True

    if max_spending_usd is None:
        logger.info("No spending limit set, set MAX_SPENDING_USD to enable cost controls")
        return True

    if cost > max_spending_usd:
        logger.error(
            "Estimated cost ${:.4f} exceeds the spending limit ${:.2f}; "
            "raise MAX_SPENDING_USD, lower BATCH_SIZE or use DRY_RUN=true",
            cost,
            max_spending_usd,
        )
        return False

    share = cost / max_spending_usd * 100
    if share > 50:
        logger.warning("HIGH: using {:.1f}% of the spending limit", share)
    elif share > 25:
        logger.warning("MODERATE: using {:.1f}% of the spending limit", share)
    else:
        logger.info("LOW: using {:.1f}% of the spending limit", share)
    return True
