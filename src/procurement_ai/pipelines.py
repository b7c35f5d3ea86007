"""Task pipelines: prompt the model and turn its reply into procurement data.

Each pipeline sends exactly one user message and keeps no state between
calls. Transport and extraction failures propagate to the caller unchanged;
callers are responsible for persistence and for any resubmission.
"""

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import TypeVar

from pydantic import BaseModel

from procurement_ai import prompts
from procurement_ai.client import GenAIClient
from procurement_ai.extraction import extract_record
from procurement_ai.models import (
    Message,
    ProcessedProposal,
    ProposalDraft,
    ProposalScore,
    RFPContext,
    RFPDraft,
    SupplierProposal,
)

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def _context_text(rfp_context: RFPContext | str) -> str:
    if isinstance(rfp_context, RFPContext):
        return rfp_context.summary()
    return rfp_context


def _run_structured(
    client: GenAIClient, name: str, prompt: str, model: type[RecordT]
) -> RecordT:
    """Send *prompt* and extract a *model* record from the full reply."""
    logger.info("Running %s pipeline", name)
    text = client.complete([Message.user(prompt)])
    return extract_record(text, model)


def structure_rfp(client: GenAIClient, raw_input: str) -> RFPDraft:
    """Convert a natural-language procurement request into an RFP draft."""
    return _run_structured(
        client, "rfp_structuring", prompts.rfp_structuring_prompt(raw_input), RFPDraft
    )


def structure_proposal(
    client: GenAIClient, email: str, rfp_context: RFPContext | str
) -> ProposalDraft:
    """Extract a proposal draft from a supplier's free-text reply.

    Args:
        client: Generative-text client.
        email: Raw text of the supplier's reply.
        rfp_context: The RFP the reply answers, as a context block or model.

    Returns:
        The structured proposal draft.
    """
    prompt = prompts.proposal_structuring_prompt(email, _context_text(rfp_context))
    return _run_structured(client, "proposal_structuring", prompt, ProposalDraft)


def score_proposal(
    client: GenAIClient, rfp_context: RFPContext | str, draft: ProposalDraft
) -> ProposalScore:
    """Score a structured proposal from 0 to 100 against its RFP."""
    prompt = prompts.proposal_scoring_prompt(
        _context_text(rfp_context), draft.content, draft.pricing, draft.terms
    )
    return _run_structured(client, "proposal_scoring", prompt, ProposalScore)


def process_proposal(
    client: GenAIClient, email: str, rfp_context: RFPContext | str
) -> ProcessedProposal:
    """Structure a supplier reply and score the result.

    Stops at the first failure; no partially processed proposal is returned.
    """
    draft = structure_proposal(client, email, rfp_context)
    score = score_proposal(client, rfp_context, draft)
    return ProcessedProposal(draft=draft, score=score)


def stream_evaluation(
    client: GenAIClient,
    rfp_context: RFPContext | str,
    proposals: Sequence[SupplierProposal],
) -> Iterator[str]:
    """Return a lazy fragment stream of the multi-proposal evaluation.

    For consumers that pull fragments themselves (e.g. an HTTP streaming
    response). Closing the iterator releases the upstream connection.
    """
    prompt = prompts.evaluation_prompt(_context_text(rfp_context), proposals)
    logger.info("Streaming proposal_evaluation (%d proposals)", len(proposals))
    return client.stream([Message.user(prompt)])


def evaluate_proposals(
    client: GenAIClient,
    rfp_context: RFPContext | str,
    proposals: Sequence[SupplierProposal],
    on_chunk: Callable[[str], None] | None = None,
) -> str:
    """Write a prose comparison of several proposals.

    No minimum number of proposals is enforced here; callers reject
    comparisons of fewer than two proposals before invoking this pipeline.

    Args:
        client: Generative-text client.
        rfp_context: The RFP all proposals answer.
        proposals: Proposals to compare.
        on_chunk: Receives each fragment for progressive display.

    Returns:
        The model's markdown evaluation, unmodified.
    """
    prompt = prompts.evaluation_prompt(_context_text(rfp_context), proposals)
    logger.info("Running proposal_evaluation pipeline (%d proposals)", len(proposals))
    return client.complete([Message.user(prompt)], on_chunk=on_chunk)
