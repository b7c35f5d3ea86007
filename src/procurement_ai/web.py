"""FastAPI web interface for the procurement AI pipelines."""

import logging
from collections.abc import Iterator, Sequence
from contextlib import asynccontextmanager, closing

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from procurement_ai import invitations, pipelines
from procurement_ai.client import GenAIClient
from procurement_ai.config import AppConfig
from procurement_ai.errors import ProcurementAIError
from procurement_ai.models import (
    ProcessedProposal,
    ProposalDraft,
    ProposalScore,
    RFPContext,
    RFPDraft,
    SupplierProposal,
)

logger = logging.getLogger(__name__)

_config = AppConfig()

MIN_PROPOSALS_TO_COMPARE = 2


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Create the generative-text client on startup and close it on shutdown."""
    client = GenAIClient(_config.genai)
    application.state.genai_client = client
    logger.info("GenAI client ready (endpoint: %s)", _config.genai.endpoint)
    try:
        yield
    finally:
        client.close()


app = FastAPI(
    title="Procurement AI",
    lifespan=lifespan,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
)

router = APIRouter(prefix="/api/v1")


def get_genai_client(request: Request) -> GenAIClient:
    """FastAPI dependency: return the shared GenAI client from app state."""
    client = getattr(request.app.state, "genai_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="AI service not initialized.")
    return client


def _upstream_failure(action: str, exc: ProcurementAIError) -> HTTPException:
    logger.error("Failed to %s: %s", action, exc)
    return HTTPException(status_code=502, detail=f"Failed to {action}")


def _require_comparable(proposals: Sequence[SupplierProposal]) -> None:
    if len(proposals) < MIN_PROPOSALS_TO_COMPARE:
        raise HTTPException(
            status_code=422,
            detail=f"Need at least {MIN_PROPOSALS_TO_COMPARE} proposals to compare",
        )


class StructureRFPRequest(BaseModel):
    input: str = Field(min_length=1)


class StructureProposalRequest(BaseModel):
    email: str = Field(min_length=1)
    rfp: RFPContext


class ScoreProposalRequest(BaseModel):
    rfp: RFPContext
    proposal: ProposalDraft


class EvaluateRequest(BaseModel):
    rfp: RFPContext
    proposals: list[SupplierProposal]


class EvaluateResponse(BaseModel):
    evaluation: str


class InvitationRequest(BaseModel):
    rfp_id: str
    rfp: RFPContext
    suppliers: list[invitations.Supplier]


class InvitationResponse(BaseModel):
    success: bool
    results: list[invitations.DeliveryResult]
    message: str


class HealthResponse(BaseModel):
    status: str
    endpoint: str
    app_id_configured: bool


@router.get("/health", response_model=HealthResponse)
async def api_health():
    return HealthResponse(
        status="ok",
        endpoint=_config.genai.endpoint,
        app_id_configured=bool(_config.genai.app_id),
    )


@router.post("/rfps/structure", response_model=RFPDraft)
def api_structure_rfp(
    body: StructureRFPRequest, client: GenAIClient = Depends(get_genai_client)
):
    try:
        return pipelines.structure_rfp(client, body.input)
    except ProcurementAIError as exc:
        raise _upstream_failure("create RFP", exc) from exc


@router.post("/proposals/structure", response_model=ProposalDraft)
def api_structure_proposal(
    body: StructureProposalRequest, client: GenAIClient = Depends(get_genai_client)
):
    try:
        return pipelines.structure_proposal(client, body.email, body.rfp)
    except ProcurementAIError as exc:
        raise _upstream_failure("process proposal", exc) from exc


@router.post("/proposals/score", response_model=ProposalScore)
def api_score_proposal(
    body: ScoreProposalRequest, client: GenAIClient = Depends(get_genai_client)
):
    try:
        return pipelines.score_proposal(client, body.rfp, body.proposal)
    except ProcurementAIError as exc:
        raise _upstream_failure("score proposal", exc) from exc


@router.post("/proposals/process", response_model=ProcessedProposal)
def api_process_proposal(
    body: StructureProposalRequest, client: GenAIClient = Depends(get_genai_client)
):
    try:
        return pipelines.process_proposal(client, body.email, body.rfp)
    except ProcurementAIError as exc:
        raise _upstream_failure("process proposal", exc) from exc


@router.post("/evaluations", response_model=EvaluateResponse)
def api_evaluate(body: EvaluateRequest, client: GenAIClient = Depends(get_genai_client)):
    _require_comparable(body.proposals)
    try:
        evaluation = pipelines.evaluate_proposals(client, body.rfp, body.proposals)
    except ProcurementAIError as exc:
        raise _upstream_failure("evaluate proposals", exc) from exc
    return EvaluateResponse(evaluation=evaluation)


@router.post("/evaluations/stream")
def api_evaluate_stream(
    body: EvaluateRequest, client: GenAIClient = Depends(get_genai_client)
):
    """Stream the evaluation as plain text while the model writes it.

    The first fragment is read before the response starts so an upstream
    failure still produces a proper error status. Failures after that point
    end the stream early; text already sent is not retracted.
    """
    _require_comparable(body.proposals)
    fragments = pipelines.stream_evaluation(client, body.rfp, body.proposals)
    try:
        first = next(fragments, "")
    except ProcurementAIError as exc:
        raise _upstream_failure("evaluate proposals", exc) from exc

    def _body() -> Iterator[str]:
        with closing(fragments):
            if first:
                yield first
            try:
                yield from fragments
            except ProcurementAIError as exc:
                logger.error("Evaluation stream aborted: %s", exc)

    return StreamingResponse(_body(), media_type="text/plain; charset=utf-8")


@router.post("/invitations", response_model=InvitationResponse)
def api_send_invitations(body: InvitationRequest):
    try:
        results = invitations.dispatch_invitations(
            body.rfp_id, body.rfp, body.suppliers
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return InvitationResponse(
        success=True,
        results=results,
        message=f"Processed {len(results)} email(s)",
    )


app.include_router(router)
