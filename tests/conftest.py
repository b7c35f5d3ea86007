"""Shared fixtures for the test suite."""

import json

import httpx
import pytest

from procurement_ai.client import GenAIClient
from procurement_ai.config import GenAIConfig
from procurement_ai.models import RFPContext, SupplierProposal

TEST_ENDPOINT = "https://genai.test/v1/generate:stream"


def sse_event(text: str) -> str:
    """Return one SSE data line carrying *text* in the standard envelope."""
    envelope = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return f"data: {json.dumps(envelope, ensure_ascii=False)}\n\n"


class TrackingStream(httpx.SyncByteStream):
    """Response body that records whether httpx closed it."""

    def __init__(self, chunks: list[bytes], fail_after: int | None = None) -> None:
        self.chunks = chunks
        self.fail_after = fail_after
        self.closed = False
        self.served = 0

    def __iter__(self):
        for chunk in self.chunks:
            if self.fail_after is not None and self.served >= self.fail_after:
                raise httpx.ReadError("connection reset by peer")
            self.served += 1
            yield chunk

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sse():
    return sse_event


@pytest.fixture
def tracking_stream():
    return TrackingStream


@pytest.fixture
def genai_config() -> GenAIConfig:
    return GenAIConfig(endpoint=TEST_ENDPOINT, app_id="test-app")


@pytest.fixture
def sent_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_client(genai_config, sent_requests):
    """Build a GenAIClient whose HTTP layer serves a canned streamed body.

    ``body`` is either a list of byte chunks or a ``TrackingStream``.
    """
    clients: list[GenAIClient] = []

    def _make(body, status_code: int = 200) -> GenAIClient:
        def handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            if isinstance(body, httpx.SyncByteStream):
                return httpx.Response(status_code, stream=body)
            return httpx.Response(status_code, content=iter(list(body)))

        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        client = GenAIClient(genai_config, http_client=http_client)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client._http.close()


@pytest.fixture
def rfp_context() -> RFPContext:
    return RFPContext(
        title="Office laptops and monitors",
        description="Laptops and monitors for the new office.",
        budget=50000,
        delivery_timeline="Within 30 days",
        requirements={
            "laptops": {"quantity": 20, "ram": "16GB"},
            "monitors": {"quantity": 15, "size": "27-inch"},
        },
    )


@pytest.fixture
def supplier_proposals() -> list[SupplierProposal]:
    return [
        SupplierProposal(
            supplier_name="Acme Supplies",
            content="20 laptops and 15 monitors delivered in 3 weeks.",
            pricing={"total": 46500, "currency": "USD"},
            terms="Net 30, 1 year warranty",
        ),
        SupplierProposal(
            supplier_name="Globex",
            content="Full order within 25 days, premium monitors.",
            pricing={"total": 49800, "currency": "USD"},
            terms="Net 45, 2 year warranty",
        ),
    ]
