"""HTTP client for the streaming generative-text endpoint."""

from collections.abc import Callable, Iterator, Sequence
from contextlib import closing

import httpx

from procurement_ai.config import GenAIConfig
from procurement_ai.errors import TransportError
from procurement_ai.models import Message
from procurement_ai.streaming import accumulate, iter_fragments


class GenAIClient:
    """Sends prompts to the generative-text endpoint and reads streamed replies.

    Every call is stateless: one POST, one streamed response, nothing kept
    afterwards. A single client may be shared between threads; concurrent
    calls only share the underlying connection pool.

    Args:
        config: Endpoint settings. Uses defaults if not provided.
        http_client: Pre-built ``httpx.Client`` (e.g. with a mock
            transport). When omitted the client creates and owns one.
    """

    def __init__(
        self,
        config: GenAIConfig | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.config = config or GenAIConfig()
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=self.config.timeout)

    def __enter__(self) -> "GenAIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Release the HTTP connection pool if this client created it."""
        if self._owns_http:
            self._http.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.app_id:
            headers[self.config.app_id_header] = self.config.app_id
        return headers

    def stream(self, messages: Sequence[Message]) -> Iterator[str]:
        """Yield text fragments of the model's reply as they arrive.

        The response is released on every exit path. Closing the returned
        generator early (``.close()``) aborts the read loop and closes the
        connection.

        Args:
            messages: Conversation to send; pipelines send a single user turn.

        Yields:
            Text fragments in the order the server produced them.

        Raises:
            TransportError: On a non-2xx status (before any fragment) or on
                a network failure while connecting or reading.
        """
        body = {"contents": [m.to_payload() for m in messages]}
        try:
            with self._http.stream(
                "POST", self.config.endpoint, json=body, headers=self._headers()
            ) as response:
                if not response.is_success:
                    raise TransportError(
                        f"LLM API error: {response.reason_phrase}",
                        status_code=response.status_code,
                        reason=response.reason_phrase,
                    )
                yield from iter_fragments(response.iter_bytes())
        except httpx.HTTPError as exc:
            raise TransportError(f"LLM API request failed: {exc}") from exc

    def complete(
        self,
        messages: Sequence[Message],
        on_chunk: Callable[[str], None] | None = None,
    ) -> str:
        """Return the model's full reply, optionally streaming fragments.

        Args:
            messages: Conversation to send.
            on_chunk: Called with each fragment before the next is read.

        Returns:
            The concatenation of all fragments.
        """
        with closing(self.stream(messages)) as fragments:
            return accumulate(fragments, on_chunk)
