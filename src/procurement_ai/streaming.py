"""Streaming primitives that turn a chunked SSE byte stream into completion text.

The generative-text endpoint answers with lines of the form::

    data: {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}

terminated by ``data: [DONE]``. Decoding is best-effort: a malformed line is
skipped rather than aborting an otherwise healthy stream.
"""

import codecs
import json
import logging
import re
from collections.abc import Callable, Iterable, Iterator

from procurement_ai.models import Fragment, Skip

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def iter_text(byte_chunks: Iterable[bytes], encoding: str = "utf-8") -> Iterator[str]:
    """Decode byte chunks into text as soon as they arrive.

    A single incremental decoder is shared across chunks, so a multi-byte
    character split between two chunks is emitted intact once its final
    byte is read.

    Args:
        byte_chunks: Raw body chunks in arrival order.
        encoding: Text encoding of the body.

    Yields:
        Non-empty decoded text pieces.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    for chunk in byte_chunks:
        text = decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


def iter_lines(text_chunks: Iterable[str]) -> Iterator[str]:
    """Split decoded text into lines, buffering partial lines across chunks.

    Lines may end in ``\\r\\n``, ``\\n`` or a bare ``\\r``. Each chunk is
    scanned once; the unterminated tail is kept as a list of pieces and
    joined only when its terminator arrives.

    Args:
        text_chunks: Decoded text pieces in arrival order.

    Yields:
        Complete lines without their terminators. A trailing line with no
        terminator is yielded once the input is exhausted.
    """
    pending: list[str] = []
    held_cr = False
    for chunk in text_chunks:
        if held_cr:
            chunk = "\r" + chunk
            held_cr = False
        # A final "\r" may be the first half of "\r\n".
        if chunk.endswith("\r"):
            chunk = chunk[:-1]
            held_cr = True
        first, *rest = _LINE_BREAK_RE.split(chunk)
        pending.append(first)
        if not rest:
            continue
        yield "".join(pending)
        yield from rest[:-1]
        pending = [rest[-1]]
    tail = "".join(pending)
    if held_cr or tail:
        yield tail


def decode_event_line(line: str) -> Fragment | Skip:
    """Interpret one event line.

    Args:
        line: A single line from the stream, without its terminator.

    Returns:
        ``Fragment`` with the text found at
        ``candidates[0].content.parts[0].text``, or ``Skip`` for framing
        lines, the end-of-stream sentinel, and malformed payloads.
    """
    if not line.startswith(DATA_PREFIX):
        return Skip("not a data line")

    payload = line[len(DATA_PREFIX) :].strip()
    if payload == DONE_SENTINEL:
        return Skip("end-of-stream sentinel")

    try:
        envelope = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed event payload: %.80s", payload)
        return Skip("invalid JSON")

    try:
        text = envelope["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        logger.debug("Skipping event without text: %.80s", payload)
        return Skip("no text in envelope")

    if not isinstance(text, str) or not text:
        return Skip("empty text")
    return Fragment(text)


def iter_fragments(byte_chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield text fragments from a raw SSE body in arrival order."""
    for line in iter_lines(iter_text(byte_chunks)):
        outcome = decode_event_line(line)
        if isinstance(outcome, Fragment):
            yield outcome.text


def accumulate(
    fragments: Iterable[str],
    on_chunk: Callable[[str], None] | None = None,
) -> str:
    """Concatenate fragments, forwarding each one to *on_chunk* first.

    The callback runs synchronously before the next fragment is pulled, so
    it sees exactly the sequence that makes up the returned text.

    Args:
        fragments: Text fragments in arrival order.
        on_chunk: Optional per-fragment callback.

    Returns:
        The full accumulated text.
    """
    parts: list[str] = []
    for text in fragments:
        if on_chunk is not None:
            on_chunk(text)
        parts.append(text)
    return "".join(parts)
