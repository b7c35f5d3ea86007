"""Reply loader: reads supplier replies and RFP requests from text, Markdown,
e-mail, and PDF files."""

import html
import logging
import re
from email import policy
from email.parser import BytesParser
from pathlib import Path
from typing import Callable

import markdown
from pypdf import PdfReader

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


def _html_to_text(markup: str) -> str:
    # Entities such as &amp; and &lt; survive tag stripping.
    return html.unescape(_TAG_RE.sub("", markup))


def _load_txt(file_path: Path) -> str:
    # Replies saved from Windows mail clients often start with a BOM.
    return file_path.read_text(encoding="utf-8-sig")


def _load_pdf(file_path: Path) -> str:
    """Extract the text of a PDF quote or proposal.

    Pages without extractable text (scanned price sheets, blank pages) are
    dropped, and page breaks become blank lines.
    """
    reader = PdfReader(str(file_path))
    pages = (page.extract_text() or "" for page in reader.pages)
    return "\n\n".join(text.strip() for text in pages if text.strip())


def _load_markdown(file_path: Path) -> str:
    raw = file_path.read_text(encoding="utf-8-sig")
    return _html_to_text(markdown.markdown(raw))


def _load_eml(file_path: Path) -> str:
    """Return the text body of a saved e-mail message.

    The subject line is kept as the first line since suppliers often put
    the quoted total or reference number there. HTML-only messages are
    reduced to plain text.

    Args:
        file_path: Path to an RFC 822 ``.eml`` file.

    Returns:
        Subject and body text, or an empty string if the message has no
        text part.
    """
    with file_path.open("rb") as fh:
        message = BytesParser(policy=policy.default).parse(fh)
    body = message.get_body(preferencelist=("plain", "html"))
    if body is None:
        text = ""
    elif body.get_content_subtype() == "html":
        text = _html_to_text(body.get_content())
    else:
        text = body.get_content()
    subject = message.get("subject")
    if subject and text.strip():
        return f"Subject: {subject}\n\n{text}"
    return text


# Supported file extensions mapped to their loader functions.
LOADERS: dict[str, Callable[[Path], str]] = {
    ".txt": _load_txt,
    ".md": _load_markdown,
    ".eml": _load_eml,
    ".pdf": _load_pdf,
}


def load_text(file_path: str | Path) -> str:
    """Load the text of a supplier reply or procurement request.

    Args:
        file_path: Path to a ``.txt``, ``.md``, ``.eml`` or ``.pdf`` file.

    Returns:
        The file's text content.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the extension is unsupported or the file is empty.
    """
    path = Path(file_path)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {file_path}")

    ext = path.suffix.lower()
    loader = LOADERS.get(ext)
    if loader is None:
        supported = ", ".join(sorted(LOADERS))
        raise ValueError(f"Unsupported file type {ext!r} (expected {supported})")

    content = loader(path)
    if not content.strip():
        raise ValueError(f"File is empty: {path.name}")

    logger.info("Loaded: %s", path.name)
    return content
