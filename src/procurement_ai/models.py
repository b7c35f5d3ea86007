"""Domain models for the procurement AI core."""

import json
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "model"]


@dataclass(frozen=True)
class Part:
    """One text part of a message."""

    text: str


@dataclass(frozen=True)
class Message:
    """A single conversational turn sent to the generative-text endpoint."""

    role: Role
    parts: tuple[Part, ...] = field(default_factory=tuple)

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role="user", parts=(Part(text=text),))

    def to_payload(self) -> dict:
        """Return the wire representation used in the request body."""
        return {"role": self.role, "parts": [{"text": p.text} for p in self.parts]}


@dataclass(frozen=True)
class Fragment:
    """An incremental piece of generated text decoded from one event line."""

    text: str


@dataclass(frozen=True)
class Skip:
    """An event line that carried no usable fragment."""

    reason: str


class RFPDraft(BaseModel):
    """Structured RFP extracted from a natural-language procurement request."""

    model_config = ConfigDict(extra="allow")

    title: str
    description: str
    budget: float | None = None
    delivery_timeline: str | None = None
    requirements: dict[str, Any] = Field(default_factory=dict)


class ProposalDraft(BaseModel):
    """Structured proposal extracted from a supplier's reply e-mail."""

    model_config = ConfigDict(extra="allow")

    content: str
    pricing: dict[str, Any] = Field(default_factory=dict)
    terms: str = ""


class ProposalScore(BaseModel):
    """AI score for a single proposal against its RFP."""

    model_config = ConfigDict(extra="allow")

    score: float = Field(ge=0, le=100, strict=True)
    summary: str
    evaluation: dict[str, Any] = Field(default_factory=dict)


def format_amount(value: float | None) -> str:
    if value is None:
        return "Not specified"
    return str(int(value)) if float(value).is_integer() else str(value)


class RFPContext(BaseModel):
    """RFP fields used as context when handling proposals."""

    title: str
    description: str | None = None
    budget: float | None = None
    delivery_timeline: str | None = None
    requirements: dict[str, Any] | None = None

    @classmethod
    def from_draft(cls, draft: RFPDraft) -> "RFPContext":
        return cls(
            title=draft.title,
            description=draft.description,
            budget=draft.budget,
            delivery_timeline=draft.delivery_timeline,
            requirements=draft.requirements,
        )

    def summary(self) -> str:
        """Render the context block embedded in proposal prompts."""
        lines = [
            f"Title: {self.title}",
            f"Description: {self.description or 'No description provided'}",
            f"Budget: {format_amount(self.budget)}",
        ]
        if self.delivery_timeline:
            lines.append(f"Delivery Timeline: {self.delivery_timeline}")
        lines.append(f"Requirements: {json.dumps(self.requirements or {})}")
        return "\n".join(lines)


class SupplierProposal(BaseModel):
    """A proposal as supplied to the multi-proposal evaluation."""

    supplier_name: str
    content: str = ""
    pricing: dict[str, Any] = Field(default_factory=dict)
    terms: str = ""


class ProcessedProposal(BaseModel):
    """A supplier reply after structuring and scoring."""

    draft: ProposalDraft
    score: ProposalScore
