"""RFP invitation composition and per-recipient dispatch.

Delivery itself is pluggable: callers pass a ``send`` callable (SMTP, a
queue, an e-mail API). Without one, invitations are logged and marked as
sent without delivery.
"""

import json
import logging
from collections.abc import Callable, Sequence
from typing import Literal

from pydantic import BaseModel

from procurement_ai.models import RFPContext, format_amount

logger = logging.getLogger(__name__)


class Supplier(BaseModel):
    id: str
    name: str
    email: str
    contact_person: str | None = None


class Invitation(BaseModel):
    supplier_id: str
    recipient: str
    subject: str
    body: str


class DeliveryResult(BaseModel):
    supplier_id: str
    email: str
    status: Literal["sent", "failed"]
    error: str | None = None


Sender = Callable[[Invitation], None]


def compose_invitation(rfp: RFPContext, supplier: Supplier) -> Invitation:
    """Build the invitation e-mail asking *supplier* to answer *rfp*."""
    lines = [
        f"Dear {supplier.contact_person or supplier.name},",
        "",
        "You have been invited to submit a proposal for the following "
        "Request for Proposal (RFP):",
        "",
        f"RFP Title: {rfp.title}",
        "",
        "Description:",
        rfp.description or "No description provided",
        "",
    ]
    if rfp.budget is not None:
        lines.append(f"Budget: ${format_amount(rfp.budget)}")
    if rfp.delivery_timeline:
        lines.append(f"Delivery Timeline: {rfp.delivery_timeline}")
    lines += [
        "",
        "Requirements:",
        json.dumps(rfp.requirements, indent=2)
        if rfp.requirements
        else "See attached details",
        "",
        "Please submit your proposal by replying to this email with:",
        "1. Your pricing breakdown",
        "2. Delivery timeline",
        "3. Terms and conditions",
        "4. Any additional information",
        "",
        "We look forward to receiving your proposal.",
        "",
        "Best regards,",
        "RFP Management Team",
    ]
    return Invitation(
        supplier_id=supplier.id,
        recipient=supplier.email,
        subject=f"RFP Invitation: {rfp.title}",
        body="\n".join(lines),
    )


def dispatch_invitations(
    rfp_id: str,
    rfp: RFPContext,
    suppliers: Sequence[Supplier],
    send: Sender | None = None,
) -> list[DeliveryResult]:
    """Send an invitation to every supplier and report per-recipient status.

    A failure for one recipient is recorded and does not stop the others.

    Args:
        rfp_id: Identifier of the RFP being sent out.
        rfp: RFP fields used in the invitation body.
        suppliers: Recipients.
        send: Delivery callable. When omitted, invitations are only logged.

    Returns:
        One result per supplier, in input order.

    Raises:
        ValueError: If *rfp_id* is empty or no suppliers are given.
    """
    if not rfp_id or not suppliers:
        raise ValueError("Missing rfp_id or supplier_ids")

    if send is None:
        logger.info("No mail sender configured; marking RFP %s as sent", rfp_id)

    results: list[DeliveryResult] = []
    for supplier in suppliers:
        invitation = compose_invitation(rfp, supplier)
        try:
            if send is None:
                logger.info(
                    "Would send %r to %s", invitation.subject, invitation.recipient
                )
            else:
                send(invitation)
        except Exception as exc:
            logger.exception("Failed to send invitation to %s", supplier.email)
            results.append(
                DeliveryResult(
                    supplier_id=supplier.id,
                    email=supplier.email,
                    status="failed",
                    error=str(exc) or exc.__class__.__name__,
                )
            )
            continue
        results.append(
            DeliveryResult(supplier_id=supplier.id, email=supplier.email, status="sent")
        )

    logger.info("Processed %d invitation(s) for RFP %s", len(results), rfp_id)
    return results
