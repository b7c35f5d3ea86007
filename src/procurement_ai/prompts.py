"""Instruction templates for the four procurement pipelines."""

import json
from collections.abc import Sequence

from procurement_ai.models import SupplierProposal

_JSON_ONLY = (
    "Return only the JSON object, no additional text or markdown formatting."
)

RFP_STRUCTURING_TEMPLATE = (
    "You are an AI assistant that converts natural language procurement "
    "requirements into structured RFP data.\n\n"
    "Parse the following procurement request and extract structured "
    "information. Return ONLY a valid JSON object with these fields:\n"
    "- title: A concise title for the RFP (string)\n"
    "- description: A detailed description (string)\n"
    "- budget: Total budget amount as a number (or null if not specified)\n"
    "- delivery_timeline: Delivery requirements as a string "
    "(or null if not specified)\n"
    "- requirements: An object containing all specific requirements "
    "(items, quantities, specifications, terms, etc.)\n\n"
    'Input: "{raw_input}"\n\n' + _JSON_ONLY
)

PROPOSAL_STRUCTURING_TEMPLATE = (
    "You are an AI assistant that extracts structured information from "
    "supplier proposal emails.\n\n"
    "RFP Context:\n{rfp_context}\n\n"
    "Supplier Email:\n{email}\n\n"
    "Extract the following information and return ONLY a valid JSON object:\n"
    "- content: A summary of the proposal (string)\n"
    "- pricing: An object containing all pricing information "
    "(line items, totals, discounts, etc.)\n"
    "- terms: Payment terms, warranty, and other conditions (string)\n\n"
    + _JSON_ONLY
)

PROPOSAL_SCORING_TEMPLATE = (
    "You are an AI procurement assistant that scores supplier proposals.\n\n"
    "RFP Requirements:\n{rfp_context}\n\n"
    "Proposal Details:\n"
    "Content: {content}\n"
    "Pricing: {pricing}\n"
    "Terms: {terms}\n\n"
    "Evaluate this proposal and return ONLY a valid JSON object with:\n"
    "- score: A number from 0-100 representing overall quality\n"
    "- summary: A brief 2-3 sentence summary of the proposal\n"
    "- evaluation: An object with detailed scores for: "
    "pricing_competitiveness, terms_favorability, completeness, "
    "and overall_fit\n\n" + _JSON_ONLY
)

EVALUATION_TEMPLATE = (
    "You are an AI procurement assistant that evaluates and compares "
    "supplier proposals.\n\n"
    "RFP Requirements:\n{rfp_context}\n\n"
    "Proposals to Compare:\n{proposals}\n\n"
    "Provide a comprehensive evaluation including:\n"
    "1. Summary of each proposal's strengths and weaknesses\n"
    "2. Comparison of pricing (value for money)\n"
    "3. Comparison of terms and conditions\n"
    "4. Completeness of response to requirements\n"
    "5. Overall recommendation with reasoning\n\n"
    "Format your response in clear sections with markdown formatting."
)

_PROPOSAL_SEPARATOR = "\n---\n"


def _format_pricing(pricing: dict) -> str:
    return json.dumps(pricing, indent=2)


def rfp_structuring_prompt(raw_input: str) -> str:
    return RFP_STRUCTURING_TEMPLATE.format(raw_input=raw_input)


def proposal_structuring_prompt(email: str, rfp_context: str) -> str:
    return PROPOSAL_STRUCTURING_TEMPLATE.format(rfp_context=rfp_context, email=email)


def proposal_scoring_prompt(
    rfp_context: str, content: str, pricing: dict, terms: str
) -> str:
    return PROPOSAL_SCORING_TEMPLATE.format(
        rfp_context=rfp_context,
        content=content,
        pricing=_format_pricing(pricing),
        terms=terms,
    )


def format_proposals(proposals: Sequence[SupplierProposal]) -> str:
    """Render proposals as numbered blocks separated by horizontal rules."""
    blocks = [
        f"Proposal {i} ({p.supplier_name}):\n"
        f"Content: {p.content}\n"
        f"Pricing: {_format_pricing(p.pricing)}\n"
        f"Terms: {p.terms}\n"
        for i, p in enumerate(proposals, start=1)
    ]
    return _PROPOSAL_SEPARATOR.join(blocks)


def evaluation_prompt(rfp_context: str, proposals: Sequence[SupplierProposal]) -> str:
    return EVALUATION_TEMPLATE.format(
        rfp_context=rfp_context, proposals=format_proposals(proposals)
    )
