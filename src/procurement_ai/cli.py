"""CLI interface for the procurement AI pipelines."""

import argparse
import json
import logging
import sys
from pathlib import Path

from procurement_ai import pipelines
from procurement_ai.client import GenAIClient
from procurement_ai.config import AppConfig, GenAIConfig
from procurement_ai.errors import ProcurementAIError
from procurement_ai.models import RFPContext, SupplierProposal
from procurement_ai.reply_loader import load_text

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _load_rfp(path: str) -> RFPContext:
    return RFPContext.model_validate_json(Path(path).read_text(encoding="utf-8"))


def _load_proposals(path: str) -> list[SupplierProposal]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of proposals")
    return [SupplierProposal.model_validate(item) for item in data]


def _echo(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


def create_rfp(raw_input: str, config: AppConfig | None = None) -> None:
    """Structure a natural-language procurement request and print the RFP JSON.

    Args:
        raw_input: The procurement request as written by the user.
        config: Application configuration. Uses defaults if not provided.
    """
    cfg = config or AppConfig()
    with GenAIClient(cfg.genai) as client:
        draft = pipelines.structure_rfp(client, raw_input)
    print(draft.model_dump_json(indent=2))


def process_reply(
    rfp_path: str, reply_path: str, config: AppConfig | None = None
) -> None:
    """Structure and score a supplier reply against an RFP.

    Args:
        rfp_path: JSON file with the RFP fields (title, description, ...).
        reply_path: The supplier's reply (.txt, .md, .eml or .pdf).
        config: Application configuration. Uses defaults if not provided.
    """
    cfg = config or AppConfig()
    rfp = _load_rfp(rfp_path)
    reply = load_text(reply_path)
    with GenAIClient(cfg.genai) as client:
        processed = pipelines.process_proposal(client, reply, rfp)
    print(processed.model_dump_json(indent=2))


def evaluate(
    rfp_path: str, proposals_path: str, config: AppConfig | None = None
) -> None:
    """Stream an AI comparison of the proposals in *proposals_path*.

    At least two proposals are required; with fewer, nothing is sent to
    the model and the command exits with status 1.
    """
    cfg = config or AppConfig()
    rfp = _load_rfp(rfp_path)
    proposals = _load_proposals(proposals_path)

    if len(proposals) < 2:
        print("Need at least 2 proposals to compare", file=sys.stderr)
        sys.exit(1)

    with GenAIClient(cfg.genai) as client:
        pipelines.evaluate_proposals(client, rfp, proposals, on_chunk=_echo)
    _echo("\n")


def serve(config: AppConfig | None = None) -> None:
    """Run the web interface with uvicorn."""
    import uvicorn

    cfg = config or AppConfig()
    uvicorn.run("procurement_ai.web:app", host=cfg.server.host, port=cfg.server.port)


def main() -> None:
    """CLI entry point: parse arguments and dispatch to a pipeline command."""
    parser = argparse.ArgumentParser(
        description="Procurement AI: structure RFPs, process and compare proposals",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--endpoint", type=str, default=None, help="Generative-text endpoint URL"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # rfp
    rfp_p = subparsers.add_parser("rfp", help="Create an RFP from a description")
    rfp_p.add_argument("text", nargs="?", help="Procurement request text")
    rfp_p.add_argument("--file", type=str, help="Read the request from a file")

    # proposal
    proposal_p = subparsers.add_parser(
        "proposal", help="Structure and score a supplier reply"
    )
    proposal_p.add_argument("--rfp", required=True, help="RFP JSON file")
    proposal_p.add_argument("--reply", required=True, help="Supplier reply file")

    # evaluate
    evaluate_p = subparsers.add_parser("evaluate", help="Compare proposals")
    evaluate_p.add_argument("--rfp", required=True, help="RFP JSON file")
    evaluate_p.add_argument("proposals", help="JSON array of proposals")

    # serve
    subparsers.add_parser("serve", help="Start the web interface")

    args = parser.parse_args()
    if args.command == "rfp" and not (args.text or args.file):
        rfp_p.error("provide the request text or --file")
    _setup_logging(args.verbose)

    cfg = AppConfig()
    if args.endpoint:
        cfg = AppConfig(genai=GenAIConfig(endpoint=args.endpoint), server=cfg.server)

    try:
        if args.command == "rfp":
            create_rfp(load_text(args.file) if args.file else args.text, cfg)
        elif args.command == "proposal":
            process_reply(args.rfp, args.reply, cfg)
        elif args.command == "evaluate":
            evaluate(args.rfp, args.proposals, cfg)
        elif args.command == "serve":
            serve(cfg)
        else:
            parser.print_help()
            sys.exit(1)
    except ProcurementAIError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Failed to process request: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
