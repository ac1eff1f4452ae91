"""Command line front-end for boarding document verification."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from jsonschema import Draft202012Validator

from .errors import BoardCheckError
from .ledger import FileLedgerStore, VerificationLedger, VerificationResult, verify_ledger
from .policy import Evaluation, PassengerInput
from .policy.codes import CompanionType, DestinationGroup, DocumentCode, PassengerCategory
from .policy.descriptions import (
    EXTENDED_BLOC_COUNTRIES,
    describe_category,
    describe_companion,
    describe_destination,
    describe_document,
)
from .service import BoardingVerifier

logger = logging.getLogger(__name__)


@dataclass
class CliConfig:
    command: str
    ledger: Path
    requester: str | None
    index: int | None
    passenger: dict[str, Any] | None
    input: Path | None
    describe: bool
    min_policy_version: str | None
    log_level: str


def _default_ledger_path() -> Path:
    return Path(__file__).resolve().parents[1] / "state" / "ledger.jsonl"


def _default_schema_path() -> Path:
    return Path(__file__).resolve().parent / "schema" / "passenger_input.schema.json"


def _load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _validate_schema(document: Any, schema_path: Path) -> list[str]:
    validator = Draft202012Validator(_load_json(schema_path))
    errors = sorted(validator.iter_errors(document), key=lambda err: list(err.path))
    return [f"{list(error.path)}: {error.message}" for error in errors]


def _add_passenger_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", type=Path, help="JSON document with the passenger attributes")
    parser.add_argument("--nationality", type=int, help="0 = citizen, 1 = foreign national")
    parser.add_argument("--age", type=int)
    parser.add_argument("--companion", type=int, default=0, help="Companion type code (0-3)")
    parser.add_argument("--destination", type=int, default=1, help="0 = extended bloc, 1 = other")
    parser.add_argument(
        "--express-authorization",
        action="store_true",
        help="The passport already carries express travel authorization",
    )


def _add_ledger_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--ledger", type=Path, default=_default_ledger_path(), help="JSON lines ledger file")


def _passenger_document(parser: argparse.ArgumentParser, args: argparse.Namespace) -> dict[str, Any] | None:
    if args.input:
        return None
    if args.nationality is None or args.age is None:
        parser.error("either --input or both --nationality and --age must be supplied")
    return {
        "nationality": args.nationality,
        "age": args.age,
        "companion": args.companion,
        "destination": args.destination,
        "has_express_authorization": args.express_authorization,
    }


def _parse_args(argv: Sequence[str] | None) -> CliConfig:
    parser = argparse.ArgumentParser(description="Boarding document verification")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate a passenger without recording")
    _add_passenger_arguments(evaluate_parser)
    evaluate_parser.add_argument("--describe", action="store_true", help="Include document descriptions")

    verify_parser = subparsers.add_parser("verify", help="Evaluate a passenger and record the outcome")
    _add_passenger_arguments(verify_parser)
    verify_parser.add_argument("--requester", required=True)
    verify_parser.add_argument("--describe", action="store_true", help="Include document descriptions")
    _add_ledger_argument(verify_parser)

    count_parser = subparsers.add_parser("count", help="Number of records for a requester")
    count_parser.add_argument("--requester", required=True)
    _add_ledger_argument(count_parser)

    get_parser = subparsers.add_parser("get", help="Read one record of a requester")
    get_parser.add_argument("--requester", required=True)
    get_parser.add_argument("--index", type=int, required=True)
    get_parser.add_argument("--describe", action="store_true", help="Include document descriptions")
    _add_ledger_argument(get_parser)

    audit_parser = subparsers.add_parser("audit", help="Verify the integrity of a ledger file")
    audit_parser.add_argument("--min-policy-version", help="Reject entries recorded under an older policy")
    _add_ledger_argument(audit_parser)

    subparsers.add_parser("describe", help="List every code with its description")

    args = parser.parse_args(argv)

    passenger: dict[str, Any] | None = None
    if args.command in ("evaluate", "verify"):
        passenger = _passenger_document(parser, args)

    return CliConfig(
        command=args.command,
        ledger=getattr(args, "ledger", _default_ledger_path()),
        requester=getattr(args, "requester", None),
        index=getattr(args, "index", None),
        passenger=passenger,
        input=getattr(args, "input", None),
        describe=getattr(args, "describe", False),
        min_policy_version=getattr(args, "min_policy_version", None),
        log_level=args.log_level,
    )


def _with_descriptions(output: dict[str, Any], result: Evaluation | VerificationResult) -> dict[str, Any]:
    output["descriptions"] = {
        "category": describe_category(result.category),
        "required_documents": [describe_document(code) for code in result.required_documents],
        "optional_documents": [describe_document(code) for code in result.optional_documents],
    }
    return output


def _code_table() -> dict[str, Any]:
    return {
        "documents": {int(code): describe_document(code) for code in DocumentCode},
        "categories": {int(code): describe_category(code) for code in PassengerCategory},
        "companions": {int(code): describe_companion(code) for code in CompanionType},
        "destinations": {int(code): describe_destination(code) for code in DestinationGroup},
        "extended_bloc_countries": list(EXTENDED_BLOC_COUNTRIES),
    }


def _load_passenger(config: CliConfig) -> PassengerInput:
    document: Any = config.passenger
    if config.input is not None:
        try:
            document = _load_json(config.input)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Cannot read passenger input {config.input}: {exc}") from exc

    schema_errors = _validate_schema(document, _default_schema_path())
    if schema_errors:
        raise SystemExit("; ".join(schema_errors))
    return PassengerInput.from_dict(document)


def _run(config: CliConfig) -> dict[str, Any]:
    if config.command == "describe":
        return _code_table()

    if config.command == "evaluate":
        evaluation = BoardingVerifier().evaluate(_load_passenger(config))
        output = evaluation.to_dict()
        return _with_descriptions(output, evaluation) if config.describe else output

    if config.command == "audit":
        entries = verify_ledger(FileLedgerStore(config.ledger), min_policy_version=config.min_policy_version)
        return {
            "status": "ok",
            "entries": len(entries),
            "requesters": len({entry.requester for entry in entries}),
            "tip": entries[-1].record_hash() if entries else None,
        }

    ledger = VerificationLedger(FileLedgerStore(config.ledger))
    requester = config.requester
    assert requester is not None  # For type-checkers; enforced by argument parsing.

    if config.command == "verify":
        passenger = _load_passenger(config)
        verifier = BoardingVerifier(ledger)
        recorded = verifier.verify(requester, passenger)
        output = recorded.result.to_dict()
        if config.describe:
            _with_descriptions(output, recorded.result)
        return {
            "index": recorded.index,
            "global_count": ledger.global_count(),
            "result": output,
            "notifications": [notification.to_dict() for notification in recorded.notifications],
        }

    if config.command == "count":
        return {"requester": requester, "count": ledger.count(requester), "global_count": ledger.global_count()}

    assert config.index is not None  # For type-checkers; enforced by argument parsing.
    result = ledger.get(requester, config.index)
    output = result.to_dict()
    if config.describe:
        _with_descriptions(output, result)
    return {"requester": requester, "index": config.index, "result": output}


def main(argv: Sequence[str] | None = None) -> None:
    config = _parse_args(argv)
    logging.basicConfig(level=config.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.debug("Running %s against %s", config.command, config.ledger)

    try:
        output = _run(config)
    except (BoardCheckError, ValueError) as exc:
        raise SystemExit(str(exc)) from exc

    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
