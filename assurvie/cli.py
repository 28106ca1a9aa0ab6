"""Command-line harness for the assurvie engines.

Each subcommand reads a JSON document matching an engine's input model
(from a file, or stdin with "-") and prints the result model as JSON.

    assurvie rachat examples/rachat.json
    cat deces.json | assurvie deces -
    assurvie frais params.json --summary --output-dir results
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable

import pydantic

from assurvie import __version__
from assurvie.application.services import (
    ResultExporter,
    compute_death_benefit_tax,
    compute_withdrawal_tax,
    simulate_fee_erosion,
)
from assurvie.core.exceptions import ValidationError
from assurvie.core.logging import configure_logging, get_logger
from assurvie.core.settings import get_settings
from assurvie.domain.models import DecesInput, FeeSimParams, RachatInput

log = get_logger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_VALIDATION_ERROR = 2

# subcommand -> (input model, engine, help)
COMMANDS: dict[str, tuple[type[pydantic.BaseModel], Callable[[Any], pydantic.BaseModel], str]] = {
    "rachat": (RachatInput, compute_withdrawal_tax, "Withdrawal taxation: PFU versus progressive IR"),
    "deces": (DecesInput, compute_death_benefit_tax, "Death-benefit taxation (990 I / 757 B)"),
    "frais": (FeeSimParams, simulate_fee_erosion, "Fee-erosion simulation with and without fees"),
}


def parse_input(model: type[pydantic.BaseModel], data: Any) -> pydantic.BaseModel:
    """Build an input model, reporting pydantic errors as ValidationError."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        param = ".".join(str(p) for p in first["loc"]) or model.__name__
        raise ValidationError(param, first.get("input"), first["msg"]) from e


def round_floats(value: Any, digits: int) -> Any:
    """Round every float of a JSON-like structure."""
    if isinstance(value, float):
        return round(value, digits)
    if isinstance(value, dict):
        return {k: round_floats(v, digits) for k, v in value.items()}
    if isinstance(value, list):
        return [round_floats(v, digits) for v in value]
    return value


def _read_document(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assurvie",
        description="French life-insurance tax engines (rachat, décès, frais).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    parser.add_argument("--json-logs", action="store_true", help="Render logs as JSON on stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, (_, _, help_text) in COMMANDS.items():
        cmd = sub.add_parser(name, help=help_text, description=help_text)
        cmd.add_argument("input", help="JSON input document, or - for stdin")
        cmd.add_argument("--output-dir", default=None, help="Also save input and result to this directory")
        cmd.add_argument("--compact", action="store_true", help="Single-line JSON output")
        cmd.add_argument("--camel-case", action="store_true", help="Emit camelCase keys")
        if name == "frais":
            cmd.add_argument("--summary", action="store_true", help="Omit the monthly series")
    return parser


def run(args: argparse.Namespace) -> int:
    """Execute one subcommand and return its exit code."""
    model, engine, _ = COMMANDS[args.command]

    try:
        document = _read_document(args.input)
    except (OSError, json.JSONDecodeError) as e:
        log.error("input_unreadable", path=args.input, error=str(e))
        print(json.dumps({"error": f"Cannot read input: {e}"}), file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        result = engine(parse_input(model, document))
    except ValidationError as e:
        print(json.dumps({"error": str(e), "param": e.param_name}, ensure_ascii=False), file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    exclude = None
    if getattr(args, "summary", False):
        exclude = {"with_fees": {"points"}, "without_fees": {"points"}}
    payload = result.model_dump(mode="json", by_alias=args.camel_case, exclude=exclude)
    payload = round_floats(payload, get_settings().result_precision)

    if args.output_dir:
        ResultExporter(args.output_dir).save_result(args.command, document, payload)

    print(json.dumps(payload, ensure_ascii=False, indent=None if args.compact else 2))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level or args.json_logs:
        configure_logging(level=args.log_level, json_output=args.json_logs or None, force=True)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
