"""Ontogen command line.

Usage:
    ontogen shapes.ttl --out DIR [--context ctx.jsonld] [--package NAME]
                       [--dsl-name NAME] [--validation none|embedded|external]
                       [--external-validator module:attribute]
                       [--strict-datatypes] [--config options.json] [-v]
    ontogen shapes.ttl --check data.ttl    # validate instance data with pySHACL

Options from ``--config`` are applied first; explicit flags override them.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from .errors import GenerationError, InvalidConfigurationError
from .generator import generate, write
from .options import GenerationOptions, TypeConfig, ValidationConfig, ValidationMode
from .shacl_bridge import load_data, load_model, validate_data

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ontogen",
        description="Generate typed Python domain code from SHACL shapes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("shapes", help="SHACL shapes file (Turtle)")
    parser.add_argument("--context", "-c", help="JSON-LD context file for property aliases")
    parser.add_argument("--out", "-o", help="Output directory for the generated package")
    parser.add_argument("--package", help="Generated package name (dotted)")
    parser.add_argument("--dsl-name", help="Name of the instance DSL entry point")
    parser.add_argument(
        "--validation",
        choices=[m.value for m in ValidationMode],
        help="How validate() is generated",
    )
    parser.add_argument("--external-validator", help="Validator for external mode, as module:attribute")
    parser.add_argument(
        "--strict-datatypes",
        action="store_true",
        help="Fail on datatypes with no Python mapping instead of using str",
    )
    parser.add_argument("--config", help="JSON file with GenerationOptions")
    parser.add_argument("--check", metavar="DATA", help="Validate a data graph against the shapes and exit")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging (-vv for debug)")
    return parser


def options_from_args(args: argparse.Namespace) -> GenerationOptions:
    """GenerationOptions from ``--config`` overlaid with the explicit flags."""
    if args.config:
        try:
            data = json.loads(Path(args.config).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise InvalidConfigurationError(f"Cannot read config: {exc}", {"path": args.config}) from exc
        options = GenerationOptions.from_mapping(data)
    else:
        options = GenerationOptions()

    changes = {}
    if args.package:
        changes["package_name"] = args.package
    if args.dsl_name:
        changes["dsl_name"] = args.dsl_name
    if args.validation or args.external_validator:
        mode = ValidationMode(args.validation) if args.validation else options.validation.mode
        changes["validation"] = ValidationConfig(
            enabled=mode != ValidationMode.NONE,
            mode=mode,
            external_validator=args.external_validator or options.validation.external_validator,
            validate_on_build=options.validation.validate_on_build,
        )
    if args.strict_datatypes:
        changes["types"] = TypeConfig(strict_datatypes=True)
    return options.with_changes(**changes) if changes else options


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        model = load_model(args.shapes, args.context)

        if args.check:
            logger.info("Checking %s against %s", args.check, args.shapes)
            report = validate_data(model, load_data(args.check))
            print(report.summary())
            return 0 if report.conforms else 1

        if not args.out:
            parser.error("--out is required unless --check is given")

        options = options_from_args(args)
        result = generate(model, options)
        write(result, args.out)
    except GenerationError as exc:
        print(f"ontogen: error: {exc}", file=sys.stderr)
        return 2

    print(result.summary())
    return 0


if __name__ == "__main__":
    sys.exit(main())
