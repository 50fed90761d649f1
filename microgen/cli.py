"""CLI entrypoint for microgen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, build_generation_info, load_config
from .errors import ConfigError, LoaderError, ValidationError
from .loader import load_interface
from .logging import configure_logging
from .orchestrator import Orchestrator, list_templates_for_gen


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="microgen",
        description="Generate go-kit boilerplate (exchanges, endpoints, middleware, gRPC transport) for a service interface.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--file",
        default="service.yml",
        help="Interface description to generate from (defaults to service.yml).",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output directory (defaults to the config 'out' value or the config directory).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing files instead of skipping them.",
    )
    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print generated documents to stdout instead of writing files.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"Path to {CONFIG_FILENAME} or its directory (defaults to the interface file's directory).",
    )
    parser.add_argument(
        "--protobuf",
        default=None,
        help="Import path of the generated protobuf package used by the gRPC templates.",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write debug-friendly logs to this file.",
    )
    parser.add_argument(
        "--list-templates",
        action="store_true",
        help="List the templates that would run for the interface and exit.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for microgen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    source = Path(args.file).expanduser()
    config_path = Path(args.config).expanduser() if args.config else source.resolve().parent
    try:
        config = load_config(config_path)
        iface = load_interface(source)
        info = build_generation_info(
            iface,
            config,
            output_dir=Path(args.out).expanduser() if args.out else None,
            force=bool(args.force),
            stream=sys.stdout if args.stdout else None,
            protobuf_package=args.protobuf,
            source_file=source,
        )
    except (ConfigError, LoaderError) as exc:
        parser.exit(1, f"microgen: {exc}\n")

    orchestrator = Orchestrator(
        enabled=config.templates.enabled or None,
        disabled=config.templates.disabled,
    )

    if args.list_templates:
        try:
            templates = list_templates_for_gen(info, orchestrator.enabled, orchestrator.disabled)
        except ConfigError as exc:
            parser.exit(1, f"microgen: {exc}\n")
        for template in templates:
            print(f"{template.name:<12} {template.default_path()}")
        return

    try:
        report = orchestrator.run(info)
    except (ConfigError, ValidationError) as exc:
        parser.exit(1, f"microgen: {exc}\n")

    # Documents already went to stdout; keep the summary off it.
    summary = sys.stderr if args.stdout else sys.stdout
    for outcome in report.outcomes:
        line = f"{outcome.status:<8} {outcome.path or outcome.name}"
        if outcome.error is not None:
            line += f": {outcome.error}"
        print(line, file=summary)

    if not report.ok:
        parser.exit(
            1,
            f"microgen: {len(report.failures)} of {len(report.outcomes)} artifact(s) failed.\n"
            "Run with --verbose for more details.\n",
        )


if __name__ == "__main__":
    main(sys.argv[1:])
