"""CLI entrypoints for apidoc commands."""

from __future__ import annotations

import argparse
import sys

from .config import ConfigError
from .endpoints import join_documents
from .logging import configure_logging
from .orchestrator import Orchestrator
from .render.json_template import generate_json_template
from .render.table import generate_parameter_table


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to an .apidoc.yml file (defaults to ROOT/.apidoc.yml).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apidoc",
        description="Generate Markdown API documents from Spring controller sources.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Render endpoint documents for a controller.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    generate_parser.add_argument("root", help="Path to the Java source root.")
    generate_parser.add_argument(
        "--controller",
        required=True,
        help="Controller class name, simple or fully qualified.",
    )
    generate_parser.add_argument(
        "--method",
        default=None,
        help="Only document this controller method.",
    )

    endpoints_parser = subparsers.add_parser(
        "endpoints",
        help="List mapped controller methods.",
    )
    _add_verbose_option(endpoints_parser, suppress_default=True)
    _add_config_option(endpoints_parser)
    endpoints_parser.add_argument("root", help="Path to the Java source root.")

    fields_parser = subparsers.add_parser(
        "fields",
        help="Print the extracted document shape of one type.",
    )
    _add_verbose_option(fields_parser, suppress_default=True)
    _add_config_option(fields_parser)
    fields_parser.add_argument("root", help="Path to the Java source root.")
    fields_parser.add_argument("type", help="Type name, simple or fully qualified.")
    fields_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output as a parameter table or a JSON template.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for apidoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator()

    try:
        if args.command == "generate":
            documents = orchestrator.run_generate(
                args.root, args.controller, args.method, config_path=args.config
            )
            if not documents:
                parser.exit(1, f"No endpoints found on {args.controller}\n")
            sys.stdout.write(join_documents(documents))
        elif args.command == "endpoints":
            endpoints = orchestrator.run_endpoints(args.root, config_path=args.config)
            if not endpoints:
                parser.exit(1, f"No controller endpoints found under {args.root}\n")
            for endpoint in endpoints:
                print(
                    f"{endpoint.http_method:<10} {endpoint.url:<40} "
                    f"{endpoint.controller}#{endpoint.method}  {endpoint.title}"
                )
        elif args.command == "fields":
            fields = orchestrator.run_fields(args.root, args.type, config_path=args.config)
            if args.format == "json":
                print(generate_json_template(fields))
            else:
                sys.stdout.write(generate_parameter_table(fields))
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    except LookupError as exc:
        parser.exit(1, f"{exc.args[0] if exc.args else exc}\n")
    except RuntimeError as exc:
        parser.exit(1, f"apidoc {args.command} failed: {exc}\nRun with --verbose for more details.\n")


if __name__ == "__main__":
    main(sys.argv[1:])
