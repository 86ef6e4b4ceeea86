import argparse
import asyncio
from dataclasses import dataclass

import msgspec.structs
from loguru import logger
from rich.markup import escape

from zonescope.cli.internals import ArgparseModel, CLIGroup, cli_arg
from zonescope.core._logging import configure_lib_logger
from zonescope.core.options import ParserOptions, load_options
from zonescope.errors import ZoneFileError


@dataclass
class ParserArgs(ArgparseModel):
    origin: str | None = cli_arg(
        "--origin",
        help="Origin to use before the first $ORIGIN directive, e.g. example.com.",
    )
    strict: bool = cli_arg(
        "--strict",
        default=False,
        action="store_true",
        help="Treat malformed or unknown $ directives as syntax errors",
    )
    encoding: str | None = cli_arg(
        "--encoding",
        help="Text encoding of the zone file(s)",
    )
    config: str | None = cli_arg(
        "--config",
        help="Path to a YAML file with parser options",
    )

    def options(self) -> ParserOptions:
        options = load_options(self.config) if self.config else ParserOptions()
        changes: dict = {}
        if self.origin is not None:
            changes["origin"] = self.origin
        if self.strict:
            changes["strict_directives"] = True
        if self.encoding is not None:
            changes["encoding"] = self.encoding
        return msgspec.structs.replace(options, **changes)


@dataclass
class ParseArgs(ParserArgs):
    file: str = cli_arg(
        "--file",
        required=True,
        help="Zone file in DNS master file format",
    )
    json: bool = cli_arg(
        "--json",
        default=False,
        action="store_true",
        help="Print the parsed zone as JSON",
    )
    table: bool = cli_arg(
        "--table",
        default=False,
        action="store_true",
        help="Print the records as a table",
    )


@dataclass
class CheckArgs(ParserArgs):
    files: list[str] = cli_arg(
        "--files",
        required=True,
        nargs="+",
        help="Zone files to parse concurrently",
    )
    validate_rdata: bool = cli_arg(
        "--validate-rdata",
        default=False,
        action="store_true",
        help="Check each record's data against its type with dnspython",
    )


class ParseGroup(CLIGroup[ParseArgs]):
    model = ParseArgs

    async def routine(self, args: ParseArgs) -> int:
        from zonescope.zone import parse_zone
        from zonescope.zone.render import describe_error, zone_table, zone_to_json

        try:
            options = args.options()
        except (ZoneFileError, ValueError) as err:
            self.err_console.print(f"[red]Error:[/red] {escape(str(err))}")
            return 1

        logger.debug("parsing {} with {}", args.file, options)
        try:
            zone = await asyncio.to_thread(parse_zone, args.file, options)
        except ZoneFileError as err:
            self.err_console.print(f"[red]Error:[/red] {escape(describe_error(err))}")
            return 1

        if args.json:
            self.console.print_json(zone_to_json(zone))
        elif args.table:
            self.console.print(zone_table(zone))
        else:
            self.console.print(zone.render())
        return 0


class CheckGroup(CLIGroup[CheckArgs]):
    model = CheckArgs

    async def routine(self, args: CheckArgs) -> int:
        from zonescope.zone import Zone, parse_zones
        from zonescope.zone.rdata import check_zone
        from zonescope.zone.render import summary_table

        try:
            options = args.options()
        except (ZoneFileError, ValueError) as err:
            self.err_console.print(f"[red]Error:[/red] {escape(str(err))}")
            return 1

        results = await parse_zones(args.files, options)

        warnings: dict[str, list[str]] = {}
        if args.validate_rdata:
            for path, result in results.items():
                if isinstance(result, Zone):
                    warnings[path] = check_zone(result)
                    logger.debug("{}: {} rdata warning(s)", path, len(warnings[path]))

        self.console.print(summary_table(results, warnings))
        failed = [path for path, result in results.items() if isinstance(result, ZoneFileError)]
        return 1 if failed else 0


def create_app() -> argparse.ArgumentParser:
    app_schema = {
        "parse": {
            "class": ParseGroup,
            "help": "Parse a zone file and print its records",
        },
        "check": {
            "class": CheckGroup,
            "help": "Parse several zone files and summarise the results",
        },
    }

    parser = argparse.ArgumentParser(
        prog="zonescope",
        description="DNS master file (zone file) parser",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Log level for diagnostics written to stderr",
    )
    parser.add_argument(
        "--rich-tracebacks",
        default=False,
        action="store_true",
        help="Install rich tracebacks for unexpected errors",
    )
    subparsers = parser.add_subparsers(
        title="subcommands",
        description="valid subcommands",
        help="additional help",
        dest="command",
    )

    for app_name, config in app_schema.items():
        app_class: type[CLIGroup] = config["class"]

        subparser = subparsers.add_parser(
            app_name,
            help=config["help"],
            formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        )
        group: CLIGroup = app_class(subparser)
        subparser.set_defaults(func=group)

    return parser


def run(argv: list[str] | None = None) -> int:
    parser = create_app()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 2

    configure_lib_logger(
        level_name=args.log_level,
        rich_tracebacks=args.rich_tracebacks,
    )
    return args.func(args)


def main() -> None:
    raise SystemExit(run())
