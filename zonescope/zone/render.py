from __future__ import annotations

import msgspec.json
from rich.markup import escape
from rich.table import Table

from zonescope.errors import ZoneFileError, ZoneReadError, ZoneSyntaxError
from zonescope.zone.models import Zone


def zone_to_json(zone: Zone, *, indent: int = 2) -> str:
    encoded = msgspec.json.encode(zone)
    return msgspec.json.format(encoded, indent=indent).decode()


def zone_table(zone: Zone) -> Table:
    table = Table(title=f'Zone {zone.origin or "(no origin)"}')
    table.add_column('Name', style='cyan', no_wrap=True)
    table.add_column('TTL', style='magenta', justify='right')
    table.add_column('Class', style='magenta')
    table.add_column('Type', style='bold')
    table.add_column('RData', style='green')

    for record in zone:
        table.add_row(
            escape(record.name),
            str(record.ttl),
            record.rclass,
            record.rtype,
            escape(record.rdata),
        )
    return table


def describe_error(err: ZoneFileError) -> str:
    if isinstance(err, ZoneReadError):
        return f'cannot read file: {err.reason}'
    if isinstance(err, ZoneSyntaxError):
        return f'malformed record at line {err.lineno}: {err.message}'
    return str(err)


def summary_table(
    results: dict[str, Zone | ZoneFileError],
    warnings: dict[str, list[str]] | None = None,
) -> Table:
    warnings = warnings or {}
    table = Table(title='Zone File Check')
    table.add_column('File', style='cyan', no_wrap=True)
    table.add_column('Origin', style='magenta')
    table.add_column('Records', style='green')
    table.add_column('Problems', style='red')

    for path, result in results.items():
        if isinstance(result, ZoneFileError):
            table.add_row(escape(path), '-', '-', escape(describe_error(result)))
            continue

        counts = [f'{rtype}: {len(result.of_type(rtype))}' for rtype in result.rtypes]
        problems = warnings.get(path, [])
        table.add_row(
            escape(path),
            escape(result.origin) or '-',
            '\n'.join(counts) if counts else 'No records found',
            escape('\n'.join(problems)) if problems else 'None',
        )
    return table
