from __future__ import annotations

import asyncio
import contextlib
import dataclasses as dc
import logging
import pathlib
from collections.abc import Iterable

from zonescope.core import fs_utils
from zonescope.core.options import ParserOptions
from zonescope.errors import ZoneFileError, ZoneSyntaxError
from zonescope.zone import tokens
from zonescope.zone.assembler import LogicalLine, ParseState, RecordAssembler
from zonescope.zone.models import Record, Zone
from zonescope.zone.ttl import parse_ttl

log = logging.getLogger(__name__)


@dc.dataclass(slots=True, frozen=True)
class Idle:
    pass


@dc.dataclass(slots=True)
class Accumulating:
    '''
    A record whose `(` has not been closed yet. `head` is the opening
    line, it already holds the name, TTL, class and type fields.
    '''
    head: LogicalLine
    continuation: list[str] = dc.field(default_factory=list)

    def flatten(self) -> LogicalLine:
        parts = [self.head.text, *self.continuation]
        text = ' '.join(tokens.drop_dangling_escape(part) for part in parts)
        return self.head._replace(text=tokens.remove_parens(text))


ReaderState = Idle | Accumulating


class ZoneParser:
    '''
    Reads master file lines and drives the record assembler.

    The parser handles `$ORIGIN` and `$TTL`, skips comments and
    blank lines, and joins parenthesised records spanning several
    lines before handing them to the assembler.
    '''

    def __init__(self, options: ParserOptions | None = None) -> None:
        self.options = options or ParserOptions()

    def _directive(self, line: str, lineno: int, state: ParseState) -> None:
        parts = line.split()
        keyword = parts[0].upper()

        if keyword == '$ORIGIN':
            if len(parts) < 2:
                self._malformed(lineno, '$ORIGIN without a domain name')
                return
            state.origin = parts[1]
            log.debug('line %d: origin is now %s', lineno, state.origin)
            return

        if keyword == '$TTL':
            if len(parts) < 2:
                self._malformed(lineno, '$TTL without a value')
                return
            try:
                state.default_ttl = parse_ttl(parts[1])
            except ValueError as exc:
                self._malformed(lineno, str(exc))
                return
            log.debug('line %d: default TTL is now %d', lineno, state.default_ttl)
            return

        self._malformed(lineno, f'unsupported directive {parts[0]}')

    def _malformed(self, lineno: int, message: str) -> None:
        if self.options.strict_directives:
            raise ZoneSyntaxError(lineno, message)
        log.warning('line %d: ignoring directive: %s', lineno, message)

    def parse_lines(
        self,
        lines: Iterable[str],
        *,
        filename: str | None = None,
    ) -> Zone:
        '''
        Parses master file lines into a `Zone`.

        Parameters
        ----------
        lines : Iterable[str]
            _Physical lines, with or without line endings_
        filename : str | None
            _Used to tag syntax errors_

        Returns
        -------
        Zone

        Raises
        ------
        ZoneSyntaxError
            _The first record that cannot be classified, or an
            unterminated multi-line record_
        '''
        state = ParseState(
            origin=self.options.origin,
            default_ttl=self.options.default_ttl,
        )
        assemble = RecordAssembler(state)
        records: list[Record] = []
        reader: ReaderState = Idle()

        try:
            for lineno, raw in enumerate(lines, start=1):
                line = raw.strip()

                if isinstance(reader, Accumulating):
                    line = tokens.strip_comment(line)
                    if line:
                        reader.continuation.append(line)
                    if tokens.closes_group(line):
                        logical = reader.flatten()
                        log.debug(
                            'lines %d-%d: joined multi-line record',
                            logical.lineno, lineno,
                        )
                        records.append(assemble(logical))
                        reader = Idle()
                    continue

                if not line or line.startswith(';'):
                    continue

                line = tokens.strip_comment(line)
                if line.startswith('$'):
                    self._directive(line, lineno, state)
                    continue

                logical = LogicalLine(
                    text=line,
                    lineno=lineno,
                    owner_omitted=raw[:1].isspace(),
                )
                if tokens.opens_group(line):
                    reader = Accumulating(head=logical)
                    continue

                records.append(assemble(logical))

            if isinstance(reader, Accumulating):
                raise ZoneSyntaxError(
                    reader.head.lineno,
                    'unterminated multi-line record, missing ")"',
                )
        except ZoneSyntaxError as err:
            if filename and not err.filename:
                raise err.with_filename(filename) from None
            raise

        return Zone(
            origin=state.origin,
            default_ttl=state.default_ttl,
            records=tuple(records),
        )

    def parse_file(self, pathname: str | pathlib.Path) -> Zone:
        '''
        Reads and parses a zone file.

        Raises
        ------
        ZoneReadError
            _The file cannot be opened, read or decoded_
        ZoneSyntaxError
        '''
        lines = fs_utils.iter_lines(pathname, encoding=self.options.encoding)
        with contextlib.closing(lines):
            return self.parse_lines(lines, filename=str(pathname))


class ConcurrentZoneParser:
    '''
    Parses several independent zone files at once, each file
    gets its own parser state in a worker thread.
    '''

    def __init__(
        self,
        *,
        options: ParserOptions | None = None,
    ) -> None:
        self.options = options or ParserOptions()

    async def _parse_one(self, pathname: str) -> Zone:
        parser = ZoneParser(self.options)
        return await asyncio.to_thread(parser.parse_file, pathname)

    async def parse(self, paths: list[str]) -> dict[str, Zone | ZoneFileError]:
        '''
        Parses every path, failures are returned in place of the zone
        instead of aborting the other files.

        Parameters
        ----------
        paths : list[str]

        Returns
        -------
        dict[str, Zone | ZoneFileError]
        '''
        results = await asyncio.gather(
            *(self._parse_one(path) for path in paths),
            return_exceptions=True,
        )
        collected: dict[str, Zone | ZoneFileError] = {}
        for path, result in zip(paths, results):
            if isinstance(result, (Zone, ZoneFileError)):
                collected[path] = result
            else:
                raise result
        return collected


def parse_zone(
    pathname: str | pathlib.Path,
    options: ParserOptions | None = None,
) -> Zone:
    '''
    Parses a DNS master file.

    Parameters
    ----------
    pathname : str | pathlib.Path
    options : ParserOptions | None

    Returns
    -------
    Zone

    Raises
    ------
    ZoneReadError
        _The file cannot be read_
    ZoneSyntaxError
        _A record is malformed, tagged with its starting line_
    '''
    return ZoneParser(options).parse_file(pathname)


def parse_zone_text(text: str, options: ParserOptions | None = None) -> Zone:
    return ZoneParser(options).parse_lines(text.splitlines())


async def parse_zones(
    paths: list[str],
    options: ParserOptions | None = None,
) -> dict[str, Zone | ZoneFileError]:
    engine = ConcurrentZoneParser(options=options)
    return await engine.parse(paths)
