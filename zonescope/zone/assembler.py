"""
Turns one flattened, comment free record line into a `Record`.

The leading fields are classified by position and content in the
fixed order name, TTL, class, type. A class name that also reads as
a TTL literal is not supported, none of the known classes do.
"""

from __future__ import annotations

import dataclasses as dc
import logging
from typing import Final, NamedTuple

from zonescope.errors import ZoneSyntaxError
from zonescope.zone import tokens
from zonescope.zone.models import Record
from zonescope.zone.ttl import parse_ttl

log = logging.getLogger(__name__)

DNS_CLASSES: Final[frozenset[str]] = frozenset({'IN', 'CH', 'HS', 'NONE', 'ANY'})
DEFAULT_CLASS: Final[str] = 'IN'


def is_class(token: str) -> bool:
    return token.upper() in DNS_CLASSES


def resolve_name(token: str, origin: str) -> str:
    '''
    Expands `@` and relative names against the origin.

    Parameters
    ----------
    token : str
        _The owner name as written_
    origin : str
        _The current origin, empty when no `$ORIGIN` was seen_

    Returns
    -------
    str
    '''
    if token == '@':
        return origin
    if token.endswith('.'):
        return token
    if not origin:
        return token
    return f'{token}.{origin}'


@dc.dataclass(slots=True)
class ParseState:
    '''
    Everything carried from one record to the next within a
    single parse call.
    '''
    origin: str = ''
    default_ttl: int = 0
    name: str | None = None
    ttl: int | None = None
    rclass: str | None = None


class LogicalLine(NamedTuple):
    '''
    One record worth of text, `lineno` is where it started and
    `owner_omitted` is set when the physical line began with whitespace.
    '''
    text: str
    lineno: int
    owner_omitted: bool = False


class RecordAssembler:
    def __init__(self, state: ParseState) -> None:
        self.state = state

    def _owner(self, line: LogicalLine, fields: list[str]) -> tuple[str, int]:
        if line.owner_omitted:
            if self.state.name is None:
                log.warning(
                    'line %d: record has no owner name and none to inherit',
                    line.lineno,
                )
                return '', 0
            return self.state.name, 0

        return resolve_name(fields[0], self.state.origin), 1

    def __call__(self, line: LogicalLine) -> Record:
        '''
        Assembles a record and updates the carry-over state.

        Raises
        ------
        ZoneSyntaxError
            _Fewer than two fields, or no type after name, TTL and class_
        '''
        fields = tokens.split_fields(tokens.remove_parens(line.text))
        if len(fields) < 2:
            raise ZoneSyntaxError(
                line.lineno, f'expected at least 2 fields, got {len(fields)}'
            )

        name, idx = self._owner(line, fields)

        ttl: int | None = None
        if idx < len(fields):
            try:
                ttl = parse_ttl(fields[idx])
                idx += 1
            except ValueError:
                pass

        rclass: str | None = None
        if idx < len(fields) and is_class(fields[idx]):
            rclass = fields[idx].upper()
            idx += 1

        if idx >= len(fields):
            raise ZoneSyntaxError(line.lineno, 'missing record type')

        rtype = fields[idx].upper()
        rdata = tokens.collapse_whitespace(
            tokens.drop_parens(' '.join(fields[idx + 1:]))
        )

        state = self.state
        if not line.owner_omitted:
            state.name = name
        if ttl is not None:
            state.ttl = ttl
        if rclass is not None:
            state.rclass = rclass

        return Record(
            name=name,
            ttl=state.ttl if state.ttl is not None else state.default_ttl,
            rclass=state.rclass or DEFAULT_CLASS,
            rtype=rtype,
            rdata=rdata,
            origin=state.origin,
        )
