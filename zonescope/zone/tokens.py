"""
Quote and escape aware helpers for master file text.

A `"` toggles a quoted segment and a `\\` escapes the character after
it. Comment markers, parentheses and whitespace only have meaning
outside quoted segments. Record data finally loses every
parenthesis, quoted ones included.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

_WHITESPACE_RE = re.compile(r'\s+')
_PARENS = str.maketrans('', '', '()')


def _unquoted(text: str) -> Iterator[tuple[int, str]]:
    '''
    Yields `(index, char)` for every character that is neither
    inside a quoted segment nor escaped, quotes and backslashes
    themselves are never yielded.
    '''
    in_quotes = False
    escaped = False
    for idx, char in enumerate(text):
        if escaped:
            escaped = False
            continue
        if char == '\\':
            escaped = True
            continue
        if char == '"':
            in_quotes = not in_quotes
            continue
        if not in_quotes:
            yield idx, char


def strip_comment(line: str) -> str:
    '''
    Drops everything from the first unquoted `;` to the end of the line.
    '''
    for idx, char in _unquoted(line):
        if char == ';':
            return line[:idx].rstrip()
    return line


def opens_group(line: str) -> bool:
    '''
    True when the line leaves a `(` open, that is the last unquoted
    parenthesis on it is an opening one.
    '''
    last = None
    for _, char in _unquoted(line):
        if char in '()':
            last = char
    return last == '('


def closes_group(line: str) -> bool:
    return any(char == ')' for _, char in _unquoted(line))


def remove_parens(text: str) -> str:
    '''
    Deletes every unquoted parenthesis character.
    '''
    drop = {idx for idx, char in _unquoted(text) if char in '()'}
    if not drop:
        return text
    return ''.join(char for idx, char in enumerate(text) if idx not in drop)


def drop_parens(text: str) -> str:
    '''
    Deletes every parenthesis character, quoted or not.
    '''
    return text.translate(_PARENS)


def drop_dangling_escape(line: str) -> str:
    '''
    Removes a backslash left unpaired at the end of a line, it has
    nothing to escape and a line end always separates fields.
    '''
    stripped = line.rstrip('\\')
    if (len(line) - len(stripped)) % 2:
        return line[:-1]
    return line


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(' ', text).strip()


def split_fields(line: str) -> list[str]:
    '''
    Splits a record line into whitespace separated fields.

    Whitespace inside a quoted segment stays part of the field, the
    quote characters are removed, and a backslash makes the next
    character literal and is removed itself. Empty fields (`""`)
    are dropped.

    Parameters
    ----------
    line : str

    Returns
    -------
    list[str]
    '''
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    escaped = False

    for char in line:
        if escaped:
            current.append(char)
            escaped = False
            continue

        if char == '\\':
            escaped = True
            continue

        if char == '"':
            in_quotes = not in_quotes
            continue

        if char.isspace() and not in_quotes:
            if current:
                fields.append(''.join(current))
                current.clear()
            continue

        current.append(char)

    if current:
        fields.append(''.join(current))

    return fields
