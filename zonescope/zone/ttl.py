import re
from typing import Final

MAX_TTL: Final[int] = 2**32 - 1

TTL_UNITS: Final[dict[str, int]] = {
    'S': 1,
    'M': 60,
    'H': 3600,
    'D': 86400,
    'W': 604800,
}

_TTL_RE = re.compile(r'([0-9]+)([SMHDW]?)', re.IGNORECASE | re.ASCII)


def parse_ttl(literal: str) -> int:
    '''
    Parses a TTL literal such as `3600`, `2H` or `1w` into seconds.

    Parameters
    ----------
    literal : str

    Returns
    -------
    int

    Raises
    ------
    ValueError
        _Not a TTL literal, or the value does not fit in 32 unsigned bits_
    '''
    match = _TTL_RE.fullmatch(literal)
    if not match:
        raise ValueError(f'Invalid TTL: {literal!r}')

    value, unit = match.groups()
    seconds = int(value) * TTL_UNITS[unit.upper() or 'S']
    if seconds > MAX_TTL:
        raise ValueError(f'TTL out of range: {literal!r}')

    return seconds

