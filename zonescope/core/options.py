from __future__ import annotations

from typing import Annotated

import msgspec
import msgspec.yaml

from zonescope.core import fs_utils
from zonescope.errors import ZoneReadError
from zonescope.zone.ttl import MAX_TTL


class ParserOptions(msgspec.Struct, kw_only=True, frozen=True):
    '''
    Options for parsing a zone file.

    Parameters
    ----------
    origin : str
        _Origin in effect before the first `$ORIGIN` directive_
    default_ttl : int
        _Default TTL in effect before the first `$TTL` directive, between
        0 and 2**32 - 1_
    strict_directives : bool
        _Treat malformed or unknown `$` directives as syntax errors
        instead of ignoring them_
    encoding : str
        _Text encoding of the zone file, the default also accepts
        UTF-8 with a byte order mark_
    '''
    origin: str = ''
    default_ttl: Annotated[int, msgspec.Meta(ge=0, le=MAX_TTL)] = 0
    strict_directives: bool = False
    encoding: str = 'utf-8-sig'


def load_options(pathname: str) -> ParserOptions:
    '''
    Loads `ParserOptions` from a YAML file, keys missing from
    the file keep their defaults.

    Raises
    ------
    ZoneReadError
        _The file is missing or cannot be read_
    ValueError
        _The file is not valid YAML or has the wrong shape_
    '''
    path = fs_utils.normalize_pathname(pathname)
    if not path.is_file():
        raise ZoneReadError(str(path), 'config file not found')

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ZoneReadError(str(path), exc.strerror or str(exc)) from exc

    try:
        return msgspec.yaml.decode(data, type=ParserOptions)
    except msgspec.DecodeError as exc:
        raise ValueError(f'Invalid parser options in {path}: {exc}') from exc
