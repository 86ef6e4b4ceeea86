"""
utility file system operations
"""

from __future__ import annotations

import pathlib
from collections.abc import Iterator

from zonescope.errors import ZoneReadError


def _validate_file_path(
    *,
    path: pathlib.Path,
    must_exist: bool = True,
    is_file: bool = True,
) -> ZoneReadError | None:
    if must_exist and not path.exists():
        return ZoneReadError(str(path), 'file not found')

    if is_file and not path.is_file():
        return ZoneReadError(
            str(path), 'expected a file but got a directory'
        )

    return None


def normalize_pathname(path: str | pathlib.Path) -> pathlib.Path:
    '''
    Expands `~` and resolves the path.

    Parameters
    ----------
    path : str | pathlib.Path

    Returns
    -------
    pathlib.Path
    '''
    return pathlib.Path(path).expanduser().resolve()


def iter_lines(
    pathname: str | pathlib.Path,
    *,
    encoding: str = 'utf-8-sig',
) -> Iterator[str]:
    '''
    Lazily yields the lines of a text file without their line endings.

    Parameters
    ----------
    pathname : str | pathlib.Path
    encoding : str, optional
         by default 'utf-8-sig'

    Yields
    ------
    str

    Raises
    ------
    ZoneReadError
        _The file does not exist, is a directory, cannot be read
        or is not valid text in `encoding`_
    '''
    norm_path = normalize_pathname(pathname)
    if err := _validate_file_path(path=norm_path):
        raise err

    try:
        with norm_path.open('r', encoding=encoding) as f:
            for line in f:
                yield line.rstrip('\r\n')
    except UnicodeDecodeError as exc:
        raise ZoneReadError(str(norm_path), f'not valid {encoding} text') from exc
    except OSError as exc:
        raise ZoneReadError(str(norm_path), exc.strerror or str(exc)) from exc
