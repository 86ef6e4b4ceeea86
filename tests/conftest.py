import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def write_zone(tmp_path: Path):
    '''
    Writes a dedented zone file into `tmp_path` and returns its path.
    '''
    def _write(text: str, name: str = 'db.example') -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text).lstrip('\n'), encoding='utf-8')
        return path

    return _write
