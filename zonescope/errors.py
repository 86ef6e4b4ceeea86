from __future__ import annotations


class ZoneFileError(Exception):
    '''
    Base class for everything `parse_zone` raises.
    '''


class ZoneReadError(ZoneFileError):
    '''
    The zone file could not be opened or read.
    '''

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f'cannot read {path}: {reason}')


class ZoneSyntaxError(ZoneFileError):
    '''
    A logical record could not be classified. `lineno` is the
    1-based physical line the record started on.
    '''

    def __init__(
        self,
        lineno: int,
        message: str,
        *,
        filename: str | None = None,
    ) -> None:
        self.lineno = lineno
        self.message = message
        self.filename = filename
        super().__init__(self._format())

    def _format(self) -> str:
        if self.filename:
            return f'{self.filename}:{self.lineno}: {self.message}'
        return f'line {self.lineno}: {self.message}'

    def with_filename(self, filename: str) -> ZoneSyntaxError:
        return ZoneSyntaxError(self.lineno, self.message, filename=filename)
