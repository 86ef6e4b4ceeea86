from __future__ import annotations

import abc
import dataclasses as dc
from collections.abc import Iterator

from rich.markup import escape


class Renderable(abc.ABC):
    @abc.abstractmethod
    def render(self) -> str:
        pass

    def __str__(self) -> str:
        return self.render()


@dc.dataclass(slots=True, frozen=True)
class Record(Renderable):
    '''
    A single resource record. `rdata` is kept as opaque text with
    comments, parentheses and repeated whitespace removed, `origin`
    is the origin that was in effect when the record was read.
    '''
    name: str
    ttl: int
    rclass: str
    rtype: str
    rdata: str
    origin: str = ''

    def render(self) -> str:
        return (
            f"[bold]Name:[/bold] {escape(self.name)}\n"
            f"[bold]TTL:[/bold] {self.ttl}\n"
            f"[bold]Class:[/bold] {self.rclass}\n"
            f"[bold]Type:[/bold] {self.rtype}\n"
            f"[bold]RData:[/bold] [italic green]{escape(self.rdata)}[/italic green]\n"
        )


@dc.dataclass(slots=True, frozen=True)
class Zone(Renderable):
    '''
    The result of parsing one zone file.
    '''
    origin: str = ''
    default_ttl: int = 0
    records: tuple[Record, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def of_type(self, rtype: str) -> list[Record]:
        rtype = rtype.upper()
        return [record for record in self.records if record.rtype == rtype]

    def by_name(self, name: str) -> list[Record]:
        return [record for record in self.records if record.name == name]

    @property
    def rtypes(self) -> list[str]:
        '''
        Record types in order of first appearance.
        '''
        return list(dict.fromkeys(record.rtype for record in self.records))

    def render(self) -> str:
        output = f"[bold underline]Zone: {escape(self.origin)}[/bold underline]\n"
        if self.default_ttl:
            output += f"[bold]Default TTL:[/bold] {self.default_ttl}\n"
        output += f"[bold]Records:[/bold] {len(self.records)}\n\n"
        for idx, record in enumerate(self.records, start=1):
            output += f"[bold blue]Record {idx}:[/bold blue]\n"
            output += record.render() + "\n"
        return output
