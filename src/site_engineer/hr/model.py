from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Column:
    key: str
    label: str


@dataclass(frozen=True)
class ReportTable:
    """A tabular HR report: JSON rows, CSV export and email all come from this."""

    kind: str
    title: str
    period: str
    columns: tuple[Column, ...]
    rows: list[dict]

    @property
    def fieldnames(self) -> list[str]:
        return [c.key for c in self.columns]

    @property
    def filename(self) -> str:
        return f"{self.kind}_{self.period.replace(' ', '').replace('..', '_')}.csv"
