from __future__ import annotations

import csv
import io
from typing import Iterable, Mapping, Sequence


def rows_to_csv(rows: Iterable[Mapping[str, object]], fieldnames: Sequence[str]) -> bytes:
    """Render rows as CSV bytes with a BOM so spreadsheet apps pick up UTF-8."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(fieldnames), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({k: ("" if row.get(k) is None else row.get(k)) for k in fieldnames})
    return out.getvalue().encode("utf-8-sig")
