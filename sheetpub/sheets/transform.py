"""Sheet rows to JSON records."""

from typing import Any

from sheetpub.errors import TransformError

Record = dict[str, str]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def rows_to_records(rows: list[list[Any]]) -> list[Record]:
    """
    Zip the header row with each data row.

    Missing trailing cells become empty strings and cells beyond the header
    are dropped. A sheet with only a header (or nothing) yields no records.
    """
    if not isinstance(rows, list) or not all(isinstance(row, list) for row in rows):
        raise TransformError("sheet values must be a list of rows")
    if len(rows) < 2:
        return []

    headers = rows[0]
    for index, name in enumerate(headers):
        if not isinstance(name, str):
            raise TransformError(f"header cell {index} is not text: {name!r}")

    records: list[Record] = []
    for row in rows[1:]:
        padded = list(row[: len(headers)]) + [""] * (len(headers) - len(row))
        records.append({name: _cell(value) for name, value in zip(headers, padded)})
    return records
