import locale
import re

_NUMERIC_RE = re.compile(r"^\s*-?\d+(\.\d+)?\s*$")


class Store:
    """
    Client-side copy of one resource, rebuilt from the server on load.

    Records are plain dicts kept in server order and keyed by ``key``
    (``id`` for weeks, ``student_id`` for students). The store is only
    mutated after the server has confirmed the corresponding write.
    """

    def __init__(self, key: str = "id"):
        self.key = key
        self.items: list[dict] = []

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def replace(self, records):
        self.items = [dict(r) for r in records]

    def find(self, key_value):
        for record in self.items:
            if str(record.get(self.key)) == str(key_value):
                return record
        return None

    def add(self, record: dict):
        self.items.append(dict(record))

    def update(self, key_value, changes: dict):
        record = self.find(key_value)
        if record is not None:
            record.update(changes)
        return record

    def remove(self, key_value):
        self.items = [r for r in self.items if str(r.get(self.key)) != str(key_value)]


class SortState:
    """Per-column sort direction; each click on a header flips it, starting with ascending."""

    def __init__(self):
        self.directions: dict[str, str] = {}

    def toggle(self, column: str) -> str:
        direction = self.directions.get(column, "asc")
        self.directions[column] = "desc" if direction == "asc" else "asc"
        return direction


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_numeric(value) -> bool:
    return isinstance(value, (int, float)) or (isinstance(value, str) and bool(_NUMERIC_RE.match(value)))


def _collation_key(value) -> tuple:
    text = str(value)
    return locale.strxfrm(text.casefold()), text


def sort_records(records: list[dict], field: str, direction: str = "asc") -> None:
    """Sort in place. Numeric-looking columns compare as numbers, everything else
    case-insensitively by locale collation. Missing values always go last."""
    present = [r.get(field) for r in records if not _is_missing(r.get(field))]
    if present and all(_is_numeric(v) for v in present):
        value_key = float
    else:
        value_key = _collation_key
    descending = direction == "desc"

    filled = [r for r in records if not _is_missing(r.get(field))]
    filled.sort(key=lambda r: value_key(r.get(field)), reverse=descending)
    records[:] = filled + [r for r in records if _is_missing(r.get(field))]


def filter_records(records, field: str, term: str | None) -> list[dict]:
    term = (term or "").strip().lower()
    if not term:
        return list(records)
    return [r for r in records if term in str(r.get(field) or "").lower()]
