"""Deterministic citation keys of the form ``YYYY-MM-First-Last``.

``First`` is the last name of the first author and ``Last`` the last name
of the last author.  Non-ASCII characters are dropped from author names
(not transliterated), so ``"Ñuñez"`` contributes ``"uez"``.  Components
that cannot be found are left out of the key; year and month fall back to
``"0000"`` and ``"00"``.

The first author's last name is the word just before whitespace and the
whole word ``and``, so a name such as ``"Brandon"`` is never split.
"""

import logging
import re
from collections.abc import Iterable

from refmanager.models import Record
from refmanager.months import normalize_month

logger = logging.getLogger(__name__)

MISSING_YEAR = "0000"

_FIRST_RE = re.compile(r"\b(\w+)(?=\s+and\b)", re.ASCII)
_LAST_RE = re.compile(r"(\w+)$", re.ASCII)


def build_key(record: Record) -> str:
    """Return the citation key for one record."""
    year = record.get("year")
    year = str(year).strip() if year is not None else ""

    author = _ascii_only(record.get("author") or "")
    first = _FIRST_RE.search(author)
    last = _LAST_RE.search(author)

    parts = [
        year or MISSING_YEAR,
        normalize_month(record.get("month")),
        first.group(1) if first else None,
        last.group(1) if last else None,
    ]
    return "-".join(p for p in parts if p)


def assign_keys(records: Iterable[Record]) -> dict[str, Record]:
    """Key a batch of records; on a key collision the later record wins."""
    keyed: dict[str, Record] = {}
    for record in records:
        key = build_key(record)
        if key in keyed:
            logger.warning("Duplicate key %s in batch; keeping the later record", key)
        keyed[key] = record
    return keyed


def _ascii_only(text: str) -> str:
    return text.encode("ascii", "ignore").decode("ascii")
