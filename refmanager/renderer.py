"""Render records as BibLaTeX text and build human-readable summaries.

No file I/O is performed here — ``library.save_library`` writes the string
returned by ``render_entries`` and ``merge`` prints it to the console.
"""

import logging
from collections.abc import Iterable, Sequence

from bibtexparser.bibdatabase import BibDatabase
from bibtexparser.bwriter import BibTexWriter

from refmanager.models import Record

logger = logging.getLogger(__name__)

# Fields written first, in this order; everything else follows alphabetically.
_DISPLAY_ORDER = ("author", "title", "journal", "year", "month")


def render_entries(records: Iterable[Record]) -> str:
    """Convert records to BibLaTeX source, keeping the given order.

    Fields whose value is ``None`` are left out, so the ``eprint`` /
    ``eprinttype`` placeholders added on load never reach the output.

    Args:
        records: bibtexparser-style dicts with ``ID`` and ``ENTRYTYPE`` set.

    Returns:
        The BibTeX text, ready to be written to a ``.bib`` file.
    """
    db = BibDatabase()
    db.entries = [_writable(record) for record in records]
    return _writer().write(db)


def render_added_summary(keys: Sequence[str]) -> str:
    """Return ``"Adding entries for:"`` followed by one ``@key`` per line."""
    return "Adding entries for:\n  " + "\n  ".join(f"@{key}" for key in keys)


def _writer() -> BibTexWriter:
    writer = BibTexWriter()
    writer.indent = "  "
    writer.order_entries_by = None
    writer.display_order = _DISPLAY_ORDER
    return writer


def _writable(record: Record) -> dict[str, str]:
    entry = {k: str(v) for k, v in record.items() if v is not None}
    entry.setdefault("ENTRYTYPE", "article")
    return entry
