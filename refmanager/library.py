"""BibTeX library store — read-once, write-once persistence via bibtexparser.

The library file is created empty if it does not exist.  Every loaded record
carries ``eprint`` and ``eprinttype`` keys (``None`` when the entry has no
such field) so that PMID filtering never has to guard against missing
fields.  On save, entries are sorted by citation key.
"""

import logging
import re
from pathlib import Path

import bibtexparser
from bibtexparser.bparser import BibTexParser

from refmanager.models import PUBMED_EPRINTTYPE, Library, LibraryError
from refmanager.renderer import render_entries

logger = logging.getLogger(__name__)

_ALWAYS_PRESENT = ("eprint", "eprinttype")

_ENTRY_HEADER_RE = re.compile(
    r"^\s*@(?!(?:comment|string|preamble)\b)\w+\s*\{", re.MULTILINE | re.IGNORECASE
)


def load_library(path: Path) -> Library:
    """Read the library at ``path``, creating an empty file if it is missing.

    Raises:
        LibraryError: if the file exists but cannot be parsed, or if any
            ``@type{...}`` entry in it was skipped by the parser.
    """
    path = Path(path)
    if not path.exists():
        logger.info("Creating empty library: %s", path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        return {}

    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}

    try:
        db = bibtexparser.loads(text, parser=_parser())
    except Exception as e:
        raise LibraryError(path, e) from e

    # bibtexparser skips malformed entries silently; rewriting would delete them.
    n_headers = len(_ENTRY_HEADER_RE.findall(text))
    if n_headers > len(db.entries):
        raise LibraryError(
            path,
            ValueError(
                f"{n_headers - len(db.entries)} of {n_headers} entries could not be parsed"
            ),
        )

    library: Library = {}
    for entry in db.entries:
        key = entry["ID"]
        if key in library:
            logger.warning("Duplicate key %s in %s; keeping the first entry", key, path)
            continue
        record = dict(entry)
        for field in _ALWAYS_PRESENT:
            record.setdefault(field, None)
        library[key] = record

    logger.debug("Loaded %d entries from %s", len(library), path)
    return library


def save_library(library: Library, path: Path) -> None:
    """Overwrite ``path`` with ``library`` sorted by citation key."""
    records = []
    for key in sorted(library):
        record = dict(library[key])
        record["ID"] = key
        records.append(record)
    Path(path).write_text(render_entries(records), encoding="utf-8")
    logger.debug("Wrote %d entries to %s", len(records), path)


def pubmed_ids(library: Library) -> set[str]:
    """Return the PMIDs already recorded in ``library``."""
    return {
        record["eprint"]
        for record in library.values()
        if record.get("eprinttype") == PUBMED_EPRINTTYPE and record.get("eprint")
    }


def _parser() -> BibTexParser:
    return BibTexParser(common_strings=True, ignore_nonstandard_types=False)
