"""Merge orchestration — add PubMed records to a BibTeX library by PMID.

The library file is read once at the start and written once at the end, so
a run that fails part-way (network error, unreadable file) leaves it
untouched.  "Nothing to do" outcomes are logged and return ``None``; they
are not errors.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from refmanager.keys import assign_keys
from refmanager.library import load_library, pubmed_ids, save_library
from refmanager.models import (
    PUBMED_EPRINTTYPE,
    PUBMED_URL,
    Config,
    Library,
    Record,
)
from refmanager.pubmed import Lookup, create_client
from refmanager.renderer import render_added_summary, render_entries

logger = logging.getLogger(__name__)


def add_by_identifiers(
    identifiers: Iterable[object],
    bib_dir: str | Path = ".",
    bib_name: str = "library.bib",
    print_entries: bool = True,
    lookup: Lookup | None = None,
) -> Library | None:
    """Look up new PMIDs and merge them into ``bib_dir/bib_name``.

    Steps
    -----
    1. Deduplicate ``identifiers`` (coerced to stripped strings).
    2. Load the library, creating an empty file if needed.
    3. Drop PMIDs already present (``eprint`` with ``eprinttype = pubmed``).
    4. Resolve the rest with ``lookup.fetch``.
    5. Set ``eprint``, ``eprinttype`` and ``url``; assign citation keys.
    6. Merge, keeping the existing entry whenever a key is already taken.
    7. Optionally print the new entries, then write the sorted library.

    Args:
        identifiers:   PMIDs; ints and strings are both accepted, and a
                       single PMID need not be wrapped in a list.
        bib_dir:       Directory containing the library.
        bib_name:      Library file name.
        print_entries: If True, print the retrieved entries as BibLaTeX.
        lookup:        Object with ``fetch(pmids) -> {pmid: record}``.
                       Defaults to a ``PubMedClient`` configured from the
                       environment.

    Returns:
        The merged library, or ``None`` when nothing was written.

    Raises:
        PubMedError:  if the lookup fails.
        LibraryError: if the existing library cannot be parsed.
    """
    if isinstance(identifiers, (str, int)):
        identifiers = [identifiers]
    pmids = [str(i).strip() for i in identifiers]
    pmids = list(dict.fromkeys(p for p in pmids if p))

    path = Path(bib_dir) / bib_name
    library = load_library(path)

    if library:
        known = pubmed_ids(library)
        new_pmids = [p for p in pmids if p not in known]
    else:
        new_pmids = pmids

    if not new_pmids:
        logger.info("No new PMIDs to add")
        return None

    if lookup is None:
        lookup = create_client(Config(bib_dir=Path(bib_dir), bib_name=bib_name))
    resolved = lookup.fetch(new_pmids)

    if not resolved:
        logger.info("No new PMIDs could be retrieved")
        return None

    keyed = assign_keys(_tag_pubmed(pmid, record) for pmid, record in resolved.items())
    new_entries = {key: {**record, "ID": key} for key, record in keyed.items()}
    merged, added = merge_libraries(library, new_entries)

    if print_entries:
        print(render_entries(new_entries.values()))

    if added:
        logger.info("%s", render_added_summary(added))
    save_library(merged, path)
    return merged


def merge_libraries(library: Library, new_entries: Library) -> tuple[Library, list[str]]:
    """Union of two libraries where ``library`` wins on shared keys.

    Returns:
        The merged library and the keys taken from ``new_entries``.
    """
    merged = dict(library)
    added: list[str] = []
    for key, record in new_entries.items():
        if key in merged:
            logger.info("Keeping existing entry for @%s", key)
            continue
        merged[key] = record
        added.append(key)
    return merged, added


def _tag_pubmed(pmid: str, record: Record) -> Record:
    record = dict(record)
    record["eprint"] = pmid
    record["eprinttype"] = PUBMED_EPRINTTYPE
    record["url"] = PUBMED_URL + pmid
    record.setdefault("ENTRYTYPE", "article")
    return record
