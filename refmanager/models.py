"""Pydantic models, dataclass Config, and exceptions for refmanager.

Library records are kept as plain dicts shaped like bibtexparser entries
(``ID``, ``ENTRYTYPE`` and lowercase field names) so that they can be
written back unchanged.  Only data coming from PubMed is validated through
a pydantic model before it becomes a record.
"""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Record = dict[str, str | None]
"""A bibliographic record: bibtexparser-style entry dict."""

Library = dict[str, Record]
"""Citation key → record."""

PUBMED_EPRINTTYPE = "pubmed"
PUBMED_URL = "https://www.ncbi.nlm.nih.gov/pubmed/"

# ---------------------------------------------------------------------------
# PubMed article
# ---------------------------------------------------------------------------


class PubMedArticle(BaseModel):
    """One ``PubmedArticle`` element parsed from an efetch XML response.

    ``authors`` holds display names in ``"First Last"`` order; collective
    names are already wrapped in braces.
    """

    pmid: str
    title: str = ""
    authors: list[str] = Field(default_factory=list)
    journal: str = ""
    year: str | None = None
    month: str | None = None
    volume: str = ""
    issue: str = ""
    pages: str = ""
    doi: str = ""
    pmcid: str = ""

    def to_record(self) -> Record:
        """Convert to a bibtexparser-shaped entry, dropping empty fields."""
        fields = {
            "title": self.title,
            "author": " and ".join(self.authors),
            "journal": self.journal,
            "year": self.year,
            "month": self.month,
            "volume": self.volume,
            "number": self.issue,
            "pages": self.pages,
            "doi": self.doi,
            "pmcid": self.pmcid,
            "eprint": self.pmid,
            "eprinttype": PUBMED_EPRINTTYPE,
        }
        record: Record = {"ENTRYTYPE": "article"}
        record.update({k: v for k, v in fields.items() if v})
        return record


# ---------------------------------------------------------------------------
# Config (dataclass — not pydantic; holds runtime settings)
# ---------------------------------------------------------------------------


@dataclass
class Config:
    """Runtime configuration for a merge run.

    All fields correspond to CLI flags.

    Attributes:
        bib_dir:       Directory holding the BibTeX library.
        bib_name:      File name of the library inside ``bib_dir``.
        print_entries: If True, print newly added entries as BibLaTeX to stdout.
        email:         Contact address sent to NCBI with every request.
                       ``None`` means ``NCBI_EMAIL`` is used if set.
        api_key:       NCBI API key.  ``None`` means ``NCBI_API_KEY`` is used
                       if set; without a key NCBI allows 3 requests/second.
        timeout_s:     Seconds before an efetch request is abandoned.
        batch_size:    Maximum PMIDs per efetch request.
        verbose:       If True, log at DEBUG level.
    """

    bib_dir: Path = Path(".")
    bib_name: str = "library.bib"
    print_entries: bool = True
    email: str | None = None
    api_key: str | None = None
    timeout_s: int = 30
    batch_size: int = 200
    verbose: bool = False

    @property
    def bib_path(self) -> Path:
        return Path(self.bib_dir) / self.bib_name


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PubMedError(Exception):
    """Raised when an E-utilities request fails or returns unparseable XML."""


class LibraryError(Exception):
    """Raised when an existing BibTeX library cannot be parsed.

    Attributes:
        path:  The library file that failed.
        cause: The original exception raised by the parser.
    """

    def __init__(self, path: Path, cause: Exception) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read BibTeX library {path}: {cause}")
