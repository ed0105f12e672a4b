"""PubMed lookup via NCBI E-utilities ``efetch`` — wraps ``requests``.

The public interface is ``PubMedClient.fetch(pmids)`` returning a mapping of
PMID → record, which is all ``merge.add_by_identifiers`` relies on; tests
and other callers can pass any object with the same method.

PMIDs that NCBI does not return (withdrawn, mistyped, book chapters) are
simply absent from the result.  Network and HTTP failures raise
``PubMedError``; there is no retry.
"""

import logging
import os
import re
import sys
import time
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from typing import Protocol

import requests
from tqdm.auto import tqdm

from refmanager import __version__
from refmanager.models import Config, PubMedArticle, PubMedError, Record

logger = logging.getLogger(__name__)

EFETCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"
TOOL_NAME = "refmanager"

# NCBI allows 3 requests/second without an API key and 10 with one.
_DELAY_NO_KEY_S = 0.34
_DELAY_WITH_KEY_S = 0.1

_YEAR_RE = re.compile(r"\d{4}")


class Lookup(Protocol):
    """Anything that resolves PMIDs to bibliographic records."""

    def fetch(self, pmids: Iterable[str]) -> dict[str, Record]: ...


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class PubMedClient:
    """Blocking efetch client.

    Attributes:
        email:      Contact address sent with each request (NCBI asks for one).
        api_key:    Optional NCBI API key.
        timeout_s:  Per-request timeout in seconds.
        batch_size: Maximum PMIDs per request.
    """

    def __init__(
        self,
        email: str | None = None,
        api_key: str | None = None,
        timeout_s: int = 30,
        batch_size: int = 200,
        session: requests.Session | None = None,
    ) -> None:
        self.email = email
        self.api_key = api_key
        self.timeout_s = timeout_s
        self.batch_size = batch_size
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = f"{TOOL_NAME}/{__version__}"

    @property
    def delay_s(self) -> float:
        return _DELAY_WITH_KEY_S if self.api_key else _DELAY_NO_KEY_S

    def fetch(self, pmids: Iterable[str]) -> dict[str, Record]:
        """Look up ``pmids`` and return a mapping of PMID → record.

        Raises:
            PubMedError: on any request failure or unparseable response.
        """
        pmids = list(dict.fromkeys(pmids))
        chunks = [
            pmids[i : i + self.batch_size]
            for i in range(0, len(pmids), self.batch_size)
        ]
        logger.info("Looking up %d PMIDs on PubMed", len(pmids))

        records: dict[str, Record] = {}
        for idx, chunk in enumerate(
            tqdm(
                chunks,
                desc="PubMed",
                unit="request",
                disable=not sys.stderr.isatty(),
                leave=False,
            )
        ):
            if idx:
                time.sleep(self.delay_s)
            for article in parse_efetch_xml(self._efetch(chunk)):
                records[article.pmid] = article.to_record()

        missing = [p for p in pmids if p not in records]
        if missing:
            logger.info("PubMed returned no record for: %s", ", ".join(missing))
        return records

    def _efetch(self, pmids: list[str]) -> bytes:
        params = {
            "db": "pubmed",
            "id": ",".join(pmids),
            "retmode": "xml",
            "tool": TOOL_NAME,
        }
        if self.email:
            params["email"] = self.email
        if self.api_key:
            params["api_key"] = self.api_key

        logger.debug("GET %s (%d ids)", EFETCH_URL, len(pmids))
        t0 = time.monotonic()
        try:
            resp = self._session.get(EFETCH_URL, params=params, timeout=self.timeout_s)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise PubMedError(f"PubMed efetch failed: {e}") from e
        logger.debug(
            "Response received (%.1fs, %s bytes)",
            time.monotonic() - t0,
            f"{len(resp.content):,}",
        )
        return resp.content


def create_client(config: Config) -> PubMedClient:
    """Create a client from configuration, resolving credentials.

    ``config.email`` / ``config.api_key`` take precedence over the
    ``NCBI_EMAIL`` / ``NCBI_API_KEY`` environment variables.
    """
    return PubMedClient(
        email=config.email or os.environ.get("NCBI_EMAIL") or None,
        api_key=config.api_key or os.environ.get("NCBI_API_KEY") or None,
        timeout_s=config.timeout_s,
        batch_size=config.batch_size,
    )


# ---------------------------------------------------------------------------
# XML parsing
# ---------------------------------------------------------------------------


def parse_efetch_xml(xml_text: str | bytes) -> list[PubMedArticle]:
    """Parse a ``PubmedArticleSet`` document into ``PubMedArticle`` models.

    Articles without a PMID or an ``Article`` element are skipped.

    Raises:
        PubMedError: if the document is not well-formed XML.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise PubMedError(f"Unparseable efetch response: {e}") from e

    articles = []
    for node in root.iter("PubmedArticle"):
        article = _parse_article(node)
        if article is not None:
            articles.append(article)
    return articles


def _parse_article(node: ET.Element) -> PubMedArticle | None:
    citation = node.find("MedlineCitation")
    if citation is None:
        return None
    pmid = _text(citation.find("PMID"))
    art = citation.find("Article")
    if not pmid or art is None:
        logger.warning("Skipping PubMed article without PMID or Article element")
        return None

    journal = art.find("Journal")
    issue = journal.find("JournalIssue") if journal is not None else None
    pub_date = issue.find("PubDate") if issue is not None else None

    year, month = None, None
    if pub_date is not None:
        year = _text(pub_date.find("Year")) or None
        month = _text(pub_date.find("Month")) or None
        if year is None:
            match = _YEAR_RE.search(_text(pub_date.find("MedlineDate")))
            year = match.group(0) if match else None

    ids = {
        aid.get("IdType"): _text(aid)
        for aid in node.findall("PubmedData/ArticleIdList/ArticleId")
    }

    return PubMedArticle(
        pmid=pmid,
        title=_text(art.find("ArticleTitle")).rstrip("."),
        authors=[
            name
            for name in (_author_name(a) for a in art.findall("AuthorList/Author"))
            if name
        ],
        journal=_text(journal.find("Title")) if journal is not None else "",
        year=year,
        month=month,
        volume=_text(issue.find("Volume")) if issue is not None else "",
        issue=_text(issue.find("Issue")) if issue is not None else "",
        pages=_text(art.find("Pagination/MedlinePgn")),
        doi=ids.get("doi", ""),
        pmcid=ids.get("pmc", ""),
    )


def _author_name(author: ET.Element) -> str:
    collective = _text(author.find("CollectiveName"))
    if collective:
        return "{" + collective + "}"
    last = _text(author.find("LastName"))
    first = _text(author.find("ForeName")) or _text(author.find("Initials"))
    return f"{first} {last}".strip()


def _text(node: ET.Element | None) -> str:
    """Full text content of ``node`` (including inline markup), whitespace-collapsed."""
    if node is None:
        return ""
    return " ".join("".join(node.itertext()).split())
