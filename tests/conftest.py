"""Shared pytest fixtures for the refmanager test suite."""

import logging
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# Logger isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_refmanager_logger():
    """Clear the refmanager logger between tests.

    Tests that call ``main()`` trigger ``setup_logging()``, which attaches
    handlers and sets ``propagate=False``.  Without this fixture the state
    leaks into subsequent tests and breaks ``caplog`` capture.  The
    ``urllib3`` logger is reset too, since verbose setup shares handlers
    with it.
    """
    _reset("refmanager", "urllib3")
    yield
    _reset("refmanager", "urllib3")


def _reset(*names):
    for name in names:
        logger = logging.getLogger(name)
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


# ---------------------------------------------------------------------------
# Fake PubMed lookup
# ---------------------------------------------------------------------------


class FakeLookup:
    """Stands in for ``PubMedClient``: returns canned records, records calls."""

    def __init__(self, records: dict[str, dict] | None = None) -> None:
        self.records = records or {}
        self.calls: list[list[str]] = []

    def fetch(self, pmids):
        pmids = list(pmids)
        self.calls.append(pmids)
        return {p: dict(self.records[p]) for p in pmids if p in self.records}


@pytest.fixture
def fake_lookup():
    return FakeLookup


# ---------------------------------------------------------------------------
# Library files
# ---------------------------------------------------------------------------

SAMPLE_BIB = """\
@article{2020-03-Smith-Doe,
  author = {Jane Smith and John Doe},
  title = {{Manually} Edited Title},
  journal = {Journal of Tests},
  year = {2020},
  month = {3},
  eprint = {111},
  eprinttype = {pubmed}
}

@book{1999-00-Knuth,
  author = {Donald Knuth},
  title = {The Art of Computer Programming},
  year = {1999}
}
"""


@pytest.fixture
def sample_bib(tmp_path) -> Path:
    """A library with one PubMed article and one hand-written book entry."""
    path = tmp_path / "library.bib"
    path.write_text(SAMPLE_BIB, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Mock efetch response
# ---------------------------------------------------------------------------

EFETCH_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<PubmedArticleSet>
  <PubmedArticle>
    <MedlineCitation Status="MEDLINE" Owner="NLM">
      <PMID Version="1">31314747</PMID>
      <Article PubModel="Print">
        <Journal>
          <JournalIssue CitedMedium="Internet">
            <Volume>15</Volume>
            <Issue>7</Issue>
            <PubDate><Year>2019</Year><Month>Jul</Month></PubDate>
          </JournalIssue>
          <Title>PLoS genetics</Title>
        </Journal>
        <ArticleTitle>A <i>model</i> of everything.</ArticleTitle>
        <Pagination><MedlinePgn>e1008250</MedlinePgn></Pagination>
        <AuthorList CompleteYN="Y">
          <Author><LastName>Smith</LastName><ForeName>Jane</ForeName><Initials>J</Initials></Author>
          <Author><LastName>N\xc3\xba\xc3\xb1ez</LastName><ForeName>Ana</ForeName><Initials>A</Initials></Author>
        </AuthorList>
      </Article>
    </MedlineCitation>
    <PubmedData>
      <ArticleIdList>
        <ArticleId IdType="pubmed">31314747</ArticleId>
        <ArticleId IdType="doi">10.1371/journal.pgen.1008250</ArticleId>
        <ArticleId IdType="pmc">PMC6636766</ArticleId>
      </ArticleIdList>
    </PubmedData>
  </PubmedArticle>
  <PubmedArticle>
    <MedlineCitation Status="MEDLINE" Owner="NLM">
      <PMID Version="1">29000001</PMID>
      <Article PubModel="Print">
        <Journal>
          <JournalIssue CitedMedium="Print">
            <PubDate><MedlineDate>2018 Nov-Dec</MedlineDate></PubDate>
          </JournalIssue>
          <Title>Brain imaging</Title>
        </Journal>
        <ArticleTitle>Consortium report</ArticleTitle>
        <AuthorList CompleteYN="Y">
          <Author><LastName>Jones</LastName><Initials>B</Initials></Author>
          <Author><CollectiveName>ENIGMA Consortium</CollectiveName></Author>
        </AuthorList>
      </Article>
    </MedlineCitation>
    <PubmedData>
      <ArticleIdList>
        <ArticleId IdType="pubmed">29000001</ArticleId>
      </ArticleIdList>
    </PubmedData>
  </PubmedArticle>
  <PubmedBookArticle>
    <BookDocument>
      <PMID Version="1">20301295</PMID>
    </BookDocument>
  </PubmedBookArticle>
</PubmedArticleSet>
"""


@pytest.fixture
def efetch_xml() -> bytes:
    """Raw efetch body with two journal articles and one book chapter."""
    return EFETCH_XML
