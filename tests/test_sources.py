"""Tests for refmanager/sources.py — reading PMIDs from files."""

import logging

from refmanager.sources import clean_pmids, read_pmids_file


def test_yaml_list(tmp_path):
    path = tmp_path / "pmids.yaml"
    path.write_text("- 31314747\n- '40424645'\n- 31314747\n", encoding="utf-8")
    assert read_pmids_file(path) == ["31314747", "40424645"]


def test_yaml_mapping_with_pmids_key(tmp_path):
    path = tmp_path / "refs.yml"
    path.write_text("title: My CV\npmids:\n  - 111\n  - 222\n", encoding="utf-8")
    assert read_pmids_file(path) == ["111", "222"]


def test_yaml_empty_file(tmp_path):
    path = tmp_path / "pmids.yaml"
    path.write_text("", encoding="utf-8")
    assert read_pmids_file(path) == []


def test_yaml_scalar(tmp_path):
    path = tmp_path / "pmids.yaml"
    path.write_text("12345\n", encoding="utf-8")
    assert read_pmids_file(path) == ["12345"]


def test_text_file_one_per_line(tmp_path):
    path = tmp_path / "pmids.txt"
    path.write_text("111\n\n  222  \n111\n", encoding="utf-8")
    assert read_pmids_file(path) == ["111", "222"]


def test_markdown_pmid_markers(tmp_path):
    path = tmp_path / "cv.md"
    path.write_text(
        "# Publications\n\n"
        "- Smith J. A paper. PMID: 31314747\n"
        "- Doe J. Another. pmid:40424645 and PMID : 111\n"
        "- No identifier here\n",
        encoding="utf-8",
    )
    assert read_pmids_file(path) == ["31314747", "40424645", "111"]


def test_clean_pmids_drops_non_numeric(caplog):
    with caplog.at_level(logging.WARNING):
        result = clean_pmids([123, " 456 ", "", "abc", "PMC123", "123"])
    assert result == ["123", "456"]
    assert "'abc'" in caplog.text
    assert "'PMC123'" in caplog.text
