"""PMID discovery — read identifiers from YAML or plain-text files.

YAML files (``.yaml`` / ``.yml``) may hold either a list of PMIDs or a
mapping with a ``pmids`` list.  Any other file is read line by line and
accepts bare PMIDs as well as ``PMID: 12345`` markers anywhere in the text,
so a Markdown CV can be used directly.
"""

import logging
import re
from collections.abc import Iterable
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_PMID_MARKER_RE = re.compile(r"\bPMID\s*:\s*(\d+)\b", re.IGNORECASE)
_DIGITS_RE = re.compile(r"^\d+$")


def read_pmids_file(path: Path) -> list[str]:
    """Return the unique PMIDs listed in ``path``, in file order."""
    path = Path(path)
    if path.suffix.lower() in {".yaml", ".yml"}:
        return clean_pmids(_from_yaml(path))
    return clean_pmids(_from_text(path))


def clean_pmids(values: Iterable[object]) -> list[str]:
    """Coerce to strings, drop non-numeric tokens and duplicates, keep order."""
    pmids: list[str] = []
    for value in values:
        token = str(value).strip()
        if not token:
            continue
        if not _DIGITS_RE.match(token):
            logger.warning("Ignoring non-numeric PMID: %r", token)
            continue
        pmids.append(token)
    return list(dict.fromkeys(pmids))


def _from_yaml(path: Path) -> list[object]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("pmids") or []
    if not isinstance(data, list):
        data = [data]
    return data


def _from_text(path: Path) -> list[str]:
    pmids: list[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if _DIGITS_RE.match(line):
            pmids.append(line)
        else:
            pmids.extend(_PMID_MARKER_RE.findall(line))
    return pmids
