"""
refmanager — add PubMed references to a BibTeX library by PMID.

Looks up new PMIDs via NCBI E-utilities, gives each record a deterministic
``YYYY-MM-First-Last`` citation key and merges it into the library file
without overwriting entries that are already there.
"""

__version__ = "0.1.0"
