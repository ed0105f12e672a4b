"""Command-line interface for refmanager.

Entry point: ``ref-add-pmids`` (configured in ``pyproject.toml``).

Usage:
    ref-add-pmids 31314747 40424645 [options]
    ref-add-pmids --pmids-file pmids.yaml [options]

Key options:
    --bib-dir, --bib-name, --print/--no-print,
    --email, --api-key, --timeout, --batch-size,
    --verbose/--no-verbose, --log-file.

Positional PMIDs and ``--pmids-file`` may be combined; at least one PMID
must be supplied.  ``NCBI_EMAIL`` and ``NCBI_API_KEY`` are read from the
environment (or a ``.env`` file) when the flags are not given.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from refmanager.log import setup_logging
from refmanager.merge import add_by_identifiers
from refmanager.models import Config, LibraryError, PubMedError
from refmanager.pubmed import create_client
from refmanager.sources import clean_pmids, read_pmids_file

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return parsed


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and merge the requested PMIDs into the library."""
    load_dotenv()

    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(
        verbose=args.verbose,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    config = Config(
        bib_dir=Path(args.bib_dir),
        bib_name=args.bib_name,
        print_entries=args.print_entries,
        email=args.email,
        api_key=args.api_key,
        timeout_s=args.timeout,
        batch_size=args.batch_size,
        verbose=args.verbose,
    )

    pmids = clean_pmids(args.pmids)
    if args.pmids_file:
        pmids_file = Path(args.pmids_file)
        if not pmids_file.exists():
            logger.error("File not found: %s", pmids_file)
            sys.exit(1)
        pmids = list(dict.fromkeys(pmids + read_pmids_file(pmids_file)))

    if not pmids:
        logger.error("No PMIDs given (pass PMIDs or --pmids-file)")
        sys.exit(2)

    _run(pmids, config)


def _run(pmids: list[str], config: Config) -> None:
    """Run one merge and map expected failures to exit status 1."""
    logger.info("Library: %s (%d PMIDs requested)", config.bib_path, len(pmids))
    try:
        add_by_identifiers(
            pmids,
            bib_dir=config.bib_dir,
            bib_name=config.bib_name,
            print_entries=config.print_entries,
            lookup=create_client(config),
        )
    except (PubMedError, LibraryError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ref-add-pmids",
        description=(
            "Add PubMed references to a BibTeX library by PMID. "
            "Existing entries are never overwritten."
        ),
    )

    parser.add_argument(
        "pmids",
        nargs="*",
        metavar="PMID",
        help="PubMed IDs to add.",
    )
    parser.add_argument(
        "--pmids-file",
        metavar="FILE",
        default=None,
        help="YAML list or text file (one PMID or 'PMID: N' per line) to read PMIDs from.",
    )
    parser.add_argument(
        "--bib-dir",
        metavar="DIR",
        default=".",
        help="Directory containing the BibTeX library (default: current directory).",
    )
    parser.add_argument(
        "--bib-name",
        metavar="NAME",
        default="library.bib",
        help="BibTeX library file name (default: library.bib).",
    )
    parser.add_argument(
        "--print",
        dest="print_entries",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Print new entries as BibLaTeX (default: on). Use --no-print to suppress.",
    )
    parser.add_argument(
        "--email",
        metavar="EMAIL",
        default=os.environ.get("NCBI_EMAIL"),
        help="Contact email sent to NCBI (default: NCBI_EMAIL env var).",
    )
    parser.add_argument(
        "--api-key",
        metavar="KEY",
        default=os.environ.get("NCBI_API_KEY"),
        help="NCBI API key (default: NCBI_API_KEY env var).",
    )
    parser.add_argument(
        "--timeout",
        metavar="S",
        type=_positive_int,
        default=30,
        help="PubMed request timeout in seconds (default: 30).",
    )
    parser.add_argument(
        "--batch-size",
        metavar="N",
        type=_positive_int,
        default=200,
        help="Maximum PMIDs per PubMed request (default: 200).",
    )
    parser.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Enable DEBUG-level logging (default: off).",
    )
    parser.add_argument(
        "--log-file",
        metavar="FILE",
        default=None,
        help="Also write log output to FILE.",
    )

    return parser


if __name__ == "__main__":
    main()
