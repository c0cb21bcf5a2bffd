"""
BibShelf Ingestion CLI

Parses a BibTeX bibliography into publication records and exports them
as JSON, the same records the API serves.

Usage:
    python -m services.ingestion.src.main citations.bib --output publications.json
    python -m services.ingestion.src.main --minimal
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from shared.models import Publication
from shared.utils import get_settings, setup_logging
from services.ingestion.src.parsers import BibParseError, load_publications


def publications_to_json(publications: List[Publication], minimal: bool = False) -> str:
    """
    Serialize publications for export.

    Args:
        publications: Extracted records
        minimal: Drop bibtex and citations, as the API's minimal mode does

    Returns:
        Pretty-printed JSON array
    """
    if minimal:
        records = [pub.to_summary().model_dump() for pub in publications]
    else:
        records = [pub.model_dump() for pub in publications]
    return json.dumps(records, indent=2, ensure_ascii=False)


def build_parser() -> argparse.ArgumentParser:
    """Command line interface definition."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Extract publications from a BibTeX file")
    parser.add_argument(
        "source",
        nargs="?",
        type=Path,
        default=settings.bib_source,
        help="BibTeX file to parse (defaults to BIB_SOURCE_PATH)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write JSON here instead of stdout",
    )
    parser.add_argument(
        "--minimal",
        action="store_true",
        help="Export the minimal projection (no bibtex, no citations)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the ingestion CLI."""
    settings = get_settings()
    # Logs go to stderr so stdout stays valid JSON
    logger = setup_logging(
        service_name="ingestion",
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_output="stderr",
    )

    args = build_parser().parse_args(argv)

    try:
        publications = load_publications(args.source)
    except BibParseError as e:
        logger.error(
            f"No publications extracted from {args.source}: {e}",
            extra={"source_path": str(args.source), "code": e.code.value},
        )
        return 1
    except (OSError, UnicodeDecodeError) as e:
        logger.error(
            f"Failed to read bibliography {args.source}: {e}",
            extra={"source_path": str(args.source)},
        )
        return 1

    payload = publications_to_json(publications, minimal=args.minimal)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(publications)} publications to {args.output}")
    else:
        sys.stdout.write(payload + "\n")

    dated = sum(1 for pub in publications if pub.timestamp is not None)
    logger.info(
        "Extraction summary",
        extra={
            "publications": len(publications),
            "dated": dated,
            "total_citations": sum(pub.citations for pub in publications),
        },
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
