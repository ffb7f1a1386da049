#!/usr/bin/env python3
"""
Merinfo company explorer - command line entry point

Usage:
    python main.py companies.jsonl                          # List all records
    python main.py companies.json --search bygg --sort revenue-desc
    python main.py https://example.se/data.jsonl --min-revenue 1000000
    python main.py companies.json --annotate 556677-8899 --favorite
    python main.py companies.json --favorites-only --export out.csv
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from config import Settings
from core.annotations import AnnotationStore, InteractionStatus
from core.export import export_to_csv, export_to_json
from core.filtering import Filters, RangeFilter, TriState
from core.formatting import format_sek_compact, status_label
from core.loader import STATUS_ERROR_FORMAT, STATUS_ERROR_READ, DatasetLoader
from core.models import FinancialField
from core.query import QueryState
from core.sorting import SORT_OPTIONS, SortSpec, default_sort_spec
from core.storage import KeyValueStore

STATUS_MESSAGES = {
    STATUS_ERROR_READ: "Could not read the file.",
    STATUS_ERROR_FORMAT: "Could not understand the file format (expected JSON or JSON Lines).",
}

TRI_STATE_CHOICES = [t.value for t in TriState]


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler("merinfo_explorer.log"),
        ]
    )


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search, filter, sort and annotate business-registry records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py data.jsonl --search stockholm
  python main.py data.json --min-net-profit 0 --sort net_profit-desc
  python main.py data.json --sni "Dataprogrammering" --company-phone yes
  python main.py data.json --annotate 556677-8899 --set-status callback --comment "Ring på måndag"
        """
    )

    parser.add_argument("source", help="Dataset file path or http(s) URL")
    parser.add_argument("--search", "-s", default="", help="Substring of name, org number or city")
    parser.add_argument("--sort", choices=SORT_OPTIONS, default=None, help="Sort order (default from DEFAULT_SORT)")

    for which in FinancialField:
        flag = which.value.replace("_", "-")
        parser.add_argument(f"--min-{flag}", type=float, default=None, help=f"Minimum {which.value} (SEK)")
        parser.add_argument(f"--max-{flag}", type=float, default=None, help=f"Maximum {which.value} (SEK)")

    parser.add_argument("--company-phone", choices=TRI_STATE_CHOICES, default="any")
    parser.add_argument("--board-phone", choices=TRI_STATE_CHOICES, default="any")
    parser.add_argument("--f-skatt", choices=TRI_STATE_CHOICES, default="any")
    parser.add_argument("--vat-registered", choices=TRI_STATE_CHOICES, default="any")
    parser.add_argument("--employer-registered", choices=TRI_STATE_CHOICES, default="any")
    parser.add_argument("--sni", action="append", default=[], help="Required SNI description (repeatable)")
    parser.add_argument("--category", action="append", default=[], help="Required category (repeatable)")
    parser.add_argument(
        "--status", action="append", default=[],
        choices=[s.value for s in InteractionStatus],
        help="Required interaction status (repeatable)",
    )
    parser.add_argument("--favorites-only", action="store_true", help="Only show favorites")

    annotate = parser.add_argument_group("annotation")
    annotate.add_argument("--annotate", metavar="ORG_NUMBER", help="Org number to annotate before querying")
    annotate.add_argument("--set-status", choices=[s.value for s in InteractionStatus])
    annotate.add_argument("--comment")
    fav = annotate.add_mutually_exclusive_group()
    fav.add_argument("--favorite", dest="favorite", action="store_const", const=True, default=None)
    fav.add_argument("--unfavorite", dest="favorite", action="store_const", const=False)

    parser.add_argument("--limit", type=int, default=None, help="Max rows to print (default: DISPLAY_LIMIT)")
    parser.add_argument("--export", metavar="PATH", help="Export visible records (.csv or .json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser.parse_args(argv)


def build_filters(args) -> Filters:
    filters = Filters(
        company_phone=TriState(args.company_phone),
        board_phone=TriState(args.board_phone),
        f_skatt=TriState(args.f_skatt),
        vat_registered=TriState(args.vat_registered),
        employer_registered=TriState(args.employer_registered),
        sni=frozenset(args.sni),
        categories=frozenset(args.category),
        statuses=frozenset(InteractionStatus(s) for s in args.status),
        favorites_only=args.favorites_only,
    )
    for which in FinancialField:
        attr = which.value
        bounds = RangeFilter(getattr(args, f"min_{attr}"), getattr(args, f"max_{attr}"))
        if bounds.is_set:
            filters = filters.with_range(which, bounds.min, bounds.max)
    return filters


def apply_annotation(args, store: AnnotationStore) -> None:
    changes = {}
    if args.set_status is not None:
        changes["status"] = args.set_status
    if args.comment is not None:
        changes["comment"] = args.comment
    if args.favorite is not None:
        changes["is_favorite"] = args.favorite
    if changes:
        store.merge(args.annotate, changes)


def print_table(records, annotations, limit: int) -> None:
    shown = records[:limit]
    for i, record in enumerate(shown, 1):
        a = annotations.get(record.org_number)
        star = "*" if a.is_favorite else " "
        print(f"{i:>4}. {star} {record.company.name} ({record.company.org_number})")
        print(
            f"        {record.contact.city or '-'} | {status_label(record)} | "
            f"oms {format_sek_compact(record.financials.revenue)} | "
            f"res {format_sek_compact(record.financials.net_profit)} | "
            f"status {a.status.value}"
        )
        if a.comment:
            print(f"        \"{a.comment}\"")
    if len(records) > limit:
        print(f"\nShowing first {limit} of {len(records)} records.")


def main(argv=None) -> int:
    """Main entry point."""
    load_dotenv()
    args = parse_args(argv)
    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)
    settings = Settings.from_env()

    kv_store = KeyValueStore(settings.database_path)
    store = AnnotationStore(kv_store)
    if args.annotate:
        apply_annotation(args, store)

    loader = DatasetLoader(timeout=settings.timeout)
    result = loader.load(args.source)
    if not result.ok:
        print(STATUS_MESSAGES.get(result.status, result.status), file=sys.stderr)
        logger.error(result.error)
        return 1

    state = QueryState(
        search_term=args.search,
        filters=build_filters(args),
        sort_spec=SortSpec.parse(args.sort) if args.sort else default_sort_spec(settings.default_sort),
    )
    annotations = store.snapshot()
    visible = state.run(result.dataset.records, annotations)

    print(f"Records: {len(visible)} of {len(result.dataset)}")
    print_table(visible, annotations, args.limit or settings.display_limit)

    if args.export:
        path = Path(args.export)
        if path.suffix.lower() == ".json":
            export_to_json(visible, annotations, path)
        else:
            export_to_csv(visible, annotations, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
