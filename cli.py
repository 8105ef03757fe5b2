#!/usr/bin/env python3
"""
Main CLI for the m² local real-estate index.
Usage: python cli.py COMMAND [args]
"""

import sys
import logging
import os
import argparse
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from analysis.calculations.market_position import classify, opportunities
from analysis.calculations.peer_groups import rank_groups
from analysis.calculations.trend import trend
from analysis.summaries import (
    chart_series,
    filter_listings,
    overall_summary,
    search_summary
)
from listings.backup import export_collection, restore_collection
from listings.records import find_listing, prepare_listing
from reports.atomic_writer import write_both_atomic, write_text_atomic
from reports.formatters import format_percentage, format_unit_value
from reports.markdown_template import render_report_markdown
from reports.report_contracts import build_report_content
from storage.loaders import (
    ListingNotFoundError,
    delete_listing,
    get_connection,
    insert_listing,
    list_listings,
    replace_listings,
    set_favorite
)

logger = logging.getLogger(__name__)

VISITOR = 'visitor'
ADMIN = 'admin'
ADMIN_COMMANDS = {'add', 'remove', 'favorite', 'report', 'import'}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description='m² - local real-estate index',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py summary
  python cli.py search "Ocean View"
  python cli.py --mode admin --user Ana add "Ocean View" Centro 80 450000
  python cli.py --mode admin report 3f2a...
        """
    )

    parser.add_argument('--db-path',
                        default=os.getenv('M2_DB_PATH', './data/m2.db'),
                        help='Path to SQLite database (default: ./data/m2.db)')
    parser.add_argument('--mode',
                        choices=[VISITOR, ADMIN],
                        default=os.getenv('M2_MODE', VISITOR),
                        help='visitor (read only) or admin')
    parser.add_argument('--user',
                        default=os.getenv('M2_USER', ''),
                        help='Responsible name for new listings and reports')

    sub = parser.add_subparsers(dest='command', required=True)

    add = sub.add_parser('add', help='Add a listing')
    add.add_argument('condominium')
    add.add_argument('neighborhood')
    add.add_argument('area')
    add.add_argument('price')

    listing = sub.add_parser('list', help='List listings matching condominium or neighborhood')
    listing.add_argument('query', nargs='?', default='')

    search = sub.add_parser('search', help='Summarize condominiums matching a query')
    search.add_argument('query')

    sub.add_parser('rank', help='Rank condominiums by average value per m²')
    sub.add_parser('opportunities', help='List listings priced >10%% below their condominium')
    sub.add_parser('summary', help='Overall summary')

    report = sub.add_parser('report', help='Write a listing report')
    report.add_argument('listing_id')
    report.add_argument('--output-dir', default='./data/reports')

    favorite = sub.add_parser('favorite', help='Toggle the favorite flag')
    favorite.add_argument('listing_id')

    remove = sub.add_parser('remove', help='Delete a listing')
    remove.add_argument('listing_id')

    export = sub.add_parser('export', help='Write a JSON backup')
    export.add_argument('path')

    restore = sub.add_parser('import', help='Replace all listings with a JSON backup')
    restore.add_argument('path')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    logging.basicConfig(
        level=os.getenv('M2_LOG_LEVEL', 'WARNING').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    args = build_parser().parse_args(argv)

    if args.command in ADMIN_COMMANDS and args.mode != ADMIN:
        print(f"ERROR: '{args.command}' is only available in admin mode (--mode admin)")
        return 1

    conn = get_connection(args.db_path)
    try:
        handler = COMMANDS[args.command]
        return handler(conn, args)
    finally:
        conn.close()


def cmd_add(conn, args) -> int:
    form = {
        'condominium': args.condominium,
        'neighborhood': args.neighborhood,
        'area': args.area,
        'price': args.price
    }
    result = prepare_listing(form, args.user)

    if result['status'] != 'completed':
        print(f"ERROR: {result['error_type']}: {result['error']}")
        return 1

    listing_id = insert_listing(conn, result['record'])
    print(f"Added {listing_id}: {form['condominium']} "
          f"({format_unit_value(result['record']['unit_value'])})")
    return 0


def cmd_list(conn, args) -> int:
    records = list_listings(conn)
    for record in filter_listings(records, args.query):
        position = classify(records, record)
        star = '*' if record.get('favorite') else ' '
        line = (f"{star} {record['id']}  {record['condominium']} - {record['neighborhood']}  "
                f"{format_unit_value(record.get('unit_value'))}  [{position['label']}]")
        group_trend = trend(records, record['condominium'])
        if group_trend is not None:
            line += f"  trend {format_percentage(group_trend)}"
        print(line)
    return 0


def cmd_search(conn, args) -> int:
    records = list_listings(conn)
    summary = search_summary(records, args.query)

    if summary is None:
        print(f"No condominium matches '{args.query}'")
        return 0

    print(summary['name'])
    print(f"Average: {format_unit_value(summary['average'])}")
    print(f"Listings: {summary['count']}")
    if summary['trend'] is not None:
        print(f"Trend: {format_percentage(summary['trend'])}")

    series = chart_series(records, args.query)
    if len(series) > 1:
        print("Appreciation:")
        for point in series:
            print(f"  {point['date']}  {format_unit_value(point['unit_value'])}")
    return 0


def cmd_rank(conn, args) -> int:
    for position, group in enumerate(rank_groups(list_listings(conn)), start=1):
        print(f"{position}. {group['name']}  {format_unit_value(group['average'])}  "
              f"({group['count']} listings)")
    return 0


def cmd_opportunities(conn, args) -> int:
    found = opportunities(list_listings(conn))
    if not found:
        print("No opportunities yet")
        return 0

    for record in found:
        print(f"{record['id']}  {record['condominium']} - {record['neighborhood']}  "
              f"{format_unit_value(record.get('unit_value'))}")
    return 0


def cmd_summary(conn, args) -> int:
    summary = overall_summary(list_listings(conn))
    if summary is None:
        print("No listings yet")
        return 0

    print(f"Overall average: {format_unit_value(summary['average'])}")
    print(f"Listings: {summary['count']}")
    print(f"Updated: {summary['most_recent_date'] or 'Not available'}")
    return 0


def cmd_report(conn, args) -> int:
    records = list_listings(conn)
    record = find_listing(records, args.listing_id)
    if record is None:
        print(f"ERROR: Listing {args.listing_id} not found")
        return 1

    content = build_report_content(record, records, responsible=args.user or None)
    markdown = render_report_markdown(content)

    output_dir = Path(args.output_dir)
    write_result = write_both_atomic(
        report_markdown=markdown,
        report_content=content,
        report_path=output_dir / f"{args.listing_id}.md",
        content_path=output_dir / f"{args.listing_id}.json"
    )

    if write_result['status'] != 'completed':
        print(f"ERROR: Write failed: {write_result['error']}")
        return 1

    print(f"Report: {write_result['report_path']}")
    if content['market']['percent_difference'] is not None:
        print(f"Difference to market: {content['market']['percent_difference_display']}")
    return 0


def cmd_favorite(conn, args) -> int:
    record = find_listing(list_listings(conn), args.listing_id)
    if record is None:
        print(f"ERROR: Listing {args.listing_id} not found")
        return 1

    set_favorite(conn, args.listing_id, not record['favorite'])
    print(f"{'Unmarked' if record['favorite'] else 'Marked'} {args.listing_id} as favorite")
    return 0


def cmd_remove(conn, args) -> int:
    try:
        delete_listing(conn, args.listing_id)
    except ListingNotFoundError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Removed {args.listing_id}")
    return 0


def cmd_export(conn, args) -> int:
    result = write_text_atomic(export_collection(list_listings(conn)), Path(args.path))
    if result['status'] != 'completed':
        print(f"ERROR: Backup failed: {result['error']}")
        return 1

    print(f"Backup written to {result['output_path']}")
    return 0


def cmd_import(conn, args) -> int:
    try:
        raw = Path(args.path).read_bytes()
    except OSError as e:
        print(f"ERROR: Cannot read {args.path}: {e}")
        return 1

    current = list_listings(conn)
    result = restore_collection(current, raw)
    if result['status'] != 'completed':
        print(f"ERROR: {result['error_type']}: {result['error']}")
        return 1

    count = replace_listings(conn, result['records'])
    logger.info(f"Restored {count} listings from {args.path}")
    print(f"Restored {count} listings")
    return 0


COMMANDS = {
    'add': cmd_add,
    'list': cmd_list,
    'search': cmd_search,
    'rank': cmd_rank,
    'opportunities': cmd_opportunities,
    'summary': cmd_summary,
    'report': cmd_report,
    'favorite': cmd_favorite,
    'remove': cmd_remove,
    'export': cmd_export,
    'import': cmd_import,
}


if __name__ == '__main__':
    sys.exit(main())
