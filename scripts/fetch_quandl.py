"""
Fetch Quandl data or catalog metadata and write it as CSV.

Run from project root:
    python -m scripts.fetch_quandl databases --max-pages 2
    python scripts/fetch_quandl.py data WIKI AAPL --start 2014-01-06 --end 2014-02-04 -o aapl.csv

Needs QUANDL_API_KEY in the environment (or .env) unless --api-key is given.
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from quandl_app.ingestion.quandl import QuandlException
from quandl_app.utils.logger import logger
from quandl_client.client import QuandlClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch Quandl data as CSV")
    parser.add_argument("--api-key", default=None)
    parser.add_argument("--base-url", default=None)
    parser.add_argument("-o", "--output", default=None, help="CSV path (default: print)")
    sub = parser.add_subparsers(dest="command", required=True)

    databases = sub.add_parser("databases", help="list all databases")
    databases.add_argument("--max-pages", type=int, default=None)
    databases.add_argument("--page-size", type=int, default=None)

    datasets = sub.add_parser("datasets", help="list dataset codes in a database")
    datasets.add_argument("database")

    metadata = sub.add_parser("metadata", help="metadata for one dataset")
    metadata.add_argument("database")
    metadata.add_argument("dataset")

    data = sub.add_parser("data", help="time series for one dataset")
    data.add_argument("database")
    data.add_argument("dataset")
    data.add_argument("--start", required=True)
    data.add_argument("--end", required=True)
    data.add_argument("--limit", type=int, default=None)
    data.add_argument("--rows", type=int, default=None)
    data.add_argument("--column-index", type=int, default=None)
    data.add_argument("--desc", action="store_true", help="newest rows first")
    return parser


def fetch(client: QuandlClient, args: argparse.Namespace):
    if args.command == "databases":
        return client.get_database_listing(args.max_pages, args.page_size)
    if args.command == "datasets":
        return client.get_dataset_listing(args.database)
    if args.command == "metadata":
        return client.get_metadata(args.database, args.dataset)
    return client.get_daily_data(
        args.database,
        args.dataset,
        args.start,
        args.end,
        limit=args.limit,
        rows=args.rows,
        column_index=args.column_index,
        ascending=not args.desc,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        client = QuandlClient(api_key=args.api_key, base_url=args.base_url)
        df = fetch(client, args)
    except QuandlException as e:
        logger.error("FAIL: {}", e)
        sys.exit(1)

    if args.output:
        df.to_csv(args.output)
        logger.info("Wrote {} rows to {}", len(df), args.output)
    else:
        print(df.to_string())


if __name__ == "__main__":
    main()
