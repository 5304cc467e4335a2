import argparse
import sys
from loguru import logger
from aiohttp import web

from directory_etl.annotate import annotate_simplified_categories
from directory_etl.config import (
    BUSINESS_STATUS,
    GEO_FILTER,
    INPUT_CSV,
    LOG_LEVEL,
    RAW_INPUT_CSV,
    REJECT_UNCLASSIFIED,
    WEBHOOK_HOST,
    WEBHOOK_PORT,
)
from directory_etl.errors import DirectoryEtlError
from directory_etl.pipeline import PipelineOptions, run_pipeline
from directory_etl.tables import OutputPaths
from directory_etl.webhook import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Amaravati Chamber business directory tools")
    sub = parser.add_subparsers(dest="command", required=True)

    annotate = sub.add_parser("annotate", help="Add simplified_category slugs to a raw registry export")
    annotate.add_argument("--input", default=RAW_INPUT_CSV)
    annotate.add_argument("--output", default=INPUT_CSV)

    build = sub.add_parser("build", help="Build businesses/categories/mappings CSVs")
    build.add_argument("--input", default=INPUT_CSV)
    build.add_argument("--output-dir", default=".")
    build.add_argument("--status", default=BUSINESS_STATUS, help="Status literal written on every business")
    build.add_argument("--no-geo-filter", dest="geo_filter", action="store_false", default=GEO_FILTER)
    build.add_argument("--reject-unclassified", action="store_true", default=REJECT_UNCLASSIFIED)

    serve = sub.add_parser("serve", help="Run the Ghost webhook forwarder")
    serve.add_argument("--host", default=WEBHOOK_HOST)
    serve.add_argument("--port", type=int, default=WEBHOOK_PORT)
    return parser


def main(argv=None) -> int:
    """
    Entry point for the directory tools.

    - `annotate` writes the slug-annotated copy of the registry export.
    - `build` runs the directory pipeline and writes all outputs at once.
    - `serve` starts the Ghost → Supabase webhook.
    """
    args = build_parser().parse_args(argv)

    # Initialize logs
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>")

    try:
        if args.command == "annotate":
            annotate_simplified_categories(args.input, args.output)
            logger.info("Updated CSV file created successfully.")
        elif args.command == "build":
            options = PipelineOptions(
                geo_filter=args.geo_filter,
                business_status=args.status,
                reject_unclassified=args.reject_unclassified,
            )
            run_pipeline(args.input, OutputPaths.in_directory(args.output_dir), options)
            logger.info("CSV files generated successfully.")
        elif args.command == "serve":
            web.run_app(create_app(), host=args.host, port=args.port)
    except DirectoryEtlError as e:
        logger.error(f"❌ {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
