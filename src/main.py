"""
Quant Leap - Main application entry point.

Monitors an equity watchlist, scores each ticker with a five-indicator
composite signal and sends Telegram alerts for urgent news.

Usage:
    python src/main.py          Start the API server
    python src/main.py scan     Run one scan and print the report as JSON
"""

import asyncio
import json
import sys

import uvicorn
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from quantleap.config.logging import get_logger, setup_logging
from quantleap.config.settings import get_settings, validate_required_settings
from quantleap.services.scanner import ScanReport
from quantleap.webapi.dependencies import get_scan_orchestrator, get_watchlist_store


def initialize_application() -> None:
    """Configure logging from settings."""
    settings = get_settings()

    setup_logging(
        level=settings.log_level,
        format_type=settings.log_format,
        file_enabled=settings.log_file_enabled,
        file_path=settings.log_file_path,
        max_file_size=settings.log_max_file_size,
        backup_count=settings.log_backup_count,
    )

    logger = get_logger(__name__)
    logger.info(
        "Application initialized successfully",
        environment=settings.environment,
        debug=settings.debug,
        indicator_source=settings.scan_indicator_source,
    )


async def run_scan() -> ScanReport:
    """Run one scan over the active watchlist tab."""
    tickers = get_watchlist_store().active_tickers()
    return await get_scan_orchestrator().run(tickers)


def main() -> None:
    """Main application entry point."""
    initialize_application()

    logger = get_logger(__name__)
    settings = get_settings()

    missing = validate_required_settings(settings)
    if missing:
        logger.warning("Missing configuration", missing=missing)
        if settings.is_production():
            print(f"Required variables: {', '.join(missing)}")
            sys.exit(1)

    if len(sys.argv) > 1 and sys.argv[1] == "scan":
        logger.info("Running single scan")
        report = asyncio.run(run_scan())
        print(json.dumps(report.to_dict(), indent=2))
        return

    logger.info(
        "Starting API server",
        host=settings.endpoint_host,
        port=settings.endpoint_port,
    )

    try:
        uvicorn.run(
            "quantleap.webapi.app:app",
            host=settings.endpoint_host,
            port=settings.endpoint_port,
            reload=settings.api_reload,
            log_level=settings.api_log_level.lower(),
        )
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
        print("\nShutting down...")


if __name__ == "__main__":
    main()
