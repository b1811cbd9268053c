"""Command-line entry point serving the toolpath preview over HTTP and WebSocket."""

import argparse
import logging
import sys

import uvicorn

from gcad_preview.config import get_config_summary, load_settings
from gcad_preview.exceptions import ConfigurationError
from gcad_preview.extension import activate
from gcad_preview.logger import ConsoleLogger, Logger
from gcad_preview.web_server import GcadPreviewWebServer, WebHost


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="gcad preview - live toolpath preview server")
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host address to bind to (default: 127.0.0.1, or GCAD_PREVIEW_WEB_HOST env var)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port number to listen on (default: 8020, or GCAD_PREVIEW_WEB_PORT env var)",
    )
    parser.add_argument(
        "--extension-root",
        type=str,
        default=None,
        help="Directory containing dist/app.js and dist/app.css (default: current directory)",
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=None,
        help="Quiet period after the last edit before the preview refreshes (default: 2000)",
    )
    parser.add_argument(
        "--no-revive",
        action="store_true",
        help="Do not restore the preview when the browser page is reloaded",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging verbosity (default: INFO, or GCAD_PREVIEW_LOG_LEVEL env var)",
    )
    args = parser.parse_args(argv)

    bootstrap_logger = ConsoleLogger()
    try:
        settings = load_settings(
            logger=bootstrap_logger,
            web_host=args.host,
            web_port=args.port,
            extension_root=args.extension_root,
            debounce_ms=args.debounce_ms,
            log_level=args.log_level.upper() if args.log_level else None,
        )
    except ConfigurationError as e:
        bootstrap_logger.error("FATAL: Invalid configuration", error=str(e), **e.details)
        return 1

    logger: Logger = ConsoleLogger(level=getattr(logging, settings.log_level))
    logger.info("Configuration loaded", **get_config_summary(settings))

    host = WebHost(
        origin=f"http://{settings.web_host}:{settings.web_port}",
        extension_root=settings.extension_root,
        logger=logger,
        supports_revival=not args.no_revive,
    )
    controller = activate(host, settings=settings, logger=logger)
    server = GcadPreviewWebServer(host, logger=logger)

    try:
        logger.info("Starting web server", host=settings.web_host, port=settings.web_port)
        uvicorn.run(server.app, host=settings.web_host, port=settings.web_port)
        logger.info("Web server shutdown complete")
    except KeyboardInterrupt:
        logger.info("Web server stopped by user")
    except Exception as e:
        logger.error("Failed to start web server", error=str(e), error_type=type(e).__name__)
        return 1
    finally:
        controller.deactivate()
        host.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
