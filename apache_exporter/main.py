"""Main application entry point for the Apache exporter."""

import argparse
import logging
import sys

import uvicorn

from .config.loader import ConfigLoader
from .config.models import ExporterConfig
from .server import create_app
from .utils.logger import setup_logger
from .version import PROGRAM, version_string


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apache-exporter",
        description='Prometheus exporter for Apache mod_status',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Expose metrics for the local server on :9117
  apache-exporter

  # Scrape a remote HTTPS server with a self-signed certificate
  apache-exporter --scrape-uri https://web01/server-status?auto --insecure

  # Use a config file
  apache-exporter --config /etc/apache_exporter.yaml
        """
    )

    parser.add_argument(
        '--config',
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--telemetry.address',
        dest='listen_address',
        help='Address on which to expose metrics (default: :9117)'
    )

    parser.add_argument(
        '--telemetry.endpoint',
        dest='metrics_endpoint',
        help='Path under which to expose metrics (default: /metrics)'
    )

    parser.add_argument(
        '--scrape-uri',
        dest='default_target',
        help='Status page scraped when a request names no target'
    )

    parser.add_argument(
        '--insecure',
        action='store_true',
        default=None,
        help='Ignore server certificate if using https'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO or APACHE_EXPORTER_LOG_LEVEL env var)'
    )

    parser.add_argument(
        '--version',
        action='store_true',
        help='Print version information'
    )

    return parser


def load_config(args: argparse.Namespace, logger: logging.Logger) -> ExporterConfig:
    """
    Load and validate configuration.

    Raises:
        SystemExit: If configuration is invalid
    """
    overrides = {
        "listen_address": args.listen_address,
        "metrics_endpoint": args.metrics_endpoint,
        "default_target": args.default_target,
        "insecure": args.insecure,
        "log_level": args.log_level,
    }
    try:
        return ConfigLoader.resolve(args.config, overrides)

    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)

    except Exception as e:
        logger.error(f"Failed to load configuration: {e}", exc_info=True)
        sys.exit(1)


def main(argv=None):
    """
    CLI entry point.

    Parses command-line arguments and serves metrics until interrupted.
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print(version_string())
        sys.exit(0)

    logger = setup_logger(PROGRAM, args.log_level or "INFO")
    config = load_config(args, logger)
    logger.setLevel(config.log_level)

    logger.info(f"Starting {version_string()}")
    logger.info(f"Starting Server: {config.listen_address}")
    if config.insecure:
        logger.warning("TLS certificate verification is disabled")

    app = create_app(config, logger)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == '__main__':
    main()
