"""
Command Line Interface for batch WebP conversion and upload.
"""

import argparse
import configparser
import logging
import os
import sys
from typing import List, Optional

import urllib3

from .batch_config import BatchConfig
from .errors import ConfigError
from .item_pipeline import ItemPipeline
from .orchestrator import Orchestrator
from .result_reporter import ResultReporter
from .s3_client import S3Client
from .scanner import Scanner
from .uploader import KeyBuilder, Uploader
from .webp_converter import WebPConverter


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('webpbatch')


def load_config(args: argparse.Namespace) -> BatchConfig:
    """
    Build settings from the INI file, the environment and CLI overrides.

    Later sources win: INI < environment < command line.
    """
    config_path = getattr(args, 'config', None)
    if config_path:
        config = BatchConfig.from_ini(config_path)
    elif os.path.exists('config.ini'):
        config = BatchConfig.from_ini('config.ini')
    else:
        config = BatchConfig()

    config = BatchConfig.from_env(config)

    return config.merge(
        source_path=getattr(args, 'source', None),
        bucket=getattr(args, 'bucket', None),
        region=getattr(args, 'region', None),
        endpoint=getattr(args, 'endpoint', None),
        access_key=getattr(args, 'access_key', None),
        secret_key=getattr(args, 'secret_key', None),
        workers=getattr(args, 'workers', None),
        quality=getattr(args, 'quality', None),
        method=getattr(args, 'method', None),
        key_prefix=getattr(args, 'key_prefix', None),
        lossless=getattr(args, 'lossless', None) or None,
        preserve_paths=getattr(args, 'preserve_paths', None) or None,
        delete_converted=getattr(args, 'delete_converted', None) or None,
        verify_ssl=False if getattr(args, 'no_verify_ssl', False) else None,
    )


def _load_valid_config(
    args: argparse.Namespace,
    logger: logging.Logger,
    required=BatchConfig.REQUIRED
) -> BatchConfig:
    """Load settings and fail with ConfigError if they are unusable."""
    try:
        config = load_config(args)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {e.filename}") from e
    except (ValueError, OSError, configparser.Error) as e:
        raise ConfigError(f"Could not read configuration: {e}") from e

    errors = config.validate(required)
    if errors:
        for error in errors:
            logger.error(error)
        raise ConfigError("Configuration invalid", errors)

    if not os.path.isdir(config.source_path):
        raise ConfigError(f"Source path is not a directory: {config.source_path}")

    return config


def build_pipeline(
    config: BatchConfig,
    storage_client,
    logger: logging.Logger
) -> ItemPipeline:
    """Assemble converter, uploader and key builder from settings."""
    converter = WebPConverter(
        quality=config.quality,
        lossless=config.lossless,
        method=config.method,
        logger=logger,
    )
    uploader = Uploader(storage_client, logger=logger)
    key_builder = KeyBuilder(prefix=config.key_prefix, preserve_paths=config.preserve_paths)
    return ItemPipeline(
        converter,
        uploader,
        key_builder=key_builder,
        delete_converted=config.delete_converted,
        logger=logger,
    )


def cmd_run(args: argparse.Namespace) -> int:
    """Execute run command: scan, convert and upload."""
    logger = setup_logging(args.verbose)

    if args.dry_run:
        required = ('source_path',)
    else:
        required = BatchConfig.REQUIRED

    try:
        config = _load_valid_config(args, logger, required=required)
    except ConfigError as e:
        if not e.problems:
            logger.error(str(e))
        return 1

    logger.info(f"Source: {config.source_path}")
    if config.bucket:
        logger.info(f"Bucket: {config.bucket}")
    if config.endpoint:
        logger.info(f"Endpoint: {config.endpoint}")
    logger.info(f"Workers: {config.workers}")
    logger.debug(f"Settings: {config.describe()}")

    scanner = Scanner(logger=logger)
    reporter = ResultReporter(quiet=args.quiet)

    if args.dry_run:
        key_builder = KeyBuilder(prefix=config.key_prefix, preserve_paths=config.preserve_paths)
        reporter.report_plan(scanner.scan(config.source_path), key_builder)
        return 0

    if not config.verify_ssl:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    try:
        client = S3Client(config, logger)
        if not args.skip_bucket_check:
            client.check_bucket()
    except ConfigError as e:
        logger.error(str(e))
        return 1

    pipeline = build_pipeline(config, client, logger)
    orchestrator = Orchestrator(pipeline, max_workers=config.workers, logger=logger)

    summary = orchestrator.run(scanner.scan(config.source_path), on_outcome=reporter)

    if scanner.skipped_entries:
        logger.info(f"Skipped {scanner.skipped_entries} unreadable entries")

    reporter.report_summary(summary)

    if summary.interrupted:
        return 130
    return 0 if not summary.has_failures else 1


def cmd_scan(args: argparse.Namespace) -> int:
    """Execute scan command: list the images a run would process."""
    logger = setup_logging(args.verbose)

    try:
        config = _load_valid_config(args, logger, required=('source_path',))
    except ConfigError as e:
        if not e.problems:
            logger.error(str(e))
        return 1

    scanner = Scanner(logger=logger)
    count = 0
    for item in scanner.scan(config.source_path):
        count += 1
        if not args.quiet:
            print(f"  {item.relative_path}")

    print(f"Found {count:,} images under {config.source_path}")
    if scanner.skipped_entries:
        logger.info(f"Skipped {scanner.skipped_entries} unreadable entries")
    return 0


def add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Add configuration file and source arguments to a parser."""
    parser.add_argument('-c', '--config', metavar='PATH',
                        help='INI configuration file (default: ./config.ini if present)')
    parser.add_argument('--source', metavar='PATH', help='Override source_path')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only print failures and the summary')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')


def add_storage_arguments(parser: argparse.ArgumentParser) -> None:
    """Add storage configuration arguments to a parser."""
    s3_group = parser.add_argument_group('S3 Storage')
    s3_group.add_argument('--bucket', help='Override bucket')
    s3_group.add_argument('--region', help='Override region')
    s3_group.add_argument('--endpoint', help='Custom S3 endpoint URL (MinIO, R2, ...)')
    s3_group.add_argument('--access-key', help='Override access_key')
    s3_group.add_argument('--secret-key', help='Override secret_key')
    s3_group.add_argument('--no-verify-ssl', action='store_true', help='Do not verify TLS certificates')
    s3_group.add_argument('--skip-bucket-check', action='store_true',
                          help='Do not check the bucket is reachable before starting')


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='webpbatch',
        description='Convert a directory tree of images to WebP and upload them to S3',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  webpbatch scan --source ./images
  webpbatch run -c config.ini
  webpbatch run -c config.ini --workers 8 --preserve-paths

Settings are read from config.ini, then WEBPBATCH_* / AWS_* environment
variables, then command line flags.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Run command
    run_parser = subparsers.add_parser('run', help='Convert images to WebP and upload them')
    add_source_arguments(run_parser)
    run_parser.add_argument('-w', '--workers', type=int, metavar='N',
                            help='Maximum images processed at once')
    run_parser.add_argument('--quality', type=int, help='WebP quality 0-100 (default: 80)')
    run_parser.add_argument('--lossless', action='store_true', help='Use lossless WebP')
    run_parser.add_argument('--method', type=int, help='WebP encoder effort 0-6 (default: 4)')
    run_parser.add_argument('--key-prefix', help='Prefix for upload keys')
    run_parser.add_argument('--preserve-paths', action='store_true',
                            help='Use the path relative to the source as the key instead of the file name')
    run_parser.add_argument('--delete-converted', action='store_true',
                            help='Delete local .webp files after a successful upload')
    run_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be uploaded')
    add_storage_arguments(run_parser)

    # Scan command
    scan_parser = subparsers.add_parser('scan', help='List the images a run would process')
    add_source_arguments(scan_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'run':
        return cmd_run(parsed_args)
    elif parsed_args.command == 'scan':
        return cmd_scan(parsed_args)

    return 1


if __name__ == '__main__':
    sys.exit(main())
