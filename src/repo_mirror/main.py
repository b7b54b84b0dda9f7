#!/usr/bin/env python3

import sys
import os
import argparse
import logging
from typing import List, Optional

from .config.manager import ConfigManager, MirrorConfig, read_repo_list, DEFAULT_LOG_FILE
from .storage.manager import MirrorStore
from .sync.engines import SyncEngine, redact_url

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

EXIT_OK = 0
EXIT_REPO_FAILURES = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

def setup_logging(log_file: str = DEFAULT_LOG_FILE, verbose: bool = False):
    """Configure console and log file output for the application"""
    log_dir = os.path.dirname(os.path.abspath(log_file))
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Console never shows DEBUG, the log file does when verbose
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    file_handler.setFormatter(formatter)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=[console_handler, file_handler],
        force=True
    )

def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser"""
    parser = argparse.ArgumentParser(
        prog="repo-mirror",
        description="Bulk git repository mirror",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s repos.txt git@gitlab.example.com:mirrors
  %(prog)s repos.txt https://git.example.com/mirrors --incremental
  %(prog)s repos.txt https://git.example.com/mirrors --dry-run --verbose
  %(prog)s repos.txt https://git.example.com/mirrors -c mirror.yaml --strict
        """
    )

    parser.add_argument(
        "repo_list",
        help="Text file with one source repository URL or path per line"
    )

    parser.add_argument(
        "target_group",
        help="Base URL or path prefix of the destination group"
    )

    # Defaults of None let values from --config show through
    parser.add_argument(
        "--config", "-c",
        help="Path to a YAML configuration file",
        default=None
    )

    parser.add_argument(
        "--temp-root", "-t",
        help="Working directory for local mirrors",
        default=None
    )

    parser.add_argument(
        "--retry-count", "-r",
        type=int,
        default=None,
        help="Extra clone attempts after the first one fails (default: 2)"
    )

    parser.add_argument(
        "--retry-delay",
        type=float,
        default=None,
        help="Seconds to wait between clone attempts"
    )

    parser.add_argument(
        "--timeout",
        dest="operation_timeout",
        type=float,
        default=None,
        help="Seconds before a single git command is aborted"
    )

    parser.add_argument(
        "--incremental", "-i",
        action="store_true",
        default=None,
        help="Keep local mirrors between runs and only fetch changes"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=None,
        help="Write git command output to the log file"
    )

    parser.add_argument(
        "--dry-run", "-n",
        action="store_true",
        default=None,
        help="Log what would be done without touching disk or network"
    )

    parser.add_argument(
        "--log-file", "-l",
        default=None,
        help=f"Log file, appended to (default: {DEFAULT_LOG_FILE})"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Exit with status 1 if any repository failed"
    )

    return parser

def build_config(args) -> MirrorConfig:
    config_manager = ConfigManager(args.config)
    return config_manager.load_config({
        'repo_list': args.repo_list,
        'target_group': args.target_group,
        'temp_root': args.temp_root,
        'retry_count': args.retry_count,
        'retry_delay': args.retry_delay,
        'operation_timeout': args.operation_timeout,
        'incremental': args.incremental,
        'verbose': args.verbose,
        'dry_run': args.dry_run,
        'log_file': args.log_file,
        'strict': args.strict,
    })

def run(config: MirrorConfig) -> int:
    """Mirror every repository in the list, returns the exit status"""
    if not os.path.isfile(config.repo_list):
        logger.error(f"Repository list not found: {config.repo_list}")
        return EXIT_CONFIG_ERROR

    try:
        sources = read_repo_list(config.repo_list)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read repository list {config.repo_list}: {e}")
        return EXIT_CONFIG_ERROR

    logger.info(f"Loaded {len(sources)} repositories from {config.repo_list}")
    logger.info(f"Target group: {redact_url(config.target_group)}")
    logger.info(f"Mode: {'incremental' if config.incremental else 'full clone'}"
                f"{' (dry-run)' if config.dry_run else ''}")

    store = MirrorStore(config)
    try:
        store.ensure_root()
    except OSError as e:
        logger.error(f"Cannot create temp root {config.temp_root}: {e}")
        return EXIT_CONFIG_ERROR

    space = store.check_disk_space(config.min_free_gb)
    if not space['sufficient_space']:
        logger.warning(f"Only {space['available_gb']:.1f} GB free in {space['path']}, "
                       f"{config.min_free_gb} GB recommended")

    engine = SyncEngine(config, store)
    report = engine.run(sources)

    succeeded, failed = report.summary()
    logger.info(f"Summary: succeeded={succeeded}, failed={failed}")

    if config.strict and failed > 0:
        return EXIT_REPO_FAILURES
    return EXIT_OK

def main(argv: Optional[List[str]] = None) -> int:
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(config.log_file, config.verbose)

    try:
        return run(config)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED

if __name__ == "__main__":
    sys.exit(main())
