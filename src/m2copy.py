"""m2copy - Copy Maven artifacts with version locking and srcaar fallback

    Returns:
        int: Exit code
"""
import json
import logging
import sys

from constants import ExitCodes
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import build_parser, parse_args
from cli_config import ConfigError, load_run_config
from copying.report import format_report, report_to_dict
from copying.transfer import ArtifactTransfer, TransferError
from registry.maven.client import MavenRepositoryClient
from resolution.pipeline import run_pipeline
from versioning.compare import MalformedVersionError

logger = logging.getLogger(__name__)


def export_json(report, path):
    """Exports the report to a JSON file.

    Args:
        report (Report): Report of the run.
        path (str): File path to export the JSON.

    Raises:
        OSError: If the file cannot be written.
    """
    with open(path, 'w', encoding='utf-8') as file:
        json.dump(report_to_dict(report), file, ensure_ascii=False, indent=4)
    logger.info("JSON file has been successfully exported at: %s", path)


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE, args.QUIET)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        config = load_run_config(args)
    except ConfigError as e:
        build_parser().print_help()
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value

    try:
        report = run_pipeline(
            config.packages,
            config.repositories,
            config.target_dir,
            config.lock_groups,
            MavenRepositoryClient(),
            ArtifactTransfer(),
        )
    except TransferError as e:
        logger.error("%s", e)
        return ExitCodes.CONNECTION_ERROR.value
    except MalformedVersionError as e:
        logger.error("Unable to compare versions: %s", e)
        return ExitCodes.FILE_ERROR.value

    if not args.QUIET:
        sys.stdout.write(format_report(report))

    if config.output:
        try:
            export_json(report, config.output)
        except OSError as e:
            logger.error("JSON file couldn't be written to disk: %s", e)
            return ExitCodes.FILE_ERROR.value

    if report.has_missing:
        logger.warning("%d requested artifacts were not found.", len(report.missing))
        if args.ERROR_ON_MISSING:
            return ExitCodes.EXIT_MISSING.value

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(event="function_exit", component="cli", action="main", outcome="success")
        )
    return ExitCodes.SUCCESS.value


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
