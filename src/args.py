"""Argument parsing functionality for m2copy."""

import argparse

HELP_EPILOG = """
Resolves the requested Maven artifacts (and their dependencies) against the
configured repositories, pins version locked package families to a single
version, copies the artifacts to the target directory and reports the files
copied, the packages that were not found and the packages whose version was
changed.

Each option may also be supplied through the environment:
  PACKAGES_TO_COPY  semicolon separated list of Maven artifact specifications,
                    e.g. "com.android.support:support-compat:26.0.1;
                    com.android.support:support-core-utils:26.0.1"
  MAVEN_REPOS       semicolon separated list of repository URIs or paths,
                    e.g. "http://some.repos.com;file:///some/other/path"
  TARGET_DIR        directory to copy artifacts to
  ANDROID_HOME      Android SDK root; its extras/*/m2repository directories
                    are searched after the user repositories

Semicolon separated lists need to be quoted in most shells.
"""


def build_parser():
    """Build the m2copy argument parser."""
    parser = argparse.ArgumentParser(
        prog="m2copy",
        description=(
            "m2copy - Copy Maven artifacts with version locking and srcaar fallback"
        ),
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=True,
    )

    parser.add_argument("-p", "--package",
                        dest="PACKAGES",
                        help="Maven artifact specification group:artifact[:version][@type]; "
                             "may be repeated or semicolon separated.",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-l", "--load_list",
                        dest="LIST_FROM_FILE",
                        help="Load artifact specifications from a file, one per line.",
                        action="store", type=str)
    parser.add_argument("-r", "--maven-repo",
                        dest="MAVEN_REPOS",
                        help="Maven repository URI or path searched before the defaults; "
                             "may be repeated or semicolon separated.",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-t", "--target-dir",
                        dest="TARGET_DIR",
                        help="Directory to copy artifacts to.",
                        action="store", type=str)
    parser.add_argument("--android-home",
                        dest="ANDROID_HOME",
                        help="Android SDK install location.",
                        action="store", type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to a YAML configuration file.",
                        action="store", type=str)
    parser.add_argument("--no-default-repos",
                        dest="NO_DEFAULT_REPOS",
                        help="Do not search Google Maven, Maven local, JCenter and Maven Central.",
                        action="store_true")
    parser.add_argument("--no-lock",
                        dest="NO_LOCK",
                        help="Disable version locking.",
                        action="store_true")
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Also write the report as JSON to this path.",
                        action="store", type=str)
    parser.add_argument("--error-on-missing",
                        dest="ERROR_ON_MISSING",
                        help="Exit with a non-zero status code if any artifact is missing.",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='WARNING')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output the report to the console.",
                        action="store_true")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
