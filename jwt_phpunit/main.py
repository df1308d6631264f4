"""
Main entry point for the jwt-phpunit tasks.

This script provides a command-line interface for running the PHPUnit tests of a
Symfony project. It handles parsing command-line arguments and running the
requested task.
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional, Type

from jwt_phpunit.config import ProjectConfiguration
from jwt_phpunit.Task.AllTestsTask import AllTestsTask
from jwt_phpunit.Task.BasePhpunitTask import BasePhpunitTask
from jwt_phpunit.Task.FunctionalTestsTask import FunctionalTestsTask
from jwt_phpunit.Task.UnitTestsTask import UnitTestsTask

TASKS: Dict[str, Type[BasePhpunitTask]] = {
    task.name: task for task in (UnitTestsTask, FunctionalTestsTask, AllTestsTask)
}

# Keys of the parsed namespace that are task arguments rather than options
TASK_ARGUMENTS = ("path",)
GLOBAL_OPTIONS = ("root_dir", "phpunit_binary", "php_binary", "debug", "task")


def build_parser() -> argparse.ArgumentParser:
    """Build the parser, with one sub-command per task."""
    parser = argparse.ArgumentParser(
        description="Run the PHPUnit unit and functional tests of a Symfony project"
    )

    parser.add_argument(
        "--root-dir", "-r",
        help="Project root directory (default: $SF_ROOT_DIR or the current directory)"
    )
    parser.add_argument(
        "--phpunit-binary",
        help="Path to the PHPUnit binary (default: $PHPUNIT_BINARY, vendor/bin/phpunit or phpunit)"
    )
    parser.add_argument(
        "--php-binary",
        help="Path to the PHP binary used for the bootstrap script (default: $PHP_BINARY or php)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log the commands being run"
    )

    subparsers = parser.add_subparsers(dest="task", metavar="TASK", required=True)
    for name, task_class in TASKS.items():
        subparser = subparsers.add_parser(
            name,
            help=task_class.brief_description,
            description=task_class.detailed_description,
        )
        task_class.configure(subparser)

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    # Parse command-line arguments
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    configuration = ProjectConfiguration(args.root_dir)
    task = TASKS[args.task](
        configuration,
        phpunit_binary=args.phpunit_binary,
        php_binary=args.php_binary,
    )

    values = vars(args)
    task_args = {key: values[key] for key in TASK_ARGUMENTS if key in values}
    task_opts = {
        key: val for key, val in values.items()
        if key not in TASK_ARGUMENTS and key not in GLOBAL_OPTIONS
    }

    return_code = task.execute(task_args, task_opts)
    return return_code or 0


if __name__ == "__main__":
    sys.exit(main())
