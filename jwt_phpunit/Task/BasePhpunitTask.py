"""
Base functionality for PHPUnit-related tasks.

A task collects the test files of one category, makes sure the application
context exists and hands the resulting suite to PHPUnit.
"""

import argparse
import os
from typing import Any, Dict, List, Optional, Union

from jwt_phpunit.config import (
    DEFAULT_APPLICATION,
    ApplicationConfiguration,
    ProjectConfiguration,
)
from jwt_phpunit.Context.Context import ApplicationContext, create_context
from jwt_phpunit.ErrorFormatter.Formatter import PhpUnitErrorFormatter
from jwt_phpunit.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    PhpUnitRunnerError,
)
from jwt_phpunit.PhpUnitRunner.Harness import Harness
from jwt_phpunit.PhpUnitRunner.Runner import PhpUnitRunner, TestSuite
from jwt_phpunit.PhpUnitRunner.TraceFilter import TraceFilter

TEST_FILE_EXTENSION = ".php"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


class BasePhpunitTask:
    """Base class for the phpunit:* tasks."""

    namespace = "phpunit"
    name = ""
    brief_description = ""
    detailed_description = ""

    # 'unit', 'functional' or '' for both
    test_type = ""

    # Options passed on to PHPUnit, with the defaults that also fix their types
    ALLOWED_OPTIONS: Dict[str, Any] = {
        "application": DEFAULT_APPLICATION,
        "colors": True,
        "filter": None,
        "verbose": False,
    }

    def __init__(self,
                 configuration: Union[ProjectConfiguration, ApplicationConfiguration],
                 runner: Optional[PhpUnitRunner] = None,
                 context: Optional[ApplicationContext] = None,
                 phpunit_binary: Optional[str] = None,
                 php_binary: Optional[str] = None):
        """
        Initialize the task.

        Args:
            configuration: Project or application configuration
            runner: Runner used to execute the suite (defaults to a PhpUnitRunner
                for the project root)
            context: An already created application context, if there is one
            phpunit_binary: Path to the PHPUnit binary
            php_binary: Path to the PHP binary used for the bootstrap script
        """
        self.configuration = configuration
        self.context = context
        self.php_binary = php_binary
        self.runner = runner or PhpUnitRunner(self.project.root_dir, phpunit_binary)

    @property
    def project(self) -> ProjectConfiguration:
        if isinstance(self.configuration, ApplicationConfiguration):
            return self.configuration.project
        return self.configuration

    @classmethod
    def configure(cls, parser: argparse.ArgumentParser) -> None:
        """Register the task's options on its sub-command parser."""
        phpunit_group = parser.add_argument_group("PHPUnit Options")
        phpunit_group.add_argument(
            "--application", "-a",
            help=f"Run tests from the specified application (default: {DEFAULT_APPLICATION})"
        )
        phpunit_group.add_argument(
            "--filter", "-f",
            help="Regex used to filter tests; only tests matching the filter will be run"
        )
        phpunit_group.add_argument(
            "--verbose", "-v",
            nargs="?",
            const="1",
            help="If set to 1, PHPUnit will output additional information (e.g. test names)"
        )
        phpunit_group.add_argument(
            "--colors",
            nargs="?",
            const="1",
            help="Set to 0 to disable colored output (default: 1)"
        )

    def execute(self, args: Dict[str, Any], opts: Dict[str, Any]) -> Optional[int]:
        return self._run_tests(self.test_type, self._validate_phpunit_input(args, opts))

    def log_section(self, section: str, message: str) -> None:
        print(f">> {section:<9} {message}")

    def _run_tests(self,
                   test_type: str = "",
                   options: Optional[Dict[str, Any]] = None,
                   files: Optional[List[str]] = None) -> Optional[int]:
        """
        Runs all tests of a given type.

        Args:
            test_type: 'unit', 'functional' or '' for all tests
            options: Validated options; 'application' selects the context
            files: Explicit test files, instead of every file of test_type

        Returns:
            PHPUnit's return code, or None if PHPUnit itself failed
        """
        options = dict(options or {})
        application = options.pop("application", DEFAULT_APPLICATION)
        context = self._ensure_context(application)

        bootstrap = self.project.plugin_bootstrap_file
        if not os.path.isfile(bootstrap):
            raise ConfigurationError(f"Plugin bootstrap file not found: {bootstrap}")

        trace_filter = self._build_trace_filter()

        suite = TestSuite(self._suite_name(test_type))
        suite.add_test_files(self._find_test_files(test_type) if files is None else files)

        try:
            output, return_code, xml_content = self.runner.do_run(
                suite,
                options,
                bootstrap=bootstrap,
                trace_filter=trace_filter,
                env=context.get_environment(),
            )
        except PhpUnitRunnerError as e:
            self.log_section("phpunit", str(e))
            return None

        print(output)

        if return_code != 0:
            formatter = PhpUnitErrorFormatter(trace_filter)
            report = formatter.format_report(formatter.parse_phpunit_xml(xml_content))
            if report:
                print(report)

        return return_code

    def _ensure_context(self, application: str) -> ApplicationContext:
        """Create the application context on first use, running the project bootstrap."""
        if self.context is None:
            init = self.project.bootstrap_file
            if os.path.isfile(init):
                Harness(init, self.php_binary).execute()

            self.context = create_context(self.configuration, application)

        return self.context

    def _build_trace_filter(self) -> TraceFilter:
        """Infrastructure directories that should not show up in failure backtraces."""
        trace_filter = TraceFilter()
        trace_filter.add_directory(os.path.join(self.project.plugin_dir, "lib", "test"))
        trace_filter.add_directory(os.path.join(self.project.plugin_dir, "lib", "task"))
        trace_filter.add_directory(self.project.symfony_lib_dir)
        trace_filter.add_file(os.path.join(self.project.root_dir, "symfony"))
        return trace_filter

    @staticmethod
    def _suite_name(test_type: str) -> str:
        return f"{test_type[:1].upper()}{test_type[1:]} Tests" if test_type else "All Tests"

    def _find_test_files(self, test_type: str = "") -> List[str]:
        """
        Generates a list of test files.

        Args:
            test_type: 'unit', 'functional' or '' for all tests (unit tests first)

        Returns:
            Paths of the test files, in a stable order
        """
        if test_type == "":
            return self._find_test_files("unit") + self._find_test_files("functional")

        return self._find_files(os.path.join(self.project.test_dir, test_type))

    @staticmethod
    def _find_files(base: str) -> List[str]:
        """Recursively list test files below base, sorted per directory."""
        if os.path.isfile(base):
            return [base] if base.endswith(TEST_FILE_EXTENSION) else []

        found = []
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames.sort()
            for filename in sorted(filenames):
                if filename.endswith(TEST_FILE_EXTENSION):
                    found.append(os.path.join(dirpath, filename))

        return found

    def _validate_input(self,
                        args: Dict[str, Any],
                        opts: Dict[str, Any],
                        defaults: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Compiles arguments and options into a single dict.

        Unset (None) values are dropped; in a conflict, options override arguments.
        """
        params = dict(defaults or {})
        params.update({key: val for key, val in args.items() if val is not None})
        params.update({key: val for key, val in opts.items() if val is not None})
        return params

    def _validate_phpunit_input(self, args: Dict[str, Any], opts: Dict[str, Any]) -> Dict[str, Any]:
        """
        Extracts PHPUnit-specific arguments/options.

        Each value is converted to the type of its default.

        Raises:
            InvalidArgumentError: if a value can't be converted
        """
        params = {
            key: val
            for key, val in self._validate_input(args, opts, self.ALLOWED_OPTIONS).items()
            if key in self.ALLOWED_OPTIONS
        }

        for key, val in params.items():
            default = self.ALLOWED_OPTIONS[key]
            if default is not None:
                params[key] = self._coerce(key, val, default)

        return params

    @staticmethod
    def _coerce(key: str, value: Any, default: Any) -> Any:
        if isinstance(default, bool):
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in TRUE_VALUES:
                return True
            if text in FALSE_VALUES:
                return False
            raise InvalidArgumentError(
                f'Invalid value "{value}" for option "{key}"; expected 1 or 0.'
            )

        if isinstance(default, str) and not isinstance(value, str):
            raise InvalidArgumentError(
                f'Invalid {type(value).__name__} for option "{key}"; string expected.'
            )

        return value
