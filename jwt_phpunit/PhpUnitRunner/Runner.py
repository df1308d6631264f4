"""
PHPUnit Runner Module

This module provides functionality to run a suite of PHPUnit test files and capture the output.
The suite is written to a temporary PHPUnit XML configuration, since the PHPUnit
command line only accepts a single test path.
"""

import logging
import os
import subprocess
import tempfile
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jwt_phpunit.exceptions import PhpUnitRunnerError
from jwt_phpunit.PhpUnitRunner.TraceFilter import TraceFilter

logger = logging.getLogger("jwt_phpunit")

# PHPUnit exits with this code when PHPUnit itself fails, and when a test errors
EXCEPTION_EXIT = 2


def has_testcases(xml_content: Optional[str]) -> bool:
    """Whether a JUnit log records at least one executed testcase."""
    if not xml_content:
        return False

    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError:
        return False

    return next(root.iter("testcase"), None) is not None


@dataclass
class TestSuite:
    """A named list of PHPUnit test files."""
    __test__ = False

    name: str
    files: List[str] = field(default_factory=list)

    def add_test_files(self, files: Iterable[str]) -> "TestSuite":
        """Append test files, skipping any that are already in the suite."""
        for path in files:
            if path not in self.files:
                self.files.append(path)
        return self

    def to_xml(self) -> str:
        """Render the suite as a PHPUnit XML configuration."""
        root = ET.Element("phpunit")
        testsuites = ET.SubElement(root, "testsuites")
        testsuite = ET.SubElement(testsuites, "testsuite", name=self.name)
        for path in self.files:
            ET.SubElement(testsuite, "file").text = path

        return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(root, encoding="unicode")


class PhpUnitRunner:
    """Runs PHPUnit test suites and captures the output."""

    def __init__(self, project_path: str, phpunit_binary: Optional[str] = None):
        """
        Initialize the PHPUnit runner.

        Args:
            project_path: Path to the PHP project
            phpunit_binary: Path to the PHPUnit binary (defaults to $PHPUNIT_BINARY,
                vendor/bin/phpunit or global phpunit)
        """
        self.project_path = os.path.abspath(project_path)
        if not os.path.isdir(self.project_path):
            raise ValueError(f"Project path does not exist: {self.project_path}")

        self.phpunit_binary = phpunit_binary or self._detect_binary()

    def _detect_binary(self) -> str:
        """$PHPUNIT_BINARY, then the project's Composer install, then whatever is on PATH."""
        configured = os.environ.get("PHPUNIT_BINARY")
        if configured:
            return configured

        vendor_binary = os.path.join(self.project_path, "vendor", "bin", "phpunit")
        return vendor_binary if os.path.isfile(vendor_binary) else "phpunit"

    def build_command(self,
                      config_path: str,
                      options: Dict[str, Any],
                      bootstrap: Optional[str] = None,
                      junit_path: Optional[str] = None) -> List[str]:
        """
        Build the PHPUnit command line.

        Args:
            config_path: Path to the generated XML configuration
            options: Runner options ('filter', 'verbose', 'colors')
            bootstrap: PHP file to load before the tests
            junit_path: Path to save JUnit XML output

        Returns:
            The command as a list of arguments
        """
        cmd = [self.phpunit_binary, "--configuration", config_path]

        if bootstrap:
            cmd.extend(["--bootstrap", bootstrap])

        if "colors" in options:
            cmd.append("--colors=always" if options["colors"] else "--colors=never")

        if options.get("verbose"):
            cmd.append("--verbose")

        if options.get("filter"):
            cmd.extend(["--filter", options["filter"]])

        if junit_path:
            cmd.extend(["--log-junit", junit_path])

        return cmd

    def do_run(self,
               suite: TestSuite,
               options: Optional[Dict[str, Any]] = None,
               bootstrap: Optional[str] = None,
               trace_filter: Optional[TraceFilter] = None,
               env: Optional[Dict[str, str]] = None) -> Tuple[str, int, Optional[str]]:
        """
        Run a test suite.

        Args:
            suite: The suite to run
            options: Runner options ('filter', 'verbose', 'colors')
            bootstrap: PHP file to load before the tests
            trace_filter: Filter applied to the captured output
            env: Process environment for PHPUnit

        Returns:
            Tuple of (output, return_code, xml_output)

        Raises:
            PhpUnitRunnerError: if PHPUnit could not be started, or exited with
                EXCEPTION_EXIT before running any test
        """
        options = options or {}

        with tempfile.NamedTemporaryFile("w", suffix=".xml", delete=False, encoding="utf-8") as tmp:
            tmp.write(suite.to_xml())
            config_path = tmp.name

        with tempfile.NamedTemporaryFile(suffix=".xml", delete=False) as tmp:
            junit_path = tmp.name

        try:
            cmd = self.build_command(config_path, options, bootstrap, junit_path)
            logger.debug("subprocess.run(%s)", " ".join(cmd))
            try:
                result = subprocess.run(
                    cmd,
                    cwd=self.project_path,
                    capture_output=True,
                    text=True,
                    check=False,
                    env=env,
                )
            except (OSError, subprocess.SubprocessError) as e:
                raise PhpUnitRunnerError(f"Error running PHPUnit: {e}") from e

            output = result.stdout + result.stderr
            if trace_filter is not None:
                output = trace_filter.filter_trace(output)

            logger.info("PHPUnit finished with return code: %s", result.returncode)

            # Read XML output if it was generated
            xml_content = None
            if os.path.isfile(junit_path) and os.path.getsize(junit_path) > 0:
                with open(junit_path, "r", encoding="utf-8") as f:
                    xml_content = f.read()

            # Erroring tests exit 2 as well, but they leave testcases in the log
            if result.returncode == EXCEPTION_EXIT and not has_testcases(xml_content):
                raise PhpUnitRunnerError(
                    output.strip() or f"PHPUnit exited with code {EXCEPTION_EXIT}"
                )

            return output, result.returncode, xml_content
        finally:
            for path in (config_path, junit_path):
                if os.path.exists(path):
                    os.unlink(path)

    def check_installation(self) -> bool:
        """Whether `phpunit --version` runs cleanly from the project directory."""
        cmd = [self.phpunit_binary, "--version"]
        try:
            completed = subprocess.run(cmd, cwd=self.project_path, capture_output=True, text=True, check=False)
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("%s is not runnable: %s", self.phpunit_binary, e)
            return False

        logger.debug("%s: %s", " ".join(cmd), completed.stdout.strip())
        return completed.returncode == 0
