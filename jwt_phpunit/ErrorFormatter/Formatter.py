"""
PHPUnit Error Formatter

This module turns the JUnit XML written by PHPUnit into a list of failures and
a readable report, with infrastructure frames removed from each backtrace.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from jwt_phpunit.PhpUnitRunner.TraceFilter import TraceFilter

logger = logging.getLogger("jwt_phpunit")


@dataclass
class PhpUnitError:
    """One failing or erroring testcase from the JUnit log."""

    message: str
    file: str
    line: int
    test_name: str
    error_type: str
    class_name: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PhpUnitErrorFormatter:
    """Formats PHPUnit test failures for the task output."""

    def __init__(self, trace_filter: Optional[TraceFilter] = None):
        """
        Initialize the formatter.

        Args:
            trace_filter: Filter applied to each failure message
        """
        self.trace_filter = trace_filter

    def parse_phpunit_xml(self, xml_content: str) -> List[PhpUnitError]:
        """
        Parse PHPUnit JUnit XML output and extract test failures.

        Args:
            xml_content: The XML output from PHPUnit

        Returns:
            List of PhpUnitError objects
        """
        errors = []
        if not xml_content:
            return errors

        try:
            root = ET.fromstring(xml_content)
        except ET.ParseError as e:
            logger.warning("Error parsing JUnit XML: %s", e)
            return errors

        # Test cases may be nested at any depth of test suites
        for testcase in root.iter("testcase"):
            failure = testcase.find("./failure")
            error = testcase.find("./error")
            element = failure if failure is not None else error
            if element is None:
                continue

            message = element.text.strip() if element.text else ""
            if self.trace_filter is not None:
                message = self.trace_filter.filter_trace(message).strip()

            line = int(testcase.get("line", "0") or 0)
            # Extract line number from message if not in attributes
            if line == 0 and message:
                line_match = re.search(r"\.php:(\d+)", message)
                if line_match:
                    line = int(line_match.group(1))

            errors.append(PhpUnitError(
                message=message,
                file=testcase.get("file", ""),
                line=line,
                test_name=testcase.get("name", ""),
                error_type=element.get("type", ""),
                class_name=testcase.get("class", "") or testcase.get("classname", ""),
            ))

        return errors

    def format_report(self, errors: List[PhpUnitError]) -> str:
        """
        Format failures as a short numbered summary.

        PHPUnit has already printed the full messages; the summary only lists
        each failing test, where it failed and the first line of its message.

        Args:
            errors: List of PHPUnit errors

        Returns:
            The summary, or an empty string if there are no errors
        """
        if not errors:
            return ""

        noun = "failure" if len(errors) == 1 else "failures"
        lines = [f"{len(errors)} {noun}:"]
        for idx, error in enumerate(errors, start=1):
            name = f"{error.class_name}::{error.test_name}" if error.class_name else error.test_name
            location = f" ({error.file}:{error.line})" if error.file else ""
            lines.append(f"  {idx}) {name}{location}")

            summary = error.message.splitlines()[0] if error.message else error.error_type
            if summary:
                lines.append(f"     {summary}")

        return "\n".join(lines) + "\n"
