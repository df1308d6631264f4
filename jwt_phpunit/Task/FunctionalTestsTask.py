"""Runs all functional tests for a project, or the ones under the given paths."""

import argparse
import os
from typing import Any, Dict, List, Optional

from jwt_phpunit.exceptions import InvalidArgumentError
from jwt_phpunit.Task.BasePhpunitTask import BasePhpunitTask


class FunctionalTestsTask(BasePhpunitTask):
    name = "functional"
    brief_description = "Runs all PHPUnit functional tests for the project."
    detailed_description = "Runs PHPUnit functional tests for the project."

    test_type = "functional"

    @classmethod
    def configure(cls, parser: argparse.ArgumentParser) -> None:
        super().configure(parser)
        parser.add_argument(
            "path",
            nargs="*",
            help="Relative paths to specific test files and/or directories under "
                 "test/functional. If no paths are provided, all functional tests will be run."
        )

    def execute(self, args: Dict[str, Any], opts: Dict[str, Any]) -> Optional[int]:
        params = self._validate_input(args, opts)
        paths = params.get("path") or []
        if isinstance(paths, str):
            paths = [paths]

        files = self._find_functional_test_files(paths) if paths else None
        return self._run_tests(self.test_type, self._validate_phpunit_input(args, opts), files)

    def _find_functional_test_files(self, paths: List[str]) -> List[str]:
        """
        Collect the test files reachable from a list of paths.

        Args:
            paths: Files or directories, relative to test/functional

        Returns:
            Test files in argument order, without duplicates

        Raises:
            InvalidArgumentError: if a path is missing or outside test/functional
        """
        base = os.path.join(self.project.test_dir, self.test_type)
        real_base = os.path.realpath(base)

        files: List[str] = []
        for path in paths:
            target = os.path.normpath(os.path.join(base, path))
            real_target = os.path.realpath(target)
            if real_target != real_base and not real_target.startswith(real_base + os.sep):
                raise InvalidArgumentError(f'"{path}" is not inside {base}.')

            if not os.path.exists(target):
                raise InvalidArgumentError(f'No functional tests found at "{path}".')

            for test_file in self._find_files(target):
                if test_file not in files:
                    files.append(test_file)

        return files
