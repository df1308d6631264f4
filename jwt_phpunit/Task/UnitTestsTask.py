"""Runs all unit tests for a project."""

from jwt_phpunit.Task.BasePhpunitTask import BasePhpunitTask


class UnitTestsTask(BasePhpunitTask):
    name = "unit"
    brief_description = "Runs all PHPUnit unit tests for the project."
    detailed_description = "Runs PHPUnit unit tests for the project."

    test_type = "unit"
