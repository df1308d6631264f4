"""Runs every test of a project, unit tests first."""

from jwt_phpunit.Task.BasePhpunitTask import BasePhpunitTask


class AllTestsTask(BasePhpunitTask):
    name = "all"
    brief_description = "Runs all PHPUnit tests for the project."
    detailed_description = "Runs PHPUnit unit tests, then functional tests, for the project."

    test_type = ""
