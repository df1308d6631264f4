"""
Application Context Module

The context is created once by whoever starts a test run and then handed to
every run that follows, so the bootstrap only ever happens one time.
"""

import os
from typing import Dict, Union

from jwt_phpunit.config import (
    DEFAULT_ENVIRONMENT,
    ApplicationConfiguration,
    ProjectConfiguration,
)


class ApplicationContext:
    """Execution context of one application, in the test environment."""

    def __init__(self, configuration: ApplicationConfiguration):
        self.configuration = configuration

    @property
    def application(self) -> str:
        return self.configuration.application

    @property
    def environment(self) -> str:
        return self.configuration.environment

    def get_environment(self) -> Dict[str, str]:
        """
        Build the process environment for PHP subprocesses.

        Returns:
            A copy of os.environ with the application variables applied on top
        """
        env = os.environ.copy()
        env.update(self.configuration.get_environment_variables())
        return env


def create_context(configuration: Union[ProjectConfiguration, ApplicationConfiguration],
                   application: str) -> ApplicationContext:
    """
    Create the context for an application.

    Args:
        configuration: Either a project configuration, from which the application
            configuration is derived, or an application configuration used as-is
        application: Application name, ignored for application configurations

    Returns:
        The new ApplicationContext
    """
    if isinstance(configuration, ApplicationConfiguration):
        return ApplicationContext(configuration)

    return ApplicationContext(
        configuration.get_application_configuration(
            application, DEFAULT_ENVIRONMENT, True
        )
    )
