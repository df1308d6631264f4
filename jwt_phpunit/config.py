"""
Project Configuration Module

This module locates the pieces of a Symfony project that the PHPUnit tasks rely on.
Paths can be overridden through environment variables, which are also read from a
.env file in the working directory.
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv

from jwt_phpunit.exceptions import ConfigurationError

# Load environment variables from .env file
load_dotenv()

PLUGIN_NAME = "sfJwtPhpUnitPlugin"
DEFAULT_APPLICATION = "frontend"
DEFAULT_ENVIRONMENT = "test"


class ProjectConfiguration:
    """Filesystem layout of a Symfony project."""

    def __init__(self,
                 root_dir: Optional[str] = None,
                 plugins_dir: Optional[str] = None,
                 symfony_lib_dir: Optional[str] = None):
        """
        Initialize the project configuration.

        Args:
            root_dir: Project root (defaults to $SF_ROOT_DIR, then the current directory)
            plugins_dir: Plugins directory (defaults to $SF_PLUGINS_DIR, then root_dir/plugins)
            symfony_lib_dir: Symfony core library (defaults to $SF_SYMFONY_LIB_DIR,
                then root_dir/lib/vendor/symfony/lib)
        """
        self.root_dir = os.path.abspath(
            root_dir or os.environ.get("SF_ROOT_DIR") or os.getcwd()
        )
        self.plugins_dir = os.path.abspath(
            plugins_dir
            or os.environ.get("SF_PLUGINS_DIR")
            or os.path.join(self.root_dir, "plugins")
        )
        self.symfony_lib_dir = os.path.abspath(
            symfony_lib_dir
            or os.environ.get("SF_SYMFONY_LIB_DIR")
            or os.path.join(self.root_dir, "lib", "vendor", "symfony", "lib")
        )

    @property
    def test_dir(self) -> str:
        return os.path.join(self.root_dir, "test")

    @property
    def bootstrap_file(self) -> str:
        """Project-level bootstrap, executed once before the first run."""
        return os.path.join(self.test_dir, "bootstrap", "phpunit.php")

    @property
    def plugin_dir(self) -> str:
        return os.path.join(self.plugins_dir, PLUGIN_NAME)

    @property
    def plugin_bootstrap_file(self) -> str:
        """Plugin bootstrap, handed to PHPUnit via --bootstrap."""
        return os.path.join(self.plugin_dir, "test", "bootstrap", "phpunit.php")

    def get_application_configuration(self,
                                      application: str,
                                      environment: str = DEFAULT_ENVIRONMENT,
                                      debug: bool = True) -> "ApplicationConfiguration":
        """
        Build the configuration for one application of the project.

        Args:
            application: Application name (a directory under apps/)
            environment: Environment name
            debug: Whether the application runs in debug mode

        Returns:
            ApplicationConfiguration for the application

        Raises:
            ConfigurationError: if the application does not exist
        """
        app_dir = os.path.join(self.root_dir, "apps", application)
        if not os.path.isdir(app_dir):
            raise ConfigurationError(
                f'Application "{application}" does not exist ({app_dir} not found).'
            )

        return ApplicationConfiguration(self, application, environment, debug)


class ApplicationConfiguration:
    """Configuration of a single application in a given environment."""

    def __init__(self,
                 project: ProjectConfiguration,
                 application: str,
                 environment: str = DEFAULT_ENVIRONMENT,
                 debug: bool = True):
        self.project = project
        self.application = application
        self.environment = environment
        self.debug = debug

    @property
    def app_dir(self) -> str:
        return os.path.join(self.project.root_dir, "apps", self.application)

    def get_environment_variables(self) -> Dict[str, str]:
        """Variables the PHP bootstrap reads to boot the matching context."""
        return {
            "SF_ROOT_DIR": self.project.root_dir,
            "SF_APP": self.application,
            "SF_ENVIRONMENT": self.environment,
            "SF_DEBUG": "1" if self.debug else "0",
        }
