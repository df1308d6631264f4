"""
Bootstrap Harness Module

Runs the project's PHP bootstrap script before the first test run.
"""

import logging
import os
import subprocess
from typing import Dict, Optional

from jwt_phpunit.exceptions import HarnessError

logger = logging.getLogger("jwt_phpunit")


class Harness:
    """Executes a PHP initialization script exactly once."""

    def __init__(self, init_script: str, php_binary: Optional[str] = None):
        """
        Initialize the harness.

        Args:
            init_script: Path to the PHP script to execute
            php_binary: Path to the PHP binary (defaults to $PHP_BINARY or php)
        """
        self.init_script = os.path.abspath(init_script)
        self.php_binary = php_binary or os.environ.get("PHP_BINARY") or "php"
        self.executed = False
        self.output = ""

    def execute(self, env: Optional[Dict[str, str]] = None) -> str:
        """
        Run the script, unless it has already been run.

        Args:
            env: Process environment for the script

        Returns:
            Combined stdout and stderr of the script

        Raises:
            HarnessError: if PHP can't be started or the script exits nonzero
        """
        if self.executed:
            return self.output

        cmd = [self.php_binary, self.init_script]
        logger.debug("subprocess.run(%s)", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                cwd=os.path.dirname(self.init_script),
                capture_output=True,
                text=True,
                check=False,
                env=env,
            )
        except OSError as e:
            raise HarnessError(f"Unable to execute {self.init_script}: {e}") from e

        self.output = result.stdout + result.stderr
        if result.returncode != 0:
            raise HarnessError(
                f"{self.init_script} exited with code {result.returncode}:\n{self.output}"
            )

        self.executed = True
        return self.output
