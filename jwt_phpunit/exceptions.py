class JwtPhpUnitException(Exception):
    """General jwt-phpunit exception"""


class InvalidArgumentError(JwtPhpUnitException, ValueError):
    """A value of the wrong type or shape was passed in"""


class ConfigurationError(JwtPhpUnitException):
    """Project layout does not match what the task expects"""


class HarnessError(JwtPhpUnitException):
    """The project bootstrap script could not be executed"""

    def __init__(self, message="Bootstrap script failed"):
        super().__init__(message)


class PhpUnitRunnerError(JwtPhpUnitException):
    """PHPUnit itself failed, as opposed to a test failing"""

    def __init__(self, message="PHPUnit failed to run"):
        super().__init__(message)
