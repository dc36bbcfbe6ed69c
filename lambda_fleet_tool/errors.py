# lambda_fleet_tool/errors.py
"""
Exception hierarchy for lambda-fleet-tool

Only validation, authorization and bulk query failures stop a command.
Per-function problems (log lookups, update submissions, poll timeouts)
are captured into result objects instead of being raised.
"""
from typing import Iterable


class LambdaToolError(Exception):
    """Base class for every error the CLI reports to the operator"""


class ValidationError(LambdaToolError):
    """Bad input detected before any AWS call is made"""


class UnsupportedRuntimeFamily(ValidationError):
    """Target runtime does not belong to a supported family"""

    def __init__(self, runtime: str):
        self.runtime = runtime
        super().__init__(f"Unsupported runtime '{runtime}'. Only python and nodejs are supported.")


class InvalidRuntimeFormat(ValidationError):
    """Target runtime belongs to a known family but has the wrong shape"""

    def __init__(self, runtime: str, family: str, example: str):
        self.runtime = runtime
        self.family = family
        self.example = example
        super().__init__(
            f"Invalid target runtime '{runtime}'. Expected {family} format like '{example}'"
        )


class InvalidOptionError(ValidationError):
    """One or more command line options failed validation"""

    def __init__(self, problems: Iterable[str]):
        self.problems = list(problems)
        super().__init__(f"Options validation failed: {', '.join(self.problems)}")


class AuthorizationError(LambdaToolError):
    """Credentials are missing, invalid, expired or lack permissions"""


class QueryFailure(LambdaToolError):
    """A read against AWS that the command cannot continue without failed"""


class OperatorCancelled(LambdaToolError):
    """The operator cancelled a prompt or declined the confirmation"""
