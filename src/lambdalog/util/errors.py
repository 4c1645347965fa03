# src/lambdalog/util/errors.py: Typed exceptions and exit codes.
# This module defines the exception hierarchy of the library. Each error type
# carries the process exit code the CLI uses when it surfaces the error, and the
# caller-contract errors also derive from the matching builtin so generic
# handlers keep working.

class LambdaLogError(Exception):
    """Base exception for the library."""
    exit_code = 1

class ConfigError(LambdaLogError):
    """Configuration file missing, unreadable or invalid."""
    exit_code = 2

class InvalidArgumentError(LambdaLogError, ValueError):
    """A required argument was not supplied by the caller."""
    exit_code = 3

class SerializationError(LambdaLogError, TypeError):
    """A record holds a value that cannot be rendered as JSON."""
    exit_code = 4

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path
