"""
Custom exceptions for the audio track switcher.

This module defines the exception hierarchy used throughout the application.
Every error raised by an operation is a subclass of SwitcherError so the
operation boundary can turn it into a single failure message.
"""

from typing import Optional


class SwitcherError(Exception):
    """Base exception for all switcher errors."""

    pass


class ConfigurationError(SwitcherError):
    """Configuration is invalid or missing."""

    pass


class LaunchError(SwitcherError):
    """External tool could not be started (missing executable, permissions)."""

    def __init__(self, message: str, command: Optional[list[str]] = None):
        """
        Initialize launch error.

        Args:
            message: Error message
            command: Command that could not be started
        """
        super().__init__(message)
        self.command = command


class StreamReadError(SwitcherError):
    """Reading the progress channel failed before end-of-stream."""

    pass


class ExternalProcessError(SwitcherError):
    """External tool exited abnormally."""

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        stderr: str = "",
        returncode: Optional[int] = None,
    ):
        """
        Initialize external process error with command details.

        Args:
            message: Error message, including the diagnostic output
            command: Command that failed
            stderr: Diagnostic output captured from the process (may be empty)
            returncode: Exit code reported by the process
        """
        super().__init__(message)
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class MalformedOutputError(SwitcherError):
    """Inspection tool produced output that could not be parsed."""

    pass


class ProcessTimeoutError(SwitcherError):
    """Process exceeded timeout threshold."""

    def __init__(self, message: str, timeout: float):
        """
        Initialize timeout error.

        Args:
            message: Error message
            timeout: Timeout value in seconds
        """
        super().__init__(message)
        self.timeout = timeout
