"""
pwmanager - Errors

Every failure the store can report is a PWManagerError subclass, so the
command line can catch one base class and print a single-line message.
Low-level causes (OSError, json errors, re.error, binascii.Error) are
chained with ``raise ... from`` and stay reachable via ``__cause__``.
"""

from typing import List


class PWManagerError(Exception):
    """Base class for all password manager errors."""


class StoreIOError(PWManagerError):
    """Store file could not be opened, read or written."""


class ParseError(PWManagerError):
    """Store file exists but does not hold a valid list of records."""


class PatternError(PWManagerError):
    """User supplied site pattern is not a valid regular expression."""


class NotFoundError(PWManagerError):
    """No record matched the site pattern."""

    def __init__(self, pattern: str):
        super().__init__("Site not found")
        self.pattern = pattern


class AmbiguousMatchError(PWManagerError):
    """More than one record matched the site pattern."""

    def __init__(self, sites: List[str]):
        lines = ["Multiple matches:"]
        lines.extend(f"  {site}" for site in sites)
        super().__init__("\n".join(lines))
        self.sites = list(sites)


class DecodeError(PWManagerError):
    """Stored secret is not a valid encoding."""


class GeneratorError(PWManagerError):
    """Secret generator could not be run or exited with an error."""


class UsageError(PWManagerError):
    """Command line was invoked with the wrong arguments."""
