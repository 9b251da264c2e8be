"""
pwmanager - Manager Module

This file handles the three store operations:
- add: append a new record with a generated secret
- remove: delete the single record matching a site pattern
- get: decode and return the single record matching a site pattern

Every call is one full cycle: read the whole store from disk, compute,
and (for add/remove) write the whole store back. Nothing is cached
between calls, so two PasswordManager objects on the same file always
see each other's changes.
"""

import logging
from typing import Callable, Dict, List, Optional

from . import crypto
from .config import Config
from .errors import AmbiguousMatchError, NotFoundError
from .store import CredentialRecord, find_matches, load_or_empty, save

logger = logging.getLogger(__name__)


class PasswordManager:
    """
    Operations over one store file.

    Usage:
        manager = PasswordManager(Config.resolve())

        # Add entry (secret comes from pwgen)
        manager.add("github.com", "alice", "work account")

        # Retrieve entry
        entry = manager.get("github")
        print(entry['secret'])

        # Remove entry
        manager.remove("^github\\.com$")
    """

    def __init__(self, config: Config, generator: Optional[Callable[[], str]] = None):
        """
        Args:
            config: Store path and generator settings
            generator: Returns a new plaintext secret. Defaults to the
                generator named in config.
        """
        self.config = config
        self.generator = generator or (lambda: crypto.generate_secret(config))

    @property
    def path(self) -> str:
        return self.config.store_path

    def add(self, site: str, login: str, comment: str = "") -> CredentialRecord:
        """
        Append a new credential with a freshly generated secret.

        A missing store file is created. Duplicate sites are allowed.

        Returns:
            The stored record (secret in encoded form)

        Raises:
            GeneratorError: If no secret could be generated (store untouched)
            StoreIOError, ParseError: If the store cannot be read or written
        """
        records = load_or_empty(self.path)

        secret = self.generator()
        record = CredentialRecord(
            site=site,
            login=login,
            comment=comment,
            secret=crypto.encode_secret(secret),
        )
        records.append(record)

        save(self.path, records)
        logger.info("Added credential for %s (%d stored)", site, len(records))
        return record

    def remove(self, pattern: str) -> CredentialRecord:
        """
        Remove the one record whose site matches pattern.

        Returns:
            The removed record

        Raises:
            PatternError: If pattern is not a valid regular expression
            NotFoundError: If nothing matched (store untouched)
            AmbiguousMatchError: If several records matched (store untouched)
        """
        records = load_or_empty(self.path)
        target = self._single_match(records, pattern)

        remaining = [r for r in records if r is not target]
        save(self.path, remaining)
        logger.info("Removed credential for %s (%d stored)", target.site, len(remaining))
        return target

    def get(self, pattern: str) -> Dict[str, str]:
        """
        Look up the one record whose site matches pattern.

        Returns:
            Dict with site, login, comment and the plaintext secret

        Raises:
            PatternError: If pattern is not a valid regular expression
            NotFoundError: If nothing matched
            AmbiguousMatchError: If several records matched
            DecodeError: If the stored secret is corrupt
        """
        records = load_or_empty(self.path)
        record = self._single_match(records, pattern)

        return {
            'site': record.site,
            'login': record.login,
            'comment': record.comment,
            'secret': crypto.decode_secret(record.secret),
        }

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _single_match(self, records: List[CredentialRecord], pattern: str) -> CredentialRecord:
        """Return the only record matching pattern, or raise."""
        matches = find_matches(records, pattern)
        if not matches:
            raise NotFoundError(pattern)
        if len(matches) > 1:
            raise AmbiguousMatchError([records[i].site for i in matches])
        return records[matches[0]]
