"""
pwmanager - Store Module

This file handles:
- The CredentialRecord type
- Loading the JSON store file into an ordered list of records
- Writing the whole list back in one replace
- Matching records by a regular expression over the site field

File format (one JSON array, tab indented, stable key order):
    [
    	{
    		"Site": "example.com",
    		"Login": "alice",
    		"Comment": "",
    		"Password": "QWIxMkNkMzRFZjU2R2g3OElqOTBLbDEy"
    	}
    ]

"Password" holds the base64 encoded secret (see crypto.encode_secret).
"""

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from typing import List

from .errors import ParseError, PatternError, StoreIOError

logger = logging.getLogger(__name__)


# =============================================================================
# RECORD TYPE
# =============================================================================

# On-disk key for each field, in the order they are written
FIELDS = (
    ("site", "Site"),
    ("login", "Login"),
    ("comment", "Comment"),
    ("secret", "Password"),
)

FILE_MODE = 0o600


@dataclass
class CredentialRecord:
    """
    One stored credential.

    ``secret`` is the encoded form, never the plaintext. Use
    crypto.decode_secret() to get the plaintext back.
    """
    site: str
    login: str
    comment: str
    secret: str

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in FIELDS}

    @classmethod
    def from_dict(cls, data: dict) -> "CredentialRecord":
        """
        Build a record from one decoded JSON object.

        Missing keys read as empty strings. Any non-string value is rejected.

        Raises:
            ParseError: If data is not an object or holds non-string fields
        """
        if not isinstance(data, dict):
            raise ParseError(f"expected an object, got {type(data).__name__}")

        values = {}
        for attr, key in FIELDS:
            value = data.get(key, "")
            if not isinstance(value, str):
                raise ParseError(f"field {key!r} must be a string, got {type(value).__name__}")
            values[attr] = value
        return cls(**values)


# =============================================================================
# LOADING
# =============================================================================

def load(path: str) -> List[CredentialRecord]:
    """
    Read the store file.

    Args:
        path: Path to the JSON store file

    Returns:
        Records in file order

    Raises:
        StoreIOError: If the file is missing or cannot be read
        ParseError: If the contents are not a list of records
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise StoreIOError(f"cannot read {path}: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise ParseError(f"{path} is not valid UTF-8: {e}") from e

    records = parse(text)
    logger.debug("Loaded %d records from %s", len(records), path)
    return records


def load_or_empty(path: str) -> List[CredentialRecord]:
    """
    Read the store file, treating a missing file as an empty store.

    Only "file does not exist" maps to an empty list. Permission problems,
    read errors and corrupt contents are still raised.
    """
    try:
        return load(path)
    except StoreIOError as e:
        if isinstance(e.__cause__, FileNotFoundError):
            logger.debug("Store %s does not exist yet, starting empty", path)
            return []
        raise


def parse(text: str) -> List[CredentialRecord]:
    """
    Decode the JSON document into records.

    A top-level ``null`` is accepted as an empty store.

    Raises:
        ParseError: On invalid JSON or an unexpected document shape
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON: {e}") from e

    if data is None:
        return []
    if not isinstance(data, list):
        raise ParseError(f"expected a list of records, got {type(data).__name__}")

    records = []
    for i, item in enumerate(data):
        try:
            records.append(CredentialRecord.from_dict(item))
        except ParseError as e:
            raise ParseError(f"record {i}: {e}") from e
    return records


# =============================================================================
# SAVING
# =============================================================================

def dumps(records: List[CredentialRecord]) -> str:
    """Serialize records with stable key order and tab indentation."""
    return json.dumps([r.to_dict() for r in records], indent="\t", ensure_ascii=False)


def save(path: str, records: List[CredentialRecord]) -> None:
    """
    Write the full list of records to the store file.

    The document is serialized in memory, written to a temporary file in
    the same directory (mode 0600), then moved over the target with
    os.replace(). Readers see either the old file or the new one.

    Args:
        path: Path to the JSON store file
        records: Every record to keep, in order

    Raises:
        ParseError: If a field cannot be encoded as UTF-8 (nothing is written)
        StoreIOError: If the temporary file cannot be created, written or moved
    """
    try:
        data = dumps(records).encode("utf-8")
    except UnicodeEncodeError as e:
        raise ParseError(f"record text is not valid UTF-8: {e}") from e
    directory = os.path.dirname(os.path.abspath(path))

    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=".", suffix=".tmp"
        )
    except OSError as e:
        raise StoreIOError(f"cannot create {path}: {e.strerror or e}") from e

    saved = False
    try:
        with os.fdopen(fd, "wb") as f:
            os.fchmod(f.fileno(), FILE_MODE)
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        saved = True
    except OSError as e:
        raise StoreIOError(f"cannot write {path}: {e.strerror or e}") from e
    finally:
        if not saved and os.path.exists(tmp_path):
            os.unlink(tmp_path)

    logger.debug("Saved %d records to %s", len(records), path)


# =============================================================================
# MATCHING
# =============================================================================

def compile_pattern(pattern: str) -> "re.Pattern":
    """
    Compile a user supplied site pattern.

    Raises:
        PatternError: If the pattern is not a valid regular expression
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(f"invalid pattern {pattern!r}: {e}") from e


def find_matches(records: List[CredentialRecord], pattern: str) -> List[int]:
    """
    Find records whose site contains a match for pattern.

    Uses re.search, so "example" matches "www.example.com" and "x"
    matches both "x" and "x2". Anchor with ^ and $ for an exact site.

    Args:
        records: Records to scan
        pattern: Regular expression

    Returns:
        Indices into records, in original order

    Raises:
        PatternError: If pattern does not compile (checked before any matching)
    """
    regex = compile_pattern(pattern)
    matches = [i for i, record in enumerate(records) if regex.search(record.site)]
    logger.debug("Pattern %r matched %d of %d records", pattern, len(matches), len(records))
    return matches
