"""
pwmanager - Local Password Store

A small command line store for site logins and generated passwords,
kept as one JSON file in your home directory.

Key Features:
- Plain JSON file: easy to inspect, back up and diff
- Generated passwords: 24 characters from pwgen (or built-in generator)
- Regexp lookup: find a site by any part of its name
- Safe writes: the whole file is replaced in one step, mode 0600

Components:
- store.py: Record type, JSON load/save, site matching
- crypto.py: Secret encoding and password generation
- config.py: Store path and generator settings
- manager.py: add / remove / get operations
- cli.py: Command-line interface (uses built-in argparse)

Usage:
    pwmanager add                   # Add password (prompts, generated secret)
    pwmanager get <regexp>          # Show password for matching site
    pwmanager get --copy <regexp>   # Copy password to clipboard
    pwmanager remove <regexp>       # Remove password for matching site
    pwmanager -f <file> ...         # Use another store file

Passwords are base64 encoded in the file, NOT encrypted.
"""

from .config import Config
from .errors import (
    AmbiguousMatchError,
    DecodeError,
    GeneratorError,
    NotFoundError,
    ParseError,
    PatternError,
    PWManagerError,
    StoreIOError,
    UsageError,
)
from .manager import PasswordManager
from .store import CredentialRecord, find_matches, load, load_or_empty, save

__version__ = "0.1.0"
__author__ = "pwmanager Team"
