"""
pwmanager - Configuration

Where the store lives and how secrets are generated. Values come from,
in order: explicit arguments (command line flags), environment
variables, then the defaults below.

Environment:
    PWMANAGER_FILE       Store file path
    PWMANAGER_GENERATOR  "pwgen" or "builtin"
    PWMANAGER_PWGEN      pwgen executable (name or path)
"""

import os
from dataclasses import dataclass
from typing import Optional

from .crypto import GENERATORS, SECRET_LENGTH
from .errors import StoreIOError, UsageError

DEFAULT_STORE_DIR = os.path.join(os.path.expanduser("~"), ".pwmanager")
DEFAULT_STORE_PATH = os.path.join(DEFAULT_STORE_DIR, "passwords.json")

ENV_FILE = "PWMANAGER_FILE"
ENV_GENERATOR = "PWMANAGER_GENERATOR"
ENV_PWGEN = "PWMANAGER_PWGEN"


@dataclass(frozen=True)
class Config:
    store_path: str
    generator: str = "pwgen"
    secret_length: int = SECRET_LENGTH
    pwgen_command: str = "pwgen"

    @classmethod
    def resolve(cls, path: Optional[str] = None, generator: Optional[str] = None) -> "Config":
        """
        Build a Config from arguments, then environment, then defaults.

        Empty strings count as unset, so ``-f ""`` means the default path.

        Raises:
            UsageError: If the generator name is unknown
        """
        store_path = path or os.environ.get(ENV_FILE) or DEFAULT_STORE_PATH
        generator = generator or os.environ.get(ENV_GENERATOR) or "pwgen"
        if generator not in GENERATORS:
            raise UsageError(f"unknown generator {generator!r}, expected one of {', '.join(GENERATORS)}")

        return cls(
            store_path=os.path.expanduser(store_path),
            generator=generator,
            pwgen_command=os.environ.get(ENV_PWGEN) or "pwgen",
        )


def ensure_store_dir(path: str) -> None:
    """Create the directory holding the store file if it is missing."""
    d = os.path.dirname(path)
    if d and not os.path.exists(d):
        try:
            os.makedirs(d, mode=0o755, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"cannot create {d}: {e.strerror or e}") from e
