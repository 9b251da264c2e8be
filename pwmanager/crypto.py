"""
pwmanager - Secret Module

This file contains everything that touches the secret itself:
- Reversible encoding of secrets for storage (base64)
- Generating new secrets, either with the external ``pwgen`` tool or
  in-process with the ``secrets`` module

Secrets are encoded, not encrypted. Encoding keeps raw bytes out of the
store file and away from accidental terminal output; anyone who can read
the store file can decode every secret in it.
"""

import base64
import binascii
import logging
import secrets
import string
import subprocess
from typing import List

from .errors import DecodeError, GeneratorError

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

SECRET_LENGTH = 24

# Passed to pwgen: -s secure, -y include symbols, -n include digits
PWGEN_FLAGS = ["-s", "-y", "-n"]

SYMBOLS = "!@#$%^&*()_+-="

GENERATORS = ("pwgen", "builtin")


# =============================================================================
# Encoding
# =============================================================================

def encode_secret(plaintext: str) -> str:
    """
    Encode a plaintext secret for storage.

    Args:
        plaintext: Secret as entered or generated

    Returns:
        Standard base64 (padded) of the UTF-8 bytes
    """
    return base64.b64encode(plaintext.encode("utf-8")).decode("ascii")


def decode_secret(encoded: str) -> str:
    """
    Decode a stored secret back to plaintext.

    Raises:
        DecodeError: If encoded is not valid base64 or not UTF-8 underneath
    """
    try:
        raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"stored secret is not valid base64: {e}") from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"stored secret is not valid UTF-8: {e}") from e


# =============================================================================
# Generation
# =============================================================================

def pwgen_command(executable: str = "pwgen", length: int = SECRET_LENGTH) -> List[str]:
    """Build the argv asking pwgen for one secret of the given length."""
    return [executable, *PWGEN_FLAGS, str(length), "1"]


def run_generator(command: List[str]) -> str:
    """
    Run an external generator and return its output.

    Args:
        command: argv to execute, e.g. pwgen_command()

    Returns:
        Standard output with surrounding whitespace stripped

    Raises:
        GeneratorError: If the command cannot be started, exits non-zero
            or prints nothing
    """
    logger.debug("Running secret generator: %s", command[0])
    try:
        result = subprocess.run(command, capture_output=True, text=True, check=True)
    except FileNotFoundError as e:
        raise GeneratorError(f"{command[0]}: command not found") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise GeneratorError(f"{command[0]}: {detail}") from e
    except OSError as e:
        raise GeneratorError(f"{command[0]}: {e}") from e

    secret = result.stdout.strip()
    if not secret:
        raise GeneratorError(f"{command[0]}: produced no output")
    return secret


def generate_password(length: int = SECRET_LENGTH, use_symbols: bool = True) -> str:
    """
    Generate a random password in-process.

    Character set:
    - Uppercase: A-Z (26)
    - Lowercase: a-z (26)
    - Digits: 0-9 (10)
    - Symbols: !@#$%^&*()_+-= (optional, 14)

    Args:
        length: Password length (default 24)
        use_symbols: Include symbols?

    Returns:
        Random password string
    """
    chars = string.ascii_letters + string.digits
    if use_symbols:
        chars += SYMBOLS

    # secrets.choice() draws from os.urandom()
    return "".join(secrets.choice(chars) for _ in range(length))


def generate_secret(config) -> str:
    """
    Produce a new plaintext secret using the generator named in config.

    Args:
        config: pwmanager.config.Config

    Raises:
        GeneratorError: If the external generator fails
    """
    if config.generator == "builtin":
        return generate_password(config.secret_length)
    return run_generator(pwgen_command(config.pwgen_command, config.secret_length))
