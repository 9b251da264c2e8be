"""
pwmanager - Command Line Interface

    pwmanager add                     # prompts for site/login/comment
    pwmanager remove <regexp>         # removes the one matching site
    pwmanager get [--copy] <regexp>   # shows the one matching site
    pwmanager -f other.json get git   # use another store file
"""

import argparse
import logging
import sys
from typing import List, Optional

import pyperclip

from .config import Config, ensure_store_dir
from .errors import PWManagerError, UsageError
from .manager import PasswordManager

logger = logging.getLogger(__name__)

DESCRIPTION = "Keep site logins and generated passwords in a local JSON file."

EPILOG = """Commands are:
  add
        adds a new password
  remove <regexp>
        removes the password whose site matches provided regexp
  get <regexp>
        gets the password whose site matches provided regexp
"""


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="pwmanager",
        usage="%(prog)s [flags] <command> [args]",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-f", "--file", default="",
        help="Name of file that stores the passwords. "
             "Leave empty for the default $HOME/.pwmanager/passwords.json",
    )
    parser.add_argument(
        "-g", "--generator", choices=["pwgen", "builtin"], default=None,
        help="How new passwords are generated (default: pwgen)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")

    sub = parser.add_subparsers(dest="command", metavar="<command>")

    sub.add_parser("add", help="Add a new password")

    p_rm = sub.add_parser("remove", help="Remove a password")
    p_rm.add_argument("pattern", help="Regexp matched against the site")

    p_get = sub.add_parser("get", help="Show a password")
    p_get.add_argument("pattern", help="Regexp matched against the site")
    p_get.add_argument("--copy", action="store_true",
                       help="Copy the password to the clipboard instead of printing it")

    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def prompt(label: str) -> str:
    try:
        return input(f"{label}: ")
    except EOFError as e:
        raise PWManagerError(f"no input for {label.lower()}") from e


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_add(manager: PasswordManager, args: argparse.Namespace) -> int:
    site = prompt("Site")
    login = prompt("Login")
    comment = prompt("Comment")
    ensure_store_dir(manager.path)
    record = manager.add(site, login, comment)
    print(f"Added {record.site}")
    return 0


def cmd_remove(manager: PasswordManager, args: argparse.Namespace) -> int:
    record = manager.remove(args.pattern)
    print(f"Removed {record.site}")
    return 0


def cmd_get(manager: PasswordManager, args: argparse.Namespace) -> int:
    e = manager.get(args.pattern)
    print(f"Site: {e['site']}")
    print(f"Login: {e['login']}")
    print(f"Comment: {e['comment']}")
    if args.copy:
        try:
            pyperclip.copy(e['secret'])
        except pyperclip.PyperclipException as err:
            raise PWManagerError(f"clipboard unavailable: {err}") from err
        print("Password: copied to clipboard")
    else:
        print(f"Password: {e['secret']}")
    return 0


COMMANDS = {
    "add": cmd_add,
    "remove": cmd_remove,
    "get": cmd_get,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    command = None
    try:
        args = parser.parse_args(argv)
        setup_logging(args.verbose)
        command = args.command
        if command is None:
            raise UsageError("")

        config = Config.resolve(args.file, args.generator)
        logger.debug("Using store %s", config.store_path)
        return COMMANDS[command](PasswordManager(config), args)
    except UsageError as e:
        if str(e):
            print(f"pwmanager: {e}", file=sys.stderr)
        print(parser.format_help(), file=sys.stderr)
        return 1
    except PWManagerError as e:
        print(f"pwmanager {command}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nExiting...", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
