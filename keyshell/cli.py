#!/usr/bin/env python3
"""
keyshell - Interactive shell for an encrypted password vault

    keyshell <vault-file>               start the interactive prompt
    keyshell <vault-file> <command...>  run a single command and exit
"""
import logging
import os
import sys
from typing import Optional

import click

from . import __version__
from .admin import check_new_passphrase
from .crypto import KdfParams
from .router import PROG_NAME, run_command
from .session import SessionConfig, TerminalInput
from .shell import Shell
from .storage import VaultFile
from .vault import PasswordDatabase

logger = logging.getLogger(__name__)


def load_or_create(
    vault_file: VaultFile, line_input: TerminalInput, kdf: Optional[KdfParams] = None
) -> PasswordDatabase:
    """
    Open the vault file, or create and save a new vault if it doesn't exist.

    Raises:
        VaultOpenError: Wrong master password or unreadable vault
        EmptyPassword, PasswordMismatch: Bad new master password
        OSError: The file could not be read or written
    """
    if vault_file.exists():
        click.echo("Opening password file.")
        data = vault_file.read()
        password = line_input.read_password("Master password: ")
        return PasswordDatabase.from_bytes(data, password)

    click.echo("File does not exist. Creating new password database.")
    password = line_input.read_password("Master password: ")
    confirm_password = line_input.read_password("Confirm password: ")
    check_new_passphrase(password, confirm_password)

    db = PasswordDatabase.new(password, kdf)
    vault_file.write(db.save())
    logger.debug("Created new vault at %s", vault_file.filename)
    return db


@click.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    }
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.option('--debug', is_flag=True, help='Log debug information to stderr')
@click.argument('vault_path', envvar='KEYSHELL_VAULT', type=click.Path(dir_okay=False))
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
def main(debug, vault_path, command):
    """Simple password manager

    Opens VAULT_PATH (creating it if needed). With a COMMAND, runs it and
    exits; otherwise starts an interactive prompt. Type "--help" at the
    prompt for the list of commands.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    vault_file = VaultFile(vault_path)
    line_input = TerminalInput(f"{os.path.basename(vault_path)}> ")

    try:
        vault = load_or_create(vault_file, line_input)
    except Exception as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)

    session = SessionConfig(
        vault=vault,
        file_path=vault_path,
        line_input=line_input,
        write_file=vault_file.write,
    )

    if command:
        try:
            run_command(command, session)
        except Exception as e:
            click.echo(f"ERROR: {e}", err=True)
            sys.exit(1)
        return

    if not Shell(session).run():
        sys.exit(1)


if __name__ == '__main__':
    main()
