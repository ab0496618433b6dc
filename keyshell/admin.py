"""
admin.py - Vault-wide commands: master password, default policy, save and exit
"""
import click

from .errors import EmptyPassword, PasswordMismatch
from .policy import describe_default
from .prompts import collect_policy
from .session import Outcome, SessionConfig

UNSAVED_CHANGES = (
    'Unsaved changes detected. Please save your password database using "save", '
    'or exit without saving using the "-f" option'
)


def check_new_passphrase(passphrase: str, confirmation: str) -> None:
    """
    Validate a new master password and its confirmation.

    Raises:
        EmptyPassword: If the passphrase is blank
        PasswordMismatch: If the two entries differ
    """
    if not passphrase.strip():
        raise EmptyPassword()
    if passphrase != confirmation:
        raise PasswordMismatch()


def add_admin_commands(group, session: SessionConfig) -> None:
    """Register the top-level vault commands on group (an AliasedGroup)"""
    vault = session.vault
    echo = session.echo

    @group.command("change-master-password", aliases=("cmp",))
    def change_master_password():
        """Change database password"""
        new_password = session.line_input.read_password("New master password: ")
        confirm_password = session.line_input.read_password("Confirm new password: ")
        check_new_passphrase(new_password, confirm_password)

        vault.set_password(new_password)
        echo("Master password changed. Please save the database to use the new password.")

    @group.group("default-policy", aliases=("dp",))
    def default_policy():
        """Default password generation policy"""

    @default_policy.command("view", aliases=("v",))
    def view_default_policy():
        """View default policy"""
        for line in describe_default(vault.default_policy):
            echo(line)

    @default_policy.command("change", aliases=("c",))
    def change_default_policy():
        """Change default policy

        Every field is asked for; blank answers leave the field unset.
        """
        echo("Enter new policy values (leave blank to unset)")
        vault.set_default_policy(collect_policy(session, vault.default_policy))
        echo("Default policy updated")

    @group.command("save")
    def save():
        """Save the password database to file"""
        modified = vault.modified
        data = vault.save()
        try:
            session.write_file(data)
        except Exception:
            vault.modified = modified
            raise

        echo(f"Password database saved to {session.file_path}")

    @group.command("exit", aliases=("quit",))
    @click.option("--force", "-f", is_flag=True, help="Force exit without saving")
    def exit_prompt(force):
        """Exit prompt"""
        if vault.modified and not force:
            echo(UNSAVED_CHANGES)
            return Outcome.CONTINUE
        return Outcome.EXIT
