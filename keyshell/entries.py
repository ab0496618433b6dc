"""
entries.py - The "passwords" commands: work on individual entries by name
"""
import click

from .errors import DuplicateEntry, EntryNotFound
from .policy import describe
from .prompts import collect_policy
from .session import SessionConfig
from .vault import PasswordEntry

NEW_PASSWORD_PROMPT = "Password (leave empty to generate): "


def add_password_commands(group, session: SessionConfig) -> None:
    """Register the entry commands on group (an AliasedGroup)"""
    vault = session.vault
    echo = session.echo

    def get_entry(name: str) -> PasswordEntry:
        entry = vault.get_entry(name)
        if entry is None:
            raise EntryNotFound(name)
        return entry

    def read_new_password() -> str:
        # End of input counts as "generate one for me"
        try:
            return session.line_input.read_password(NEW_PASSWORD_PROMPT)
        except EOFError:
            return ""

    @group.command("list", aliases=("l",))
    def list_entries():
        """List password entries"""
        names = sorted(entry.name for entry in vault.entries())
        if not names:
            echo("No entries found")
            return

        for name in names:
            echo(name)

    @group.command("new", aliases=("n",))
    @click.argument("name")
    @click.argument("description", required=False, default="")
    def new_entry(name, description):
        """Create new password entry"""
        if vault.get_entry(name) is not None:
            raise DuplicateEntry(name)

        password = read_new_password()
        vault.add_entry(PasswordEntry(name=name, password=password, description=description))
        if password == "":
            vault.generate_password(name)

        echo("Password added")

    @group.command("show", aliases=("s",))
    @click.argument("name")
    @click.option("--pass-only", "-p", is_flag=True, help="Only show password")
    def show_entry(name, pass_only):
        """Show password entry"""
        entry = get_entry(name)

        if pass_only:
            echo(entry.password)
            return

        echo(f"Name: {entry.name}")
        echo(f"Password: ({len(entry.password)} characters)")
        if entry.description:
            echo(f"Description: {entry.description}")
        else:
            echo("No description")

    @group.command("copy", aliases=("cp",))
    @click.argument("name")
    def copy_entry(name):
        """Copy password to clipboard"""
        entry = get_entry(name)
        session.copy(entry.password)
        echo("Password copied to clipboard")

    @group.command("edit", aliases=("e",))
    @click.argument("name")
    @click.option("--new-name", "-n", default=None, help="Change name of entry")
    @click.option("--description", "-d", default=None, help="Change description of entry")
    @click.option("--change-password", "-p", is_flag=True, help="Change password")
    def edit_entry(name, new_name, description, change_password):
        """Edit a password entry

        Only the given fields change.
        """
        entry = get_entry(name)
        if new_name is not None and new_name != name and vault.get_entry(new_name) is not None:
            raise DuplicateEntry(new_name)

        if new_name is not None:
            entry.name = new_name
        if description is not None:
            entry.description = description
        if change_password:
            entry.password = read_new_password()

        vault.update_entry(name, entry)

        # Generation runs against the committed (possibly renamed) entry
        if change_password and entry.password == "":
            vault.generate_password(entry.name)

        echo("Entry updated")

    @group.command("delete", aliases=("d",))
    @click.argument("name")
    def delete_entry(name):
        """Delete a password entry"""
        vault.remove_entry(name)
        echo("Entry removed")

    @group.group("policy", aliases=("p",))
    def policy():
        """Password generation policy of an entry"""

    @policy.command("view", aliases=("v",))
    @click.argument("name")
    def view_policy(name):
        """Show password policy of entry"""
        entry = get_entry(name)
        for line in describe(entry.policy_override, vault.default_policy):
            echo(line)

    @policy.command("change", aliases=("c",))
    @click.argument("name")
    def change_policy(name):
        """Change password policy of entry

        Every field is asked for; blank answers fall back to the default policy.
        """
        entry = get_entry(name)

        echo("Enter new policy values (leave blank to use default)")
        entry.policy_override = collect_policy(session, entry.policy_override)
        vault.update_entry(entry.name, entry)

        echo("Entry policy updated")
