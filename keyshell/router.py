"""
router.py - Builds the command tree and dispatches argument vectors to it

The tree is rebuilt for every command so the handlers always close over
the session's current vault.
"""
import logging
from typing import Dict, Sequence

import click

from .admin import add_admin_commands
from .entries import add_password_commands
from .errors import DispatchError, KeyshellError, MissingArgument
from .session import Outcome, SessionConfig

logger = logging.getLogger(__name__)

PROG_NAME = "keyshell"


class SessionHelpMixin:
    """Write --help through the session's echo instead of straight to stdout"""

    def get_help_option(self, ctx):
        option = super().get_help_option(ctx)
        if option is None:
            return None

        def show_help(ctx, param, value):
            if not value or ctx.resilient_parsing:
                return
            ctx.obj.echo(ctx.get_help())
            ctx.exit()

        option.callback = show_help
        return option


class SessionCommand(SessionHelpMixin, click.Command):
    pass


class AliasedGroup(SessionHelpMixin, click.Group):
    """A click group whose sub-commands can also be reached by short aliases"""

    command_class = SessionCommand

    def __init__(self, *args, **kwargs):
        # A group on its own is a dispatch error, not a help screen
        kwargs.setdefault("no_args_is_help", False)
        super().__init__(*args, **kwargs)
        self.aliases: Dict[str, str] = {}

    def add_command(self, cmd, name=None, aliases=()):
        super().add_command(cmd, name)
        for alias in aliases:
            self.aliases[alias] = name or cmd.name

    def command(self, *args, aliases=(), **kwargs):
        decorator = super().command(*args, **kwargs)

        def register(f):
            cmd = decorator(f)
            for alias in aliases:
                self.aliases[alias] = cmd.name
            return cmd

        return register

    def group(self, *args, aliases=(), **kwargs):
        kwargs.setdefault("cls", AliasedGroup)
        return self.command(*args, aliases=aliases, **kwargs)

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, rest = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, rest


def build_cli(session: SessionConfig) -> AliasedGroup:
    """Create the command tree for one invocation"""
    cli = AliasedGroup(
        name=PROG_NAME,
        help="Simple password manager",
        context_settings={"help_option_names": ["-h", "--help"]},
    )
    add_admin_commands(cli, session)

    passwords = AliasedGroup(name="passwords", help="Manage password entries")
    add_password_commands(passwords, session)
    cli.add_command(passwords, aliases=("pw",))

    return cli


def run_command(args: Sequence[str], session: SessionConfig) -> Outcome:
    """
    Run one tokenized command against the session.

    Raises:
        MissingArgument: A required positional argument is missing
        DispatchError: Unknown command, sub-command, flag or extra argument
        KeyshellError: Any error raised by the handler itself
    """
    cli = build_cli(session)
    logger.debug("Dispatching %r", args[0] if args else None)
    try:
        rv = cli.main(
            args=list(args), prog_name=PROG_NAME, standalone_mode=False, obj=session
        )
    except click.MissingParameter as e:
        raise MissingArgument(e.param.name if e.param else "required") from None
    except click.UsageError as e:
        raise DispatchError(e.format_message()) from None
    except click.Abort:
        raise KeyshellError("Interrupted") from None
    except click.ClickException as e:
        raise KeyshellError(e.format_message()) from None

    # --help returns an exit code instead of an outcome
    return rv if isinstance(rv, Outcome) else Outcome.CONTINUE
