"""
shell.py - The interactive prompt loop
"""
import logging
import shlex
from typing import List

import click

from .errors import ParseError
from .router import build_cli, run_command
from .session import Outcome, SessionConfig

logger = logging.getLogger(__name__)

CHANGES_DISCARDED = "End of input: unsaved changes discarded"


def tokenize(line: str) -> List[str]:
    """Split a command line with shell quoting and escaping rules"""
    try:
        return shlex.split(line)
    except ValueError as e:
        raise ParseError(str(e)) from None


def complete_entry_name(session: SessionConfig, line: str, text: str) -> List[str]:
    """
    Entry names starting with text, when text is the first argument of a
    command that takes an entry name (e.g. "pw show gi<TAB>").
    """
    try:
        words = shlex.split(line)
    except ValueError:
        return []
    if text and words:
        words = words[:-1]
    if not words:
        return []

    node = build_cli(session)
    for word in words:
        if not isinstance(node, click.Group):
            return []
        node = node.get_command(None, word)
        if node is None:
            return []

    if isinstance(node, click.Group):
        return []
    arguments = [p for p in node.params if isinstance(p, click.Argument)]
    if not arguments or arguments[0].name != "name":
        return []

    return sorted(e.name for e in session.vault.entries() if e.name.startswith(text))


class Shell:
    """
    Reads one line at a time and runs it as a command until a command
    asks to exit.

    Ctrl-C and end of input on the prompt both run "exit". On a terminal a
    refused exit just shows the prompt again. When input is not
    interactive nothing more can arrive, so a refused exit ends the loop
    and reports the unsaved changes as discarded.
    """

    def __init__(self, session: SessionConfig):
        self.session = session

    def step(self, line: str) -> Outcome:
        """Run one input line, reporting any error instead of raising it"""
        if not line.strip():
            return Outcome.CONTINUE

        try:
            return run_command(tokenize(line), self.session)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            self.session.echo(f"ERROR: {e}")
            return Outcome.CONTINUE

    def run(self) -> bool:
        """
        Run until exit.

        Returns:
            False if the input ended with unsaved changes, True otherwise
        """
        line_input = self.session.line_input
        line_input.set_completer(
            lambda line, text: complete_entry_name(self.session, line, text)
        )
        clean = True

        while True:
            end_of_input = False
            try:
                line = line_input.readline()
            except KeyboardInterrupt:
                self.session.echo("")
                line = "exit"
            except EOFError:
                self.session.echo("")
                line = "exit"
                end_of_input = True

            if self.step(line) is Outcome.EXIT:
                break
            if end_of_input and not line_input.interactive():
                self.session.echo(CHANGES_DISCARDED)
                clean = False
                break

        line_input.close()
        return clean
