"""
Shared test fixtures: fast key derivation, a scripted terminal and a
session whose output, writes and clipboard are captured in lists.
"""

from dataclasses import dataclass, field
from typing import List

import pytest

from keyshell import crypto
from keyshell.crypto import KdfParams
from keyshell.session import SessionConfig
from keyshell.vault import PasswordDatabase

FAST_KDF = KdfParams(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    """Argon2 at production cost makes every test take ~100ms per vault."""
    monkeypatch.setattr(crypto, "DEFAULT_KDF", FAST_KDF)


class ScriptedInput:
    """
    Stands in for the terminal.

    ``answers`` maps a prompt to its answer (a list gives one answer per
    call); unknown prompts get a blank answer. ``lines`` feeds the main
    prompt; an exception class or instance in it is raised instead.
    Running out of lines raises EOFError. ``interactive`` says whether it
    behaves like a terminal.
    """

    def __init__(self, answers=None, lines=None, interactive=False):
        self.is_terminal = interactive
        self.completer = None
        self.answers = dict(answers or {})
        self.lines = list(lines or [])
        self.prompts: List[str] = []
        self.closed = False

    def _answer(self, prompt):
        self.prompts.append(prompt)
        value = self.answers.get(prompt, "")
        if isinstance(value, list):
            value = value.pop(0)
        if isinstance(value, BaseException) or (
            isinstance(value, type) and issubclass(value, BaseException)
        ):
            raise value
        return value

    def readline(self, prompt=None):
        if prompt is not None:
            return self._answer(prompt)
        if not self.lines:
            raise EOFError
        item = self.lines.pop(0)
        if isinstance(item, BaseException) or (
            isinstance(item, type) and issubclass(item, BaseException)
        ):
            raise item
        return item

    def read_password(self, prompt):
        return self._answer(prompt)

    def interactive(self):
        return self.is_terminal

    def set_completer(self, complete):
        self.completer = complete

    def close(self):
        self.closed = True


@dataclass
class Harness:
    session: SessionConfig
    output: List[str] = field(default_factory=list)
    written: List[bytes] = field(default_factory=list)
    copied: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.output)

    @property
    def line_input(self) -> ScriptedInput:
        return self.session.line_input


@pytest.fixture
def vault():
    return PasswordDatabase.new("testpassword")


@pytest.fixture
def make_harness(vault):
    def factory(answers=None, lines=None, db=None, interactive=False):
        harness = Harness(session=None)
        harness.session = SessionConfig(
            vault=db if db is not None else vault,
            file_path="test.vault",
            line_input=ScriptedInput(answers, lines, interactive),
            write_file=harness.written.append,
            echo=harness.output.append,
            copy=harness.copied.append,
        )
        return harness

    return factory
