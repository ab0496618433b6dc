"""
prompts.py - Field-by-field policy questions

A blank answer always means "not set". Length answers must be integers;
anything else prints a warning and leaves the length unset. Boolean
answers are y/n (any case); anything else is "not set".
"""
from typing import Optional

from .errors import ParseError
from .policy import PasswordPolicy
from .session import SessionConfig

LENGTH_PROMPT = "Length: "
CHARACTER_PROMPTS = (
    ("use_lowercase", "Use Lowercase [y/n]: "),
    ("use_uppercase", "Use Uppercase [y/n]: "),
    ("use_numbers", "Use Numbers [y/n]: "),
    ("use_special", "Use Special characters [y/n]: "),
)


def _ask(prompt: str, session: SessionConfig) -> str:
    try:
        return session.line_input.readline(prompt)
    except EOFError:
        return ""


def parse_length(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise ParseError(f"Not a number: {text!r}") from None


def prompt_int(prompt: str, session: SessionConfig) -> Optional[int]:
    answer = _ask(prompt, session).strip()
    if not answer:
        return None
    try:
        return parse_length(answer)
    except ParseError:
        session.echo("Could not parse value. Using default")
        return None


def prompt_bool(prompt: str, session: SessionConfig) -> Optional[bool]:
    answer = _ask(prompt, session).strip().lower()
    if answer == "y":
        return True
    if answer == "n":
        return False
    return None


def collect_policy(session: SessionConfig, current: PasswordPolicy) -> PasswordPolicy:
    """
    Ask for every policy field, starting from a copy of current.

    Every field is overwritten by its answer, so fields left blank end up
    unset even if current had a value for them.
    """
    # TODO: keep current values on blank answers once entry edit and policy
    # change are unified on partial-update semantics
    policy = current.copy()
    policy.length = prompt_int(LENGTH_PROMPT, session)
    for attr, prompt in CHARACTER_PROMPTS:
        setattr(policy, attr, prompt_bool(prompt, session))
    return policy
