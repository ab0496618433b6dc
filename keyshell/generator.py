"""
generator.py - Secure password generation from a resolved policy
"""
import secrets
import string
from typing import List

from .errors import VaultError
from .policy import PasswordPolicy


def _character_sets(policy: PasswordPolicy) -> List[str]:
    # Same order as policy.CHARACTER_CLASSES
    sets = []
    if policy.use_lowercase:
        sets.append(string.ascii_lowercase)
    if policy.use_uppercase:
        sets.append(string.ascii_uppercase)
    if policy.use_numbers:
        sets.append(string.digits)
    if policy.use_special:
        sets.append(string.punctuation)
    return sets


def generate_password(policy: PasswordPolicy) -> str:
    """
    Generate a cryptographically secure random password.

    Args:
        policy: A fully resolved policy (see policy.effective_policy)

    Returns:
        A password of policy.length characters

    Raises:
        VaultError: If the length is not positive or no character class is enabled
    """
    length = policy.length or 0
    if length < 1:
        raise VaultError("Password length must be at least 1")

    sets = _character_sets(policy)
    if not sets:
        raise VaultError("At least one character type must be enabled")

    characters = "".join(sets)
    password = [secrets.choice(characters) for _ in range(length)]

    # Make sure every enabled class shows up when there is room for it
    if length >= len(sets):
        positions = list(range(length))
        for chars in sets:
            if any(c in chars for c in password):
                continue
            pos = positions.pop(secrets.randbelow(len(positions)))
            while _sole_member(password, pos, sets) and positions:
                pos = positions.pop(secrets.randbelow(len(positions)))
            password[pos] = secrets.choice(chars)

    return "".join(password)


def _sole_member(password: List[str], pos: int, sets: List[str]) -> bool:
    """True if password[pos] is the only character from its class"""
    for chars in sets:
        if password[pos] in chars:
            return sum(1 for c in password if c in chars) == 1
    return False
