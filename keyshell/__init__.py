"""
keyshell - Interactive shell for an encrypted password vault.

Features:
- Argon2id key derivation and Fernet (AES + HMAC) encryption
- Per-entry password policies that fall back to a vault-wide default
- One-shot commands or a persistent prompt with an unsaved-changes guard
"""

__version__ = "1.0.0"
__license__ = "MIT"


def get_version():
    """Get the current version string."""
    return __version__


from .policy import PasswordPolicy
from .vault import PasswordDatabase, PasswordEntry

__all__ = ["PasswordDatabase", "PasswordEntry", "PasswordPolicy", "get_version"]
