"""
errors.py - Exception hierarchy shared by the vault engine and the command layer
"""


class KeyshellError(Exception):
    """Base class for every error keyshell raises on purpose"""


class MissingArgument(KeyshellError):
    """A required positional argument was not given"""

    def __init__(self, name: str = "name"):
        super().__init__(f"Missing {name} argument")
        self.name = name


class EntryNotFound(KeyshellError):
    """An entry name did not resolve in the vault"""

    def __init__(self, name: str):
        super().__init__(f"Entry {name} not found")
        self.name = name


class EmptyPassword(KeyshellError):
    def __init__(self):
        super().__init__("Password cannot be empty")


class PasswordMismatch(KeyshellError):
    def __init__(self):
        super().__init__("Passwords do not match")


class DispatchError(KeyshellError):
    """Unknown command, sub-command or flag"""


class ParseError(KeyshellError):
    """A line of interactive input could not be parsed"""


class VaultError(KeyshellError):
    """Raised by the vault engine"""


class DuplicateEntry(VaultError):
    def __init__(self, name: str):
        super().__init__(f"Entry {name} already exists")
        self.name = name


class VaultOpenError(VaultError):
    """Wrong passphrase, tampered or unreadable vault data"""
