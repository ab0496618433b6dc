'''
storage.py - Reads and writes the vault file as a whole
'''
import logging
import os

logger = logging.getLogger(__name__)


class VaultFile:
    """The file a vault is loaded from and saved to"""

    def __init__(self, filename: str):
        """
        Args:
            filename: Path of the encrypted vault file
        """
        self.filename = filename

    def exists(self) -> bool:
        return os.path.exists(self.filename)

    def read(self) -> bytes:
        """Return the full contents of the vault file"""
        with open(self.filename, 'rb') as f:
            return f.read()

    def write(self, data: bytes) -> None:
        """
        Replace the vault file with data.

        The file is made readable/writable by its owner only (600) on
        Unix-like systems.
        """
        with open(self.filename, 'wb') as f:
            f.write(data)

        if os.name == 'posix':
            os.chmod(self.filename, 0o600)
        logger.debug("Wrote %d bytes to %s", len(data), self.filename)
