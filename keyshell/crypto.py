"""
crypto.py - Key derivation and encryption of the vault payload
"""
import base64
import os
from dataclasses import dataclass
from typing import Optional

from argon2.low_level import Type, hash_secret_raw
from cryptography.fernet import Fernet

SALT_SIZE = 16


@dataclass(frozen=True)
class KdfParams:
    """Argon2id cost parameters, stored alongside every vault"""

    time_cost: int = 3          # iterations
    memory_cost: int = 65536    # KiB (64MB)
    parallelism: int = 4


DEFAULT_KDF = KdfParams()


def new_salt() -> bytes:
    return os.urandom(SALT_SIZE)


class Crypto:
    """Handles encryption/decryption using Fernet (AES-128 + HMAC)"""

    def __init__(self, params: Optional[KdfParams] = None):
        self.params = params or DEFAULT_KDF
        self.key = None

    def create_key(self, master_password: str, salt: bytes) -> None:
        """
        Derive an encryption key from the master password.

        Argon2id is memory-hard, so guessing the passphrase offline is
        expensive. The salt makes the same passphrase produce different
        keys for different vaults (and after every re-key).
        """
        raw = hash_secret_raw(
            secret=master_password.encode("utf-8"),
            salt=salt,
            time_cost=self.params.time_cost,
            memory_cost=self.params.memory_cost,
            parallelism=self.params.parallelism,
            hash_len=32,
            type=Type.ID,
        )
        self.key = Fernet(base64.urlsafe_b64encode(raw))

    def encrypt(self, data: bytes) -> bytes:
        if not self.key:
            raise ValueError("No encryption key set. Call create_key first.")
        return self.key.encrypt(data)

    def decrypt(self, token: bytes) -> bytes:
        """
        Decrypt a Fernet token.

        Raises cryptography.fernet.InvalidToken for a wrong key or
        tampered data.
        """
        if not self.key:
            raise ValueError("No encryption key set. Call create_key first.")
        return self.key.decrypt(token)
