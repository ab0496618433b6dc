"""
vault.py - The password database: entries, default policy and its encrypted form

Serialized layout:

    magic "KSHV" | version (u8) | time_cost, memory_cost, parallelism (u32 BE)
    | salt (16 bytes) | Fernet token over the JSON payload
"""
import json
import logging
import struct
from dataclasses import dataclass, field, replace
from typing import List, Optional

from argon2.exceptions import HashingError
from cryptography.fernet import InvalidToken

from .crypto import SALT_SIZE, Crypto, KdfParams, new_salt
from .errors import DuplicateEntry, EntryNotFound, VaultError, VaultOpenError
from .generator import generate_password
from .policy import BUILTIN_POLICY, PasswordPolicy, effective_policy

logger = logging.getLogger(__name__)

MAGIC = b"KSHV"
FORMAT_VERSION = 1
_HEADER = struct.Struct(">4sBIII")


@dataclass
class PasswordEntry:
    name: str
    password: str = ""
    description: str = ""
    policy_override: PasswordPolicy = field(default_factory=PasswordPolicy)

    def copy(self) -> "PasswordEntry":
        return replace(self, policy_override=self.policy_override.copy())

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "password": self.password,
            "description": self.description,
            "policy_override": self.policy_override.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PasswordEntry":
        return cls(
            name=data["name"],
            password=data.get("password", ""),
            description=data.get("description", ""),
            policy_override=PasswordPolicy.from_dict(data.get("policy_override")),
        )


class PasswordDatabase:
    """
    In-memory vault.

    Every mutating method sets ``modified``; save() clears it. Entries are
    handed out as copies, so changes only reach the vault through
    add_entry/update_entry/remove_entry/generate_password.
    """

    def __init__(self, crypto: Crypto, salt: bytes):
        self._crypto = crypto
        self._salt = salt
        self._default_policy = BUILTIN_POLICY.copy()
        self._entries: List[PasswordEntry] = []
        self.modified = False

    @classmethod
    def new(cls, passphrase: str, kdf: Optional[KdfParams] = None) -> "PasswordDatabase":
        """Create an empty vault protected by passphrase"""
        crypto = Crypto(kdf)
        salt = new_salt()
        crypto.create_key(passphrase, salt)
        return cls(crypto, salt)

    @classmethod
    def from_bytes(cls, data: bytes, passphrase: str) -> "PasswordDatabase":
        """
        Open a serialized vault.

        Raises:
            VaultOpenError: Wrong passphrase, tampered or corrupt data
        """
        prefix = _HEADER.size + SALT_SIZE
        if len(data) <= prefix:
            raise VaultOpenError("Not a keyshell vault (file too short)")

        magic, version, time_cost, memory_cost, parallelism = _HEADER.unpack_from(data)
        if magic != MAGIC:
            raise VaultOpenError("Not a keyshell vault")
        if version != FORMAT_VERSION:
            raise VaultOpenError(f"Unsupported vault version: {version}")

        salt = data[_HEADER.size:prefix]
        crypto = Crypto(KdfParams(time_cost, memory_cost, parallelism))
        try:
            crypto.create_key(passphrase, salt)
            payload = json.loads(crypto.decrypt(data[prefix:]).decode("utf-8"))
            db = cls(crypto, salt)
            db._default_policy = PasswordPolicy.from_dict(payload.get("policy"))
            db._entries = [PasswordEntry.from_dict(e) for e in payload.get("entries", [])]
        except InvalidToken:
            raise VaultOpenError("Invalid master password or corrupted vault") from None
        except HashingError as e:
            raise VaultOpenError(f"Corrupted vault header: {e}") from e
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise VaultOpenError(f"Corrupted vault contents: {e}") from e

        logger.debug("Opened vault with %d entries", len(db._entries))
        return db

    def save(self) -> bytes:
        """Serialize and encrypt the vault, clearing the modified flag"""
        payload = {
            "policy": self._default_policy.to_dict(),
            "entries": [e.to_dict() for e in self._entries],
        }
        token = self._crypto.encrypt(json.dumps(payload).encode("utf-8"))
        params = self._crypto.params
        header = _HEADER.pack(
            MAGIC, FORMAT_VERSION, params.time_cost, params.memory_cost, params.parallelism
        )
        self.modified = False
        logger.debug("Serialized vault with %d entries", len(self._entries))
        return header + self._salt + token

    def set_password(self, passphrase: str) -> None:
        """Re-key the vault in memory with a fresh salt"""
        self._salt = new_salt()
        self._crypto.create_key(passphrase, self._salt)
        self.modified = True

    # Entries

    def _index(self, name: str) -> Optional[int]:
        for idx, entry in enumerate(self._entries):
            if entry.name == name:
                return idx
        return None

    def _require(self, name: str) -> int:
        idx = self._index(name)
        if idx is None:
            raise EntryNotFound(name)
        return idx

    def entries(self) -> List[PasswordEntry]:
        return [e.copy() for e in self._entries]

    def get_entry(self, name: str) -> Optional[PasswordEntry]:
        idx = self._index(name)
        return None if idx is None else self._entries[idx].copy()

    def add_entry(self, entry: PasswordEntry) -> None:
        if not entry.name.strip():
            raise VaultError("Entry name cannot be empty")
        if self._index(entry.name) is not None:
            raise DuplicateEntry(entry.name)
        entry.policy_override.validate()

        self._entries.append(entry.copy())
        self.modified = True
        logger.debug("Added entry %s", entry.name)

    def update_entry(self, name: str, entry: PasswordEntry) -> None:
        """Replace the entry called name; entry.name may differ (rename)"""
        idx = self._require(name)
        if entry.name != name:
            if not entry.name.strip():
                raise VaultError("Entry name cannot be empty")
            if self._index(entry.name) is not None:
                raise DuplicateEntry(entry.name)
            logger.debug("Renamed entry %s to %s", name, entry.name)
        entry.policy_override.validate()

        self._entries[idx] = entry.copy()
        self.modified = True

    def remove_entry(self, name: str) -> PasswordEntry:
        idx = self._require(name)
        removed = self._entries.pop(idx)
        self.modified = True
        logger.debug("Removed entry %s", name)
        return removed

    # Policies

    @property
    def default_policy(self) -> PasswordPolicy:
        return self._default_policy.copy()

    def set_default_policy(self, policy: PasswordPolicy) -> None:
        """Replace the default policy wholesale"""
        policy.validate()
        self._default_policy = policy.copy()
        self.modified = True

    def effective_policy(self, name: str) -> PasswordPolicy:
        entry = self._entries[self._require(name)]
        return effective_policy(entry.policy_override, self._default_policy)

    def generate_password(self, name: str) -> str:
        """Generate and store a new password for the entry called name"""
        idx = self._require(name)
        password = generate_password(self.effective_policy(name))
        self._entries[idx].password = password
        self.modified = True
        return password
