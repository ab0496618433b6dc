"""Tests for keyshell.admin: master password, default policy, save and exit."""

import pytest

from keyshell.admin import UNSAVED_CHANGES, check_new_passphrase
from keyshell.errors import EmptyPassword, PasswordMismatch, VaultError, VaultOpenError
from keyshell.policy import PasswordPolicy
from keyshell.router import run_command
from keyshell.session import Outcome
from keyshell.vault import PasswordDatabase, PasswordEntry

NEW = "New master password: "
CONFIRM = "Confirm new password: "


class TestCheckNewPassphrase:
    def test_ok(self):
        check_new_passphrase("abc", "abc")

    def test_blank(self):
        with pytest.raises(EmptyPassword):
            check_new_passphrase("   ", "   ")

    def test_mismatch(self):
        with pytest.raises(PasswordMismatch):
            check_new_passphrase("abc", "abd")


class TestChangeMasterPassword:
    def test_change_then_reopen(self, vault, make_harness):
        vault.add_entry(PasswordEntry(name="test", password="test", description="test"))
        h = make_harness({NEW: "anotherpassword", CONFIRM: "anotherpassword"})

        run_command(["change-master-password"], h.session)

        assert h.output == [
            "Master password changed. Please save the database to use the new password."
        ]
        assert vault.modified is True
        assert h.written == []

        data = vault.save()
        assert PasswordDatabase.from_bytes(data, "anotherpassword").get_entry("test").password == "test"
        with pytest.raises(VaultOpenError):
            PasswordDatabase.from_bytes(data, "testpassword")

    def test_mismatch(self, vault, make_harness):
        h = make_harness({NEW: "one", CONFIRM: "two"})
        with pytest.raises(PasswordMismatch):
            run_command(["cmp"], h.session)
        assert vault.modified is False

    def test_empty(self, make_harness):
        with pytest.raises(EmptyPassword):
            run_command(["cmp"], make_harness().session)


class TestDefaultPolicy:
    def test_view(self, vault, make_harness):
        vault.set_default_policy(
            PasswordPolicy(
                length=16,
                use_lowercase=False,
                use_uppercase=True,
                use_numbers=True,
                use_special=True,
            )
        )
        h = make_harness()
        run_command(["default-policy", "view"], h.session)
        assert h.text == "Length: 16\nCharacters: uppercase, numbers, special characters"

    def test_change(self, vault, make_harness):
        h = make_harness(
            {
                "Length: ": "24",
                "Use Lowercase [y/n]: ": "y",
                "Use Uppercase [y/n]: ": "n",
                "Use Numbers [y/n]: ": "y",
                "Use Special characters [y/n]: ": "n",
            }
        )
        run_command(["dp", "c"], h.session)

        assert vault.default_policy == PasswordPolicy(
            length=24,
            use_lowercase=True,
            use_uppercase=False,
            use_numbers=True,
            use_special=False,
        )
        assert vault.modified is True

    def test_blank_answers_unset_everything(self, vault, make_harness):
        run_command(["default-policy", "change"], make_harness().session)
        assert vault.default_policy.is_empty()

    def test_zero_length_is_rejected(self, vault, make_harness):
        with pytest.raises(VaultError):
            run_command(["dp", "c"], make_harness({"Length: ": "0"}).session)
        assert vault.default_policy.length == 32


class TestSave:
    def test_save(self, vault, make_harness):
        vault.add_entry(PasswordEntry(name="a", password="b"))
        h = make_harness()
        run_command(["save"], h.session)

        assert h.output == ["Password database saved to test.vault"]
        assert len(h.written) == 1
        assert vault.modified is False
        assert PasswordDatabase.from_bytes(h.written[0], "testpassword").get_entry("a").password == "b"

    def test_failed_write_keeps_modified(self, vault, make_harness):
        vault.add_entry(PasswordEntry(name="a", password="b"))
        h = make_harness()

        def broken(data):
            raise OSError("disk full")

        h.session.write_file = broken
        with pytest.raises(OSError, match="disk full"):
            run_command(["save"], h.session)
        assert vault.modified is True


class TestExit:
    def test_clean_vault_exits(self, make_harness):
        assert run_command(["exit"], make_harness().session) is Outcome.EXIT

    def test_alias(self, make_harness):
        assert run_command(["quit"], make_harness().session) is Outcome.EXIT

    def test_unsaved_changes_refuse(self, vault, make_harness):
        vault.add_entry(PasswordEntry(name="a"))
        h = make_harness()
        assert run_command(["exit"], h.session) is Outcome.CONTINUE
        assert h.output == [UNSAVED_CHANGES]

    def test_force(self, vault, make_harness):
        vault.add_entry(PasswordEntry(name="a"))
        h = make_harness()
        assert run_command(["exit", "-f"], h.session) is Outcome.EXIT
        assert h.written == []
