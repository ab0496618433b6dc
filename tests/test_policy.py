"""Tests for keyshell.policy: policy fallback and how it is displayed."""

import pytest

from keyshell.errors import VaultError
from keyshell.policy import (
    BUILTIN_POLICY,
    PasswordPolicy,
    ResolvedField,
    describe,
    describe_default,
    effective_policy,
    resolve,
)

DEFAULT = PasswordPolicy(
    length=16,
    use_lowercase=False,
    use_uppercase=True,
    use_numbers=True,
    use_special=True,
)


class TestResolve:
    def test_no_override_uses_default(self):
        length, characters = resolve(PasswordPolicy(), DEFAULT)
        assert length == ResolvedField("length", 16, False)
        assert [c.label for c in characters] == ["uppercase", "numbers", "special characters"]
        assert not any(c.overridden for c in characters)

    def test_override_wins_field_by_field(self):
        override = PasswordPolicy(length=8, use_lowercase=True, use_numbers=False)
        length, characters = resolve(override, DEFAULT)
        assert length == ResolvedField("length", 8, True)
        assert characters == [
            ResolvedField("lowercase", True, True),
            ResolvedField("uppercase", True, False),
            ResolvedField("special characters", True, False),
        ]

    def test_false_default_and_unset_override_is_omitted(self):
        _, characters = resolve(PasswordPolicy(), PasswordPolicy())
        assert characters == []

    def test_order_is_fixed(self):
        override = PasswordPolicy(use_special=True, use_lowercase=True)
        _, characters = resolve(override, PasswordPolicy(use_numbers=True, use_uppercase=True))
        assert [c.label for c in characters] == [
            "lowercase",
            "uppercase",
            "numbers",
            "special characters",
        ]


class TestDescribe:
    def test_entry_without_override(self):
        assert describe(PasswordPolicy(), DEFAULT) == [
            "Length: 16 (default)",
            "Characters: uppercase (default), numbers (default), special characters (default)",
        ]

    def test_entry_with_override(self):
        override = PasswordPolicy(length=20, use_lowercase=True, use_special=False)
        assert describe(override, DEFAULT) == [
            "Length: 20",
            "Characters: lowercase, uppercase (default), numbers (default)",
        ]

    def test_unset_length_everywhere(self):
        assert describe(PasswordPolicy(), PasswordPolicy())[0] == "Length: not set (default)"

    def test_default_policy_has_no_annotation(self):
        assert describe_default(DEFAULT) == [
            "Length: 16",
            "Characters: uppercase, numbers, special characters",
        ]


class TestEffectivePolicy:
    def test_three_levels(self):
        override = PasswordPolicy(use_numbers=False)
        default = PasswordPolicy(length=12, use_lowercase=None, use_uppercase=False)
        policy = effective_policy(override, default)
        assert policy == PasswordPolicy(
            length=12,
            use_lowercase=True,
            use_uppercase=False,
            use_numbers=False,
            use_special=True,
        )

    def test_empty_layers_give_builtin(self):
        assert effective_policy(PasswordPolicy(), PasswordPolicy()) == BUILTIN_POLICY


class TestPasswordPolicy:
    def test_roundtrip_dict_keeps_unset(self):
        policy = PasswordPolicy(length=10, use_special=False)
        assert PasswordPolicy.from_dict(policy.to_dict()) == policy

    def test_from_none(self):
        assert PasswordPolicy.from_dict(None).is_empty()

    @pytest.mark.parametrize("length", [0, -3])
    def test_validate_rejects_non_positive_length(self, length):
        with pytest.raises(VaultError):
            PasswordPolicy(length=length).validate()

    def test_copy_is_independent(self):
        policy = PasswordPolicy(length=5)
        clone = policy.copy()
        clone.length = 6
        assert policy.length == 5
