"""
policy.py - Password generation policies and how they fall back to each other

A policy has five independently optional fields. An entry's override policy
falls back to the vault's default policy field by field, and the default
policy falls back to BUILTIN_POLICY.
"""
from dataclasses import dataclass, fields, replace
from typing import Dict, List, Optional, Tuple

from .errors import VaultError


@dataclass
class PasswordPolicy:
    """Generation rules; None means "not set" for every field"""

    length: Optional[int] = None
    use_lowercase: Optional[bool] = None
    use_uppercase: Optional[bool] = None
    use_numbers: Optional[bool] = None
    use_special: Optional[bool] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def validate(self) -> None:
        if self.length is not None and self.length <= 0:
            raise VaultError("Password policy length can't be 0 or lower")

    def copy(self) -> "PasswordPolicy":
        return replace(self)

    def to_dict(self) -> Dict[str, Optional[object]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "PasswordPolicy":
        data = data or {}
        return cls(**{f.name: data.get(f.name) for f in fields(cls)})


# What the engine uses when neither the entry nor the vault says anything
BUILTIN_POLICY = PasswordPolicy(
    length=32,
    use_lowercase=True,
    use_uppercase=True,
    use_numbers=True,
    use_special=True,
)

# Display order is part of the output format
CHARACTER_CLASSES: Tuple[Tuple[str, str], ...] = (
    ("use_lowercase", "lowercase"),
    ("use_uppercase", "uppercase"),
    ("use_numbers", "numbers"),
    ("use_special", "special characters"),
)


@dataclass(frozen=True)
class ResolvedField:
    """One field after resolving an override against a default.

    ``overridden`` is False when the value came from the default policy.
    """

    label: str
    value: Optional[object]
    overridden: bool


def resolve(
    override: PasswordPolicy, default: PasswordPolicy
) -> Tuple[ResolvedField, List[ResolvedField]]:
    """
    Resolve an override policy against a default policy for display.

    Returns the length field plus the enabled character classes, in
    CHARACTER_CLASSES order. A character class is listed only when it is
    enabled, either by the override or (override unset) by the default.
    """
    if override.length is not None:
        length = ResolvedField("length", override.length, True)
    else:
        length = ResolvedField("length", default.length, False)

    characters = []
    for attr, label in CHARACTER_CLASSES:
        value = getattr(override, attr)
        if value is True:
            characters.append(ResolvedField(label, True, True))
        elif value is None and getattr(default, attr) is True:
            characters.append(ResolvedField(label, True, False))

    return length, characters


def effective_policy(
    override: PasswordPolicy,
    default: PasswordPolicy,
    builtin: PasswordPolicy = BUILTIN_POLICY,
) -> PasswordPolicy:
    """Merge override -> default -> builtin into a fully set policy"""
    merged = {}
    for f in fields(PasswordPolicy):
        for layer in (override, default, builtin):
            value = getattr(layer, f.name)
            if value is not None:
                merged[f.name] = value
                break
        else:
            merged[f.name] = None
    return PasswordPolicy(**merged)


def _render(field: ResolvedField, annotate: bool) -> str:
    text = "not set" if field.value is None else str(field.value)
    if field.label != "length":
        text = field.label
    if annotate and not field.overridden:
        text += " (default)"
    return text


def describe(override: PasswordPolicy, default: PasswordPolicy) -> List[str]:
    """Lines shown by "passwords policy view" for an entry"""
    length, characters = resolve(override, default)
    return [
        f"Length: {_render(length, True)}",
        "Characters: " + ", ".join(_render(c, True) for c in characters),
    ]


def describe_default(policy: PasswordPolicy) -> List[str]:
    """Lines shown by "default-policy view"; there is no override layer"""
    length, characters = resolve(PasswordPolicy(), policy)
    return [
        f"Length: {_render(length, False)}",
        "Characters: " + ", ".join(_render(c, False) for c in characters),
    ]
