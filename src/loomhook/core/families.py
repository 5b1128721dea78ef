"""
Weave families: the closed set of generation strategies.

Each family has a catalogue entry with its display name and the length of
its textile repeat unit. CUSTOM has no generator; its matrix is filled by
edits or by import.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class WeaveFamily(str, Enum):
    """Named weave structure."""

    PLAIN = "plain"
    TWILL = "twill"
    SATIN = "satin"
    BASKET = "basket"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "str | WeaveFamily") -> "WeaveFamily":
        """Look up a family by value, case-insensitively."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Weave family must be a string, got {type(value).__name__}")
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown weave family: {value!r}") from None

    @property
    def info(self) -> "FamilyInfo":
        return FAMILY_CATALOGUE[self]

    @property
    def is_generated(self) -> bool:
        """True for families produced by a closed-form rule."""
        return self is not WeaveFamily.CUSTOM


@dataclass(frozen=True)
class FamilyInfo:
    """Catalogue entry for a weave family."""

    display_name: str
    repeat: int  # Length of the repeat unit in both axes


FAMILY_CATALOGUE: dict[WeaveFamily, FamilyInfo] = {
    WeaveFamily.PLAIN: FamilyInfo("Plain Weave", 2),
    WeaveFamily.TWILL: FamilyInfo("2/2 Twill", 4),
    WeaveFamily.SATIN: FamilyInfo("Satin", 5),
    WeaveFamily.BASKET: FamilyInfo("Basket Weave", 4),
    WeaveFamily.CUSTOM: FamilyInfo("Custom Design", 1),
}
