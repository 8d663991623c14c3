"""
Link Management Value Objects

Immutable value objects for link patch semantics.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class UpdateKind(Enum):
    """How a patch field should be applied."""
    UNCHANGED = "unchanged"
    CLEAR = "clear"
    SET = "set"


@dataclass(frozen=True)
class FieldUpdate(Generic[T]):
    """
    Value object for a three-state patch field.

    Distinguishes "leave the field alone" from "remove the value" from
    "replace the value", which a single nullable argument cannot express.
    """
    kind: UpdateKind
    value: Optional[T] = None

    def __post_init__(self):
        if self.kind != UpdateKind.SET and self.value is not None:
            raise ValueError(f"{self.kind.value} update cannot carry a value")

    @classmethod
    def unchanged(cls) -> "FieldUpdate[Any]":
        return cls(UpdateKind.UNCHANGED)

    @classmethod
    def clear(cls) -> "FieldUpdate[Any]":
        return cls(UpdateKind.CLEAR)

    @classmethod
    def set_to(cls, value: T) -> "FieldUpdate[T]":
        return cls(UpdateKind.SET, value)

    @classmethod
    def from_password(cls, value: Optional[str], present: bool = True) -> "FieldUpdate[str]":
        """
        Build a password update from a transport-level field.

        Args:
            value: Submitted password, may be empty
            present: Whether the caller submitted the field at all

        Returns:
            UNCHANGED when absent, CLEAR when empty, SET otherwise
        """
        if not present or value is None:
            return cls.unchanged()
        if value == "":
            return cls.clear()
        return cls.set_to(value)

    @classmethod
    def from_provider_id(cls, value: Optional[int], present: bool = True) -> "FieldUpdate[int]":
        """
        Build a provider binding update from a transport-level field.

        Returns:
            UNCHANGED when absent, CLEAR when zero or negative, SET otherwise
        """
        if not present or value is None:
            return cls.unchanged()
        if value <= 0:
            return cls.clear()
        return cls.set_to(value)

    @property
    def is_unchanged(self) -> bool:
        return self.kind == UpdateKind.UNCHANGED

    @property
    def is_clear(self) -> bool:
        return self.kind == UpdateKind.CLEAR

    @property
    def is_set(self) -> bool:
        return self.kind == UpdateKind.SET
