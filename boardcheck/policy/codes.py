"""Wire-level codes and the transient passenger input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping, Type, TypeVar

_E = TypeVar("_E", bound=IntEnum)


class Nationality(IntEnum):
    CITIZEN = 0
    FOREIGN = 1


class CompanionType(IntEnum):
    BOTH_GUARDIANS = 0
    ONE_GUARDIAN = 1
    AUTHORIZED_ADULT = 2
    UNACCOMPANIED = 3


class DestinationGroup(IntEnum):
    EXTENDED_BLOC = 0
    OTHER = 1


class PassengerCategory(IntEnum):
    ADULT_CITIZEN = 0
    MINOR_CITIZEN = 1
    FOREIGN_NATIONAL = 2


class DocumentCode(IntEnum):
    """Document kinds. The ordinals are part of the external contract."""

    PASSPORT = 0
    PASSPORT_WITH_AUTH = 1
    REGIONAL_STATE_ID = 2
    BLOC_NATIONAL_ID = 3
    ONE_PARENT_AUTHORIZATION = 4
    BOTH_PARENTS_AUTHORIZATION = 5
    ELECTRONIC_TRAVEL_AUTHORIZATION = 6


def coerce_code(enum_type: Type[_E], value: Any) -> _E:
    """Convert an integer ordinal or a member name into ``enum_type``.

    Raises a :class:`ValueError` for anything outside the enumeration.
    """

    if isinstance(value, enum_type):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid {enum_type.__name__} code: {value!r}")
    if isinstance(value, int):
        try:
            return enum_type(value)
        except ValueError as exc:
            raise ValueError(f"Invalid {enum_type.__name__} code: {value}") from exc
    if isinstance(value, str):
        try:
            return enum_type[value.upper()]
        except KeyError as exc:
            raise ValueError(f"Invalid {enum_type.__name__} name: {value!r}") from exc
    raise ValueError(f"Invalid {enum_type.__name__} code: {value!r}")


@dataclass(frozen=True)
class PassengerInput:
    """Caller-supplied passenger attributes for a single evaluation."""

    nationality: Nationality
    age: int
    companion: CompanionType = CompanionType.BOTH_GUARDIANS
    destination: DestinationGroup = DestinationGroup.OTHER
    has_express_authorization: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PassengerInput":
        """Build an input from its wire form.

        Keys are ``nationality``, ``age``, ``companion``, ``destination`` and
        ``has_express_authorization``. Only ``nationality`` and ``age`` are
        mandatory.
        """

        if "nationality" not in data or "age" not in data:
            raise ValueError("Passenger input must include nationality and age")

        age = data["age"]
        if isinstance(age, bool) or not isinstance(age, int):
            raise ValueError(f"Passenger age must be an integer, got {age!r}")

        authorization = data.get("has_express_authorization", False)
        if not isinstance(authorization, bool):
            raise ValueError("has_express_authorization must be a boolean")

        return cls(
            nationality=coerce_code(Nationality, data["nationality"]),
            age=age,
            companion=coerce_code(CompanionType, data.get("companion", CompanionType.BOTH_GUARDIANS)),
            destination=coerce_code(DestinationGroup, data.get("destination", DestinationGroup.OTHER)),
            has_express_authorization=authorization,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "nationality": int(self.nationality),
            "age": self.age,
            "companion": int(self.companion),
            "destination": int(self.destination),
            "has_express_authorization": self.has_express_authorization,
        }
