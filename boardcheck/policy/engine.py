"""Boarding document policy: category classification and document derivation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..errors import InvalidAge
from .codes import (
    CompanionType,
    DestinationGroup,
    DocumentCode,
    Nationality,
    PassengerCategory,
    PassengerInput,
)

MAX_AGE = 150
ADULT_AGE = 18


@dataclass(frozen=True)
class Evaluation:
    """Outcome of evaluating a passenger against the boarding policy."""

    can_board: bool
    category: PassengerCategory
    required_documents: tuple[DocumentCode, ...]
    optional_documents: tuple[DocumentCode, ...]

    def to_dict(self) -> dict[str, object]:
        return {
            "can_board": self.can_board,
            "category": int(self.category),
            "required_documents": [int(code) for code in self.required_documents],
            "optional_documents": [int(code) for code in self.optional_documents],
        }


def _check_age(age: int, maximum: int = MAX_AGE) -> None:
    if age < 0 or age > maximum:
        raise InvalidAge(age, maximum)


def classify(nationality: Nationality, age: int) -> PassengerCategory:
    """Resolve the regulatory category. Foreign nationality overrides age."""

    _check_age(age)
    if nationality == Nationality.FOREIGN:
        return PassengerCategory.FOREIGN_NATIONAL
    if age >= ADULT_AGE:
        return PassengerCategory.ADULT_CITIZEN
    return PassengerCategory.MINOR_CITIZEN


def adult_citizen_rule(destination: DestinationGroup) -> Evaluation:
    optional: tuple[DocumentCode, ...] = ()
    if destination == DestinationGroup.EXTENDED_BLOC:
        optional = (DocumentCode.REGIONAL_STATE_ID,)
    return Evaluation(
        can_board=True,
        category=PassengerCategory.ADULT_CITIZEN,
        required_documents=(DocumentCode.PASSPORT,),
        optional_documents=optional,
    )


def foreign_national_rule(destination: DestinationGroup) -> Evaluation:
    optional: tuple[DocumentCode, ...] = ()
    if destination == DestinationGroup.EXTENDED_BLOC:
        optional = (DocumentCode.BLOC_NATIONAL_ID,)
    return Evaluation(
        can_board=True,
        category=PassengerCategory.FOREIGN_NATIONAL,
        required_documents=(DocumentCode.PASSPORT,),
        optional_documents=optional,
    )


def minor_citizen_rule(
    age: int,
    companion: CompanionType,
    destination: DestinationGroup,
    has_express_authorization: bool,
) -> Evaluation:
    """Derive the documents for a citizen under 18.

    A passport carrying express travel authorization replaces any separate
    parental authorization. Without it, a minor travelling with one guardian
    needs the absent parent's authorization, and a minor travelling with
    another adult or alone needs authorization from both parents, for which an
    electronic travel authorization is accepted as a substitute.
    """

    _check_age(age, ADULT_AGE - 1)

    needs_both_parents = False
    if companion == CompanionType.BOTH_GUARDIANS:
        required: tuple[DocumentCode, ...] = (DocumentCode.PASSPORT,)
    elif has_express_authorization:
        required = (DocumentCode.PASSPORT_WITH_AUTH,)
    elif companion == CompanionType.ONE_GUARDIAN:
        required = (DocumentCode.PASSPORT, DocumentCode.ONE_PARENT_AUTHORIZATION)
    else:
        required = (DocumentCode.PASSPORT, DocumentCode.BOTH_PARENTS_AUTHORIZATION)
        needs_both_parents = True

    optional: list[DocumentCode] = []
    if destination == DestinationGroup.EXTENDED_BLOC:
        optional.append(DocumentCode.REGIONAL_STATE_ID)
    if needs_both_parents:
        optional.append(DocumentCode.ELECTRONIC_TRAVEL_AUTHORIZATION)

    return Evaluation(
        can_board=True,
        category=PassengerCategory.MINOR_CITIZEN,
        required_documents=required,
        optional_documents=tuple(optional),
    )


_RULES: dict[PassengerCategory, Callable[[PassengerInput], Evaluation]] = {
    PassengerCategory.FOREIGN_NATIONAL: lambda p: foreign_national_rule(p.destination),
    PassengerCategory.ADULT_CITIZEN: lambda p: adult_citizen_rule(p.destination),
    PassengerCategory.MINOR_CITIZEN: lambda p: minor_citizen_rule(
        p.age, p.companion, p.destination, p.has_express_authorization
    ),
}


def evaluate(passenger: PassengerInput) -> Evaluation:
    """Classify ``passenger`` and apply the matching category rule.

    Raises :class:`~boardcheck.errors.InvalidAge` when the age is outside
    ``0..150``.
    """

    category = classify(passenger.nationality, passenger.age)
    return _RULES[category](passenger)
