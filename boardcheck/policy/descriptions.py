"""Human-readable descriptions for wire codes.

These lookups are informational only. The rule functions in
:mod:`boardcheck.policy.engine` resolve everything through the enumerations
and never consult this module.
"""

from __future__ import annotations

from .codes import CompanionType, DestinationGroup, DocumentCode, PassengerCategory, coerce_code

DOCUMENT_DESCRIPTIONS: dict[DocumentCode, str] = {
    DocumentCode.PASSPORT: "Valid passport",
    DocumentCode.PASSPORT_WITH_AUTH: "Passport carrying express authorization for the minor to travel",
    DocumentCode.REGIONAL_STATE_ID: "State-issued identity card (accepted in place of the passport)",
    DocumentCode.BLOC_NATIONAL_ID: "National identity document of a bloc country (accepted in place of the passport)",
    DocumentCode.ONE_PARENT_AUTHORIZATION: "Notarized travel authorization from the absent parent",
    DocumentCode.BOTH_PARENTS_AUTHORIZATION: "Notarized travel authorization from both parents",
    DocumentCode.ELECTRONIC_TRAVEL_AUTHORIZATION: (
        "Electronic travel authorization (accepted in place of the notarized authorization)"
    ),
}

CATEGORY_DESCRIPTIONS: dict[PassengerCategory, str] = {
    PassengerCategory.ADULT_CITIZEN: "Adult citizen",
    PassengerCategory.MINOR_CITIZEN: "Minor citizen",
    PassengerCategory.FOREIGN_NATIONAL: "Foreign national",
}

COMPANION_DESCRIPTIONS: dict[CompanionType, str] = {
    CompanionType.BOTH_GUARDIANS: "Travelling with both parents or guardians",
    CompanionType.ONE_GUARDIAN: "Travelling with one parent or guardian",
    CompanionType.AUTHORIZED_ADULT: "Travelling with an authorized adult",
    CompanionType.UNACCOMPANIED: "Travelling unaccompanied",
}

DESTINATION_DESCRIPTIONS: dict[DestinationGroup, str] = {
    DestinationGroup.EXTENDED_BLOC: "Extended regional bloc country",
    DestinationGroup.OTHER: "Any other country",
}

EXTENDED_BLOC_COUNTRIES: tuple[str, ...] = (
    "Argentina",
    "Bolivia",
    "Chile",
    "Colombia",
    "Ecuador",
    "Paraguay",
    "Peru",
    "Uruguay",
    "Venezuela",
)


def describe_document(code: DocumentCode | int) -> str:
    return DOCUMENT_DESCRIPTIONS[coerce_code(DocumentCode, code)]


def describe_category(code: PassengerCategory | int) -> str:
    return CATEGORY_DESCRIPTIONS[coerce_code(PassengerCategory, code)]


def describe_companion(code: CompanionType | int) -> str:
    return COMPANION_DESCRIPTIONS[coerce_code(CompanionType, code)]


def describe_destination(code: DestinationGroup | int) -> str:
    return DESTINATION_DESCRIPTIONS[coerce_code(DestinationGroup, code)]
