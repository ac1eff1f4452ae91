"""Boarding document policy engine."""

from .codes import (  # noqa: F401
    CompanionType,
    DestinationGroup,
    DocumentCode,
    Nationality,
    PassengerCategory,
    PassengerInput,
)
from .engine import (  # noqa: F401
    Evaluation,
    adult_citizen_rule,
    classify,
    evaluate,
    foreign_national_rule,
    minor_citizen_rule,
)
