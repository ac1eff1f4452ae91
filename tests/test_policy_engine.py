import itertools

import pytest

from boardcheck.errors import InvalidAge
from boardcheck.policy import (
    CompanionType,
    DestinationGroup,
    DocumentCode,
    Nationality,
    PassengerCategory,
    PassengerInput,
    adult_citizen_rule,
    classify,
    evaluate,
    foreign_national_rule,
    minor_citizen_rule,
)

D = DocumentCode


def _passenger(nationality, age, companion=CompanionType.BOTH_GUARDIANS, destination=DestinationGroup.OTHER, auth=False):
    return PassengerInput(
        nationality=nationality,
        age=age,
        companion=companion,
        destination=destination,
        has_express_authorization=auth,
    )


def test_adult_citizen_outside_bloc():
    result = evaluate(_passenger(Nationality.CITIZEN, 35))

    assert result.category == PassengerCategory.ADULT_CITIZEN
    assert result.can_board
    assert result.required_documents == (D.PASSPORT,)
    assert result.optional_documents == ()


def test_adult_citizen_to_bloc_may_use_state_id():
    result = evaluate(_passenger(Nationality.CITIZEN, 25, destination=DestinationGroup.EXTENDED_BLOC))

    assert result.required_documents == (D.PASSPORT,)
    assert result.optional_documents == (D.REGIONAL_STATE_ID,)


def test_unaccompanied_minor_to_bloc_without_authorization():
    result = evaluate(
        _passenger(
            Nationality.CITIZEN,
            14,
            companion=CompanionType.UNACCOMPANIED,
            destination=DestinationGroup.EXTENDED_BLOC,
        )
    )

    assert result.category == PassengerCategory.MINOR_CITIZEN
    assert result.required_documents == (D.PASSPORT, D.BOTH_PARENTS_AUTHORIZATION)
    assert result.optional_documents == (D.REGIONAL_STATE_ID, D.ELECTRONIC_TRAVEL_AUTHORIZATION)


def test_minor_with_one_guardian_and_authorized_passport():
    result = evaluate(_passenger(Nationality.CITIZEN, 12, companion=CompanionType.ONE_GUARDIAN, auth=True))

    assert result.required_documents == (D.PASSPORT_WITH_AUTH,)
    assert result.optional_documents == ()


def test_foreign_national_to_bloc():
    result = evaluate(_passenger(Nationality.FOREIGN, 22, destination=DestinationGroup.EXTENDED_BLOC))

    assert result.category == PassengerCategory.FOREIGN_NATIONAL
    assert result.required_documents == (D.PASSPORT,)
    assert result.optional_documents == (D.BLOC_NATIONAL_ID,)


@pytest.mark.parametrize(
    "companion, auth, required, optional",
    [
        (CompanionType.BOTH_GUARDIANS, False, (D.PASSPORT,), ()),
        (CompanionType.BOTH_GUARDIANS, True, (D.PASSPORT,), ()),
        (CompanionType.ONE_GUARDIAN, True, (D.PASSPORT_WITH_AUTH,), ()),
        (CompanionType.ONE_GUARDIAN, False, (D.PASSPORT, D.ONE_PARENT_AUTHORIZATION), ()),
        (CompanionType.AUTHORIZED_ADULT, True, (D.PASSPORT_WITH_AUTH,), ()),
        (
            CompanionType.AUTHORIZED_ADULT,
            False,
            (D.PASSPORT, D.BOTH_PARENTS_AUTHORIZATION),
            (D.ELECTRONIC_TRAVEL_AUTHORIZATION,),
        ),
        (CompanionType.UNACCOMPANIED, True, (D.PASSPORT_WITH_AUTH,), ()),
        (
            CompanionType.UNACCOMPANIED,
            False,
            (D.PASSPORT, D.BOTH_PARENTS_AUTHORIZATION),
            (D.ELECTRONIC_TRAVEL_AUTHORIZATION,),
        ),
    ],
)
def test_minor_rule_table_outside_bloc(companion, auth, required, optional):
    result = minor_citizen_rule(10, companion, DestinationGroup.OTHER, auth)

    assert result.required_documents == required
    assert result.optional_documents == optional


def test_minor_rule_rejects_adult_age():
    with pytest.raises(InvalidAge):
        minor_citizen_rule(18, CompanionType.BOTH_GUARDIANS, DestinationGroup.OTHER, False)


def test_single_destination_rules_in_isolation():
    assert adult_citizen_rule(DestinationGroup.OTHER).optional_documents == ()
    assert foreign_national_rule(DestinationGroup.OTHER).optional_documents == ()
    assert foreign_national_rule(DestinationGroup.EXTENDED_BLOC).category == PassengerCategory.FOREIGN_NATIONAL


def test_foreign_nationality_overrides_age():
    minor_foreigner = _passenger(
        Nationality.FOREIGN, 9, companion=CompanionType.UNACCOMPANIED, destination=DestinationGroup.OTHER
    )

    result = evaluate(minor_foreigner)

    assert result.category == PassengerCategory.FOREIGN_NATIONAL
    assert result.required_documents == (D.PASSPORT,)


@pytest.mark.parametrize(
    "age, category",
    [(0, PassengerCategory.MINOR_CITIZEN), (17, PassengerCategory.MINOR_CITIZEN), (18, PassengerCategory.ADULT_CITIZEN), (150, PassengerCategory.ADULT_CITIZEN)],
)
def test_age_boundaries(age, category):
    assert classify(Nationality.CITIZEN, age) == category
    assert evaluate(_passenger(Nationality.CITIZEN, age)).category == category


@pytest.mark.parametrize("age", [151, 200, -1])
def test_out_of_range_age_rejected(age):
    with pytest.raises(InvalidAge, match="Invalid age"):
        evaluate(_passenger(Nationality.CITIZEN, age))
    with pytest.raises(InvalidAge):
        evaluate(_passenger(Nationality.FOREIGN, age))


def test_every_input_yields_required_documents_deterministically():
    combinations = itertools.product(
        Nationality,
        (0, 5, 17, 18, 64, 150),
        CompanionType,
        DestinationGroup,
        (False, True),
    )
    for nationality, age, companion, destination, auth in combinations:
        passenger = _passenger(nationality, age, companion, destination, auth)
        first = evaluate(passenger)

        assert first == evaluate(passenger)
        assert len(first.required_documents) >= 1
        assert set(first.optional_documents).isdisjoint(first.required_documents)
        if nationality == Nationality.FOREIGN:
            assert first.category == PassengerCategory.FOREIGN_NATIONAL


def test_passenger_input_from_wire_codes():
    passenger = PassengerInput.from_dict(
        {"nationality": 0, "age": 14, "companion": 3, "destination": 0, "has_express_authorization": False}
    )

    assert passenger.nationality == Nationality.CITIZEN
    assert passenger.companion == CompanionType.UNACCOMPANIED
    assert passenger.destination == DestinationGroup.EXTENDED_BLOC
    assert PassengerInput.from_dict(passenger.to_dict()) == passenger


def test_passenger_input_accepts_member_names():
    passenger = PassengerInput.from_dict({"nationality": "foreign", "age": 40, "destination": "extended_bloc"})

    assert passenger.nationality == Nationality.FOREIGN
    assert passenger.destination == DestinationGroup.EXTENDED_BLOC


@pytest.mark.parametrize(
    "document, message",
    [
        ({"nationality": 2, "age": 30}, "Invalid Nationality code"),
        ({"nationality": 0, "age": 10, "companion": 4}, "Invalid CompanionType code"),
        ({"nationality": 0}, "must include nationality and age"),
        ({"nationality": 0, "age": "ten"}, "must be an integer"),
        ({"nationality": 0, "age": 10, "has_express_authorization": "yes"}, "must be a boolean"),
    ],
)
def test_passenger_input_rejects_malformed_documents(document, message):
    with pytest.raises(ValueError, match=message):
        PassengerInput.from_dict(document)
