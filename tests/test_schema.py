import pytest
from pydantic import ValidationError

from lease_abstraction.lease_schema import LEASE_ABSTRACT_SCHEMA
from lease_abstraction.schema import (
    array,
    build_model,
    obj,
    partition,
    string,
    title_case,
    validate_schema,
)

FIVE_SECTIONS = obj(
    "abstract",
    obj("general", string("tenantName")),
    array("amendments", string("documentReviewed")),
    obj("terms", string("leaseTerm")),
    obj(
        "clauses",
        obj("guaranty", string("notes")),
        obj("signage", string("notes")),
        array("additionalNotes", string("notes"), catch_all=True),
        granularity="expand",
    ),
    obj("insurance", string("comments")),
)


def test_partition_expands_only_the_flagged_section():
    units = partition(FIVE_SECTIONS)

    assert [u.key for u in units] == [
        "general",
        "amendments",
        "terms",
        "guaranty",
        "signage",
        "additionalNotes",
        "insurance",
    ]
    assert [u.section for u in units] == [None, None, None, "clauses", "clauses", "clauses", None]
    assert [u.catch_all for u in units].count(True) == 1
    assert units[3].label == "Clauses: Guaranty"
    assert units[3].schema == FIVE_SECTIONS.child("clauses").child("guaranty")


def test_partition_is_deterministic():
    assert partition(LEASE_ABSTRACT_SCHEMA) == partition(LEASE_ABSTRACT_SCHEMA)


def test_lease_schema_units():
    validate_schema(LEASE_ABSTRACT_SCHEMA)
    units = partition(LEASE_ABSTRACT_SCHEMA)

    # seven whole sections plus nineteen clauses and the catch-all
    assert len(units) == 27
    assert units[0].label == "General Information"
    assert units[-1].key == "tenantInsuranceInformation"
    catch_all = [u for u in units if u.catch_all]
    assert [u.key for u in catch_all] == ["additionalNotes"]


def test_response_shape_requires_unit_key():
    unit = partition(FIVE_SECTIONS)[0]
    model = build_model(unit.response_shape)

    assert model.model_validate({"general": {"tenantName": "Acme"}}).general.tenantName == "Acme"
    with pytest.raises(ValidationError):
        model.model_validate({})
    with pytest.raises(ValidationError):
        model.model_validate({"general": {}, "terms": {}})


def test_build_model_handles_nested_arrays():
    node = LEASE_ABSTRACT_SCHEMA.child("billingAndCharges")
    model = build_model(node)
    value = model.model_validate(
        {
            "baseRentSchedule": [
                {"sourceDocument": "Original Lease", "annualTotal": "$120,000.00"},
            ],
            "percentageRent": {"naturalBreakpoint": "Not Provided"},
        }
    )
    assert value.baseRentSchedule[0].annualTotal == "$120,000.00"
    assert value.camTaxInsuranceFirstYear is None


def test_validate_schema_requires_single_catch_all():
    bad = obj(
        "abstract",
        obj("clauses", obj("guaranty", string("notes")), granularity="expand"),
    )
    with pytest.raises(ValueError):
        validate_schema(bad)


@pytest.mark.parametrize(
    "key, expected",
    [
        ("leaseTermAndDates", "Lease Term And Dates"),
        ("hvac", "Hvac"),
        ("", ""),
    ],
)
def test_title_case(key, expected):
    assert title_case(key) == expected
