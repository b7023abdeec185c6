"""Unit tests for the shared Address value object."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shared.domain.value_objects import PLACEHOLDER_PICKUP, Address

pytestmark = pytest.mark.unit


def test_accepts_camel_case_full_name_from_checkout():
    address = Address.from_json(
        {"fullName": "Tunde Bello", "address": "4 Allen Avenue", "city": "Ikeja"}
    )

    assert address.full_name == "Tunde Bello"
    assert address.to_json()["full_name"] == "Tunde Bello"
    assert "fullName" not in address.to_json()


def test_unknown_keys_are_dropped():
    address = Address.from_json({"address": "1 Road", "landmark": "Behind the mosque"})

    assert "landmark" not in address.to_json()


def test_from_json_handles_missing_value():
    assert Address.from_json(None).is_blank
    assert Address.from_json({}).is_blank


def test_str_joins_present_parts():
    address = Address(address="12 Farm Road", city="Ibadan", state="Oyo")

    assert str(address) == "12 Farm Road, Ibadan, Oyo"
    assert str(Address()) == "N/A"


def test_placeholder_pickup_matches_legacy_shape():
    assert PLACEHOLDER_PICKUP.address == "Seller location"
    assert not PLACEHOLDER_PICKUP.is_blank


def test_address_is_immutable():
    address = Address(address="1 Road")

    with pytest.raises(ValidationError):
        address.city = "Lagos"
