"""Tests for building codes and tenant credential derivation."""

import pytest

from src.services.credentials import (
    generate_building_code,
    generate_tenant_credentials,
    hash_password,
    verify_password,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Green View", "gv"),
        ("Green Valley Residency", "gvr"),
        ("  Sunrise   Apartments ", "sa"),
        ("Tower", "t"),
    ],
)
def test_generate_building_code(name, expected) -> None:
    assert generate_building_code(name) == expected


def test_generate_tenant_credentials() -> None:
    creds = generate_tenant_credentials("101", "gv")

    assert creds.username == "101@gv"
    assert creds.password == "pass@101@gv"


def test_credentials_are_lower_cased() -> None:
    creds = generate_tenant_credentials("A-12", "GV")

    assert creds.username == "a-12@gv"
    assert creds.password == "pass@a-12@gv"


def test_password_hash_round_trip() -> None:
    stored = hash_password("pass@101@gv")

    assert stored != "pass@101@gv"
    assert verify_password("pass@101@gv", stored)
    assert not verify_password("pass@102@gv", stored)


def test_verify_rejects_non_bcrypt_value() -> None:
    assert not verify_password("pass@101@gv", "pass@101@gv")
