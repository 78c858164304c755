from __future__ import annotations

from types import SimpleNamespace

import pytest

from workhub.db.models import Role
from workhub.utils.helpers import extract_bearer_token, has_role, is_valid_email


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc123", "abc123"),
        ("abc123", None),
        (None, None),
        ("", None),
        ("bearer abc123", None),
        ("Bearer ", ""),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_has_role_with_mapping():
    assert has_role({"role": "manager"}, ["admin", "manager"]) is True
    assert has_role({"role": "employee"}, ["admin", "manager"]) is False


def test_has_role_absent_user_is_false():
    assert has_role(None, ["admin"]) is False
    assert has_role({}, ["admin"]) is False


def test_has_role_with_object_and_enum():
    user = SimpleNamespace(role=Role.MANAGER)
    assert has_role(user, ["ADMIN", "MANAGER"]) is True
    assert has_role(SimpleNamespace(), ["ADMIN"]) is False


@pytest.mark.parametrize(
    "email, expected",
    [
        ("a@b.com", True),
        ("first.last@sub.example.org", True),
        ("not-an-email", False),
        ("a@b", False),
        ("a b@c.com", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_email(email, expected):
    assert is_valid_email(email) is expected

