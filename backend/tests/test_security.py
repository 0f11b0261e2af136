import pytest

from spark_rentals.core.security import (
    get_password_hash,
    hash_token,
    is_same_origin,
    token_hash_matches,
    verify_password,
)


@pytest.mark.parametrize(
    "origin,host,expected",
    [
        (None, "testserver", True),
        ("http://testserver", None, True),
        ("http://testserver", "testserver", True),
        ("http://testserver:80", "testserver", True),
        ("https://rentals.example:443", "rentals.example", True),
        ("http://testserver", "testserver:80", True),
        ("http://localhost:3000", "localhost:3000", True),
        ("http://localhost:3000", "localhost", False),
        ("https://testserver:80", "testserver", False),
        ("https://evil.example", "testserver", False),
        ("null", "testserver", False),
    ],
)
def test_is_same_origin(origin, host, expected):
    assert is_same_origin(origin, host) is expected


def test_password_hash_round_trip():
    hashed = get_password_hash("Password123!")
    assert verify_password("Password123!", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert verify_password("Password123!", "not-a-bcrypt-hash") is False


def test_token_hash_comparison():
    stored = hash_token("abc")
    assert token_hash_matches("abc", stored) is True
    assert token_hash_matches("abd", stored) is False
    assert token_hash_matches("abc", None) is False
