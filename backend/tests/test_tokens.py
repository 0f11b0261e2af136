from datetime import timedelta

import pytest

from spark_rentals.core.exceptions import InvalidTokenError
from spark_rentals.core.roles import Role
from spark_rentals.core.tokens import Principal, TokenCodec, token_codec


def _strip_times(claims):
    return {k: v for k, v in claims.items() if k not in ("exp", "iat")}


@pytest.mark.parametrize(
    "principal",
    [
        Principal(id=7, email="alice@example.com", role=Role.OWNER),
        Principal(id=1, email="root@example.com", role=Role.ADMIN),
        Principal(id=42, email="norole@example.com", role=None),
    ],
)
def test_access_token_round_trip(principal):
    claims = token_codec.verify_access(token_codec.sign_access(principal))
    assert _strip_times(claims) == {**principal.to_claims(), "tokenType": "access"}
    assert claims["exp"] - claims["iat"] == 15 * 60
    assert Principal.from_claims(claims) == principal


def test_role_claim_omitted_when_absent():
    claims = token_codec.verify_access(token_codec.sign_access(Principal(id=3, email="x@example.com")))
    assert "role" not in claims


def test_refresh_token_carries_jti_and_kind():
    token = token_codec.sign_refresh(Principal(id=9, email="bob@example.com", role=Role.CUSTOMER), "jti-123")
    claims = token_codec.verify_refresh(token)
    assert claims["jti"] == "jti-123"
    assert claims["tokenType"] == "refresh"
    assert claims["exp"] - claims["iat"] == 7 * 24 * 60 * 60


def test_access_verifier_rejects_refresh_token():
    refresh = token_codec.sign_refresh(Principal(id=1, email="a@example.com"), "jti-1")
    with pytest.raises(InvalidTokenError):
        token_codec.verify_access(refresh)


def test_refresh_verifier_rejects_access_token():
    access = token_codec.sign_access(Principal(id=1, email="a@example.com"))
    with pytest.raises(InvalidTokenError):
        token_codec.verify_refresh(access)


def test_token_type_checked_even_with_shared_secret():
    codec = TokenCodec(access_secret="same-secret", refresh_secret="same-secret")
    principal = Principal(id=5, email="s@example.com", role=Role.ADMIN)
    with pytest.raises(InvalidTokenError):
        codec.verify_access(codec.sign_refresh(principal, "jti-5"))
    with pytest.raises(InvalidTokenError):
        codec.verify_refresh(codec.sign_access(principal))


def test_expired_token_rejected():
    token = token_codec.sign_access(
        Principal(id=1, email="a@example.com"), expires_delta=timedelta(seconds=-5)
    )
    with pytest.raises(InvalidTokenError):
        token_codec.verify_access(token)


def test_tampered_signature_rejected():
    token = token_codec.sign_refresh(Principal(id=1, email="a@example.com"), "jti-t")
    header, payload, signature = token.split(".")
    middle = len(signature) // 2
    flipped = "A" if signature[middle] != "A" else "B"
    tampered = ".".join([header, payload, signature[:middle] + flipped + signature[middle + 1:]])
    with pytest.raises(InvalidTokenError):
        token_codec.verify_refresh(tampered)


def test_foreign_secret_rejected():
    other = TokenCodec(access_secret="another-secret", refresh_secret="another-refresh")
    token = other.sign_access(Principal(id=1, email="a@example.com"))
    with pytest.raises(InvalidTokenError):
        token_codec.verify_access(token)


@pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c"])
def test_garbage_rejected(garbage):
    with pytest.raises(InvalidTokenError):
        token_codec.verify_access(garbage)


def test_refresh_requires_jti():
    with pytest.raises(ValueError):
        token_codec.sign_refresh(Principal(id=1, email="a@example.com"), "")


def test_default_secrets_fall_back_to_shared():
    from spark_rentals.config import Settings

    config = Settings(JWT_SECRET="shared", JWT_ACCESS_SECRET=None, JWT_REFRESH_SECRET="refresh-only")
    codec = TokenCodec.from_settings(config)
    assert codec.access_secret == "shared"
    assert codec.refresh_secret == "refresh-only"
