from datetime import timedelta

from spark_rentals.core.roles import Role
from spark_rentals.services.session_ledger import as_utc, session_ledger, utcnow


def _row(db, user_id, jti, expires_in=timedelta(days=7)):
    row = session_ledger.create(
        db, user_id=user_id, jti=jti, token_hash="h" * 64, expires_at=utcnow() + expires_in
    )
    db.commit()
    return row


def test_create_and_find_by_jti(db, make_user):
    user = make_user(role=Role.OWNER)
    created = _row(db, user.id, "jti-a")

    found = session_ledger.find_by_jti(db, "jti-a")
    assert found is not None
    assert found.id == created.id
    assert found.user_id == user.id
    assert found.revoked_at is None
    assert as_utc(found.expires_at) > utcnow()
    assert session_ledger.find_by_jti(db, "missing") is None


def test_revoke_is_idempotent(db, make_user):
    user = make_user()
    row = _row(db, user.id, "jti-b")

    assert session_ledger.revoke(db, row.id) is True
    db.commit()
    first_revoked_at = session_ledger.find_by_jti(db, "jti-b").revoked_at
    assert first_revoked_at is not None

    assert session_ledger.revoke(db, row.id) is False
    db.commit()
    assert session_ledger.find_by_jti(db, "jti-b").revoked_at == first_revoked_at


def test_revoke_by_jti_tolerates_missing_and_revoked(db, make_user):
    user = make_user()
    _row(db, user.id, "jti-c")

    assert session_ledger.revoke_by_jti(db, "jti-c") == 1
    assert session_ledger.revoke_by_jti(db, "jti-c") == 0
    assert session_ledger.revoke_by_jti(db, "never-issued") == 0


def test_active_for_user_skips_revoked_and_expired(db, make_user):
    user = make_user()
    live = _row(db, user.id, "jti-live")
    _row(db, user.id, "jti-old", expires_in=timedelta(days=-1))
    revoked = _row(db, user.id, "jti-revoked")
    session_ledger.revoke(db, revoked.id)
    db.commit()

    assert [row.id for row in session_ledger.active_for_user(db, user.id)] == [live.id]
