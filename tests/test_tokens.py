import re
import threading
from datetime import datetime, timedelta, timezone

import pytest

from app.core.database import SessionLocal
from app.core.exceptions import InvalidOrExpiredTokenError
from app.models.business import Business
from app.models.token import EmailVerificationToken, PasswordResetToken
from app.services import crud
from app.services.tokens import EMAIL_VERIFICATION, PASSWORD_RESET, consume_token, issue_token


@pytest.fixture
def business(db_session):
    created = crud.create_business(
        db_session,
        name="Joe's Coffee",
        slug="joescoffee",
        tagline=None,
        email="joe@example.com",
        password_hash="not-a-real-hash",
    )
    db_session.commit()
    return created


def _mark_verified(business):
    business.is_verified = True


def test_issued_token_is_64_hex_characters(db_session, business):
    raw = issue_token(db_session, EMAIL_VERIFICATION, business.id)
    db_session.commit()

    assert re.fullmatch(r"[0-9a-f]{64}", raw)
    record = db_session.query(EmailVerificationToken).one()
    assert record.token == raw
    assert record.business_id == business.id


def test_ttl_depends_on_purpose(db_session, business):
    now = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    issue_token(db_session, EMAIL_VERIFICATION, business.id, now=now)
    issue_token(db_session, PASSWORD_RESET, business.id, now=now)
    db_session.commit()

    verification = db_session.query(EmailVerificationToken).one()
    reset = db_session.query(PasswordResetToken).one()
    assert verification.expires_at.replace(tzinfo=timezone.utc) == now + timedelta(hours=24)
    assert reset.expires_at.replace(tzinfo=timezone.utc) == now + timedelta(hours=1)


def test_new_token_supersedes_previous_of_same_purpose_only(db_session, business):
    first = issue_token(db_session, PASSWORD_RESET, business.id)
    issue_token(db_session, EMAIL_VERIFICATION, business.id)
    second = issue_token(db_session, PASSWORD_RESET, business.id)
    db_session.commit()

    assert [t.token for t in db_session.query(PasswordResetToken).all()] == [second]
    assert db_session.query(EmailVerificationToken).count() == 1
    with pytest.raises(InvalidOrExpiredTokenError):
        consume_token(db_session, PASSWORD_RESET, first, _mark_verified)


def test_consume_applies_change_and_deletes_token(db_session, business):
    raw = issue_token(db_session, EMAIL_VERIFICATION, business.id)
    db_session.commit()

    result = consume_token(db_session, EMAIL_VERIFICATION, raw, _mark_verified)

    assert result.id == business.id
    assert result.is_verified is True
    assert db_session.query(EmailVerificationToken).count() == 0
    with pytest.raises(InvalidOrExpiredTokenError):
        consume_token(db_session, EMAIL_VERIFICATION, raw, _mark_verified)


def test_token_is_expired_at_its_expiry_instant(db_session, business):
    issued = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    raw = issue_token(db_session, PASSWORD_RESET, business.id, now=issued)
    db_session.commit()

    with pytest.raises(InvalidOrExpiredTokenError):
        consume_token(db_session, PASSWORD_RESET, raw, _mark_verified, now=issued + timedelta(hours=1))

    assert db_session.query(PasswordResetToken).count() == 0
    db_session.refresh(business)
    assert business.is_verified is False


def test_token_just_before_expiry_is_accepted(db_session, business):
    issued = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    raw = issue_token(db_session, PASSWORD_RESET, business.id, now=issued)
    db_session.commit()

    consume_token(db_session, PASSWORD_RESET, raw, _mark_verified, now=issued + timedelta(minutes=59))

    assert business.is_verified is True


def test_unknown_token(db_session, business):
    with pytest.raises(InvalidOrExpiredTokenError) as exc_info:
        consume_token(db_session, EMAIL_VERIFICATION, "0" * 64, _mark_verified)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid or expired token"


def test_concurrent_redemption_is_accepted_once(db_session, business):
    raw = issue_token(db_session, EMAIL_VERIFICATION, business.id)
    db_session.commit()

    both_applied = threading.Barrier(2, timeout=10)
    results = []

    def _apply_together(target):
        # as duas requisições já leram o token antes de qualquer uma gravar
        both_applied.wait()
        target.is_verified = True

    def _redeem():
        session = SessionLocal()
        try:
            consume_token(session, EMAIL_VERIFICATION, raw, _apply_together)
            results.append("ok")
        except InvalidOrExpiredTokenError:
            results.append("rejected")
        finally:
            session.close()

    workers = [threading.Thread(target=_redeem) for _ in range(2)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join(timeout=30)

    assert sorted(results) == ["ok", "rejected"]
    db_session.expire_all()
    assert db_session.query(EmailVerificationToken).count() == 0
    assert db_session.get(Business, business.id).is_verified is True
