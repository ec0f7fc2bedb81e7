from __future__ import annotations

from hoaxify.core.security import verify_password
from hoaxify.models.token import Token
from hoaxify.models.user import User


def _request_reset(client, email):
    return client.post("/api/1.0/user/password", json={"email": email})


def _reset_token(db_session, user_id):
    db_session.expire_all()
    return db_session.get(User, user_id).password_reset_token


def test_reset_request_sets_token_and_sends_email(client, users, db_session, sent_emails):
    user1, _ = users
    res = _request_reset(client, "user1@mail.com")
    assert res.status_code == 200
    assert res.json()["message"] == "Check your e-mail for resetting your password"

    token = _reset_token(db_session, user1.id)
    assert token
    assert sent_emails[-1] == {"kind": "password_reset", "to": "user1@mail.com", "token": token}


def test_reset_request_unknown_email_is_404(client):
    res = _request_reset(client, "nobody@mail.com")
    assert res.status_code == 404
    assert res.json()["message"] == "E-mail is not in use"


def test_reset_request_invalid_email_is_400(client):
    res = _request_reset(client, "not-an-email")
    assert res.status_code == 400
    assert res.json()["validationErrors"] == {"email": "E-mail is not valid"}


def test_reset_request_email_failure_is_502(client, users, db_session, monkeypatch):
    from hoaxify.services import email as email_service

    def _boom(email, token):
        raise email_service.EmailDeliveryError("smtp down")

    monkeypatch.setattr(email_service, "send_password_reset", _boom)
    user1, _ = users

    res = _request_reset(client, "user1@mail.com")
    assert res.status_code == 502
    assert res.json()["message"] == "E-mail Failure"
    assert _reset_token(db_session, user1.id) is None


def test_password_update(client, users, auth_headers, db_session):
    user1, _ = users
    auth_headers(user1)
    _request_reset(client, "user1@mail.com")
    token = _reset_token(db_session, user1.id)

    res = client.put("/api/1.0/user/password", json={"passwordResetToken": token, "password": "N3wPassword"})
    assert res.status_code == 200

    db_session.expire_all()
    user = db_session.get(User, user1.id)
    assert verify_password("N3wPassword", user.password)
    assert user.password_reset_token is None
    assert db_session.query(Token).filter(Token.user_id == user1.id).count() == 0


def test_password_update_activates_inactive_account(client, make_user, db_session):
    user = make_user("sleepy", inactive=True, activation_token="abc")
    _request_reset(client, "sleepy@mail.com")
    token = _reset_token(db_session, user.id)

    client.put("/api/1.0/user/password", json={"passwordResetToken": token, "password": "N3wPassword"})

    db_session.expire_all()
    user = db_session.get(User, user.id)
    assert user.inactive is False
    assert user.activation_token is None


def test_password_update_with_bad_token_is_403(client, users):
    res = client.put("/api/1.0/user/password", json={"passwordResetToken": "nope", "password": "N3wPassword"})
    assert res.status_code == 403
    assert res.json()["message"].startswith("You are not authorized to update your password")


def test_password_update_checks_token_before_password(client):
    res = client.put("/api/1.0/user/password", json={"passwordResetToken": "nope", "password": "weak"})
    assert res.status_code == 403
    assert client.put("/api/1.0/user/password", json={"passwordResetToken": 123, "password": 42}).status_code == 403
    assert client.put(
        "/api/1.0/user/password", content=b"{bad", headers={"Content-Type": "application/json"}
    ).status_code == 403


def test_password_update_validates_password(client, users, db_session):
    user1, _ = users
    _request_reset(client, "user1@mail.com")
    token = _reset_token(db_session, user1.id)

    res = client.put("/api/1.0/user/password", json={"passwordResetToken": token, "password": "weakpass"})
    assert res.status_code == 400
    assert res.json()["validationErrors"] == {
        "password": "Password must have at least 1 uppercase, 1 lowercase letter and 1 number"
    }
    assert _reset_token(db_session, user1.id) == token


def test_reset_token_is_single_use(client, users, db_session):
    user1, _ = users
    _request_reset(client, "user1@mail.com")
    token = _reset_token(db_session, user1.id)

    body = {"passwordResetToken": token, "password": "N3wPassword"}
    assert client.put("/api/1.0/user/password", json=body).status_code == 200
    assert client.put("/api/1.0/user/password", json=body).status_code == 403
