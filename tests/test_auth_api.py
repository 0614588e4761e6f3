from urllib.parse import parse_qs, urlparse

import pytest

from partylink.core.timeutil import utcnow
from partylink.models import LoginCode, User
from partylink.services import mailer


@pytest.fixture
def outbox(monkeypatch):
    sent = []

    def fake_send_login_email(*, to, code, link):
        sent.append({"to": to, "code": code, "link": link})
        return True

    monkeypatch.setattr(mailer, "send_login_email", fake_send_login_email)
    return sent


def test_host_paths_redirect_to_login(client):
    r = client.get("/host/events/5/guests", follow_redirects=False)
    assert r.status_code == 307
    location = urlparse(r.headers["location"])
    assert location.path == "/login"
    assert parse_qs(location.query)["next"] == ["/host/events/5/guests"]


def test_invalid_cookie_is_treated_as_signed_out(client):
    client.cookies.set("access_token", "garbage")
    r = client.get("/host/events", follow_redirects=False)
    assert r.status_code == 307


def test_public_paths_are_not_guarded(client):
    assert client.get("/health").json()["status"] == "ok"
    assert client.get("/login", params={"next": "/host/events/1/guests"}).json()["next"] == "/host/events/1/guests"
    assert client.get("/me").status_code == 401


def test_www_redirects_to_apex(client):
    r = client.get("/rsvp/abc?x=1", headers={"host": "www.partylink.co"}, follow_redirects=False)
    assert r.status_code == 308
    assert r.headers["location"] == "https://partylink.co/rsvp/abc?x=1"


def test_otp_sign_in(client, outbox, db):
    r = client.post("/auth/otp", json={"email": " Host@Example.com ", "next": "/host/events/3/guests"})
    assert r.status_code == 204
    assert outbox[0]["to"] == "host@example.com"
    code = outbox[0]["code"]
    assert len(code) == 6

    r = client.post("/auth/verify", json={"email": "host@example.com", "code": f"{code[:3]} {code[3:]}"})
    assert r.status_code == 200
    assert r.json() == {"ok": True, "next": "/host/events/3/guests"}

    assert client.get("/me").json()["email"] == "host@example.com"
    assert client.get("/host/events", follow_redirects=False).status_code == 200

    # one-time
    r = client.post("/auth/verify", json={"email": "host@example.com", "code": code})
    assert r.status_code == 401


def test_wrong_code_locks_after_max_attempts(client, outbox):
    client.post("/auth/otp", json={"email": "host@example.com"})
    code = outbox[0]["code"]
    wrong = "000000" if code != "000000" else "111111"

    for _ in range(5):
        r = client.post("/auth/verify", json={"email": "host@example.com", "code": wrong})
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid code."

    r = client.post("/auth/verify", json={"email": "host@example.com", "code": code})
    assert r.status_code == 401
    assert r.json()["detail"] == "Too many attempts. Please request a new code."


def test_expired_code(client, outbox, db):
    client.post("/auth/otp", json={"email": "host@example.com"})
    row = db.query(LoginCode).one()
    row.expires_at = utcnow().replace(year=2000)
    db.commit()

    r = client.post("/auth/verify", json={"email": "host@example.com", "code": outbox[0]["code"]})
    assert r.status_code == 401


def test_invalid_email_rejected(client, outbox):
    r = client.post("/auth/otp", json={"email": "not-an-email"})
    assert r.status_code == 422
    assert outbox == []


def test_mail_failure_is_reported(client, monkeypatch):
    monkeypatch.setattr(mailer, "send_login_email", lambda **kw: False)
    r = client.post("/auth/otp", json={"email": "host@example.com"})
    assert r.status_code == 503


def test_magic_link_callback(client, outbox, db):
    client.post("/auth/otp", json={"email": "host@example.com", "next": "/host/events/9/guests"})
    link = urlparse(outbox[0]["link"])
    assert link.path == "/auth/callback"
    params = parse_qs(link.query)

    r = client.get("/auth/callback", params={"code": params["code"][0], "next": params["next"][0]},
                   follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/host/events/9/guests"
    assert db.query(User).filter(User.email == "host@example.com").count() == 1
    assert client.get("/me").status_code == 200


def test_callback_failure_goes_back_to_login(client):
    r = client.get("/auth/callback", params={"code": "bogus", "next": "/host/events"}, follow_redirects=False)
    assert r.status_code == 307
    location = urlparse(r.headers["location"])
    q = parse_qs(location.query)
    assert location.path == "/login"
    assert q["error"] == ["auth_failed"]
    assert q["next"] == ["/host/events"]
    assert q["message"]


def test_callback_without_code_just_redirects(client):
    r = client.get("/auth/callback", follow_redirects=False)
    assert r.headers["location"] == "/host/events"


def test_callback_refuses_offsite_next(client):
    r = client.get("/auth/callback", params={"next": "https://evil.example"}, follow_redirects=False)
    assert r.headers["location"] == "/host/events"


def test_logout(host_client):
    assert host_client.get("/me").status_code == 200
    r = host_client.post("/auth/logout")
    assert r.status_code == 204
    host_client.cookies.clear()
    assert host_client.get("/me").status_code == 401
