"""Invite, list pending and accept."""
import pytest
from sqlalchemy.exc import IntegrityError

from models.TripMember import TripMember, InvitationStatus
from routes import invitations


def _invite(client, trip_id, email="friend@example.com", **extra):
    return client.post(f"/api/trips/{trip_id}/invite", json={"email": email, **extra})


def test_invite_creates_pending_editor_invitation(client, trip):
    resp = _invite(client, trip["id"])
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Invitation sent to friend@example.com"
    invitation = body["invitation"]
    assert invitation["tripId"] == trip["id"]
    assert invitation["invitedEmail"] == "friend@example.com"
    assert invitation["role"] == "editor"
    assert invitation["status"] == "pending"
    assert invitation["userId"] is None


def test_invite_normalizes_email_to_lower_case(client, trip):
    resp = _invite(client, trip["id"], email="Friend@Example.com")
    assert resp.status_code == 201
    assert resp.json()["invitation"]["invitedEmail"] == "friend@example.com"


def test_invite_empty_role_falls_back_to_editor(client, trip):
    resp = _invite(client, trip["id"], role="")
    assert resp.json()["invitation"]["role"] == "editor"


def test_invite_with_viewer_role(client, trip):
    resp = _invite(client, trip["id"], role="viewer")
    assert resp.status_code == 201
    assert resp.json()["invitation"]["role"] == "viewer"


def test_invite_rejects_unknown_role(client, trip):
    resp = _invite(client, trip["id"], role="admin")
    assert resp.status_code == 422
    assert resp.json()["details"][0]["field"] == "role"


def test_invite_links_registered_user(client, trip, user_payload):
    user = client.post("/api/auth/signup", json=user_payload).json()["user"]
    resp = _invite(client, trip["id"], email=user_payload["email"])
    assert resp.json()["invitation"]["userId"] == user["id"]


def test_invite_unknown_trip_is_404(client):
    resp = _invite(client, 999)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Trip not found."}


def test_duplicate_invite_is_rejected(client, trip):
    assert _invite(client, trip["id"]).status_code == 201

    resp = _invite(client, trip["id"], email="FRIEND@example.com")
    assert resp.status_code == 400
    assert resp.json() == {"error": "User has already been invited to this trip."}


def test_same_email_can_be_invited_to_different_trips(client, trip):
    other = client.post("/api/trips", json={
        "title": "Seoul", "destination": "Korea",
        "startDate": "2025-09-01", "endDate": "2025-09-05",
    }).json()
    assert _invite(client, trip["id"]).status_code == 201
    assert _invite(client, other["id"]).status_code == 201


def _miss_first_lookup(monkeypatch, target, real):
    """Make the first lookup miss, as if a concurrent request inserted right after it."""
    calls = []

    def lookup(*args):
        calls.append(args)
        return None if len(calls) == 1 else real(*args)

    monkeypatch.setattr(target, lookup)


def test_racing_duplicate_invite_maps_constraint_to_same_error(client, trip, monkeypatch):
    assert _invite(client, trip["id"]).status_code == 201
    _miss_first_lookup(monkeypatch, "routes.invitations._find_invitation", invitations._find_invitation)

    resp = _invite(client, trip["id"])
    assert resp.status_code == 400
    assert resp.json() == {"error": "User has already been invited to this trip."}


def test_unique_constraint_holds_at_store_level(trip, db_session):
    db_session.add(TripMember(trip_id=trip["id"], invited_email="a@example.com"))
    db_session.commit()
    db_session.add(TripMember(trip_id=trip["id"], invited_email="a@example.com"))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_list_pending_requires_email(client):
    resp = client.get("/api/user/invitations")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email parameter is required"}


def test_list_pending_joins_trip_details(client, trip):
    _invite(client, trip["id"])

    resp = client.get("/api/user/invitations", params={"email": "Friend@example.com"})
    assert resp.status_code == 200
    invitations = resp.json()
    assert len(invitations) == 1
    assert invitations[0]["trip"] == {
        "id": trip["id"],
        "title": "Japan Trip",
        "destination": "Tokyo",
        "startDate": "2025-04-01",
        "endDate": "2025-04-10",
    }


def test_list_pending_only_for_that_email(client, trip):
    _invite(client, trip["id"])
    _invite(client, trip["id"], email="someone@example.com")

    invitations = client.get("/api/user/invitations", params={"email": "someone@example.com"}).json()
    assert [i["invitedEmail"] for i in invitations] == ["someone@example.com"]


def test_accept_invitation(client, trip):
    invitation = _invite(client, trip["id"]).json()["invitation"]

    resp = client.put(f"/api/invitations/{invitation['id']}/accept")
    assert resp.status_code == 200
    assert resp.json() == {
        "message": "You have joined the trip: Japan Trip",
        "trip": {"id": trip["id"], "title": "Japan Trip", "destination": "Tokyo"},
    }
    pending = client.get("/api/user/invitations", params={"email": "friend@example.com"}).json()
    assert pending == []


def test_accept_is_unconditional(client, trip, db_session):
    invitation = _invite(client, trip["id"]).json()["invitation"]
    row = db_session.query(TripMember).filter(TripMember.id == invitation["id"]).one()
    row.status = InvitationStatus.REJECTED
    db_session.commit()

    assert client.put(f"/api/invitations/{invitation['id']}/accept").status_code == 200
    assert client.put(f"/api/invitations/{invitation['id']}/accept").status_code == 200

    db_session.expire_all()
    row = db_session.query(TripMember).filter(TripMember.id == invitation["id"]).one()
    assert row.status == InvitationStatus.ACCEPTED


def test_accept_unknown_invitation_is_404(client):
    resp = client.put("/api/invitations/4242/accept")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Invitation not found."}


def test_deleting_trip_removes_its_invitations(client, trip):
    _invite(client, trip["id"])
    client.delete(f"/api/trips/{trip['id']}")
    assert client.get("/api/user/invitations", params={"email": "friend@example.com"}).json() == []


def test_other_constraint_failures_are_server_errors(client, trip, monkeypatch):
    # e.g. the trip was deleted between the lookup and the insert
    def failing_commit(self):
        raise IntegrityError("INSERT INTO trip_members ...", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr("sqlalchemy.orm.Session.commit", failing_commit)

    resp = _invite(client, trip["id"])
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to send invitation."}


def test_invite_message_echoes_address_as_sent(client, trip):
    resp = _invite(client, trip["id"], email="Bob@EXAMPLE.com")
    assert resp.status_code == 201
    assert resp.json()["message"] == "Invitation sent to Bob@EXAMPLE.com"
    assert resp.json()["invitation"]["invitedEmail"] == "bob@example.com"


def test_invite_rejects_malformed_email(client, trip):
    resp = _invite(client, trip["id"], email="not-an-email")
    assert resp.status_code == 422
    assert resp.json()["details"][0]["field"] == "email"


def test_invite_links_user_registered_with_mixed_case_email(client, trip, user_payload):
    user = client.post("/api/auth/signup", json={**user_payload, "email": "Traveler@Example.COM"}).json()["user"]
    resp = _invite(client, trip["id"], email="traveler@example.com")
    assert resp.json()["invitation"]["userId"] == user["id"]
