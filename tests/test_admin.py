import uuid

import pytest

from rentable.models.support import SupportTicket


@pytest.fixture
def admin(make_user, login):
    user = make_user(role="admin")
    login(user)
    return user


def _ticket(session, **fields):
    ticket = SupportTicket(
        name="Dana",
        email="dana@example.com",
        subject="Drill arrived broken",
        message="The chuck does not tighten at all.",
        **fields,
    )
    session.add(ticket)
    session.commit()
    session.refresh(ticket)
    return ticket


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/v1/admin/stats"),
        ("get", "/api/v1/admin/users"),
        ("get", "/api/v1/admin/rentals"),
        ("get", "/api/v1/admin/settings"),
    ],
)
def test_admin_routes_require_admin(client, login, make_user, method, path):
    login(None)
    assert getattr(client, method)(path).status_code == 401

    login(make_user())
    r = getattr(client, method)(path)
    assert r.status_code == 403
    assert r.json() == {"kind": "Forbidden", "detail": "Admin access required"}


def test_dashboard_stats(client, admin, session, make_user, make_listing, make_rental):
    owner = make_user()
    listing = make_listing(owner)
    make_listing(owner, availability="unavailable")
    make_rental(listing, make_user())
    _ticket(session)
    _ticket(session, status="resolved")

    r = client.get("/api/v1/admin/stats")

    assert r.status_code == 200
    assert r.json() == {
        "user_count": 3,
        "listing_count": 2,
        "rental_count": 1,
        "open_ticket_count": 1,
    }


def test_ban_blocks_authenticated_routes(client, admin, login, make_user):
    target = make_user()

    r = client.post(f"/api/v1/admin/users/{target.id}/ban", json={"reason": "Spam listings"})
    assert r.status_code == 200
    assert r.json()["is_banned"] is True
    assert r.json()["ban_reason"] == "Spam listings"

    login(target)
    r = client.get("/api/v1/users/me")
    assert r.status_code == 403
    assert r.json()["detail"] == "Account is banned"

    login(admin)
    r = client.post(f"/api/v1/admin/users/{target.id}/unban")
    assert r.json()["is_banned"] is False

    login(target)
    assert client.get("/api/v1/users/me").status_code == 200


def test_promote_and_list_users(client, admin, make_user):
    target = make_user()

    r = client.post(f"/api/v1/admin/users/{target.id}/promote")

    assert r.status_code == 200
    assert r.json()["role"] == "admin"
    ids = {u["id"] for u in client.get("/api/v1/admin/users").json()}
    assert {str(admin.id), str(target.id)} <= ids


def test_unknown_user_is_404(client, admin):
    r = client.post(f"/api/v1/admin/users/{uuid.uuid4()}/promote")

    assert r.status_code == 404


def test_listing_moderation(client, admin, login, make_user, make_listing):
    listing = make_listing(make_user())
    spam = make_listing(make_user(), title="Totally real Rolex")

    login(make_user())
    client.post(f"/api/v1/listings/{listing.id}/flag", json={"reason": "Looks stolen"})
    client.post(f"/api/v1/listings/{spam.id}/flag", json={"reason": "Counterfeit"})

    login(admin)
    flagged = client.get("/api/v1/admin/listings/flagged").json()
    assert {item["id"] for item in flagged} == {str(listing.id), str(spam.id)}

    r = client.post(f"/api/v1/admin/listings/{listing.id}/approve")
    assert r.json()["is_verified"] is True
    assert r.json()["is_flagged"] is False

    r = client.post(f"/api/v1/admin/listings/{spam.id}/remove", json={"reason": "Counterfeit"})
    assert r.json()["availability"] == "unavailable"
    assert r.json()["is_flagged"] is True

    search = client.get("/api/v1/listings").json()
    assert [item["id"] for item in search] == [str(listing.id)]
    assert len(client.get("/api/v1/admin/listings").json()) == 2


def test_admin_can_delete_any_idle_listing(client, admin, make_user, make_listing):
    listing = make_listing(make_user())

    assert client.delete(f"/api/v1/admin/listings/{listing.id}").status_code == 204
    assert client.get(f"/api/v1/listings/{listing.id}").status_code == 404


def test_list_all_rentals(client, admin, make_user, make_listing, make_rental):
    listing = make_listing(make_user())
    make_rental(listing, make_user())
    make_rental(listing, make_user(), status="completed")

    r = client.get("/api/v1/admin/rentals")

    assert r.status_code == 200
    assert len(r.json()) == 2


def test_ticket_triage(client, admin, session):
    ticket = _ticket(session)
    _ticket(session, status="closed")

    open_tickets = client.get("/api/v1/admin/tickets", params={"status": "open"}).json()
    assert [t["id"] for t in open_tickets] == [str(ticket.id)]
    assert len(client.get("/api/v1/admin/tickets").json()) == 2

    r = client.patch(
        f"/api/v1/admin/tickets/{ticket.id}",
        json={"status": "in_progress", "priority": "high"},
    )
    assert r.json()["status"] == "in_progress"
    assert r.json()["priority"] == "high"
    assert r.json()["resolved_at"] is None

    r = client.patch(
        f"/api/v1/admin/tickets/{ticket.id}",
        json={"status": "resolved", "admin_notes": "Replacement sent"},
    )
    assert r.json()["status"] == "resolved"
    assert r.json()["admin_notes"] == "Replacement sent"
    assert r.json()["resolved_at"] is not None


def test_ticket_update_validation(client, admin, session):
    ticket = _ticket(session)

    assert client.patch(f"/api/v1/admin/tickets/{ticket.id}", json={"status": "done"}).status_code == 422
    assert client.patch(f"/api/v1/admin/tickets/{uuid.uuid4()}", json={"status": "closed"}).status_code == 404


def test_settings(client, admin):
    r = client.get("/api/v1/admin/settings/maintenance_banner")
    assert r.status_code == 404
    assert r.json()["kind"] == "NotFound"

    r = client.put("/api/v1/admin/settings/maintenance_banner", json={"value": "Back at 5pm"})
    assert r.status_code == 200
    assert r.json()["value"] == "Back at 5pm"

    client.put("/api/v1/admin/settings/maintenance_banner", json={"value": "Back at 6pm"})
    client.put("/api/v1/admin/settings/barter_enabled", json={"value": "true"})

    assert client.get("/api/v1/admin/settings/maintenance_banner").json()["value"] == "Back at 6pm"
    keys = [s["key"] for s in client.get("/api/v1/admin/settings").json()]
    assert keys == ["barter_enabled", "maintenance_banner"]


def test_owner_cannot_relist_removed_listing(client, admin, login, make_user, make_listing):
    owner = make_user()
    listing = make_listing(owner, title="Sketchy thing")
    client.post(f"/api/v1/admin/listings/{listing.id}/remove", json={"reason": "Counterfeit"})

    login(owner)
    r = client.patch(f"/api/v1/listings/{listing.id}", json={"availability": "available"})
    assert r.status_code == 403
    assert r.json()["kind"] == "Forbidden"
    assert client.patch(f"/api/v1/listings/{listing.id}", json={"title": "Genuine thing"}).status_code == 403
    assert "Sketchy thing" not in [item["title"] for item in client.get("/api/v1/listings").json()]

    login(admin)
    r = client.post(f"/api/v1/admin/listings/{listing.id}/approve")
    assert r.json()["is_removed"] is False

    login(owner)
    r = client.patch(f"/api/v1/listings/{listing.id}", json={"availability": "available"})
    assert r.status_code == 200
    assert [item["title"] for item in client.get("/api/v1/listings").json()] == ["Sketchy thing"]


def test_removed_listing_hidden_even_if_available(client, admin, make_user, make_listing):
    make_listing(make_user(), is_removed=True)

    assert client.get("/api/v1/listings").json() == []


def test_admin_can_edit_any_listing(client, admin, make_user, make_listing):
    listing = make_listing(make_user(), title="Drill")
    client.post(f"/api/v1/admin/listings/{listing.id}/remove", json={"reason": "Bad photos"})

    r = client.patch(
        f"/api/v1/admin/listings/{listing.id}",
        json={"title": "Cordless drill (edited)", "availability": "available"},
    )

    assert r.status_code == 200
    assert r.json()["title"] == "Cordless drill (edited)"
    assert r.json()["availability"] == "available"
    assert r.json()["is_removed"] is True


def test_admin_listing_edit_requires_admin(client, login, make_user, make_listing):
    owner = make_user()
    listing = make_listing(owner)
    login(owner)

    r = client.patch(f"/api/v1/admin/listings/{listing.id}", json={"title": "Mine anyway"})

    assert r.status_code == 403


def test_repository_listings(session, make_user):
    from rentable.repositories.support_repo import SupportRepository
    from rentable.repositories.user_repo import UserRepository

    user = make_user()
    ticket = _ticket(session, user_id=user.id)
    _ticket(session, status="closed")

    assert [t.id for t in SupportRepository().list_tickets(session, status="open")] == [ticket.id]
    assert len(SupportRepository().list_tickets(session)) == 2
    assert [u.id for u in UserRepository().list_users(session)] == [user.id]
