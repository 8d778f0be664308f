from datetime import datetime
from decimal import Decimal

import pytest
from sqlmodel import select

from rentable.models.rental import Rental
from rentable.services.rental_service import rental_days, rental_total

API = "/api/v1/rentals"


def _request(listing, start="2025-06-01T00:00:00Z", end="2025-06-04T00:00:00Z", **extra):
    return {"listing_id": str(listing.id), "start_date": start, "end_date": end, **extra}


@pytest.mark.parametrize(
    "start, end, days",
    [
        (datetime(2025, 6, 1), datetime(2025, 6, 4), 3),
        (datetime(2025, 6, 1), datetime(2025, 6, 1, 2), 1),
        (datetime(2025, 6, 1), datetime(2025, 6, 2, 0, 0, 1), 2),
        (datetime(2025, 6, 1), datetime(2025, 6, 2), 1),
    ],
)
def test_rental_days_rounds_up(start, end, days):
    assert rental_days(start, end) == days


def test_rental_total_rounds_half_up_to_cents():
    assert rental_total(Decimal("45.00"), 3) == Decimal("135.00")
    assert rental_total(Decimal("0.125"), 1) == Decimal("0.13")


def test_request_rental_scenario(client, login, session, make_user, make_listing):
    owner = make_user()
    renter = make_user()
    listing = make_listing(owner, price_per_day=Decimal("45.00"))
    login(renter)

    r = client.post(API, json=_request(listing, notes="  pick up after 5pm  "))

    assert r.status_code == 201
    body = r.json()
    assert Decimal(body["total_price"]) == Decimal("135.00")
    assert body["status"] == "pending"
    assert body["payment_status"] == "pending"
    assert body["owner_id"] == str(owner.id)
    assert body["renter_id"] == str(renter.id)
    assert body["notes"] == "pick up after 5pm"

    session.refresh(listing)
    assert listing.availability == "rented"


def test_partial_day_is_billed_as_full_day(client, login, make_user, make_listing):
    listing = make_listing(make_user(), price_per_day=Decimal("10.00"))
    login(make_user())

    r = client.post(API, json=_request(listing, end="2025-06-02T06:00:00Z"))

    assert Decimal(r.json()["total_price"]) == Decimal("20.00")


def test_cannot_rent_unavailable_listing(client, login, session, make_user, make_listing):
    listing = make_listing(make_user(), availability="unavailable")
    login(make_user())

    r = client.post(API, json=_request(listing))

    assert r.status_code == 409
    assert r.json()["kind"] == "Conflict"
    assert session.exec(select(Rental)).all() == []


def test_second_request_loses_to_reservation(client, login, session, make_user, make_listing):
    listing = make_listing(make_user())

    login(make_user())
    assert client.post(API, json=_request(listing)).status_code == 201

    login(make_user())
    r = client.post(API, json=_request(listing))
    assert r.status_code == 409
    assert len(session.exec(select(Rental)).all()) == 1


def test_cannot_rent_own_listing(client, login, make_user, make_listing):
    owner = make_user()
    listing = make_listing(owner)
    login(owner)

    r = client.post(API, json=_request(listing))

    assert r.status_code == 409


def test_end_must_be_after_start(client, login, session, make_user, make_listing):
    listing = make_listing(make_user())
    login(make_user())

    r = client.post(API, json=_request(listing, end="2025-06-01T00:00:00Z"))

    assert r.status_code == 400
    assert r.json()["kind"] == "InvalidInput"
    session.refresh(listing)
    assert listing.availability == "available"


def test_unknown_listing(client, login, make_user):
    login(make_user())

    r = client.post(
        API,
        json={
            "listing_id": "00000000-0000-0000-0000-000000000000",
            "start_date": "2025-06-01T00:00:00Z",
            "end_date": "2025-06-02T00:00:00Z",
        },
    )

    assert r.status_code == 404


# -------- Status transitions --------


def _patch_status(client, rental, status):
    return client.patch(f"{API}/{rental.id}/status", json={"status": status})


def test_clients_cannot_confirm(client, login, make_user, make_listing, make_rental):
    owner = make_user()
    rental = make_rental(make_listing(owner), make_user())
    login(owner)

    assert _patch_status(client, rental, "confirmed").status_code == 422


def test_renter_cancels_pending_and_listing_is_released(
    client, login, session, make_user, make_listing
):
    listing = make_listing(make_user())
    renter = make_user()
    login(renter)
    rental_id = client.post(API, json=_request(listing)).json()["id"]

    r = client.patch(f"{API}/{rental_id}/status", json={"status": "canceled"})

    assert r.status_code == 200
    assert r.json()["status"] == "canceled"
    session.refresh(listing)
    assert listing.availability == "available"


def test_owner_runs_confirmed_rental_to_completion(
    client, login, session, make_user, make_listing, make_rental
):
    owner = make_user()
    renter = make_user()
    listing = make_listing(owner, availability="rented")
    rental = make_rental(listing, renter, status="confirmed")

    login(renter)
    assert _patch_status(client, rental, "in_progress").status_code == 403

    login(owner)
    assert _patch_status(client, rental, "in_progress").json()["status"] == "in_progress"
    assert _patch_status(client, rental, "canceled").status_code == 409
    assert _patch_status(client, rental, "completed").json()["status"] == "completed"

    session.refresh(listing)
    assert listing.availability == "available"


@pytest.mark.parametrize(
    "current, target",
    [
        ("pending", "in_progress"),
        ("pending", "completed"),
        ("confirmed", "completed"),
        ("completed", "canceled"),
        ("canceled", "in_progress"),
    ],
)
def test_illegal_transitions_conflict(
    client, login, make_user, make_listing, make_rental, current, target
):
    owner = make_user()
    rental = make_rental(make_listing(owner), make_user(), status=current)
    login(owner)

    r = _patch_status(client, rental, target)

    assert r.status_code == 409
    assert r.json()["kind"] == "Conflict"


def test_strangers_cannot_touch_rental(client, login, make_user, make_listing, make_rental):
    rental = make_rental(make_listing(make_user()), make_user())
    login(make_user())

    assert client.get(f"{API}/{rental.id}").status_code == 403
    assert _patch_status(client, rental, "canceled").status_code == 403


def test_admin_can_cancel_any_rental(client, login, make_user, make_listing, make_rental):
    rental = make_rental(make_listing(make_user()), make_user(), status="confirmed")
    login(make_user(role="admin"))

    r = _patch_status(client, rental, "canceled")

    assert r.status_code == 200
    assert r.json()["status"] == "canceled"


def test_my_and_owned_rentals(client, login, make_user, make_listing, make_rental):
    owner = make_user()
    renter = make_user()
    rental = make_rental(make_listing(owner), renter)

    login(renter)
    assert [x["id"] for x in client.get(f"{API}/me").json()] == [str(rental.id)]
    assert client.get(f"{API}/owned").json() == []

    login(owner)
    assert [x["id"] for x in client.get(f"{API}/owned").json()] == [str(rental.id)]
    assert client.get(f"{API}/{rental.id}").status_code == 200


def test_damage_report(client, login, make_user, make_listing, make_rental):
    renter = make_user()
    listing = make_listing(make_user())
    pending = make_rental(listing, renter)
    started = make_rental(listing, renter, status="in_progress")
    login(renter)

    r = client.post(f"{API}/{pending.id}/damage", json={"description": "Cracked handle"})
    assert r.status_code == 409

    r = client.post(f"{API}/{started.id}/damage", json={"description": "Cracked handle"})
    assert r.status_code == 200
    assert r.json()["damage_reported"] is True
    assert r.json()["damage_description"] == "Cracked handle"


def test_naive_dates_are_treated_as_utc(client, login, make_user, make_listing):
    listing = make_listing(make_user(), price_per_day=Decimal("10.00"))
    login(make_user())

    r = client.post(
        API,
        json=_request(listing, start="2025-06-01T00:00:00", end="2025-06-03T00:00:00+00:00"),
    )

    assert r.status_code == 201
    assert Decimal(r.json()["total_price"]) == Decimal("20.00")
