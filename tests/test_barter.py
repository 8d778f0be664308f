from sqlmodel import select

from rentable.models.barter import BarterOffer

API = "/api/v1/barter"

DESCRIPTION = "Vintage record player, works great"


def _offer(listing, **extra):
    return {"listing_id": str(listing.id), "offered_item_description": DESCRIPTION, **extra}


def test_offer_requires_barter_enabled(client, login, session, make_user, make_listing):
    listing = make_listing(make_user(), is_barter_enabled=False)
    login(make_user())

    r = client.post(API, json=_offer(listing))

    assert r.status_code == 409
    assert r.json()["kind"] == "Conflict"
    assert session.exec(select(BarterOffer)).all() == []


def test_offer_goes_to_listing_owner(client, login, make_user, make_listing):
    owner = make_user()
    listing = make_listing(owner, is_barter_enabled=True)
    login(make_user())

    r = client.post(API, json=_offer(listing, offered_item_value="80.00"))

    assert r.status_code == 201
    assert r.json()["to_user_id"] == str(owner.id)
    assert r.json()["status"] == "pending"


def test_owner_cannot_offer_on_own_listing(client, login, make_user, make_listing):
    owner = make_user()
    listing = make_listing(owner, is_barter_enabled=True)
    login(owner)

    assert client.post(API, json=_offer(listing)).status_code == 409


def test_description_min_length(client, login, make_user, make_listing):
    listing = make_listing(make_user(), is_barter_enabled=True)
    login(make_user())

    r = client.post(API, json=_offer(listing, offered_item_description="   short    "))

    assert r.status_code == 422


def test_offer_lifecycle(client, login, make_user, make_listing):
    owner = make_user()
    offerer = make_user()
    listing = make_listing(owner, is_barter_enabled=True)
    login(offerer)
    offer_id = client.post(API, json=_offer(listing)).json()["id"]

    def set_status(status):
        return client.patch(f"{API}/{offer_id}/status", json={"status": status})

    # Offerer cannot accept their own offer
    assert set_status("accepted").status_code == 403
    # Cannot complete before acceptance
    assert set_status("completed").status_code == 409

    login(owner)
    assert set_status("accepted").json()["status"] == "accepted"
    assert set_status("rejected").status_code == 409

    login(offerer)
    assert set_status("completed").json()["status"] == "completed"

    login(owner)
    for status in ("accepted", "rejected", "completed"):
        r = set_status(status)
        assert r.status_code == 409


def test_rejected_is_terminal(client, login, make_user, make_listing):
    owner = make_user()
    listing = make_listing(owner, is_barter_enabled=True)
    login(make_user())
    offer_id = client.post(API, json=_offer(listing)).json()["id"]

    login(owner)
    assert client.patch(f"{API}/{offer_id}/status", json={"status": "rejected"}).status_code == 200
    assert client.patch(f"{API}/{offer_id}/status", json={"status": "accepted"}).status_code == 409


def test_outsiders_cannot_change_status(client, login, make_user, make_listing):
    listing = make_listing(make_user(), is_barter_enabled=True)
    login(make_user())
    offer_id = client.post(API, json=_offer(listing)).json()["id"]

    login(make_user())
    r = client.patch(f"{API}/{offer_id}/status", json={"status": "rejected"})

    assert r.status_code == 403


def test_offer_listings(client, login, make_user, make_listing):
    owner = make_user()
    offerer = make_user()
    listing = make_listing(owner, is_barter_enabled=True)
    login(offerer)
    client.post(API, json=_offer(listing))

    assert len(client.get(f"{API}/me").json()) == 1
    login(owner)
    assert len(client.get(f"{API}/me").json()) == 1
    assert len(client.get(f"/api/v1/listings/{listing.id}/barter-offers").json()) == 1
    login(make_user())
    assert client.get(f"{API}/me").json() == []


def test_no_offers_on_listings_off_the_market(client, login, session, make_user, make_listing):
    withdrawn = make_listing(make_user(), is_barter_enabled=True, availability="unavailable")
    removed = make_listing(make_user(), is_barter_enabled=True, is_removed=True)
    login(make_user())

    assert client.post(API, json=_offer(withdrawn)).status_code == 409
    assert client.post(API, json=_offer(removed)).status_code == 409
    assert session.exec(select(BarterOffer)).all() == []
