API = "/api/v1/reviews"


def _review(rental, review_type, rating=5, **extra):
    return {"rental_id": str(rental.id), "rating": rating, "review_type": review_type, **extra}


def test_review_requires_completed_rental(client, login, make_user, make_listing, make_rental):
    renter = make_user()
    rental = make_rental(make_listing(make_user()), renter, status="in_progress")
    login(renter)

    r = client.post(API, json=_review(rental, "renter_to_owner"))

    assert r.status_code == 409
    assert r.json()["kind"] == "Conflict"


def test_both_sides_review_once(client, login, make_user, make_listing, make_rental):
    owner = make_user()
    renter = make_user()
    rental = make_rental(make_listing(owner), renter, status="completed")

    login(renter)
    r = client.post(API, json=_review(rental, "renter_to_owner", comment="  Great drill  "))
    assert r.status_code == 201
    assert r.json()["to_user_id"] == str(owner.id)
    assert r.json()["comment"] == "Great drill"
    assert client.post(API, json=_review(rental, "renter_to_owner")).status_code == 409

    login(owner)
    r = client.post(API, json=_review(rental, "owner_to_renter", rating=4))
    assert r.status_code == 201
    assert r.json()["to_user_id"] == str(renter.id)


def test_review_direction_must_match_caller(client, login, make_user, make_listing, make_rental):
    owner = make_user()
    renter = make_user()
    rental = make_rental(make_listing(owner), renter, status="completed")

    login(owner)
    assert client.post(API, json=_review(rental, "renter_to_owner")).status_code == 403

    login(make_user())
    assert client.post(API, json=_review(rental, "owner_to_renter")).status_code == 403


def test_rating_bounds(client, login, make_user, make_listing, make_rental):
    renter = make_user()
    rental = make_rental(make_listing(make_user()), renter, status="completed")
    login(renter)

    assert client.post(API, json=_review(rental, "renter_to_owner", rating=0)).status_code == 422
    assert client.post(API, json=_review(rental, "renter_to_owner", rating=6)).status_code == 422


def test_reviews_listed_by_listing_and_user(client, login, make_user, make_listing, make_rental):
    owner = make_user()
    renter = make_user()
    listing = make_listing(owner)
    rental = make_rental(listing, renter, status="completed")
    login(renter)
    client.post(API, json=_review(rental, "renter_to_owner"))

    by_listing = client.get(f"/api/v1/listings/{listing.id}/reviews").json()
    by_owner = client.get(f"/api/v1/users/{owner.id}/reviews").json()

    assert len(by_listing) == 1
    assert [x["from_user_id"] for x in by_owner] == [str(renter.id)]
    assert client.get(f"/api/v1/users/{renter.id}/reviews").json() == []
