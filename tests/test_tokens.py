import uuid

import pytest
from sqlmodel import select

from rentable.core.errors import InsufficientBalance, InvalidInput, NotFound
from rentable.models.token import TokenTransaction
from rentable.repositories.token_repo import TokenRepository
from rentable.repositories.user_repo import UserRepository
from rentable.services.user_service import UserService


def _ledger(session, user_id):
    stmt = select(TokenTransaction).where(TokenTransaction.user_id == user_id)
    return session.exec(stmt).all()


def test_credit_and_debit_keep_balance_equal_to_ledger_sum(session, tokens, make_user):
    user = make_user()

    tokens.credit(session, user.id, 40, "earn", "Listed a drill")
    tokens.credit(session, user.id, 5, "refund", "Refund")
    tokens.debit(session, user.id, 30, "premium filter")
    tokens.credit(session, user.id, 100, "bonus", "Welcome bonus")

    assert tokens.balance(session, user.id) == 115
    assert tokens.ledger_sum(session, user.id) == 115
    assert len(_ledger(session, user.id)) == 4


def test_debit_records_negative_spend_entry(session, tokens, make_user):
    user = make_user(balance=50)

    entry = tokens.debit(session, user.id, 20, "boost listing")

    assert entry.amount == -20
    assert entry.type == "spend"
    assert tokens.balance(session, user.id) == 30


def test_debit_over_balance_changes_nothing(session, tokens, make_user):
    user = make_user(balance=20)
    before = len(_ledger(session, user.id))

    with pytest.raises(InsufficientBalance):
        tokens.debit(session, user.id, 25, "premium filter")
    session.rollback()

    assert tokens.balance(session, user.id) == 20
    assert tokens.ledger_sum(session, user.id) == 20
    assert len(_ledger(session, user.id)) == before


def test_debit_can_empty_the_balance(session, tokens, make_user):
    user = make_user(balance=25)

    tokens.debit(session, user.id, 25, "everything")

    assert tokens.balance(session, user.id) == 0


def test_history_is_newest_first(session, tokens, make_user):
    user = make_user()
    tokens.credit(session, user.id, 1, "earn", "first")
    tokens.credit(session, user.id, 2, "earn", "second")
    tokens.credit(session, user.id, 3, "earn", "third")

    history = tokens.history(session, user.id)

    assert [t.description for t in history] == ["third", "second", "first"]


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_amounts_are_rejected(session, tokens, make_user, amount):
    user = make_user(balance=10)

    with pytest.raises(InvalidInput):
        tokens.credit(session, user.id, amount, "earn", "nope")
    with pytest.raises(InvalidInput):
        tokens.debit(session, user.id, amount, "nope")


def test_credit_rejects_spend_type(session, tokens, make_user):
    user = make_user()

    with pytest.raises(InvalidInput):
        tokens.credit(session, user.id, 5, "spend", "wrong direction")


def test_unknown_user_is_not_found(session, tokens):
    with pytest.raises(NotFound):
        tokens.credit(session, uuid.uuid4(), 5, "earn", "ghost")


def test_provisioned_user_gets_signup_bonus_as_ledger_entry(session, tokens, settings):
    service = UserService(UserRepository(), tokens)
    user_id = uuid.uuid4()

    user = service.get_or_provision(session, user_id, "newbie@example.com")

    assert user.name == "newbie"
    assert user.role == "user"
    assert user.token_balance == settings.SIGNUP_BONUS_TOKENS
    assert tokens.ledger_sum(session, user_id) == user.token_balance
    [entry] = _ledger(session, user_id)
    assert entry.type == "bonus"

    # Second login does not credit again
    again = service.get_or_provision(session, user_id, "newbie@example.com")
    assert again.token_balance == settings.SIGNUP_BONUS_TOKENS


def test_owner_id_is_provisioned_as_admin(session, tokens, settings, monkeypatch):
    owner_id = uuid.uuid4()
    monkeypatch.setattr(settings, "OWNER_USER_ID", str(owner_id))
    service = UserService(UserRepository(), tokens)

    user = service.get_or_provision(session, owner_id, "owner@example.com")

    assert user.role == "admin"


# -------- Routes --------


def test_balance_and_history_routes(client, login, make_user):
    user = make_user(balance=20)
    login(user)

    assert client.get("/api/v1/tokens/balance").json() == {"balance": 20}
    history = client.get("/api/v1/tokens/history").json()
    assert [h["amount"] for h in history] == [20]


def test_spend_route_insufficient_balance(client, login, make_user):
    user = make_user(balance=20)
    login(user)

    r = client.post("/api/v1/tokens/spend", json={"amount": 25, "description": "premium filter"})

    assert r.status_code == 409
    assert r.json()["kind"] == "InsufficientBalance"
    assert client.get("/api/v1/tokens/balance").json() == {"balance": 20}


def test_spend_route_success(client, login, make_user):
    user = make_user(balance=20)
    login(user)

    r = client.post("/api/v1/tokens/spend", json={"amount": 5, "description": "boost"})

    assert r.status_code == 200
    assert r.json() == {"balance": 15}


def test_tokens_require_auth(client, login):
    login(None)

    r = client.get("/api/v1/tokens/balance")

    assert r.status_code == 401
    assert r.json()["kind"] == "Unauthenticated"


def test_token_repo_refuses_negative_balance(session, make_user):
    user = make_user(balance=3)

    assert TokenRepository().apply_delta(session, user.id, -4) is False
    session.rollback()
    assert TokenRepository().get_balance(session, user.id) == 3
