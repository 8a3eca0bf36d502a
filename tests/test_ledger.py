import datetime
from decimal import Decimal

import pytest
from budget_app import ledger
from budget_app.errors import (
    AuthenticationError, DuplicateError, ForbiddenError, NotFoundError, ValidationError,
)
from budget_app.ledger import LedgerStore
from budget_app.models import Budget, Transaction


@pytest.fixture()
def users(session):
    alice = ledger.create_user(session, "alice@example.com", "s3cret", name="Alice")
    bob = ledger.create_user(session, "bob@example.com", "hunter2")
    return alice, bob


@pytest.fixture()
def store(session, users):
    return LedgerStore(session, users[0].id)


def test_create_user_rejects_duplicate_email(session, users):
    with pytest.raises(DuplicateError):
        ledger.create_user(session, "alice@example.com", "other")


def test_email_is_case_sensitive(session, users):
    user = ledger.create_user(session, "Alice@example.com", "pw")
    assert user.id not in {u.id for u in users}


def test_authenticate(session, users):
    assert ledger.authenticate(session, "alice@example.com", "s3cret").id == users[0].id
    with pytest.raises(AuthenticationError):
        ledger.authenticate(session, "alice@example.com", "nope")
    with pytest.raises(AuthenticationError):
        ledger.authenticate(session, "nobody@example.com", "s3cret")


def test_update_profile_and_password(session, users):
    alice, bob = users
    ledger.update_profile(session, alice, "Alice A.", "alice@new.example.com")
    assert ledger.get_user_by_email(session, "alice@new.example.com").name == "Alice A."
    with pytest.raises(DuplicateError):
        ledger.update_profile(session, alice, "Alice", bob.email)

    with pytest.raises(ValidationError):
        ledger.change_password(session, alice, "wrong", "new-pass")
    ledger.change_password(session, alice, "s3cret", "new-pass")
    assert alice.check_password("new-pass")


def test_budget_crud(store):
    budget = store.create_budget("Food", Decimal("500"))
    assert [b.id for b in store.list_budgets()] == [budget.id]

    store.update_budget(budget.id, "Groceries", Decimal("450"))
    assert store.get_budget(budget.id).category == "Groceries"
    assert store.get_budget(budget.id).amount == Decimal("450")

    store.delete_budget(budget.id)
    assert store.list_budgets() == []
    with pytest.raises(NotFoundError):
        store.get_budget(budget.id)


def test_other_users_rows_are_forbidden(session, users, store):
    bob_store = LedgerStore(session, users[1].id)
    budget = bob_store.create_budget("Food", Decimal("100"))
    tx = bob_store.create_transaction("Lunch", Decimal("-12"), datetime.date(2024, 3, 1), "Food")

    with pytest.raises(ForbiddenError):
        store.update_budget(budget.id, "Food", Decimal("1"))
    with pytest.raises(ForbiddenError):
        store.delete_budget(budget.id)
    with pytest.raises(ForbiddenError):
        store.delete_transaction(tx.id)
    assert store.list_budgets() == []
    assert store.list_transactions() == []
    # update never changes ownership
    assert bob_store.get_budget(budget.id).user_id == users[1].id


def test_expense_increments_matching_budgets(session, store, users):
    food = store.create_budget("Food", Decimal("500"))
    food_again = store.create_budget("Food", Decimal("50"))
    rent = store.create_budget("Rent", Decimal("900"))
    bob_food = LedgerStore(session, users[1].id).create_budget("Food", Decimal("10"))

    store.create_transaction("Groceries", Decimal("-120.50"), datetime.date(2024, 3, 1), "Food")
    store.create_transaction("Refund", Decimal("20"), datetime.date(2024, 3, 2), "Food")

    session.expire_all()
    assert session.get(Budget, food.id).spent == Decimal("120.50")
    assert session.get(Budget, food_again.id).spent == Decimal("120.50")
    assert session.get(Budget, rent.id).spent == Decimal("0")
    assert session.get(Budget, bob_food.id).spent == Decimal("0")


def test_update_and_delete_move_running_total(session, store):
    food = store.create_budget("Food", Decimal("500"))
    fun = store.create_budget("Fun", Decimal("100"))
    tx = store.create_transaction("Dinner", Decimal("-80"), datetime.date(2024, 3, 1), "Food")

    store.update_transaction(tx.id, "Concert", Decimal("-30"), datetime.date(2024, 3, 2), "Fun")
    session.expire_all()
    assert session.get(Budget, food.id).spent == Decimal("0")
    assert session.get(Budget, fun.id).spent == Decimal("30")
    assert store.get_transaction(tx.id).description == "Concert"

    store.delete_transaction(tx.id)
    session.expire_all()
    assert session.get(Budget, fun.id).spent == Decimal("0")
    assert session.get(Transaction, tx.id) is None


def test_failed_create_leaves_nothing_behind(session, store, monkeypatch):
    food = store.create_budget("Food", Decimal("500"))

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(session, "commit", boom)
    with pytest.raises(RuntimeError):
        store.create_transaction("Groceries", Decimal("-10"), datetime.date(2024, 3, 1), "Food")
    monkeypatch.undo()

    session.expire_all()
    assert store.list_transactions() == []
    assert session.get(Budget, food.id).spent == Decimal("0")


def test_transactions_listed_newest_first(store):
    store.create_transaction("old", Decimal("-1"), datetime.date(2024, 1, 1), "Food")
    store.create_transaction("new", Decimal("-1"), datetime.date(2024, 5, 1), "Food")
    assert [t.description for t in store.list_transactions()] == ["new", "old"]


def test_budget_snapshot(session, store, users):
    store.create_budget("Food", Decimal("5"))
    store.create_transaction("x", Decimal("-1"), datetime.date(2024, 1, 1), "Food")
    budgets, transactions = ledger.budget_snapshot(session, users[0].id)
    assert len(budgets) == 1 and len(transactions) == 1


def test_new_budget_picks_up_existing_expenses(session, store):
    store.create_transaction("Groceries", Decimal("-200"), datetime.date(2024, 3, 1), "Food")
    store.create_transaction("Refund", Decimal("50"), datetime.date(2024, 3, 2), "Food")
    food = store.create_budget("Food", Decimal("500"))

    session.expire_all()
    assert session.get(Budget, food.id).spent == Decimal("200")


def test_recategorised_budget_recomputes_spent(session, store):
    budget = store.create_budget("Food", Decimal("500"))
    store.create_transaction("Groceries", Decimal("-200"), datetime.date(2024, 3, 1), "Food")
    store.create_transaction("Power", Decimal("-75"), datetime.date(2024, 3, 1), "Bills")

    store.update_budget(budget.id, "Bills", Decimal("500"))
    session.expire_all()
    assert session.get(Budget, budget.id).spent == Decimal("75")

    store.update_budget(budget.id, "Rent", Decimal("900"))
    session.expire_all()
    assert session.get(Budget, budget.id).spent == Decimal("0")
