# seed.py
import datetime
from decimal import Decimal

from budget_app.ledger import LedgerStore, create_user, get_user_by_email

DEMO_BUDGETS = [
    ("Food", "500"),
    ("Transportation", "300"),
    ("Entertainment", "200"),
    ("Utilities", "400"),
]

DEMO_TRANSACTIONS = [
    ("Grocery shopping", "-120.50", datetime.date(2024, 3, 1), "Food"),
    ("Monthly salary", "5000", datetime.date(2024, 3, 1), "Salary"),
    ("Movie night", "-30", datetime.date(2024, 3, 2), "Entertainment"),
    ("Bus fare", "-25", datetime.date(2024, 3, 3), "Transportation"),
    ("Electricity bill", "-150", datetime.date(2024, 3, 4), "Utilities"),
]


def seed_demo_user(session_factory, email="test@example.com", password="password123"):
    """Recreate the demo user with a fixed set of budgets and transactions."""
    session = session_factory()
    try:
        existing = get_user_by_email(session, email)
        if existing:
            session.delete(existing)
            session.commit()
        user = create_user(session, email, password, name="Test User")
        store = LedgerStore(session, user.id)
        for category, amount in DEMO_BUDGETS:
            store.create_budget(category, Decimal(amount))
        for description, amount, date, category in DEMO_TRANSACTIONS:
            store.create_transaction(description, Decimal(amount), date, category)
        session.refresh(user)
        session.expunge(user)
        return user
    finally:
        session.close()
