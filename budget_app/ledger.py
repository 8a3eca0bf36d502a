"""
Persistence for users, budgets and transactions.

``LedgerStore`` wraps one SQLAlchemy session and one user id; every read and
write goes through the owner check, so a handler can never reach another
user's rows. The account functions at the bottom work on ``User`` rows
directly.
"""
import logging
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from budget_app import insights
from budget_app.errors import (
    AuthenticationError, DuplicateError, ForbiddenError, NotFoundError, ValidationError,
)
from budget_app.models.budget import Budget
from budget_app.models.transaction import Transaction
from budget_app.models.user import User

logger = logging.getLogger(__name__)


class LedgerStore:
    def __init__(self, session, user_id: int):
        self.session = session
        self.user_id = user_id

    # ---------------- Budgets ----------------
    def list_budgets(self):
        return (self.session.query(Budget)
                .filter(Budget.user_id == self.user_id)
                .order_by(Budget.id)
                .all())

    def get_budget(self, budget_id: int) -> Budget:
        return self._owned(Budget, budget_id, "Budget")

    def create_budget(self, category: str, amount: Decimal) -> Budget:
        budget = Budget(user_id=self.user_id, category=category, amount=amount,
                        spent=self._spent_in(category))
        self.session.add(budget)
        self.session.commit()
        logger.info("user %s created budget %s (%s)", self.user_id, budget.id, category)
        return budget

    def update_budget(self, budget_id: int, category: str, amount: Decimal) -> Budget:
        budget = self.get_budget(budget_id)
        budget.category = category
        budget.amount = amount
        budget.spent = self._spent_in(category)
        self.session.commit()
        logger.info("user %s updated budget %s", self.user_id, budget_id)
        return budget

    def delete_budget(self, budget_id: int) -> None:
        budget = self.get_budget(budget_id)
        self.session.delete(budget)
        self.session.commit()
        logger.info("user %s deleted budget %s", self.user_id, budget_id)

    # ---------------- Transactions ----------------
    def list_transactions(self):
        return (self.session.query(Transaction)
                .filter(Transaction.user_id == self.user_id)
                .order_by(Transaction.date.desc(), Transaction.id.desc())
                .all())

    def get_transaction(self, transaction_id: int) -> Transaction:
        return self._owned(Transaction, transaction_id, "Transaction")

    def create_transaction(self, description, amount, date, category) -> Transaction:
        """Insert a transaction and bump matching budget totals in one commit."""
        transaction = Transaction(
            description=description or "",
            amount=amount,
            date=date,
            category=category,
            user_id=self.user_id,
        )
        try:
            self.session.add(transaction)
            self._adjust_spent(category, amount, 1)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info("user %s recorded %s of %s in %s",
                    self.user_id, transaction.type, amount, category)
        return transaction

    def update_transaction(self, transaction_id, description, amount, date, category) -> Transaction:
        transaction = self.get_transaction(transaction_id)
        try:
            self._adjust_spent(transaction.category, transaction.amount, -1)
            transaction.description = description or ""
            transaction.amount = amount
            transaction.date = date
            transaction.category = category
            self._adjust_spent(category, amount, 1)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info("user %s updated transaction %s", self.user_id, transaction_id)
        return transaction

    def delete_transaction(self, transaction_id: int) -> None:
        transaction = self.get_transaction(transaction_id)
        try:
            self._adjust_spent(transaction.category, transaction.amount, -1)
            self.session.delete(transaction)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        logger.info("user %s deleted transaction %s", self.user_id, transaction_id)

    # ---------------- Helpers ----------------
    def _owned(self, model, entity_id, label):
        entity = self.session.get(model, entity_id)
        if entity is None:
            raise NotFoundError(f"{label} not found")
        if entity.user_id != self.user_id:
            logger.warning("user %s tried to access %s %s of user %s",
                           self.user_id, label.lower(), entity_id, entity.user_id)
            raise ForbiddenError("Unauthorized")
        return entity

    def _spent_in(self, category) -> Decimal:
        expenses = (self.session.query(Transaction)
                    .filter(Transaction.user_id == self.user_id,
                            Transaction.category == category,
                            Transaction.amount < 0)
                    .all())
        return insights.spent_for_category(expenses, category)

    def _adjust_spent(self, category, amount, sign: int) -> None:
        # Only expenses move a budget's running total.
        amount = Decimal(str(amount))
        if amount >= 0:
            return
        delta = abs(amount) * sign
        matching = (self.session.query(Budget)
                    .filter(Budget.user_id == self.user_id, Budget.category == category)
                    .all())
        for budget in matching:
            budget.spent = (budget.spent or Decimal("0")) + delta


def budget_snapshot(session, user_id: int):
    """(budgets, transactions) for one user, ready for the insights functions."""
    store = LedgerStore(session, user_id)
    return store.list_budgets(), store.list_transactions()


# ---------------- Accounts ----------------
def get_user_by_email(session, email: str):
    return session.query(User).filter(User.email == email).first()


def create_user(session, email: str, password: str, name: str = None) -> User:
    if get_user_by_email(session, email):
        raise DuplicateError("User already exists")
    user = User(email=email, name=name)
    user.set_password(password)
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise DuplicateError("User already exists")
    logger.info("created user %s", user.id)
    return user


def authenticate(session, email: str, password: str) -> User:
    user = get_user_by_email(session, email)
    if user is None or not user.check_password(password):
        raise AuthenticationError("Invalid email or password")
    return user


def update_profile(session, user: User, name: str, email: str) -> User:
    if email != user.email and get_user_by_email(session, email):
        raise DuplicateError("Email is already in use")
    user.name = name
    user.email = email
    session.commit()
    logger.info("user %s updated profile", user.id)
    return user


def change_password(session, user: User, current_password: str, new_password: str) -> None:
    if not user.check_password(current_password):
        raise ValidationError("Current password is incorrect")
    user.set_password(new_password)
    session.commit()
    logger.info("user %s changed password", user.id)
