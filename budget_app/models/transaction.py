# models/transaction.py
import datetime
from decimal import Decimal

from sqlalchemy import Column, Integer, Numeric, Date, String, ForeignKey
from sqlalchemy.orm import relationship, validates

from . import Base

INCOME = "income"
EXPENSE = "expense"


def direction_for(amount) -> str:
    """'income' for a positive amount, 'expense' for a negative one."""
    value = Decimal(str(amount))
    if value > 0:
        return INCOME
    if value < 0:
        return EXPENSE
    raise ValueError("Amount cannot be zero")


class Transaction(Base):
    __tablename__ = "transactions"
    id = Column(Integer, primary_key=True, index=True)
    description = Column(String(255), nullable=False, default="")
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False, default=datetime.date.today, index=True)
    category = Column(String(64), nullable=False)
    type = Column(String(10), nullable=False)  # derived from the sign of amount
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    user = relationship("User", back_populates="transactions")

    @validates("amount")
    def _sync_type(self, key, amount):
        self.type = direction_for(amount)
        return amount

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "description": self.description,
            "amount": float(self.amount),
            "date": self.date.isoformat() if self.date else None,
            "category": self.category,
            "type": self.type,
        }
