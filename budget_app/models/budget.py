# models/budget.py
from sqlalchemy import Column, Integer, Numeric, String, ForeignKey
from sqlalchemy.orm import relationship

from . import Base


class Budget(Base):
    __tablename__ = "budgets"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    category = Column(String(64), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    # running total of expenses, maintained by the ledger store
    spent = Column(Numeric(12, 2), nullable=False, default=0)

    user = relationship("User", back_populates="budgets")

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "category": self.category,
            "amount": float(self.amount),
            "spent": float(self.spent or 0),
        }
