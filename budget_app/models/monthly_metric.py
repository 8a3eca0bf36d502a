# models/monthly_metric.py
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from . import Base


class MonthlyMetric(Base):
    __tablename__ = "monthly_metrics"
    __table_args__ = (UniqueConstraint("user_id", "year_month", name="uq_monthly_metric_user_month"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    year_month = Column(String(7), nullable=False, index=True)  # YYYY-MM
    total_income = Column(Numeric(12, 2), default=0)
    total_expense = Column(Numeric(12, 2), default=0)
    balance = Column(Numeric(12, 2), default=0)
    overspent_count = Column(Integer, default=0)
    top_overspent_category = Column(String(64), nullable=True)

    user = relationship("User", back_populates="monthly_metrics")

    def to_dict(self):
        return {
            "yearMonth": self.year_month,
            "totalIncome": float(self.total_income or 0),
            "totalExpense": float(self.total_expense or 0),
            "balance": float(self.balance or 0),
            "overspentCount": self.overspent_count or 0,
            "topOverspentCategory": self.top_overspent_category,
        }
