# utils/categories.py
# Recognised categories. Storage accepts any label; these drive the category picker.

INCOME_CATEGORIES = ("Salary", "Freelance", "Investments", "Other Income")
EXPENSE_CATEGORIES = ("Food", "Transportation", "Entertainment", "Bills", "Shopping", "Others")
