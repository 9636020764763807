from .expense import Expense, next_due_date

__all__ = ["Expense", "next_due_date"]
