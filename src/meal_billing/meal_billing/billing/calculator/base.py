from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class BaseExpenseCalculator(ABC):
    """Calculator interface (Strategy Pattern for prorating the base expense)."""

    @abstractmethod
    def base_expense(self, monthly_expense: Decimal, active_days: int) -> Decimal:
        raise NotImplementedError
