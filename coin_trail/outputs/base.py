# coin_trail/outputs/base.py
from abc import ABC, abstractmethod

class BaseOutput(ABC):
    @abstractmethod
    def write(self, year, transactions, categories):
        """Export a year's transactions and cashflow; return the written path."""
        pass
