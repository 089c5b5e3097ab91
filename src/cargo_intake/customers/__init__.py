"""
Customer Master Package

Read-only customer ledger access for the intake engine.
"""

from .directory import CsvCustomerDirectory, CustomerDirectory, InMemoryCustomerDirectory
from .models import Customer, CustomerSnapshot

__all__ = [
    "CsvCustomerDirectory",
    "Customer",
    "CustomerDirectory",
    "CustomerSnapshot",
    "InMemoryCustomerDirectory",
]
