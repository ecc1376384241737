"""Unit and payment ledgers"""
from socialauction.core.state.balances import BalanceBook, UnitLedger, PaymentLedger

__all__ = [
    "BalanceBook",
    "UnitLedger",
    "PaymentLedger",
]
