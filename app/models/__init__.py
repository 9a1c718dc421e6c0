from .user import User
from .account import Account
from .card import Card
from .invoice import Invoice
from .category import Category
from .transaction import Transaction
from .bill import Bill, BillPayment
from .debt import Debt, DebtPayment
from .investment import Investment
from .chat import ChatSession, ChatMessage
from .bank_statement import BankStatement

__all__ = [
    "User",
    "Account",
    "Card",
    "Invoice",
    "Category",
    "Transaction",
    "Bill",
    "BillPayment",
    "Debt",
    "DebtPayment",
    "Investment",
    "ChatSession",
    "ChatMessage",
    "BankStatement",
]
