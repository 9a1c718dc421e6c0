from enum import Enum


class AccountType(str, Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class CategoryType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Recurrence(str, Enum):
    NONE = "NONE"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class BillPaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class DebtType(str, Enum):
    LOAN = "LOAN"
    FINANCING = "FINANCING"
    CREDIT_CARD = "CREDIT_CARD"
    OVERDRAFT = "OVERDRAFT"
    OTHER = "OTHER"


class DebtStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PAID_OFF = "PAID_OFF"
    CANCELLED = "CANCELLED"


class MessageSender(str, Enum):
    USER = "USER"
    AI = "AI"
