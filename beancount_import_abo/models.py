#!/usr/bin/env python3

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal


class LineType(Enum):
    STATEMENT = "074"
    TRANSACTION = "075"
    ADDITIONAL_INFORMATION = "076"
    MESSAGE_START = "078"
    MESSAGE_END = "079"
    UNRECOGNIZED = None


class PostingCode(int, Enum):
    DEBIT = 1
    CREDIT = 2
    DEBIT_REVERSAL = 4
    CREDIT_REVERSAL = 5


@dataclass
class InducedPosting:
    flag: Literal["*"] | Literal["!"]
    account: str


@dataclass
class AdditionalInformation:
    transfer_identification_number: str
    deduction_date: datetime
    counter_party_name: str


@dataclass
class Transaction:
    receipt_id: str
    counter_account_number: str
    variable_symbol: str
    constant_symbol: str
    specific_symbol: str
    note: str
    date_created: datetime
    debit: Decimal | None = None
    credit: Decimal | None = None
    currency: str | None = None
    message_start: str | None = None
    message_end: str | None = None
    additional_information: AdditionalInformation | None = None
    induced_postings: list[InducedPosting] = field(default_factory=list)
    meta: dict[str, str] = field(default_factory=dict)

    @property
    def amount(self) -> Decimal | None:
        """Signed amount from the account owner's point of view."""
        if self.credit is not None:
            return self.credit
        if self.debit is not None:
            return -self.debit
        return None


@dataclass
class Statement:
    account_number: str = ""
    account_name: str = ""
    date_last_balance: datetime | None = None
    last_balance: Decimal | None = None
    balance: Decimal | None = None
    debit_turnover: Decimal | None = None
    credit_turnover: Decimal | None = None
    serial_number: int | None = None
    date_created: datetime | None = None
    transactions: list[Transaction] = field(default_factory=list)

    def add_transaction(self, transaction: Transaction) -> None:
        self.transactions.append(transaction)

    def __iter__(self):
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self.transactions)


@dataclass(frozen=True)
class NoTransactionOpen:
    pass


@dataclass(frozen=True)
class TransactionOpen:
    transaction: Transaction


AssemblerState = NoTransactionOpen | TransactionOpen
