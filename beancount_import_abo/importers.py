#!/usr/bin/env python3

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

import beangulp
from beancount.core import flags
from beancount.core.data import (
    EMPTY_SET,
    Amount,
    Balance,
    Directive,
    Posting,
    Transaction,
    new_metadata,
)

from beancount_import_abo import models
from beancount_import_abo.errors import ABOError
from beancount_import_abo.parser import (
    DEFAULT_ENCODING,
    ABOParser,
    classify_line,
    parse_account_number,
)
from beancount_import_abo.processors import TransactionOverlay

logger = logging.getLogger(__name__)


@dataclass
class ABOImporter(beangulp.Importer):
    """Beancount importer for ABO (GPC) statements of Czech and Slovak banks."""

    account_number: str
    ledger_account: str
    currency: str = "CZK"
    file_encoding: str = DEFAULT_ENCODING
    overlays: Sequence[TransactionOverlay] = ()
    hooks: Sequence[Callable[[models.Transaction], models.Transaction]] = ()
    flag: str = flags.FLAG_OKAY

    @property
    def parser(self) -> ABOParser:
        return ABOParser(overlays=self.overlays)

    def parse(self, filepath) -> models.Statement:
        statement = self.parser.parse_file(filepath, encoding=self.file_encoding)
        for i, hook in enumerate(self.hooks):
            logger.debug(
                f"Processing hook {hook.__class__.__name__} {i}/{len(self.hooks)}"
            )
            statement.transactions = [hook(txn) for txn in statement.transactions]
        return statement

    def identify(self, filepath) -> bool:
        logger.info(f"Looking at {filepath}")
        try:
            with open(filepath, encoding=self.file_encoding) as f:
                for line in f:
                    if classify_line(line) is not models.LineType.STATEMENT:
                        continue
                    account_number = parse_account_number(line)
                    logger.debug(f"Found {account_number=}")
                    return account_number == self.account_number
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot read {filepath}: {e}")
        return False

    def account(self, filepath) -> str:
        return self.ledger_account

    def date(self, filepath) -> date | None:
        statement = self.parse(filepath)
        if statement.date_created is None:
            return None
        return statement.date_created.date()

    def filename(self, filepath) -> str | None:
        statement = self.parse(filepath)
        if statement.serial_number is None:
            return None
        return f"{statement.serial_number:03d}.abo"

    def extract(self, filepath, existing=None) -> list[Directive]:
        try:
            statement = self.parse(filepath)
        except ABOError:
            logger.error(f"Failed to parse {filepath}")
            raise

        extracted_directives = []
        for i, txn in enumerate(statement.transactions, start=1):
            transaction = make_transaction(
                account=self.ledger_account,
                txn=txn,
                currency=txn.currency or self.currency,
                fname=str(filepath),
                lineno=i,
                flag=self.flag,
            )
            logger.info(f"New {transaction=}")
            extracted_directives.append(transaction)

        if statement.balance is not None and statement.date_created is not None:
            final_balance = make_balance(
                fname=str(filepath),
                lineno=0,
                date=statement.date_created.date(),
                account=self.ledger_account,
                currency=self.currency,
                amount=statement.balance,
            )
            logger.info(f"New {final_balance=}")
            extracted_directives.append(final_balance)

        return extracted_directives


def make_narration(txn: models.Transaction) -> str:
    messages = [m for m in (txn.message_start, txn.message_end) if m]
    if messages:
        return " ".join(messages)
    return txn.note


def make_payee(txn: models.Transaction) -> str:
    info = txn.additional_information
    if info is not None and info.counter_party_name:
        return info.counter_party_name
    return txn.counter_account_number


def make_meta(txn: models.Transaction) -> dict[str, str]:
    meta = {
        "receipt_id": txn.receipt_id,
        "counter_account": txn.counter_account_number,
    }
    for key, symbol in (
        ("vs", txn.variable_symbol),
        ("ks", txn.constant_symbol),
        ("ss", txn.specific_symbol),
    ):
        if symbol:
            meta[key] = symbol
    meta.update(txn.meta)
    return meta


def make_transaction(
    account: str,
    txn: models.Transaction,
    currency: str,
    fname: str,
    lineno: int,
    flag: str,
) -> Transaction:
    postings = [make_posting(account=account, amount=txn.amount, currency=currency)]
    for posting in txn.induced_postings:
        postings.append(
            make_posting(
                account=posting.account, amount=None, currency=None, flag=posting.flag
            )
        )

    return Transaction(
        meta=new_metadata(filename=fname, lineno=lineno, kvlist=make_meta(txn)),
        date=txn.date_created.date(),
        flag=flag,
        payee=make_payee(txn),
        narration=make_narration(txn),
        tags=EMPTY_SET,
        links=EMPTY_SET,
        postings=postings,
    )


def make_posting(
    amount: Decimal | None,
    currency: str | None,
    account: str,
    flag: str | None = None,
) -> Posting:
    if amount is not None:
        units = Amount(number=amount, currency=currency)
    else:
        units = None
    return Posting(
        account=account,
        units=units,  # type: ignore
        cost=None,
        price=None,
        flag=flag,
        meta=None,
    )


def make_balance(
    fname: str,
    lineno: int,
    date: date,
    account: str,
    currency: str,
    amount: Decimal,
) -> Balance:
    return Balance(
        meta=new_metadata(filename=fname, lineno=lineno),
        date=date + timedelta(days=1),
        account=account,
        amount=Amount(number=amount, currency=currency),
        tolerance=None,
        diff_amount=None,
    )
