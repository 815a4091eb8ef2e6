#!/usr/bin/env python3

"""Decoder for the ABO (GPC) statement format of Czech and Slovak banks.

Format reference: https://www.csob.cz/portal/documents/10710/1927786/format-gpc.pdf

Every line starts with a three digit record type. Records 078 and 079 are
only plain messages for domestic payments; foreign payment variants of those
lines are not implemented.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from beancount_import_abo.errors import ABOError, InputError, StructuralError
from beancount_import_abo.fields import (
    extract,
    parse_amount,
    parse_date,
    parse_int,
    strip_leading_zeros,
    trim_trailing,
)
from beancount_import_abo.models import (
    AdditionalInformation,
    AssemblerState,
    LineType,
    NoTransactionOpen,
    PostingCode,
    Statement,
    Transaction,
    TransactionOpen,
)
from beancount_import_abo.processors import TransactionOverlay

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cp1250"

_LINE_TYPES = {t.value: t for t in LineType if t is not LineType.UNRECOGNIZED}


def classify_line(line: str) -> LineType:
    return _LINE_TYPES.get(line[:3], LineType.UNRECOGNIZED)


def parse_account_number(line: str) -> str:
    return extract(line, 3, 6) + "-" + extract(line, 9, 10)


def parse_statement_line(line: str, statement: Statement) -> None:
    """Writes the header fields of a 074 record into `statement`.

    Pos | Len | Content
    ----|-----|--------------------------------
    1   | 3   | record type 074
    4   | 16  | account number
    20  | 20  | account owner name
    40  | 6   | date of the old balance, ddmmyy
    46  | 14  | old balance
    60  | 1   | old balance sign
    61  | 14  | new balance
    75  | 1   | new balance sign
    76  | 14  | debit turnover
    90  | 1   | debit turnover sign
    91  | 14  | credit turnover
    105 | 1   | credit turnover sign
    106 | 3   | statement serial number
    109 | 6   | statement date, ddmmyy
    """
    statement.account_number = parse_account_number(line)
    statement.account_name = trim_trailing(extract(line, 19, 20))
    statement.date_last_balance = parse_date(
        extract(line, 39, 6), field="date_last_balance"
    )
    statement.last_balance = parse_amount(
        extract(line, 45, 14), extract(line, 59, 1), field="last_balance"
    )
    statement.balance = parse_amount(
        extract(line, 60, 14), extract(line, 74, 1), field="balance"
    )
    statement.debit_turnover = parse_amount(
        extract(line, 75, 14), extract(line, 89, 1), field="debit_turnover"
    )
    statement.credit_turnover = parse_amount(
        extract(line, 90, 14), extract(line, 104, 1), field="credit_turnover"
    )
    statement.serial_number = parse_int(extract(line, 105, 3), field="serial_number")
    statement.date_created = parse_date(extract(line, 108, 6), field="date_created")


def parse_transaction_line(line: str) -> Transaction:
    """Decodes a 075 record.

    Pos | Len | Content
    ----|-----|--------------------------------
    1   | 3   | record type 075
    4   | 16  | client account number (not decoded)
    20  | 16  | counter-account number
    36  | 13  | identification
    49  | 12  | amount
    61  | 1   | posting code
    62  | 10  | variable symbol
    72  | 2   | filler 00
    74  | 4   | counter-account bank code
    78  | 4   | constant symbol
    82  | 10  | specific symbol
    92  | 6   | value date (not decoded)
    98  | 20  | note
    118 | 5   | bank specific, see overlays
    123 | 6   | date, ddmmyy
    """
    amount = parse_amount(extract(line, 48, 12), "+", field="amount")
    posting_code = extract(line, 60, 1)
    try:
        code = PostingCode(int(posting_code))
    except ValueError:
        code = None

    transaction = Transaction(
        receipt_id=strip_leading_zeros(extract(line, 35, 13)),
        counter_account_number=(
            extract(line, 19, 6)
            + "-"
            + extract(line, 25, 10)
            + "/"
            + extract(line, 73, 4)
        ),
        variable_symbol=strip_leading_zeros(extract(line, 61, 10)),
        constant_symbol=strip_leading_zeros(extract(line, 77, 4)),
        specific_symbol=strip_leading_zeros(extract(line, 81, 10)),
        note=trim_trailing(extract(line, 97, 20)),
        date_created=parse_date(extract(line, 122, 6), field="date_created"),
    )

    if code is PostingCode.DEBIT:
        transaction.debit = amount
    elif code is PostingCode.CREDIT:
        transaction.credit = amount
    elif code is PostingCode.DEBIT_REVERSAL:
        transaction.debit = -amount
    elif code is PostingCode.CREDIT_REVERSAL:
        transaction.credit = -amount
    else:
        logger.warning(
            f"Unknown {posting_code=} for {transaction.receipt_id=}, amount dropped"
        )
    return transaction


def parse_additional_information_line(line: str) -> AdditionalInformation:
    """Decodes a 076 record.

    Pos | Len | Content
    ----|-----|--------------------------------
    1   | 3   | record type 076
    4   | 26  | transfer identification number
    30  | 6   | deduction date, ddmmyy
    36  | 92  | counter-party name
    """
    return AdditionalInformation(
        transfer_identification_number=strip_leading_zeros(extract(line, 3, 26)),
        deduction_date=parse_date(extract(line, 29, 6), field="deduction_date"),
        counter_party_name=trim_trailing(extract(line, 35, 92)),
    )


def parse_message_line(line: str) -> str:
    return trim_trailing(extract(line, 3))


@dataclass
class ABOParser:
    """Assembles a Statement from ABO lines.

    `overlays` run in order on every 075 line right after the base decoding.
    """

    overlays: Sequence[TransactionOverlay | Callable[[str, Transaction], None]] = ()

    def parse_file(self, path, encoding: str = DEFAULT_ENCODING) -> Statement:
        try:
            with open(path, encoding=encoding) as f:
                return self.parse_lines(f)
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"Cannot read statement file {path}: {e}") from e

    def parse_content(self, content: str) -> Statement:
        if not isinstance(content, str):
            raise InputError(f"Expected statement content as str, got {type(content)}")
        return self.parse_lines(content.split("\n"))

    def parse_lines(self, lines: Iterable[str]) -> Statement:
        statement = Statement()
        state: AssemblerState = NoTransactionOpen()

        for lineno, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            line_type = classify_line(line)
            logger.debug(f"{lineno=} classified as {line_type.name}")
            try:
                state = self._feed(line, line_type, statement, state)
            except ABOError as e:
                e.with_context(lineno=lineno, line_type=line_type.value)
                raise

        if isinstance(state, TransactionOpen):
            statement.add_transaction(state.transaction)

        logger.info(
            f"Parsed statement {statement.serial_number} of "
            f"{statement.account_number} with {len(statement)} transactions"
        )
        return statement

    def _feed(
        self,
        line: str,
        line_type: LineType,
        statement: Statement,
        state: AssemblerState,
    ) -> AssemblerState:
        if line_type is LineType.UNRECOGNIZED:
            return state

        if line_type is LineType.STATEMENT:
            parse_statement_line(line, statement)
            return state

        if line_type is LineType.TRANSACTION:
            if isinstance(state, TransactionOpen):
                statement.add_transaction(state.transaction)
            transaction = parse_transaction_line(line)
            for overlay in self.overlays:
                overlay(line, transaction)
            logger.debug(f"Decoded {transaction=}")
            return TransactionOpen(transaction=transaction)

        if not isinstance(state, TransactionOpen):
            raise StructuralError(
                f"Record {line_type.value} appears before any transaction record"
            )

        transaction = state.transaction
        if line_type is LineType.ADDITIONAL_INFORMATION:
            transaction.additional_information = parse_additional_information_line(
                line
            )
        elif line_type is LineType.MESSAGE_START:
            transaction.message_start = parse_message_line(line)
        elif line_type is LineType.MESSAGE_END:
            transaction.message_end = parse_message_line(line)
        return state


def parse_file(path, overlays=(), encoding: str = DEFAULT_ENCODING) -> Statement:
    return ABOParser(overlays=overlays).parse_file(Path(path), encoding=encoding)
