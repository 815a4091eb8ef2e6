#!/usr/bin/env python3

import random
import string

# Lines of a CSOB CZ statement with a single credit transaction
STATEMENT_LINE = (
    "0741234561234567890Test s.r.o.         01011400000000100000+00000000080000+"
    "00000000060000+00000000040000+002010214              "
)
TRANSACTION_LINE = (
    "0750000000000012345000000000015678900000000020010000000400002000000001100"
    "100000120000000013050114Tran 1              00203050114"
)
ADDITIONAL_INFORMATION_LINE = "07600000000000000000000002001050114Protistrana s.r.o."
MESSAGE_START_LINE = "078First line"
MESSAGE_END_LINE = "079Second line"

CSOB_LINES = [
    STATEMENT_LINE,
    TRANSACTION_LINE,
    ADDITIONAL_INFORMATION_LINE,
    MESSAGE_START_LINE,
    MESSAGE_END_LINE,
]


def random_string(size: int, letters: bool = False, digits: bool = False):
    population = ""
    if letters:
        population += string.ascii_letters
    if digits:
        population += string.digits
    return "".join(random.choices(population=population, k=size))


def fake_account_number():
    prefix = random_string(size=6, digits=True)
    return prefix + "-" + random_string(size=10, digits=True)


def make_statement_line(
    account_number: str = "123456-1234567890",
    account_name: str = "Test s.r.o.",
    date_last_balance: str = "010114",
    last_balance: str = "00000000100000",
    last_balance_sign: str = "+",
    balance: str = "00000000080000",
    balance_sign: str = "+",
    debit_turnover: str = "00000000060000",
    debit_turnover_sign: str = "+",
    credit_turnover: str = "00000000040000",
    credit_turnover_sign: str = "+",
    serial_number: str = "002",
    date_created: str = "010214",
):
    prefix, number = account_number.split("-")
    return (
        "074"
        + prefix
        + number
        + account_name.ljust(20)
        + date_last_balance
        + last_balance
        + last_balance_sign
        + balance
        + balance_sign
        + debit_turnover
        + debit_turnover_sign
        + credit_turnover
        + credit_turnover_sign
        + serial_number
        + date_created
        + " " * 14
    )


def make_transaction_line(
    counter_account: str = "000000-0000156789",
    bank_code: str = "1000",
    identification: str = "0000000002001",
    amount: str = "000000040000",
    posting_code: str = "2",
    variable_symbol: str = "0000000011",
    constant_symbol: str = "0012",
    specific_symbol: str = "0000000013",
    note: str = "Tran 1",
    currency: str = "00203",
    date_created: str = "050114",
):
    prefix, number = counter_account.split("-")
    return (
        "075"
        + "0000000000012345"
        + prefix
        + number
        + identification
        + amount
        + posting_code
        + variable_symbol
        + "00"
        + bank_code
        + constant_symbol
        + specific_symbol
        + "050114"
        + note.ljust(20)
        + currency
        + date_created
    )


def make_additional_information_line(
    transfer_identification_number: str = "00000000000000000000002001",
    deduction_date: str = "050114",
    counter_party_name: str = "Protistrana s.r.o.",
):
    return "076" + transfer_identification_number + deduction_date + counter_party_name
