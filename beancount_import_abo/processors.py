#!/usr/bin/env python3

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from copy import deepcopy

import yaml
from beancount.core import flags

from beancount_import_abo.errors import CurrencyLookupError
from beancount_import_abo.fields import extract
from beancount_import_abo.models import InducedPosting, Transaction

logger = logging.getLogger(__name__)


class TransactionOverlay(ABC):
    """Decodes bank specific fields of a 075 line on top of the base decoding."""

    @abstractmethod
    def __call__(self, line: str, transaction: Transaction) -> None:
        ...


class CurrencyOverlay(TransactionOverlay):
    def __init__(self, table: Mapping[str, str], start: int = 117, length: int = 5):
        self.table = dict(table)
        self.start = start
        self.length = length

    @classmethod
    def from_yaml(cls, fname, **kwargs) -> CurrencyOverlay:
        with open(fname) as f:
            table = yaml.safe_load(f)

        if not isinstance(table, dict):
            raise TypeError(f"{table=} was not of type `dict`")
        for code, currency in table.items():
            if not isinstance(code, str):
                raise TypeError(f"{code=} was not of type `str`")
            if not isinstance(currency, str):
                raise TypeError(f"{currency=} for {code=} was not of type `str`")

        return cls(table=table, **kwargs)

    def __call__(self, line: str, transaction: Transaction) -> None:
        code = extract(line, self.start, self.length)
        try:
            transaction.currency = self.table[code]
        except KeyError:
            raise CurrencyLookupError(
                f"Unknown currency with code {code!r}", field="currency"
            ) from None
        logger.debug(f"Currency {code=} resolved to {transaction.currency}")


class TransactionHook(ABC):
    def __init__(self, rule_sets: dict[str, Sequence[dict[str, str]]]) -> None:
        self.rule_sets = rule_sets

    @classmethod
    def from_yaml(cls, fname) -> TransactionHook:
        """Loads nested rule sets, e.g. `Expenses: {Rent: [{note: rent}]}`.

        Every rule must only name fields of `RULE_FIELDS` with valid regexes.
        """
        with open(fname) as f:
            rule_sets = flatten_rule_tree(yaml.safe_load(f))

        for identifier, rule_set in rule_sets.items():
            if not isinstance(rule_set, list):
                raise TypeError(
                    f"Rules for {identifier} must be a list, got {rule_set}"
                )
            for rule in rule_set:
                check_rule(identifier, rule)

        return cls(rule_sets=rule_sets)

    def __call__(self, original_txn: Transaction) -> Transaction:
        txn = deepcopy(original_txn)
        searchable = searchable_fields(txn)
        for identifier, rule_set in self.rule_sets.items():
            for rule in rule_set:
                matches = []
                for field_name, pattern in rule.items():
                    if field_name not in searchable:
                        raise ValueError(
                            f"Rule for {identifier} uses field {field_name}, "
                            f"allowed fields are: {sorted(searchable)}"
                        )
                    match = re.search(
                        pattern=pattern,
                        string=searchable[field_name],
                        flags=re.IGNORECASE,
                    )
                    if not match:
                        break
                    matches.append(match)
                else:
                    logger.debug(f"{identifier=} matched {txn.receipt_id=}")
                    self.augment(identifier=identifier, matches=matches, txn=txn)
        return txn

    @abstractmethod
    def augment(
        self, identifier: str, matches: list[re.Match], txn: Transaction
    ) -> None:
        ...


class AccountProcessor(TransactionHook):
    def augment(
        self, identifier: str, matches: list[re.Match], txn: Transaction
    ) -> None:
        posting = InducedPosting(flag=flags.FLAG_WARNING, account=identifier)
        txn.induced_postings.append(posting)


class MetaProcessor(TransactionHook):
    """Adds metadata; the identifier is either `key` or `key:value`.

    With a bare key the value is taken from `(?P<meta>...)` groups.
    """

    def augment(
        self, identifier: str, matches: list[re.Match], txn: Transaction
    ) -> None:
        key, _, value = identifier.partition(":")
        if ":" in value:
            raise ValueError(f"Meta identifier {identifier} nests too deep")

        if value:
            meta_values = [value]
        else:
            meta_values = [
                match.group("meta")
                for match in matches
                if "meta" in match.groupdict()
            ]
        if meta_values:
            txn.meta[key] = " ".join(meta_values).upper()


SEARCHABLE_FIELDS = (
    "receipt_id",
    "counter_account_number",
    "variable_symbol",
    "constant_symbol",
    "specific_symbol",
    "note",
    "currency",
    "message_start",
    "message_end",
)


def searchable_fields(txn: Transaction) -> dict[str, str]:
    fields = {name: getattr(txn, name) or "" for name in SEARCHABLE_FIELDS}
    info = txn.additional_information
    fields["counter_party_name"] = info.counter_party_name if info else ""
    fields["transfer_identification_number"] = (
        info.transfer_identification_number if info else ""
    )
    return fields


RULE_FIELDS = SEARCHABLE_FIELDS + (
    "counter_party_name",
    "transfer_identification_number",
)


def check_rule(identifier: str, rule) -> None:
    if not isinstance(rule, dict):
        raise TypeError(f"Rule for {identifier} must be a mapping, got {rule}")
    for field_name, pattern in rule.items():
        if field_name not in RULE_FIELDS:
            raise ValueError(
                f"Rule for {identifier} uses field {field_name}, "
                f"allowed fields are: {sorted(RULE_FIELDS)}"
            )
        if not isinstance(pattern, str):
            raise TypeError(f"Pattern for {identifier}/{field_name} is not a string")
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(
                f"Invalid pattern for {identifier}/{field_name}: {e}"
            ) from e


def flatten_rule_tree(tree, path: str = "") -> dict:
    """`{"Expenses": {"Rent": [...]}}` -> `{"Expenses:Rent": [...]}`."""
    if not isinstance(tree, dict):
        return {path: tree}

    flat = {}
    for key, subtree in tree.items():
        if not isinstance(key, str):
            raise TypeError(f"Rule key {key!r} under {path or 'top'} is not a string")
        flat.update(flatten_rule_tree(subtree, f"{path}:{key}" if path else key))
    return flat
