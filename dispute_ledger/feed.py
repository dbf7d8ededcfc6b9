"""
feed.py - CSV transaction source

Parses rows of the form

    type,client,tx,amount
    deposit,1,1,1.0
    dispute,1,1,

into Transaction events. Whitespace around fields is ignored, type tags are
case-insensitive and the amount column may be empty or missing entirely for
dispute, resolve and chargeback rows.

Every structural problem raises MalformedTransaction with the 1-based line
number. Callers that must not apply anything from a bad file should use
load_transactions(), which parses the whole file before returning.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Union
import csv
import logging
import re

from .core import (
    Amount, Transaction, TransactionType,
    MalformedTransaction,
    MAX_CLIENT_ID, MAX_TX_ID,
)


logger = logging.getLogger(__name__)

FIELDNAMES = ("type", "client", "tx", "amount")

_ID_PATTERN = re.compile(r"[0-9]+")


def _parse_id(text: str, name: str, upper: int, line: int) -> int:
    if not _ID_PATTERN.fullmatch(text):
        raise MalformedTransaction(f"invalid {name} {text!r}", line=line)
    value = int(text)
    if value > upper:
        raise MalformedTransaction(f"{name} {value} outside 0..{upper}", line=line)
    return value


def _parse_type(text: str, line: int) -> TransactionType:
    try:
        return TransactionType(text.lower())
    except ValueError:
        raise MalformedTransaction(f"unknown transaction type {text!r}", line=line) from None


def parse_row(row: Sequence[str], line: int) -> Transaction:
    """
    Build a Transaction from one CSV row.

    Args:
        row: Raw field values (3 or 4 of them)
        line: Line number used in error messages

    Returns:
        The parsed Transaction

    Raises:
        MalformedTransaction: On any structural problem.
    """
    fields = [value.strip() for value in row]
    if len(fields) not in (3, 4):
        raise MalformedTransaction(f"expected 3 or 4 fields, got {len(fields)}", line=line)

    kind = _parse_type(fields[0], line)
    client = _parse_id(fields[1], "client", MAX_CLIENT_ID, line)
    tx = _parse_id(fields[2], "tx", MAX_TX_ID, line)

    amount: Optional[Amount] = None
    if len(fields) == 4 and fields[3]:
        try:
            amount = Amount.parse(fields[3])
        except MalformedTransaction as exc:
            raise MalformedTransaction(str(exc), line=line) from exc

    try:
        return Transaction(kind, client, tx, amount)
    except MalformedTransaction as exc:
        raise MalformedTransaction(str(exc), line=line) from exc


def _check_header(row: Sequence[str], line: int) -> None:
    header = tuple(value.strip().lower() for value in row)
    if header != FIELDNAMES:
        raise MalformedTransaction(
            f"expected header {','.join(FIELDNAMES)}, got {','.join(header)}", line=line
        )


def _csv_rows(reader) -> Iterator[List[str]]:
    """Iterate `reader`, turning undecodable or unparseable input into MalformedTransaction."""
    rows = iter(reader)
    while True:
        try:
            row = next(rows)
        except StopIteration:
            return
        except csv.Error as exc:
            raise MalformedTransaction(str(exc), line=reader.line_num) from exc
        except UnicodeDecodeError as exc:
            # Text files decode ahead in chunks, so no reliable line number.
            raise MalformedTransaction(f"input is not valid UTF-8: {exc}") from exc
        yield row


def read_transactions(stream: Iterable[str]) -> Iterator[Transaction]:
    """
    Lazily parse transactions from CSV text.

    The first non-empty row must be the header. Empty lines are skipped; a
    row of empty fields such as ",,," is malformed.

    Args:
        stream: Any iterable of lines, e.g. an open file or io.StringIO

    Yields:
        Transaction events in file order

    Raises:
        MalformedTransaction: On a bad header or row, on a field the csv
            module refuses (e.g. over its size limit) or on bytes that are
            not valid UTF-8; nothing after it is yielded.
    """
    reader = csv.reader(stream)
    header_seen = False
    count = 0
    for row in _csv_rows(reader):
        if not row:
            continue
        if not header_seen:
            _check_header(row, reader.line_num)
            header_seen = True
            continue
        yield parse_row(row, reader.line_num)
        count += 1
    logger.debug("parsed %d transactions", count)


def load_transactions(path: Union[str, Path]) -> List[Transaction]:
    """
    Parse a whole CSV file eagerly.

    Raises:
        MalformedTransaction: On any bad row (before anything is returned).
        OSError: If the file cannot be read.
    """
    with open(path, newline="", encoding="utf-8") as handle:
        return list(read_transactions(handle))
