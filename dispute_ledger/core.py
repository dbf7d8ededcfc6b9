"""
Core types for the dispute ledger.

This module provides the foundational data structures shared by every other module:
1. Amount: exact fixed-point money value (4 fractional digits) on top of Decimal
2. Enums: TransactionType, DisputeState, ApplyResult
3. Transaction: the immutable, shape-validated input event
4. Exceptions: LedgerError and the fatal / non-fatal error types

Nothing in this module mutates engine state. A Transaction that can be
constructed is structurally well formed; whether it is accepted is decided
by the engine.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, getcontext
from enum import Enum
import re
from typing import Optional, Union


# ============================================================================
# DECIMAL CONTEXT CONFIGURATION
# ============================================================================
#
# Amounts must be exact. The global context is configured once at import.
#
#   - prec=50: far above the 29 significant digits an Amount can carry, so
#     add/subtract of two valid amounts never rounds
#   - rounding=ROUND_HALF_EVEN: used only when rendering to 4 places
#
_LEDGER_DECIMAL_CONTEXT = getcontext()
_LEDGER_DECIMAL_CONTEXT.prec = 50
_LEDGER_DECIMAL_CONTEXT.rounding = ROUND_HALF_EVEN


# ============================================================================
# CONSTANTS
# ============================================================================

# Fractional digits carried by every Amount.
AMOUNT_DECIMAL_PLACES = 4
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)

# Largest magnitude an Amount may take: a 96-bit mantissa at scale 4.
MAX_AMOUNT = Decimal(2 ** 96 - 1).scaleb(-AMOUNT_DECIMAL_PLACES)

# Identifier domains.
MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TX_ID = 2 ** 32 - 1

_AMOUNT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class MalformedTransaction(LedgerError, ValueError):
    """
    Fatal structural error in an input event.

    Raised for unknown type tags, a missing or forbidden amount, a
    non-positive amount, unparseable or out-of-range fields. Any occurrence
    aborts the whole run.
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class AmountOverflow(LedgerError, ArithmeticError):
    """Raised when arithmetic would leave the representable Amount range."""
    pass


class InsufficientFunds(LedgerError):
    """Raised when a checked subtraction would go below zero."""
    pass


class InvalidDisputeTransition(LedgerError):
    """Raised when a deposit is asked to take a disallowed dispute-state edge."""
    pass


# ============================================================================
# ENUMS
# ============================================================================

class TransactionType(str, Enum):
    """Tag of an input event. Values are the wire spelling."""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def requires_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)

    @property
    def is_dispute_related(self) -> bool:
        return not self.requires_amount


class DisputeState(str, Enum):
    """Dispute status of a recorded deposit."""
    NORMAL = "normal"               # Never disputed
    DISPUTED = "disputed"           # Funds held pending resolution
    RESOLVED = "resolved"           # Dispute withdrawn, funds released (terminal)
    CHARGED_BACK = "charged_back"   # Funds reversed, account locked (terminal)


class ApplyResult(Enum):
    """
    Outcome of LedgerEngine.apply().

    APPLIED: The event passed every precondition and its effect was committed.
    REJECTED: A business rule failed; the event was discarded with no effect.
    """
    APPLIED = "applied"
    REJECTED = "rejected"


# ============================================================================
# AMOUNT
# ============================================================================

AmountLike = Union["Amount", Decimal, int, str]


@dataclass(frozen=True, slots=True, order=True)
class Amount:
    """
    Exact fixed-point money value with at most 4 fractional digits.

    The value may be signed. Equality and ordering compare the underlying
    Decimal exactly, so Amount("1.0") == Amount("1.00").

    Attributes:
        value: The Decimal being wrapped. Its scale is preserved for display.

    Raises:
        MalformedTransaction: If the value is not a finite Decimal, has more
            than 4 fractional digits, or exceeds MAX_AMOUNT in magnitude.
    """
    value: Decimal

    def __post_init__(self):
        if not isinstance(self.value, Decimal):
            raise MalformedTransaction(f"Amount must be Decimal, got {type(self.value).__name__}")
        if not self.value.is_finite():
            raise MalformedTransaction(f"Amount must be finite, got {self.value}")
        if abs(self.value) > MAX_AMOUNT:
            raise MalformedTransaction(f"Amount {self.value} out of range")
        if self.value.quantize(AMOUNT_QUANTUM) != self.value:
            raise MalformedTransaction(
                f"Amount {self.value} has more than {AMOUNT_DECIMAL_PLACES} decimal places"
            )

    @classmethod
    def zero(cls) -> Amount:
        return cls(Decimal("0"))

    @classmethod
    def of(cls, value: AmountLike) -> Amount:
        """
        Coerce an Amount, Decimal, int or decimal string to an Amount.

        Floats are refused: they cannot carry an exact decimal value.
        """
        if isinstance(value, Amount):
            return value
        if isinstance(value, bool) or isinstance(value, float):
            raise MalformedTransaction(f"Amount cannot be built from {type(value).__name__}")
        if isinstance(value, int):
            return cls(Decimal(value))
        if isinstance(value, str):
            return cls.parse(value)
        return cls(value)

    @classmethod
    def parse(cls, text: str) -> Amount:
        """
        Parse a plain decimal string such as "1.5", "-2" or ".25".

        Exponents, NaN, Infinity and thousands separators are rejected.
        """
        stripped = text.strip()
        if not _AMOUNT_PATTERN.fullmatch(stripped):
            raise MalformedTransaction(f"invalid amount {text!r}")
        try:
            return cls(Decimal(stripped))
        except InvalidOperation as exc:
            raise MalformedTransaction(f"invalid amount {text!r}") from exc

    def _checked(self, result: Decimal) -> Amount:
        if abs(result) > MAX_AMOUNT:
            raise AmountOverflow(f"Amount arithmetic overflow: {result}")
        return Amount(result)

    def add(self, other: Amount) -> Amount:
        """Return self + other, raising AmountOverflow instead of clamping."""
        return self._checked(self.value + other.value)

    def subtract(self, other: Amount) -> Amount:
        """
        Return self - other.

        Raises:
            InsufficientFunds: If other > self (the result would be negative
                relative to a non-negative starting balance).
        """
        if other.value > self.value:
            raise InsufficientFunds(f"{self.value} < {other.value}")
        return self._checked(self.value - other.value)

    def subtract_unchecked(self, other: Amount) -> Amount:
        """Return the signed difference self - other without a funds check."""
        return self._checked(self.value - other.value)

    def is_positive(self) -> bool:
        return self.value > 0

    def is_non_negative(self) -> bool:
        return self.value >= 0

    def __str__(self) -> str:
        return format(self.value, "f")

    def __repr__(self) -> str:
        return f"Amount({self})"


# ============================================================================
# TRANSACTION EVENT
# ============================================================================

def _check_identifier(value: int, name: str, upper: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedTransaction(f"{name} must be an integer, got {value!r}")
    if value < 0 or value > upper:
        raise MalformedTransaction(f"{name} {value} outside 0..{upper}")


@dataclass(frozen=True, slots=True)
class Transaction:
    """
    A single input event.

    For DEPOSIT and WITHDRAWAL, `tx` is the event's own globally unique id and
    `amount` is required and strictly positive. For DISPUTE, RESOLVE and
    CHARGEBACK, `tx` references a prior deposit and `amount` must be absent.

    Attributes:
        kind: Event tag.
        client: Client id the event addresses (0..65535).
        tx: Transaction id (0..4294967295).
        amount: Amount for deposits and withdrawals, None otherwise.

    This class is immutable (frozen=True). All fields are validated in
    __post_init__; a violation raises MalformedTransaction.
    """
    kind: TransactionType
    client: int
    tx: int
    amount: Optional[Amount] = None

    def __post_init__(self):
        if not isinstance(self.kind, TransactionType):
            raise MalformedTransaction(f"unknown transaction type {self.kind!r}")
        _check_identifier(self.client, "client", MAX_CLIENT_ID)
        _check_identifier(self.tx, "tx", MAX_TX_ID)
        if self.kind.requires_amount:
            if self.amount is None:
                raise MalformedTransaction(f"{self.kind.value} requires an amount")
            if not isinstance(self.amount, Amount):
                raise MalformedTransaction(f"amount must be Amount, got {type(self.amount).__name__}")
            if not self.amount.is_positive():
                raise MalformedTransaction(
                    f"{self.kind.value} amount must be positive, got {self.amount}"
                )
        elif self.amount is not None:
            raise MalformedTransaction(f"{self.kind.value} must not carry an amount")

    @classmethod
    def deposit(cls, client: int, tx: int, amount: AmountLike) -> Transaction:
        return cls(TransactionType.DEPOSIT, client, tx, Amount.of(amount))

    @classmethod
    def withdrawal(cls, client: int, tx: int, amount: AmountLike) -> Transaction:
        return cls(TransactionType.WITHDRAWAL, client, tx, Amount.of(amount))

    @classmethod
    def dispute(cls, client: int, tx: int) -> Transaction:
        return cls(TransactionType.DISPUTE, client, tx)

    @classmethod
    def resolve(cls, client: int, tx: int) -> Transaction:
        return cls(TransactionType.RESOLVE, client, tx)

    @classmethod
    def chargeback(cls, client: int, tx: int) -> Transaction:
        return cls(TransactionType.CHARGEBACK, client, tx)

    def __repr__(self) -> str:
        if self.amount is None:
            return f"Transaction({self.kind.value} client={self.client} tx={self.tx})"
        return f"Transaction({self.kind.value} client={self.client} tx={self.tx} amount={self.amount})"
