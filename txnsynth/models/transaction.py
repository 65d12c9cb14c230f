"""Transaction types, statuses, the transaction record and its output schema."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

import polars as pl
from numpy.random import Generator

from txnsynth.models.merchant import Merchant
from txnsynth.models.money import Money


class CardType(StrEnum):
    """Kinds of payment card."""

    CREDIT = "credit"
    DEBIT = "debit"
    PREPAID = "prepaid"
    GIFT = "gift"
    FLEET = "fleet"
    HSA = "hsa"
    EBT = "ebt"

    @property
    def linked_to_bank_account(self) -> bool:
        return self in (CardType.CREDIT, CardType.DEBIT)

    @property
    def has_credit_functionality(self) -> bool:
        return self is CardType.CREDIT


class TransactionStatus(StrEnum):
    """Lifecycle states of a transaction.

    Final states are completed, declined, failed, reversed and refunded;
    the others may still transition.
    """

    INITIATED = "initiated"
    PENDING = "pending"
    AUTHORIZED = "authorized"
    COMPLETED = "completed"
    DECLINED = "declined"
    FAILED = "failed"
    REVERSED = "reversed"
    REFUNDED = "refunded"

    @property
    def is_final(self) -> bool:
        return self not in _NON_FINAL_STATUSES


_NON_FINAL_STATUSES = frozenset(
    {TransactionStatus.INITIATED, TransactionStatus.PENDING, TransactionStatus.AUTHORIZED}
)


@dataclass(frozen=True)
class CardTransaction:
    """A card payment.

    Frozen so that two independently built instances with the same fields
    are equal and hash alike, which weighted samplers rely on.

    Attributes:
        network: Card network name, e.g. ``"VISA"``.
        is_contactless: Tap-to-pay at a terminal.
        is_ecommerce: Card-not-present online payment.
        is_international: Cross-border payment.
    """

    network: str
    is_contactless: bool = False
    is_ecommerce: bool = False
    is_international: bool = False

    @property
    def type_code(self) -> str:
        return "CARD"

    @property
    def display_name(self) -> str:
        if self.is_ecommerce:
            return "Card Online Payment"
        if self.is_contactless:
            return "Card Contactless Payment"
        return "Card Payment"

    @classmethod
    def standard(cls, network: str) -> CardTransaction:
        return cls(network)

    @classmethod
    def ecommerce(cls, network: str) -> CardTransaction:
        return cls(network, is_ecommerce=True)

    @classmethod
    def contactless(cls, network: str) -> CardTransaction:
        return cls(network, is_contactless=True)


@dataclass(frozen=True)
class TransferTransaction:
    """An account-to-account transfer (ACH, wire, SEPA, internal).

    Attributes:
        transfer_method: Rail used, e.g. ``"ACH"`` or ``"WIRE"``.
        is_international: Cross-border transfer.
        purpose_code: Payment purpose, defaults to ``"OTHER"``.
        reference_message: Free-text reference shown to the payee.
        is_recurring: Part of a standing order.
        is_scheduled: Executed at a future date.
        corresponding_bank_code: Correspondent bank, if any.
    """

    transfer_method: str
    is_international: bool = False
    purpose_code: str = "OTHER"
    reference_message: str = ""
    is_recurring: bool = False
    is_scheduled: bool = False
    corresponding_bank_code: str = ""

    def __post_init__(self) -> None:
        if not self.transfer_method or not self.transfer_method.strip():
            msg = "transfer_method must not be blank"
            raise ValueError(msg)

    @property
    def type_code(self) -> str:
        return "TRANSFER"

    @property
    def display_name(self) -> str:
        if self.is_international:
            return f"International {self.transfer_method}"
        return self.transfer_method

    @property
    def is_wire_transfer(self) -> bool:
        return self.transfer_method == "WIRE"

    @property
    def is_ach_transfer(self) -> bool:
        return self.transfer_method == "ACH"

    @property
    def is_sepa_transfer(self) -> bool:
        return self.transfer_method == "SEPA"

    @classmethod
    def ach(cls, reference_message: str = "") -> TransferTransaction:
        return cls("ACH", purpose_code="PAYMENT", reference_message=reference_message)

    @classmethod
    def wire(cls, is_international: bool, purpose_code: str) -> TransferTransaction:
        return cls("WIRE", is_international=is_international, purpose_code=purpose_code)

    @classmethod
    def sepa(cls, reference_message: str = "") -> TransferTransaction:
        return cls("SEPA", purpose_code="PAYMENT", reference_message=reference_message)

    @classmethod
    def recurring_ach(cls, reference_message: str = "") -> TransferTransaction:
        return cls(
            "ACH",
            purpose_code="RECURRING_PAYMENT",
            reference_message=reference_message,
            is_recurring=True,
            is_scheduled=True,
        )

    @classmethod
    def internal_transfer(cls, reference_message: str = "") -> TransferTransaction:
        return cls("INTERNAL", purpose_code="TRANSFER", reference_message=reference_message)


TransactionType = CardTransaction | TransferTransaction


@dataclass(frozen=True)
class Transaction:
    """A completed synthetic transaction record.

    Attributes:
        transaction_id: UUID-formatted identifier.
        timestamp: When the transaction happened.
        amount: Currency-scaled amount.
        merchant: Merchant receiving the payment.
        account_id: Paying account.
        transaction_type: Card payment or transfer variant.
        status: Lifecycle status.
    """

    transaction_id: str
    timestamp: datetime
    amount: Money
    merchant: Merchant
    account_id: str
    transaction_type: TransactionType
    status: TransactionStatus

    @property
    def card_network(self) -> str | None:
        if isinstance(self.transaction_type, CardTransaction):
            return self.transaction_type.network
        return None

    def to_dict(self) -> dict:
        """Flatten the record into the columns of ``TransactionSchema``."""
        return {
            "transaction_id": self.transaction_id,
            "timestamp": self.timestamp,
            "amount": float(self.amount),
            "currency": self.amount.currency.value,
            "merchant_name": self.merchant.merchant_name,
            "category": self.merchant.category,
            "mcc": self.merchant.mcc,
            "account_id": self.account_id,
            "transaction_type": self.transaction_type.type_code,
            "channel": self.transaction_type.display_name,
            "card_network": self.card_network,
            "status": self.status.value,
        }


class TransactionSchema:
    """Polars schema of the generated transaction output."""

    @staticmethod
    def polars_schema() -> dict[str, pl.DataType]:
        """Return the Polars schema for the transaction output.

        Returns:
            Dictionary mapping column names to Polars data types.
        """
        return {
            "transaction_id": pl.Utf8,
            "timestamp": pl.Datetime("us", time_zone="UTC"),
            "amount": pl.Float64,
            "currency": pl.Utf8,
            "merchant_name": pl.Utf8,
            "category": pl.Utf8,
            "mcc": pl.Utf8,
            "account_id": pl.Utf8,
            "transaction_type": pl.Utf8,
            "channel": pl.Utf8,
            "card_network": pl.Utf8,
            "status": pl.Utf8,
        }


def generate_transaction_ids(rng: Generator, count: int) -> list[str]:
    """Generate transaction IDs from seeded random bytes.

    Args:
        rng: NumPy random generator instance.
        count: Number of IDs to generate.

    Returns:
        List of UUID-formatted strings (8-4-4-4-12 hex format).
    """
    ids: list[str] = []
    for _ in range(count):
        hex_str = rng.bytes(16).hex()
        ids.append(
            f"{hex_str[:8]}-{hex_str[8:12]}-{hex_str[12:16]}-"
            f"{hex_str[16:20]}-{hex_str[20:32]}"
        )
    return ids


def build_transaction_dataframe(transactions: list[Transaction]) -> pl.DataFrame:
    """Build a Polars DataFrame from transaction records.

    Args:
        transactions: Records to convert, in output order.

    Returns:
        DataFrame with the ``TransactionSchema`` columns.
    """
    schema = TransactionSchema.polars_schema()
    if not transactions:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame([t.to_dict() for t in transactions], schema=schema)
