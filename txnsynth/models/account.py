"""Account generation logic for synthetic card holders."""

from __future__ import annotations

from dataclasses import dataclass

from faker import Faker
from numpy.random import Generator

from txnsynth.distributions.discrete import DiscreteDistribution
from txnsynth.distributions.factory import (
    create_card_network_distribution,
    create_card_type_distribution,
)
from txnsynth.models.transaction import CardType

# Account type weights
ACCOUNT_TYPE_WEIGHTS: dict[str, float] = {
    "checking": 0.50,
    "savings": 0.20,
    "credit": 0.30,
}


@dataclass(frozen=True)
class Account:
    """A synthetic account with the card it pays with.

    Attributes:
        account_id: Unique identifier in ACC-XXXXX format.
        account_holder: Generated full name.
        account_type: One of checking, savings, credit.
        card_type: Kind of card issued on the account.
        card_network: Network of that card, e.g. ``"VISA"``.
    """

    account_id: str
    account_holder: str
    account_type: str
    card_type: CardType
    card_network: str


def generate_accounts(
    rng: Generator,
    count: int,
    seed: int,
    card_networks: DiscreteDistribution[str] | None = None,
) -> list[Account]:
    """Generate a list of unique synthetic accounts.

    Args:
        rng: NumPy random generator shared by the type, card type and
            network distributions.
        count: Number of accounts to generate.
        seed: Seed for Faker name generation (reproducibility).
        card_networks: Network mix to draw from. Defaults to the stock
            market-share mix.

    Returns:
        List of Account instances with unique IDs, generated names,
        and weighted account and card attributes.
    """
    fake = Faker()
    fake.seed_instance(seed)

    account_types = DiscreteDistribution("AccountType", ACCOUNT_TYPE_WEIGHTS, rng=rng)
    card_types = create_card_type_distribution(rng)
    if card_networks is None:
        card_networks = create_card_network_distribution(rng)

    return [
        Account(
            account_id=f"ACC-{i:05d}",
            account_holder=fake.name(),
            account_type=account_types.sample(),
            card_type=card_types.sample(),
            card_network=card_networks.sample(),
        )
        for i in range(count)
    ]
