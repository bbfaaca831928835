"""
Synthetic client lists for tests and demonstrations.

Client ids are "Client 1", "Client 2", ...; each client holds between one
and max_tokens balances named "Token 1", "Token 2", ... with amounts drawn
uniformly from [min_amount, max_amount).
"""

from __future__ import annotations

import random
from typing import Optional, Union

from reserves.schemas.clients import BalanceRecord


def generate_client_list(
    length: int,
    rng: Optional[Union[random.Random, int]] = None,
    max_tokens: int = 10,
    min_amount: float = 1e-9,
    max_amount: float = 1e9,
) -> list[dict[str, list[BalanceRecord]]]:
    """
    Generate a random client list.

    Args:
        length: Number of clients
        rng: A random.Random instance, or an int seed, or None for a fresh one
        max_tokens: Upper bound on balances per client (at least 1)
        min_amount: Lower bound of generated amounts
        max_amount: Upper bound of generated amounts

    Raises:
        ValueError: On a negative length or an empty token/amount range
    """
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    if max_tokens < 1:
        raise ValueError(f"max_tokens must be >= 1, got {max_tokens}")
    if max_amount <= min_amount:
        raise ValueError("max_amount must be greater than min_amount")

    if not isinstance(rng, random.Random):
        rng = random.Random(rng)

    client_list: list[dict[str, list[BalanceRecord]]] = []
    for i in range(length):
        num_accounts = rng.randint(1, max_tokens)
        accounts: list[BalanceRecord] = [
            (f"Token {j + 1}", min_amount + rng.random() * (max_amount - min_amount))
            for j in range(num_accounts)
        ]
        client_list.append({f"Client {i + 1}": accounts})

    return client_list
