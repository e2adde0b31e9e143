"""Supported blockchain networks and currencies."""

from __future__ import annotations

from datetime import timedelta
from enum import Enum


class BlockchainNetwork(Enum):
    TRON = "tron"
    ETHEREUM = "ethereum"
    BITCOIN = "bitcoin"

    @property
    def average_block_time(self) -> timedelta:
        return _BLOCK_TIMES[self]


class CryptoCurrency(Enum):
    USDT = "USDT"
    BTC = "BTC"
    ETH = "ETH"


_BLOCK_TIMES = {
    BlockchainNetwork.TRON: timedelta(seconds=3),
    BlockchainNetwork.ETHEREUM: timedelta(seconds=13),
    BlockchainNetwork.BITCOIN: timedelta(minutes=10),
}
