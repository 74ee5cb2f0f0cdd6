"""Sources of the chain's authoritative nonce for an address.

The queue only asks for it when an address has never been seen or was
reset, e.g. after a "nonce too low" rejection.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from web3 import AsyncHTTPProvider, AsyncWeb3

logger = logging.getLogger(__name__)


class BlockNonceProvider(ABC):
    @abstractmethod
    async def get_block_nonce(self, address: str) -> int:
        """Return the next nonce the chain will accept from ``address``."""
        ...


class Web3BlockNonceProvider(BlockNonceProvider):
    """Reads the transaction count of an address at the latest block.

    RPC errors propagate to the caller untouched; retries are theirs to decide.
    """

    def __init__(self, w3: AsyncWeb3):
        self._w3 = w3

    @classmethod
    def from_rpc_url(cls, rpc_url: str) -> Web3BlockNonceProvider:
        return cls(AsyncWeb3(AsyncHTTPProvider(rpc_url)))

    async def get_block_nonce(self, address: str) -> int:
        nonce = await self._w3.eth.get_transaction_count(
            AsyncWeb3.to_checksum_address(address), "latest"
        )
        logger.info("Fetched block nonce", extra={"address": address, "nonce": nonce})
        return nonce
