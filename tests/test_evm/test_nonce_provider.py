"""Tests for nonceq.evm.nonce_provider."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from nonceq.evm.nonce_provider import Web3BlockNonceProvider

# EIP-55 reference address
LOWER = "0x5aaeb6053f3e94c9b9a09f33669435e7ef1beaed"
CHECKSUM = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


def _w3(**kwargs) -> MagicMock:
    w3 = MagicMock()
    w3.eth.get_transaction_count = AsyncMock(**kwargs)
    return w3


class TestWeb3BlockNonceProvider:
    async def test_reads_latest_transaction_count(self):
        w3 = _w3(return_value=42)
        provider = Web3BlockNonceProvider(w3)

        assert await provider.get_block_nonce(LOWER) == 42
        w3.eth.get_transaction_count.assert_awaited_once_with(CHECKSUM, "latest")

    async def test_rpc_errors_propagate(self):
        provider = Web3BlockNonceProvider(_w3(side_effect=ConnectionError("boom")))

        with pytest.raises(ConnectionError):
            await provider.get_block_nonce(LOWER)

    def test_from_rpc_url(self):
        provider = Web3BlockNonceProvider.from_rpc_url("http://localhost:8545")
        assert isinstance(provider, Web3BlockNonceProvider)
