"""Tests for the write path: signing and submitting updatePlayerInfo."""

from __future__ import annotations

import asyncio
import re
from dataclasses import replace

import pytest
from web3.exceptions import ContractLogicError, TimeExhausted

from player_state.blockchain.transactions import get_confirmations, wait_for_confirmation
from player_state.errors import (
    ConfigurationError,
    InterfaceMismatchError,
    NetworkError,
    RemoteRejectionError,
)
from player_state.update_player import (
    DEFAULT_PLAYER_ADDRESS,
    DEFAULT_PLAYER_SCORE,
    DEFAULT_PLAYER_URI,
    update_player_info,
)

from conftest import UNREACHABLE_URL


TX_HASH_PATTERN = re.compile(r"^0x[0-9a-f]{64}$")


class TestUpdatePlayerInfo:
    def test_submits_default_record(self, config, web3, contract, signer) -> None:
        result = asyncio.run(update_player_info(config, web3=web3))

        contract.functions.updatePlayerInfo.assert_called_once_with(
            DEFAULT_PLAYER_URI, DEFAULT_PLAYER_ADDRESS, DEFAULT_PLAYER_SCORE
        )
        build = contract.functions.updatePlayerInfo.return_value.build_transaction
        params = build.call_args.args[0]
        assert params["from"] == signer.address
        assert params["nonce"] == 0
        web3.eth.get_transaction_count.assert_called_once_with(signer.address, "pending")

        assert TX_HASH_PATTERN.match(result.tx_hash)
        assert result.confirmations == 0
        assert result.block_number is None

    def test_hash_matches_broadcast_payload(self, config, web3) -> None:
        result = asyncio.run(update_player_info(config, web3=web3))
        raw = web3.eth.send_raw_transaction.call_args.args[0]
        assert result.tx_hash == "0x" + bytes(web3.eth.send_raw_transaction.side_effect(raw)).hex()

    def test_lowercase_player_address_is_checksummed(self, config, web3, contract) -> None:
        asyncio.run(update_player_info(config, "uri", DEFAULT_PLAYER_ADDRESS.lower(), 1, web3=web3))
        args = contract.functions.updatePlayerInfo.call_args.args
        assert args == ("uri", DEFAULT_PLAYER_ADDRESS, 1)

    def test_wait_reports_mined_confirmations(self, config, web3) -> None:
        web3.eth.wait_for_transaction_receipt.return_value = {"status": 1, "blockNumber": 5}
        web3.eth.get_transaction.return_value = {"blockNumber": 5}
        web3.eth.block_number = 5
        result = asyncio.run(update_player_info(config, web3=web3, wait=True))
        assert result.confirmations == 1
        assert result.block_number == 5
        assert web3.eth.wait_for_transaction_receipt.call_args.kwargs["timeout"] == config.receipt_timeout

    def test_revert_is_remote_rejection(self, config, web3) -> None:
        web3.eth.send_raw_transaction.side_effect = ContractLogicError("execution reverted")
        with pytest.raises(RemoteRejectionError, match="Broadcasting transaction"):
            asyncio.run(update_player_info(config, web3=web3))

    @pytest.mark.parametrize(
        "uri, address, score",
        [
            ("uri", "0x1234", 1),
            ("uri", DEFAULT_PLAYER_ADDRESS, -1),
            ("uri", DEFAULT_PLAYER_ADDRESS, 2**256),
            ("uri", DEFAULT_PLAYER_ADDRESS, True),
            (None, DEFAULT_PLAYER_ADDRESS, 1),
        ],
    )
    def test_invalid_arguments_fail_before_network(self, config, web3, uri, address, score) -> None:
        with pytest.raises(InterfaceMismatchError):
            asyncio.run(update_player_info(config, uri, address, score, web3=web3))
        web3.eth.get_code.assert_not_called()
        web3.eth.send_raw_transaction.assert_not_called()

    def test_requires_private_key(self, config, web3) -> None:
        with pytest.raises(ConfigurationError, match="PRIVATE_KEY"):
            asyncio.run(update_player_info(replace(config, private_key=None), web3=web3))
        web3.eth.get_code.assert_not_called()

    def test_unreachable_endpoint(self, config) -> None:
        with pytest.raises(NetworkError):
            asyncio.run(update_player_info(replace(config, rpc_url=UNREACHABLE_URL)))


class TestConfirmations:
    TX = "0x" + "ab" * 32

    def test_pending(self, web3) -> None:
        assert get_confirmations(web3, self.TX).confirmations == 0

    def test_mined(self, web3) -> None:
        web3.eth.get_transaction.return_value = {"blockNumber": 10}
        web3.eth.block_number = 12
        result = get_confirmations(web3, self.TX)
        assert result.confirmations == 3
        assert result.block_number == 10

    def test_reverted_receipt(self, web3) -> None:
        web3.eth.wait_for_transaction_receipt.return_value = {"status": 0, "blockNumber": 3}
        with pytest.raises(RemoteRejectionError, match="reverted"):
            wait_for_confirmation(web3, self.TX, timeout=1)

    def test_receipt_timeout(self, web3) -> None:
        web3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not mined")
        with pytest.raises(NetworkError, match="Waiting for receipt"):
            wait_for_confirmation(web3, self.TX, timeout=1)
