"""Shared fixtures: environment, config and fake web3/contract objects."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from web3 import Web3

from player_state.config import PlayerStateConfig
from player_state.console import ColoredFormatter


CONTRACT_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
OWNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
UNREACHABLE_URL = "http://127.0.0.1:9"

ENV_VARS = (
    "API_URL",
    "PUBLIC_KEY",
    "PRIVATE_KEY",
    "CONTRACT_ADDRESS",
    "PLAYER_STATE_ABI_PATH",
    "PLAYER_STATE_RPC_TIMEOUT",
    "PLAYER_STATE_RECEIPT_TIMEOUT",
)


@pytest.fixture()
def signer():
    return Account.create()


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable the client reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture()
def env(clean_env: pytest.MonkeyPatch, signer) -> pytest.MonkeyPatch:
    clean_env.setenv("API_URL", "http://127.0.0.1:8545")
    clean_env.setenv("CONTRACT_ADDRESS", CONTRACT_ADDRESS)
    clean_env.setenv("PUBLIC_KEY", signer.address)
    clean_env.setenv("PRIVATE_KEY", signer.key.hex())
    return clean_env


@pytest.fixture()
def config(signer) -> PlayerStateConfig:
    return PlayerStateConfig(
        rpc_url="http://127.0.0.1:8545",
        contract_address=CONTRACT_ADDRESS,
        public_key=signer.address,
        private_key="0x" + bytes(signer.key).hex(),
        rpc_timeout=2.0,
        receipt_timeout=2.0,
    )


@pytest.fixture()
def contract() -> MagicMock:
    contract = MagicMock(name="contract")
    contract.address = CONTRACT_ADDRESS
    contract.functions.getAllPlayers.return_value.call.return_value = []
    contract.functions.owner.return_value.call.return_value = OWNER_ADDRESS.lower()

    def build_transaction(params):
        return {
            **params,
            "to": CONTRACT_ADDRESS,
            "data": "0x",
            "value": 0,
            "gas": 150_000,
            "gasPrice": 1_000_000_000,
            "chainId": 31337,
        }

    contract.functions.updatePlayerInfo.return_value.build_transaction.side_effect = build_transaction
    return contract


@pytest.fixture()
def web3(contract: MagicMock) -> MagicMock:
    """A Web3 stand-in whose node accepts everything and never mines."""
    web3 = MagicMock(name="web3")
    web3.eth.get_code.return_value = b"\x60\x80\x60\x40"
    web3.eth.contract.return_value = contract
    web3.eth.get_transaction_count.return_value = 0
    web3.eth.send_raw_transaction.side_effect = lambda raw: Web3.keccak(raw)
    web3.eth.get_transaction.return_value = {"blockNumber": None}
    web3.eth.block_number = 1
    return web3


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by CLI runs; they hold the runner's closed streams."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler.formatter, ColoredFormatter):
            root.removeHandler(handler)
