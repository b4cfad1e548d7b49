"""
Blockchain utilities for the player state client.
"""

from .connection import get_web3_connection, get_contract, load_contract_abi, run_blocking
from .players import (
    Player,
    get_all_players,
    get_owner,
    format_players,
)
from .transactions import (
    SubmittedTransaction,
    build_sign_send_transaction,
    get_confirmations,
    wait_for_confirmation,
)

__all__ = [
    "get_web3_connection",
    "get_contract",
    "load_contract_abi",
    "run_blocking",
    "Player",
    "get_all_players",
    "get_owner",
    "format_players",
    "SubmittedTransaction",
    "build_sign_send_transaction",
    "get_confirmations",
    "wait_for_confirmation",
]
