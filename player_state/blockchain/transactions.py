"""
Transaction utilities.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract.contract import ContractFunction
from web3.exceptions import TransactionNotFound

from ..errors import RemoteRejectionError, translate_errors


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmittedTransaction:
    """Result of broadcasting a transaction."""

    tx_hash: str
    confirmations: int
    block_number: Optional[int] = None


def build_sign_send_transaction(
    web3: Web3,
    function_call: ContractFunction,
    account: LocalAccount,
    tx_params: Optional[Dict[str, Any]] = None,
) -> str:
    """Build, sign locally and broadcast a contract transaction.

    Gas and fee fields are left to web3's defaults unless given in
    ``tx_params``. Returns the 0x-prefixed transaction hash.
    """
    params: Dict[str, Any] = dict(tx_params or {})

    with translate_errors("Building transaction"):
        params.setdefault("from", account.address)
        params.setdefault("nonce", web3.eth.get_transaction_count(account.address, "pending"))
        transaction = function_call.build_transaction(params)

    signed_txn = account.sign_transaction(transaction)

    with translate_errors("Broadcasting transaction"):
        tx_hash = web3.eth.send_raw_transaction(signed_txn.raw_transaction)

    tx_hash_hex = Web3.to_hex(tx_hash)
    logger.info(f"Broadcast transaction {tx_hash_hex} from {account.address} (nonce {transaction['nonce']})")
    return tx_hash_hex


def get_confirmations(web3: Web3, tx_hash: str) -> SubmittedTransaction:
    """Report confirmations as of now: 0 while pending, else blocks since inclusion."""
    with translate_errors("Fetching transaction"):
        try:
            tx = web3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            # The node may not have indexed the transaction yet
            return SubmittedTransaction(tx_hash=tx_hash, confirmations=0)

        block_number = tx.get("blockNumber")
        if block_number is None:
            return SubmittedTransaction(tx_hash=tx_hash, confirmations=0)
        latest = web3.eth.block_number

    return SubmittedTransaction(
        tx_hash=tx_hash,
        confirmations=max(latest - block_number + 1, 0),
        block_number=block_number,
    )


def wait_for_confirmation(web3: Web3, tx_hash: str, timeout: float) -> SubmittedTransaction:
    """Wait for the receipt and fail if the transaction reverted."""
    with translate_errors("Waiting for receipt"):
        receipt = web3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)

    if receipt["status"] != 1:
        raise RemoteRejectionError(f"Transaction reverted: {tx_hash}")

    logger.info(f"Transaction {tx_hash} mined in block {receipt['blockNumber']}")
    return get_confirmations(web3, tx_hash)
