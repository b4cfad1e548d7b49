"""
Write path: submit updatePlayerInfo(uri, address, score) signed with PRIVATE_KEY.

Usage:
  update-player-info
  update-player-info --uri Qm... --player-address 0x... --score 200 --wait

Without options it submits the default player record below.
"""

import logging
from typing import Optional

import click
from dotenv import load_dotenv
from web3 import Web3

from .blockchain import (
    SubmittedTransaction,
    build_sign_send_transaction,
    get_confirmations,
    get_contract,
    get_web3_connection,
    load_contract_abi,
    run_blocking,
    wait_for_confirmation,
)
from .config import PlayerStateConfig
from .console import run_command, setup_logging
from .errors import InterfaceMismatchError, translate_errors


logger = logging.getLogger(__name__)

DEFAULT_PLAYER_URI = "QmbFYtJqYuDwAYucwxyvYPLfgegpjGpNMWPt5p3cxTY9sy"
DEFAULT_PLAYER_ADDRESS = "0x8c8e240C723F5F850c6fdfD04a1B08598DaF6B53"
DEFAULT_PLAYER_SCORE = 200

UINT256_MAX = 2**256 - 1


def _validate_arguments(player_uri: str, player_address: str, player_score: int) -> str:
    """Check the call arguments fit updatePlayerInfo(string,address,uint256)."""
    if not isinstance(player_uri, str):
        raise InterfaceMismatchError(f"Player URI must be a string, got {player_uri!r}")
    if not Web3.is_address(player_address):
        raise InterfaceMismatchError(f"Player address is not a valid address: {player_address!r}")
    if isinstance(player_score, bool) or not isinstance(player_score, int) or not 0 <= player_score <= UINT256_MAX:
        raise InterfaceMismatchError(f"Player score must be an unsigned 256-bit integer, got {player_score!r}")
    return Web3.to_checksum_address(player_address)


async def update_player_info(
    config: PlayerStateConfig,
    player_uri: str = DEFAULT_PLAYER_URI,
    player_address: str = DEFAULT_PLAYER_ADDRESS,
    player_score: int = DEFAULT_PLAYER_SCORE,
    *,
    web3: Optional[Web3] = None,
    wait: bool = False,
) -> SubmittedTransaction:
    """Sign and submit one updatePlayerInfo call.

    Local checks (arguments, ABI shape, signing key) run before the node is
    contacted. Without ``wait`` the confirmation count reflects the state at
    submission time, usually 0.
    """
    player_address = _validate_arguments(player_uri, player_address, player_score)
    abi = load_contract_abi(config.abi_path)
    account = config.require_signer()

    if web3 is None:
        web3 = await run_blocking(get_web3_connection, config.rpc_url, config.rpc_timeout)
    contract = await run_blocking(get_contract, web3, config.contract_address, abi)

    logger.info(f"Updating player {player_address} with score {player_score}")
    with translate_errors("updatePlayerInfo"):
        function_call = contract.functions.updatePlayerInfo(player_uri, player_address, player_score)

    tx_hash = await run_blocking(build_sign_send_transaction, web3, function_call, account)

    if wait:
        return await run_blocking(wait_for_confirmation, web3, tx_hash, config.receipt_timeout)
    return await run_blocking(get_confirmations, web3, tx_hash)


@click.command()
@click.option("--uri", "player_uri", default=DEFAULT_PLAYER_URI, show_default=True, help="Player content URI")
@click.option("--player-address", default=DEFAULT_PLAYER_ADDRESS, show_default=True, help="Player address")
@click.option("--score", "player_score", type=click.IntRange(min=0), default=DEFAULT_PLAYER_SCORE, show_default=True, help="Player score")
@click.option("--wait/--no-wait", default=False, help="Wait for the transaction receipt before reporting")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(player_uri: str, player_address: str, player_score: int, wait: bool, verbose: bool):
    """Update a player's URI, address and score on the contract."""
    setup_logging(verbose)

    # Load environment variables
    load_dotenv()

    async def command():
        config = PlayerStateConfig.from_env()
        return await update_player_info(config, player_uri, player_address, player_score, wait=wait)

    result = run_command(command)

    click.echo("Transaction Successfully Done")
    click.echo(f"Tx Hash : {result.tx_hash}")
    click.echo(f"Confirmation : {result.confirmations}")


if __name__ == "__main__":
    main()
