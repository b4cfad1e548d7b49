"""
Read path: list every player and read the contract owner. No credential needed.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import click
from dotenv import load_dotenv
from web3 import Web3

from .blockchain import (
    Player,
    format_players,
    get_all_players,
    get_contract,
    get_owner,
    get_web3_connection,
    load_contract_abi,
    run_blocking,
)
from .config import PlayerStateConfig
from .console import run_command, setup_logging


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerState:
    """Snapshot of the contract state at query time."""

    players: List[Player]
    owner: str


async def read_player_state(config: PlayerStateConfig, *, web3: Optional[Web3] = None) -> PlayerState:
    """Query getAllPlayers() then owner(), one after the other."""
    abi = load_contract_abi(config.abi_path)

    if web3 is None:
        web3 = await run_blocking(get_web3_connection, config.rpc_url, config.rpc_timeout)
    contract = await run_blocking(get_contract, web3, config.contract_address, abi)

    players = await run_blocking(get_all_players, contract)
    logger.info(f"Fetched {len(players)} players")
    owner = await run_blocking(get_owner, contract)

    return PlayerState(players=players, owner=owner)


@click.command()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """List all players and the contract owner."""
    setup_logging(verbose)

    # Load environment variables
    load_dotenv()

    async def command():
        return await read_player_state(PlayerStateConfig.from_env())

    state = run_command(command)

    click.echo("All Player Details")
    click.echo(format_players(state.players))
    click.echo(f"Owner : {state.owner}")


if __name__ == "__main__":
    main()
