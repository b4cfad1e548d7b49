"""
Player-related blockchain functions.
"""

from dataclasses import dataclass
from typing import List, Sequence

from web3 import Web3
from web3.contract import Contract

from ..errors import InterfaceMismatchError, translate_errors


@dataclass(frozen=True)
class Player:
    """A player record as stored by the contract."""

    uri: str
    address: str
    score: int

    @classmethod
    def from_tuple(cls, record: Sequence) -> "Player":
        if len(record) != 3:
            raise InterfaceMismatchError(f"Expected (uri, address, score) player record, got {record!r}")
        return cls(
            uri=record[0],
            address=Web3.to_checksum_address(record[1]),
            score=int(record[2]),
        )


def get_all_players(contract: Contract) -> List[Player]:
    """Get every player record. An empty contract yields an empty list."""
    with translate_errors("getAllPlayers"):
        records = contract.functions.getAllPlayers().call()
    return [Player.from_tuple(record) for record in records]


def get_owner(contract: Contract) -> str:
    """Get the contract owner address."""
    with translate_errors("owner"):
        owner = contract.functions.owner().call()
    return Web3.to_checksum_address(owner)


def format_players(players: List[Player]) -> str:
    if not players:
        return "(no players registered)"
    return "\n".join(
        f"  #{index} uri={player.uri} address={player.address} score={player.score}"
        for index, player in enumerate(players)
    )
