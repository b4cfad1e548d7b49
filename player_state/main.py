"""
Main entry point for the player state client.
"""

import click

from . import __version__
from .read_players import main as get_all_players
from .update_player import main as update_player_info


@click.group()
@click.version_option(__version__, prog_name="player-state")
def cli():
    """PlayerStateContract client CLI."""
    pass


cli.add_command(update_player_info, name="update-player-info")
cli.add_command(get_all_players, name="get-all-players")


if __name__ == "__main__":
    cli()
