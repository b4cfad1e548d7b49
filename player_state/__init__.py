"""
Client scripts for the PlayerStateContract: update a player record, list players and the owner.
"""

__version__ = "0.1.0"
