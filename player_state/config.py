"""
Configuration settings for the player state client.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys.exceptions import ValidationError as KeyValidationError
from web3 import Web3

from .errors import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_ABI_PATH = Path(__file__).parent / "artifacts" / "PlayerStateContract_metadata.json"

_PRIVATE_KEY_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigurationError(f"Missing required environment variable {name}")
    return value


def _checksum(name: str, value: str) -> str:
    if not Web3.is_address(value):
        raise ConfigurationError(f"{name} is not a valid address: {value!r}")
    return Web3.to_checksum_address(value)


def _positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class PlayerStateConfig:
    """Client configuration, read once per invocation."""

    # Blockchain settings
    rpc_url: str
    contract_address: str

    # Credentials (write path only)
    public_key: Optional[str] = None
    private_key: Optional[str] = None

    # Contract interface
    abi_path: Path = DEFAULT_ABI_PATH

    # Timeouts in seconds
    rpc_timeout: float = 30.0
    receipt_timeout: float = 120.0

    @classmethod
    def from_env(cls) -> "PlayerStateConfig":
        """Create config from environment variables."""
        rpc_url = _require("API_URL")
        if not rpc_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"API_URL must be an http(s) URL, got {rpc_url!r}")

        contract_address = _checksum("CONTRACT_ADDRESS", _require("CONTRACT_ADDRESS"))

        # Credentials are only checked by require_signer, the read path never uses them
        public_key = os.getenv("PUBLIC_KEY", "").strip() or None

        # Normalize private key to ensure it has 0x prefix
        private_key = os.getenv("PRIVATE_KEY", "").strip() or None
        if private_key is not None and not private_key.startswith("0x"):
            private_key = "0x" + private_key

        abi_path = os.getenv("PLAYER_STATE_ABI_PATH")

        return cls(
            rpc_url=rpc_url,
            contract_address=contract_address,
            public_key=public_key,
            private_key=private_key,
            abi_path=Path(abi_path) if abi_path else DEFAULT_ABI_PATH,
            rpc_timeout=_positive_float("PLAYER_STATE_RPC_TIMEOUT", 30.0),
            receipt_timeout=_positive_float("PLAYER_STATE_RECEIPT_TIMEOUT", 120.0),
        )

    def require_signer(self) -> LocalAccount:
        """Build the signing account from the private key."""
        if not self.private_key:
            raise ConfigurationError("PRIVATE_KEY is required to submit transactions")
        if not _PRIVATE_KEY_PATTERN.match(self.private_key):
            raise ConfigurationError("PRIVATE_KEY must be 32 bytes of hex")
        try:
            account = Account.from_key(self.private_key)
        except (ValueError, KeyValidationError) as e:
            raise ConfigurationError(f"PRIVATE_KEY is not a valid key: {e}") from e

        public_key = _checksum("PUBLIC_KEY", self.public_key) if self.public_key else None
        if public_key and public_key != account.address:
            logger.warning(
                f"PUBLIC_KEY {public_key} does not match signer {account.address}, "
                "signing with the private key"
            )
        return account

    def __repr__(self) -> str:
        key = "<set>" if self.private_key else None
        return (
            f"PlayerStateConfig(rpc_url={self.rpc_url!r}, contract_address={self.contract_address!r}, "
            f"public_key={self.public_key!r}, private_key={key!r}, abi_path={str(self.abi_path)!r}, "
            f"rpc_timeout={self.rpc_timeout}, receipt_timeout={self.receipt_timeout})"
        )
