"""
Web3 connection utilities.
"""

import asyncio
import functools
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, TypeVar

from web3 import Web3
from web3.contract import Contract

from ..errors import ConfigurationError, InterfaceMismatchError, NetworkError, translate_errors


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Functions the client calls, with their input types
REQUIRED_FUNCTIONS: Dict[str, List[str]] = {
    "updatePlayerInfo": ["string", "address", "uint256"],
    "getAllPlayers": [],
    "owner": [],
}


def get_web3_connection(rpc_url: str, timeout: float = 30.0) -> Web3:
    """Create Web3 connection with a bounded request timeout and no automatic retries."""
    web3 = Web3(
        Web3.HTTPProvider(
            rpc_url,
            request_kwargs={"timeout": timeout},
            exception_retry_configuration=None,
        )
    )

    with translate_errors("Connecting to node"):
        connected = web3.is_connected()
    if not connected:
        raise NetworkError(f"Failed to connect to {rpc_url}")

    logger.info(f"Connected to blockchain at {rpc_url}")
    return web3


def load_contract_abi(abi_path: Path) -> List[Dict[str, Any]]:
    """Load the contract ABI from a Remix metadata file or a bare ABI list and check its shape."""
    try:
        with open(abi_path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read ABI file {abi_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"ABI file {abi_path} is not valid JSON: {e}") from e

    abi = document
    if isinstance(document, dict):
        # Remix metadata keeps the ABI under output.abi, compiler artifacts at the top level
        output = document.get("output")
        abi = output.get("abi") if isinstance(output, dict) else document.get("abi")

    if not isinstance(abi, list):
        raise InterfaceMismatchError(f"{abi_path} does not contain an ABI list")

    validate_abi(abi)
    logger.debug(f"Loaded ABI with {len(abi)} entries from {abi_path}")
    return abi


def validate_abi(abi: List[Dict[str, Any]]) -> None:
    """Raise InterfaceMismatchError unless every required function is declared."""
    declared = {}
    for entry in abi:
        if isinstance(entry, dict) and entry.get("type") == "function":
            inputs = [inp.get("type") for inp in entry.get("inputs", [])]
            declared.setdefault(entry.get("name"), []).append(inputs)

    for name, inputs in REQUIRED_FUNCTIONS.items():
        if name not in declared:
            raise InterfaceMismatchError(f"ABI does not declare function {name}")
        if inputs not in declared[name]:
            signature = f"{name}({','.join(inputs)})"
            raise InterfaceMismatchError(f"ABI does not declare {signature}")


def get_contract(web3: Web3, contract_address: str, abi: List[Dict[str, Any]], verify_code: bool = True) -> Contract:
    """Get contract instance bound to the address."""
    address = Web3.to_checksum_address(contract_address)

    if verify_code:
        with translate_errors("Fetching contract code"):
            code = web3.eth.get_code(address)
        if len(code) == 0:
            raise InterfaceMismatchError(f"No contract deployed at {address}")

    contract = web3.eth.contract(address=address, abi=abi)

    logger.info(f"Loaded contract at {address}")
    return contract


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Await a blocking web3 call on the default executor."""
    return await asyncio.get_running_loop().run_in_executor(
        None, functools.partial(func, *args, **kwargs)
    )
