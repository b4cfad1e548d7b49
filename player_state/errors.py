"""
Error taxonomy for the player state client.

Every failure surfaced to the CLI is one of four kinds: configuration,
network, remote rejection or interface mismatch. Nothing is retried.
"""

import json
import logging
from contextlib import contextmanager
from typing import Iterator

import requests
from eth_abi.exceptions import DecodingError
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    MismatchedABI,
    ProviderConnectionError,
    TimeExhausted,
    Web3RPCError,
    Web3ValidationError,
)


logger = logging.getLogger(__name__)


class PlayerStateError(Exception):
    """Base class for all classified failures."""

    kind = "error"
    exit_code = 1


class ConfigurationError(PlayerStateError):
    """Missing or malformed environment value, or unreadable ABI file."""

    kind = "configuration"
    exit_code = 2


class NetworkError(PlayerStateError):
    """Node unreachable or a wait timed out."""

    kind = "network"
    exit_code = 3


class RemoteRejectionError(PlayerStateError):
    """Contract call reverted or the node refused the signed transaction."""

    kind = "remote-rejection"
    exit_code = 4


class InterfaceMismatchError(PlayerStateError):
    """Bundled ABI or call arguments do not match the deployed contract interface."""

    kind = "interface-mismatch"
    exit_code = 5


NETWORK_EXCEPTIONS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    ProviderConnectionError,
    TimeExhausted,
)

INTERFACE_EXCEPTIONS = (
    BadFunctionCallOutput,
    MismatchedABI,
    Web3ValidationError,
    DecodingError,
)

REJECTION_EXCEPTIONS = (
    ContractLogicError,
    Web3RPCError,
)


def classify(exc: Exception, action: str) -> PlayerStateError:
    """Map a library exception to the matching PlayerStateError."""
    if isinstance(exc, PlayerStateError):
        return exc
    if isinstance(exc, NETWORK_EXCEPTIONS):
        return NetworkError(f"{action} failed: {exc}")
    if isinstance(exc, json.JSONDecodeError):
        # Something answered, but not with JSON-RPC
        return NetworkError(f"{action} failed: endpoint is not a JSON-RPC node ({exc})")
    if isinstance(exc, INTERFACE_EXCEPTIONS):
        return InterfaceMismatchError(f"{action} failed: {exc}")
    if isinstance(exc, REJECTION_EXCEPTIONS):
        return RemoteRejectionError(f"{action} rejected: {exc}")
    if isinstance(exc, requests.exceptions.HTTPError):
        return NetworkError(f"{action} failed: {exc}")
    raise exc


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise web3/requests/eth-abi failures as classified errors."""
    try:
        yield
    except PlayerStateError:
        raise
    except Exception as exc:
        error = classify(exc, action)
        logger.debug(f"{action}: {type(exc).__name__} classified as {error.kind}")
        raise error from exc
