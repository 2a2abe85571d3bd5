"""
Exception types raised by the NFT resolution core.

Transport failures (``httpx.HTTPError``) are not part of this hierarchy; they
propagate from the RPC gateway unchanged.
"""
from typing import Any, Dict, Optional


class NFTApiError(Exception):
    """Base class for all errors raised by this package."""


class InvalidAddressFormat(NFTApiError, ValueError):
    """Input is not a valid base-58 encoded 32-byte public key."""

    def __init__(self, address: Any):
        super().__init__(f"Invalid address: {address!r}")
        self.address = address


class InvalidSeeds(NFTApiError, ValueError):
    """Seed set exceeds the runtime's seed count or seed length limits."""


class NoValidAddressFound(NFTApiError):
    """Every bump seed produced an address on the ed25519 curve."""


class MalformedMetadata(NFTApiError):
    """Metadata account bytes are truncated or corrupt."""


class AccountNotFound(NFTApiError):
    """The node returned no account at the requested address."""

    def __init__(self, address: str):
        super().__init__(f"Account not found: {address}")
        self.address = address


class RpcError(NFTApiError):
    """Exception raised when the node answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.error_data = error_data or {}
