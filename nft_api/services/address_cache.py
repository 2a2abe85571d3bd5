"""
Process-lifetime memoization of parsed public keys and derived addresses.
"""
import logging
from typing import Dict, Optional, Union

from solders.pubkey import Pubkey

from nft_api.errors import InvalidAddressFormat

logger = logging.getLogger(__name__)

KeyLike = Union[str, Pubkey]


class AddressCache:
    """
    Holds two unbounded mappings: base-58 string -> ``Pubkey`` and
    PDA cache key -> derived base-58 address.

    Entries are pure functions of their keys so they are never expired or
    invalidated.  Concurrent coroutines computing the same key simply
    overwrite each other with an identical value.
    """

    def __init__(self) -> None:
        self._pubkeys: Dict[str, Pubkey] = {}
        self._addresses: Dict[str, str] = {}

    def intern_key(self, key: KeyLike) -> Pubkey:
        """Return a parsed ``Pubkey`` for ``key``; ``Pubkey`` inputs pass through."""
        if isinstance(key, Pubkey):
            return key
        if not isinstance(key, str):
            raise InvalidAddressFormat(key)

        result = self._pubkeys.get(key)
        if result is None:
            try:
                result = Pubkey.from_string(key)
            except (ValueError, TypeError) as e:
                logger.debug(f"Rejected public key {key!r}: {e}")
                raise InvalidAddressFormat(key) from e
            self._pubkeys[key] = result
        return result

    def get_address(self, cache_key: str) -> Optional[str]:
        return self._addresses.get(cache_key)

    def store_address(self, cache_key: str, address: str) -> None:
        self._addresses[cache_key] = address

    def stats(self) -> Dict[str, int]:
        """Get cache sizes for monitoring."""
        return {
            "pubkey_cache_size": len(self._pubkeys),
            "address_cache_size": len(self._addresses),
        }
