"""
Program derived address (PDA) resolution for the token metadata program.
"""
import hashlib
import logging
from typing import Optional, Sequence, Tuple

from solders.pubkey import Pubkey

from nft_api.constants import (
    EDITION_SEED,
    MAX_SEED_LEN,
    MAX_SEEDS,
    METADATA_PROGRAM_ID,
    METADATA_SEED,
    PDA_MARKER,
)
from nft_api.errors import InvalidSeeds, NoValidAddressFound
from nft_api.services.address_cache import AddressCache, KeyLike

logger = logging.getLogger(__name__)


def create_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Optional[Pubkey]:
    """
    Hash ``seeds`` under ``program_id``.  Returns ``None`` when the digest is
    a valid ed25519 point, since such an address could have a private key.
    """
    hasher = hashlib.sha256()
    for seed in seeds:
        hasher.update(seed)
    hasher.update(bytes(program_id))
    hasher.update(PDA_MARKER)
    candidate = Pubkey(hasher.digest())
    if candidate.is_on_curve():
        return None
    return candidate


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """
    Search bump seeds from 255 down to 0 and return the first off-curve
    address together with its bump.

    Raises:
        InvalidSeeds: too many seeds or a seed longer than 32 bytes
        NoValidAddressFound: all 256 candidates were on the curve
    """
    seeds = [bytes(seed) for seed in seeds]
    if len(seeds) + 1 > MAX_SEEDS:
        raise InvalidSeeds(f"At most {MAX_SEEDS - 1} seeds allowed, got {len(seeds)}")
    for seed in seeds:
        if len(seed) > MAX_SEED_LEN:
            raise InvalidSeeds(f"Seed of {len(seed)} bytes exceeds {MAX_SEED_LEN}")

    for bump in range(255, -1, -1):
        address = create_program_address(seeds + [bytes([bump])], program_id)
        if address is not None:
            return address, bump
    raise NoValidAddressFound(f"No off-curve address for program {program_id}")


class PdaResolver:
    """Derives metadata account addresses, memoized through an ``AddressCache``."""

    def __init__(self, cache: Optional[AddressCache] = None, program_id: KeyLike = METADATA_PROGRAM_ID):
        self.cache = cache or AddressCache()
        self.program_id = self.cache.intern_key(program_id)

    def _resolve(self, seeds: Sequence[bytes], mint: Pubkey) -> str:
        cache_key = "pda-" + "".join(seed.hex() for seed in seeds) + str(mint)
        result = self.cache.get_address(cache_key)
        if result is None:
            address, bump = find_program_address(seeds, self.program_id)
            result = str(address)
            logger.debug(f"Derived {result} (bump {bump}) for mint {mint}")
            self.cache.store_address(cache_key, result)
        return result

    def find_metadata_address(self, mint: KeyLike) -> str:
        """Base-58 address of the metadata account for ``mint``."""
        mint_key = self.cache.intern_key(mint)
        seeds = [METADATA_SEED, bytes(self.program_id), bytes(mint_key)]
        return self._resolve(seeds, mint_key)

    def find_edition_address(self, mint: KeyLike) -> str:
        """Base-58 address of the master edition account for ``mint``."""
        mint_key = self.cache.intern_key(mint)
        seeds = [METADATA_SEED, bytes(self.program_id), bytes(mint_key), EDITION_SEED]
        return self._resolve(seeds, mint_key)
