"""
NFT discovery: composes RPC calls with PDA resolution and metadata decoding.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from solders.pubkey import Pubkey

from nft_api.constants import (
    CANDY_MACHINE_OFFSET,
    METADATA_PROGRAM_ID,
    PUBKEY_LENGTH,
    TOKEN_PROGRAM_ID,
)
from nft_api.errors import AccountNotFound, MalformedMetadata
from nft_api.models.responses import MetadataData, MetadataRecord, NFTOwnerResponse, OwnedNFT
from nft_api.services.address_cache import AddressCache, KeyLike
from nft_api.services.metadata_decoder import decode_metadata, extract_candy_machine_address
from nft_api.services.pda import PdaResolver
from nft_api.services.rpc_gateway import SolanaRpcGateway

logger = logging.getLogger(__name__)

NFTRef = Union[KeyLike, OwnedNFT]


def is_nft_amount(token_amount: Dict[str, Any]) -> bool:
    """True for a balance of exactly one indivisible token."""
    try:
        return int(token_amount.get("amount")) == 1 and int(token_amount.get("decimals")) == 0
    except (TypeError, ValueError):
        return False


def is_single_token(holder: Dict[str, Any]) -> bool:
    """True for a largest-accounts entry holding exactly one token."""
    try:
        return int(holder.get("amount", 0)) == 1
    except (TypeError, ValueError):
        return False


class NFTService:
    """Read-only NFT ownership and metadata lookups."""

    def __init__(self, gateway: Optional[SolanaRpcGateway] = None, cache: Optional[AddressCache] = None) -> None:
        self.gateway = gateway or SolanaRpcGateway()
        # One cache per service instance, shared by key parsing and PDA derivation
        self.cache = cache or AddressCache()
        self.resolver = PdaResolver(self.cache, METADATA_PROGRAM_ID)

    def _mint_of(self, nft: NFTRef) -> Pubkey:
        if isinstance(nft, OwnedNFT):
            nft = nft.mint
        return self.cache.intern_key(nft)

    async def list_owned_nfts(self, owner: KeyLike) -> List[OwnedNFT]:
        """
        Token accounts of ``owner`` holding amount 1 with 0 decimals, in the
        order the node returns them.
        """
        owner_key = self.cache.intern_key(owner)
        accounts = await self.gateway.get_token_accounts_by_owner(str(owner_key), TOKEN_PROGRAM_ID)

        nfts: List[OwnedNFT] = []
        for item in accounts:
            data = item.get("account", {}).get("data", {})
            if not isinstance(data, dict) or data.get("program") != "spl-token":
                continue
            info = data.get("parsed", {}).get("info", {})
            if not is_nft_amount(info.get("tokenAmount", {})):
                continue
            if not item.get("pubkey") or not info.get("mint"):
                logger.warning(f"Skipping token account entry without pubkey or mint: {item}")
                continue
            nfts.append(OwnedNFT(pubkey=item["pubkey"], mint=info["mint"]))

        logger.info(f"Owner {owner_key}: {len(nfts)} NFT accounts out of {len(accounts)} token accounts")
        return nfts

    async def get_metadata_record(self, nft: NFTRef) -> MetadataRecord:
        """Fetch and fully decode the metadata account of ``nft``."""
        address = self.resolver.find_metadata_address(self._mint_of(nft))
        raw = await self.gateway.get_account_info(address)
        if raw is None:
            raise AccountNotFound(address)
        return decode_metadata(raw)

    async def get_metadata(self, nft: NFTRef) -> MetadataData:
        """Name, symbol, URI, royalties and creators of ``nft``."""
        record = await self.get_metadata_record(nft)
        return record.data

    async def get_owner(self, nft: NFTRef) -> NFTOwnerResponse:
        """
        Current holder of ``nft``.  ``owner`` is None when no account holds
        the single token (burned or never minted).
        """
        mint = self._mint_of(nft)
        holders = await self.gateway.get_token_largest_accounts(str(mint))
        holder = next((h for h in holders if is_single_token(h) and h.get("address")), None)
        if holder is None:
            logger.info(f"No holder with amount 1 for mint {mint}")
            return NFTOwnerResponse(mint=str(mint))

        account = await self.gateway.get_parsed_account_info(holder["address"])
        owner = None
        if account:
            data = account.get("data")
            if isinstance(data, dict):
                owner = data.get("parsed", {}).get("info", {}).get("owner")
        return NFTOwnerResponse(mint=str(mint), owner=owner, token_account=holder["address"])

    async def get_candy_machine_address(self, nft: NFTRef) -> str:
        """Candy machine of ``nft``, fetched as a 32-byte slice of its metadata account."""
        address = self.resolver.find_metadata_address(self._mint_of(nft))
        raw = await self.gateway.get_account_info(address, offset=CANDY_MACHINE_OFFSET, length=PUBKEY_LENGTH)
        if raw is None:
            raise AccountNotFound(address)
        if len(raw) < PUBKEY_LENGTH:
            raise MalformedMetadata(f"Metadata account {address} is too short for offset {CANDY_MACHINE_OFFSET}")
        return str(Pubkey(raw[:PUBKEY_LENGTH]))

    async def list_mints_by_authority(self, candy_machine: KeyLike) -> List[MetadataRecord]:
        """
        Every metadata record whose candy machine slot equals ``candy_machine``.

        The node must return the complete set in one response.  Accounts that
        fail to decode are skipped whole.
        """
        candy_key = self.cache.intern_key(candy_machine)
        filters = [{"memcmp": {"offset": CANDY_MACHINE_OFFSET, "bytes": str(candy_key)}}]
        accounts = await self.gateway.get_program_accounts(METADATA_PROGRAM_ID, filters)

        records: List[MetadataRecord] = []
        for item in accounts:
            raw = self.gateway.decode_account_data(item["account"]["data"])
            try:
                record = decode_metadata(raw)
                matches = extract_candy_machine_address(raw) == bytes(candy_key)
            except MalformedMetadata as e:
                logger.warning(f"Skipping metadata account {item.get('pubkey')}: {e}")
                continue
            if not matches:
                logger.warning(f"Skipping metadata account {item.get('pubkey')}: candy machine mismatch")
                continue
            records.append(record)

        logger.info(f"Candy machine {candy_key}: {len(records)} metadata records")
        return records

    def get_cache_stats(self) -> Dict[str, int]:
        """Get cache statistics for monitoring."""
        return self.cache.stats()

    async def close(self) -> None:
        await self.gateway.close()
