"""
Binary decoder for token metadata accounts.

Only the leading, version-stable part of the layout is parsed.  Fields that
newer program versions append (token standard, collection, uses, ...) are
left unread, so extra trailing bytes never cause a failure.
"""
import logging

from construct import (
    ConstructError,
    Bytes,
    ExprAdapter,
    GreedyBytes,
    If,
    Int8ul,
    Int16ul,
    Int32ul,
    OneOf,
    Prefixed,
    PrefixedArray,
    Struct,
    this,
)
from solders.pubkey import Pubkey

from nft_api.constants import CANDY_MACHINE_OFFSET, PUBKEY_LENGTH
from nft_api.errors import MalformedMetadata
from nft_api.models.responses import Creator, MetadataData, MetadataRecord

logger = logging.getLogger(__name__)

# u32 little-endian length followed by that many bytes
BorshString = Prefixed(Int32ul, GreedyBytes)

# Bools and option tags must be exactly 0 or 1
BorshBool = ExprAdapter(
    OneOf(Int8ul, [0, 1]),
    lambda obj, ctx: bool(obj),
    lambda obj, ctx: int(obj),
)

CREATOR_LAYOUT = Struct(
    "address" / Bytes(PUBKEY_LENGTH),
    "verified" / BorshBool,
    "share" / Int8ul,
)

DATA_LAYOUT = Struct(
    "name" / BorshString,
    "symbol" / BorshString,
    "uri" / BorshString,
    "seller_fee_basis_points" / Int16ul,
    "has_creators" / BorshBool,
    "creators" / If(this.has_creators, PrefixedArray(Int32ul, CREATOR_LAYOUT)),
)

METADATA_LAYOUT = Struct(
    "key" / Int8ul,
    "update_authority" / Bytes(PUBKEY_LENGTH),
    "mint" / Bytes(PUBKEY_LENGTH),
    "data" / DATA_LAYOUT,
    "primary_sale_happened" / BorshBool,
    "is_mutable" / BorshBool,
    "has_edition_nonce" / BorshBool,
    "edition_nonce" / If(this.has_edition_nonce, Int8ul),
)


def strip_padding(raw: bytes) -> str:
    """Decode a padded string field, removing every NUL character."""
    return raw.decode("utf-8", errors="replace").replace("\x00", "")


def _address(raw: bytes) -> str:
    return str(Pubkey(bytes(raw)))


def decode_metadata(raw: bytes) -> MetadataRecord:
    """
    Decode a metadata account payload.

    Args:
        raw: Account data as returned by ``getAccountInfo`` (base64-decoded)

    Returns:
        MetadataRecord with string fields NUL-stripped

    Raises:
        MalformedMetadata: a length prefix points past the end of the buffer
            or a required fixed-width field is missing
    """
    try:
        parsed = METADATA_LAYOUT.parse(bytes(raw))
    except ConstructError as e:
        raise MalformedMetadata(f"Cannot decode metadata account of {len(raw)} bytes: {e}") from e

    data = parsed.data
    creators = None
    if data.has_creators:
        creators = [
            Creator(address=_address(c.address), verified=c.verified, share=c.share)
            for c in data.creators
        ]

    return MetadataRecord(
        key=parsed.key,
        update_authority=_address(parsed.update_authority),
        mint=_address(parsed.mint),
        data=MetadataData(
            name=strip_padding(data.name),
            symbol=strip_padding(data.symbol),
            uri=strip_padding(data.uri),
            seller_fee_basis_points=data.seller_fee_basis_points,
            creators=creators,
        ),
        primary_sale_happened=parsed.primary_sale_happened,
        is_mutable=parsed.is_mutable,
        edition_nonce=parsed.edition_nonce,
    )


def extract_candy_machine_address(raw: bytes) -> bytes:
    """
    Return the 32 bytes at the candy machine offset without decoding.

    Relies on the string fields being padded to their maximum widths, which
    holds for accounts written by the metadata program; records with shorter
    strings shift the creator list and this slice no longer lines up.
    """
    end = CANDY_MACHINE_OFFSET + PUBKEY_LENGTH
    if len(raw) < end:
        raise MalformedMetadata(f"Account of {len(raw)} bytes is too short for offset {CANDY_MACHINE_OFFSET}")
    return bytes(raw[CANDY_MACHINE_OFFSET:end])
