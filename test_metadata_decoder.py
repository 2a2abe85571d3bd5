#!/usr/bin/env python3
"""
Tests for the metadata account decoder and the candy machine slice.
"""
import struct

import pytest
from solders.pubkey import Pubkey

from nft_api.constants import CANDY_MACHINE_OFFSET
from nft_api.errors import MalformedMetadata
from nft_api.services.metadata_decoder import decode_metadata, extract_candy_machine_address, strip_padding

from conftest import CANDY_MACHINE, NFT_MINT, UPDATE_AUTHORITY, build_metadata, key_bytes


def test_decodes_all_known_fields():
    record = decode_metadata(build_metadata())
    assert record.key == 4
    assert record.update_authority == UPDATE_AUTHORITY
    assert record.mint == NFT_MINT
    assert record.data.name == "Degen Ape #1"
    assert record.data.symbol == "DAPE"
    assert record.data.uri == "https://arweave.net/abc"
    assert record.data.seller_fee_basis_points == 420
    assert [(c.address, c.verified, c.share) for c in record.data.creators] == [
        (CANDY_MACHINE, True, 0),
        (UPDATE_AUTHORITY, False, 100),
    ]
    assert record.primary_sale_happened is True
    assert record.is_mutable is True
    assert record.edition_nonce == 254


def test_trailing_padding_is_stripped():
    record = decode_metadata(build_metadata(name="Foo\0\0\0\0", pad=False))
    assert record.data.name == "Foo"


def test_embedded_nul_is_removed():
    record = decode_metadata(build_metadata(name="Fo\0o", symbol="\0S\0Y", uri="ht\0tp://x"))
    assert record.data.name == "Foo"
    assert record.data.symbol == "SY"
    assert record.data.uri == "http://x"


def test_strip_padding_replaces_invalid_utf8():
    assert strip_padding(b"ok\xff\x00\x00") == "ok\ufffd"


def test_unpadded_strings_decode():
    record = decode_metadata(build_metadata(name="Short", pad=False))
    assert record.data.name == "Short"
    assert record.data.creators[0].address == CANDY_MACHINE


def test_absent_creators_and_edition_nonce():
    record = decode_metadata(build_metadata(creators=None, edition_nonce=None, primary_sale_happened=False, is_mutable=False))
    assert record.data.creators is None
    assert record.edition_nonce is None
    assert record.primary_sale_happened is False
    assert record.is_mutable is False


def test_empty_creator_list_is_not_none():
    record = decode_metadata(build_metadata(creators=()))
    assert record.data.creators == []


def test_unknown_key_tag_is_reported_not_enforced():
    assert decode_metadata(build_metadata(key=6)).key == 6


@pytest.mark.parametrize("extra", [b"\x00", b"\x00" * 300, b"\x01\x02\x03newer-fields"])
def test_trailing_bytes_are_tolerated(extra):
    raw = build_metadata()
    assert decode_metadata(raw + extra) == decode_metadata(raw)


def test_real_account_size_with_zero_fill():
    raw = build_metadata()
    raw = raw.ljust(679, b"\x00")
    assert decode_metadata(raw).data.name == "Degen Ape #1"


def test_truncated_before_last_fixed_field_raises():
    raw = build_metadata()
    with pytest.raises(MalformedMetadata):
        decode_metadata(raw[:-1])


@pytest.mark.parametrize("length", [0, 1, 33, 65, 70, 110, 300])
def test_truncated_anywhere_raises(length):
    with pytest.raises(MalformedMetadata):
        decode_metadata(build_metadata()[:length])


def test_length_prefix_past_end_raises():
    raw = bytearray(build_metadata())
    # name length prefix follows key + two pubkeys
    raw[65:69] = struct.pack("<I", 0xFFFFFFFF)
    with pytest.raises(MalformedMetadata):
        decode_metadata(bytes(raw))


def test_creator_count_past_end_raises():
    raw = bytearray(build_metadata())
    raw[CANDY_MACHINE_OFFSET - 4:CANDY_MACHINE_OFFSET] = struct.pack("<I", 1000)
    with pytest.raises(MalformedMetadata):
        decode_metadata(bytes(raw))


def test_extract_candy_machine_address():
    raw = build_metadata()
    assert extract_candy_machine_address(raw) == key_bytes(CANDY_MACHINE)


@pytest.mark.parametrize("name,symbol,uri", [
    ("", "", ""),
    ("A" * 32, "B" * 10, "u" * 200),
    ("Okay Bear #9999", "OKB", "https://arweave.net/" + "x" * 43),
])
def test_extract_matches_first_creator_of_full_decode(name, symbol, uri):
    raw = build_metadata(name=name, symbol=symbol, uri=uri)
    record = decode_metadata(raw)
    assert extract_candy_machine_address(raw) == bytes(Pubkey.from_string(record.data.creators[0].address))


def test_extract_does_not_need_a_decodable_record():
    raw = bytearray(build_metadata())
    raw[65:69] = struct.pack("<I", 0xFFFFFFFF)
    assert extract_candy_machine_address(bytes(raw)) == key_bytes(CANDY_MACHINE)


def test_extract_on_short_buffer_raises():
    with pytest.raises(MalformedMetadata):
        extract_candy_machine_address(build_metadata()[:CANDY_MACHINE_OFFSET + 31])


def test_creator_option_tag_other_than_zero_or_one_raises():
    raw = bytearray(build_metadata())
    # option tag follows the seller fee
    raw[CANDY_MACHINE_OFFSET - 5] = 2
    with pytest.raises(MalformedMetadata):
        decode_metadata(bytes(raw))


def test_verified_flag_other_than_zero_or_one_raises():
    raw = bytearray(build_metadata())
    raw[CANDY_MACHINE_OFFSET + 32] = 7
    with pytest.raises(MalformedMetadata):
        decode_metadata(bytes(raw))


@pytest.mark.parametrize("position", [1, 2, 3])
def test_trailing_bools_and_edition_tag_must_be_zero_or_one(position):
    raw = bytearray(build_metadata(creators=None))
    # primary_sale_happened, is_mutable, edition nonce tag follow the creators tag
    raw[CANDY_MACHINE_OFFSET - 5 + position] = 2
    with pytest.raises(MalformedMetadata):
        decode_metadata(bytes(raw))
