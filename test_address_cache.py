#!/usr/bin/env python3
"""
Tests for public key interning and derived address storage.
"""
import pytest
from solders.pubkey import Pubkey

from nft_api.errors import InvalidAddressFormat
from nft_api.services.address_cache import AddressCache

from conftest import USDC_MINT


def test_intern_key_parses_and_reuses_object():
    cache = AddressCache()
    first = cache.intern_key(USDC_MINT)
    assert isinstance(first, Pubkey)
    assert str(first) == USDC_MINT
    assert cache.intern_key(USDC_MINT) is first
    assert cache.stats()["pubkey_cache_size"] == 1


def test_intern_key_passes_through_pubkey():
    cache = AddressCache()
    key = Pubkey.from_string(USDC_MINT)
    assert cache.intern_key(key) is key
    assert cache.stats()["pubkey_cache_size"] == 0


@pytest.mark.parametrize("bad", ["", "not-base58!", "0OIl", "abc", USDC_MINT + "1111"])
def test_intern_key_rejects_malformed_input(bad):
    cache = AddressCache()
    with pytest.raises(InvalidAddressFormat) as excinfo:
        cache.intern_key(bad)
    assert excinfo.value.address == bad
    assert cache.stats()["pubkey_cache_size"] == 0


def test_intern_key_rejects_non_string():
    with pytest.raises(InvalidAddressFormat):
        AddressCache().intern_key(12345)


def test_invalid_address_is_a_value_error():
    with pytest.raises(ValueError):
        AddressCache().intern_key("???")


def test_address_store_round_trip():
    cache = AddressCache()
    assert cache.get_address("pda-00") is None
    cache.store_address("pda-00", "5x38Kp4hvdomTCnCrAny4UtMUt5rQBdB6px2K1Ui45Wq")
    assert cache.get_address("pda-00") == "5x38Kp4hvdomTCnCrAny4UtMUt5rQBdB6px2K1Ui45Wq"
    assert cache.stats() == {"pubkey_cache_size": 0, "address_cache_size": 1}
