"""
Shared fixtures: an in-process fake Solana node and a metadata account builder.
"""
import base64
import json
import struct

import httpx
import pytest
from solders.pubkey import Pubkey

from nft_api.constants import MAX_NAME_LENGTH, MAX_SYMBOL_LENGTH, MAX_URI_LENGTH
from nft_api.services.nft_service import NFTService
from nft_api.services.rpc_gateway import SolanaRpcGateway

RPC_URL = "http://solana-node.test"

OWNER = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
NFT_MINT = "Ee3bo9VyyK7GJC51ueDHNnrNbuUhJbKJYVmtSZsVsY76"
OTHER_MINT = "8yDvkJXL49DSJG5yq89gy217fVL8sX4XeHJAtBXihy9r"
CANDY_MACHINE = "FXWpjUoEmpLHa4RrCfN7WJBN6Dg9uCuNUr2hFCmkrnNR"
UPDATE_AUTHORITY = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"


class FakeSolanaNode:
    """
    Callable for ``httpx.MockTransport`` answering JSON-RPC requests.

    ``results[method]`` is either a plain result or a callable taking the
    request params; ``errors[method]`` makes the node answer with an error
    object instead.
    """

    def __init__(self):
        self.results = {}
        self.errors = {}
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)
        method = payload["method"]
        if method in self.errors:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "error": self.errors[method]})
        result = self.results.get(method)
        if callable(result):
            result = result(payload["params"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})

    def calls_to(self, method):
        return [call for call in self.calls if call["method"] == method]


def key_bytes(address: str) -> bytes:
    return bytes(Pubkey.from_string(address))


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()


def build_metadata(
    name="Degen Ape #1",
    symbol="DAPE",
    uri="https://arweave.net/abc",
    seller_fee_basis_points=420,
    creators=((CANDY_MACHINE, True, 0), (UPDATE_AUTHORITY, False, 100)),
    update_authority=UPDATE_AUTHORITY,
    mint=NFT_MINT,
    primary_sale_happened=True,
    is_mutable=True,
    edition_nonce=254,
    pad=True,
    key=4,
) -> bytes:
    """Serialize a metadata account the way the metadata program lays it out."""

    def string(value, width):
        raw = value.encode() if isinstance(value, str) else value
        if pad:
            raw = raw.ljust(width, b"\x00")
        return struct.pack("<I", len(raw)) + raw

    out = bytes([key]) + key_bytes(update_authority) + key_bytes(mint)
    out += string(name, MAX_NAME_LENGTH) + string(symbol, MAX_SYMBOL_LENGTH) + string(uri, MAX_URI_LENGTH)
    out += struct.pack("<H", seller_fee_basis_points)
    if creators is None:
        out += b"\x00"
    else:
        out += b"\x01" + struct.pack("<I", len(creators))
        for address, verified, share in creators:
            out += key_bytes(address) + bytes([int(verified), share])
    out += bytes([int(primary_sale_happened), int(is_mutable)])
    if edition_nonce is None:
        out += b"\x00"
    else:
        out += b"\x01" + bytes([edition_nonce])
    return out


@pytest.fixture
def node():
    return FakeSolanaNode()


@pytest.fixture
def gateway(node):
    client = httpx.AsyncClient(transport=httpx.MockTransport(node))
    return SolanaRpcGateway(rpc_url=RPC_URL, client=client)


@pytest.fixture
def service(gateway):
    return NFTService(gateway=gateway)
