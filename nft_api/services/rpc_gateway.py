"""
Minimal async JSON-RPC client for the Solana methods the NFT service needs.

Transport errors (``httpx.HTTPError``) propagate unchanged; retries and
connection policy belong to whoever configures the ``httpx.AsyncClient``.
"""
import base64
import itertools
import logging
from typing import Any, Dict, List, Optional

import httpx

from nft_api.config import Config
from nft_api.errors import RpcError

logger = logging.getLogger(__name__)


class SolanaRpcGateway:
    """Thin wrapper over the node's JSON-RPC endpoint."""

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.rpc_url = rpc_url or Config.SOLANA_RPC_URL
        self._client = client or httpx.AsyncClient(timeout=timeout or Config.RPC_TIMEOUT)
        self._ids = itertools.count(1)

    async def _post(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug(f"RPC {method} -> {self.rpc_url}")
        resp = await self._client.post(self.rpc_url, json=payload)
        resp.raise_for_status()
        data = resp.json()
        error = data.get("error")
        if error:
            raise RpcError(
                f"{method} failed: {error.get('message', 'unknown error')}",
                code=error.get("code"),
                error_data=error.get("data"),
            )
        return data.get("result")

    @staticmethod
    def decode_account_data(data: Any) -> bytes:
        # [payload, "base64"]
        return base64.b64decode(data[0])

    async def get_token_accounts_by_owner(self, owner: str, program_id: str) -> List[Dict[str, Any]]:
        result = await self._post(
            "getTokenAccountsByOwner",
            [owner, {"programId": program_id}, {"encoding": "jsonParsed"}],
        )
        return (result or {}).get("value") or []

    async def get_account_info(
        self,
        address: str,
        offset: Optional[int] = None,
        length: Optional[int] = None,
    ) -> Optional[bytes]:
        """Raw account data, or ``None`` when the account does not exist."""
        options: Dict[str, Any] = {"encoding": "base64"}
        if offset is not None and length is not None:
            options["dataSlice"] = {"offset": offset, "length": length}
        result = await self._post("getAccountInfo", [address, options])
        value = (result or {}).get("value")
        if not value:
            return None
        return self.decode_account_data(value["data"])

    async def get_parsed_account_info(self, address: str) -> Optional[Dict[str, Any]]:
        result = await self._post("getAccountInfo", [address, {"encoding": "jsonParsed"}])
        return (result or {}).get("value")

    async def get_token_largest_accounts(self, mint: str) -> List[Dict[str, Any]]:
        result = await self._post("getTokenLargestAccounts", [mint])
        return (result or {}).get("value") or []

    async def get_program_accounts(self, program_id: str, filters: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        result = await self._post(
            "getProgramAccounts",
            [program_id, {"encoding": "base64", "filters": filters}],
        )
        # Nodes answer with a bare list unless withContext is requested
        if isinstance(result, dict):
            return result.get("value") or []
        return result or []

    async def close(self) -> None:
        await self._client.aclose()
