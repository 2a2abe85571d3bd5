from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional


class Creator(BaseModel):
    """A verified or unverified creator entry of a metadata record."""
    address: str = Field(..., description="Creator address (base-58)", min_length=32, max_length=44)
    verified: bool = Field(..., description="Whether the creator signed the metadata")
    share: int = Field(..., description="Royalty share in percent", ge=0, le=255)


class MetadataData(BaseModel):
    """The nested ``data`` block of a metadata account."""
    name: str = Field(..., description="NFT name with NUL padding removed")
    symbol: str = Field(..., description="Collection symbol with NUL padding removed")
    uri: str = Field(..., description="Off-chain JSON metadata URI with NUL padding removed")
    seller_fee_basis_points: int = Field(..., description="Royalty in basis points", ge=0, le=65535)
    creators: Optional[List[Creator]] = Field(None, description="Creator list, absent when not set on chain")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Degen Ape #1234",
                "symbol": "DAPE",
                "uri": "https://arweave.net/abc123",
                "seller_fee_basis_points": 420,
                "creators": [
                    {
                        "address": "9BKWqDHfHZh9j39xakYVMdr6hXmCLHH5VfCpeq2idU9L",
                        "verified": True,
                        "share": 0
                    }
                ]
            }
        }
    )


class MetadataRecord(BaseModel):
    """Fully decoded metadata account."""
    key: int = Field(..., description="Account type tag (4 = MetadataV1)", ge=0, le=255)
    update_authority: str = Field(..., description="Update authority address (base-58)")
    mint: str = Field(..., description="Mint address (base-58)")
    data: MetadataData = Field(..., description="Name, symbol, URI, royalties and creators")
    primary_sale_happened: bool = Field(..., description="Whether the primary sale has happened")
    is_mutable: bool = Field(..., description="Whether the update authority may still change the record")
    edition_nonce: Optional[int] = Field(None, description="Bump of the edition PDA, if recorded")


class OwnedNFT(BaseModel):
    """A token account holding exactly one indivisible token."""
    pubkey: str = Field(..., description="Token account address", min_length=1)
    mint: str = Field(..., description="Mint address of the NFT", min_length=1)


class OwnedNFTListResponse(BaseModel):
    """Response model for the nfts endpoint."""
    owner: str = Field(..., description="Owner address queried", min_length=1)
    count: int = Field(..., description="Number of NFT candidate accounts", ge=0)
    nfts: List[OwnedNFT] = Field(default_factory=list, description="NFT token accounts in node order")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "owner": "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM",
                "count": 1,
                "nfts": [
                    {
                        "pubkey": "3Nz5Tnm2Y3gBbd4UBoG8ZHdxjBUxhMuGnwQEj4Bvd6Cq",
                        "mint": "Ee3bo9VyyK7GJC51ueDHNnrNbuUhJbKJYVmtSZsVsY76"
                    }
                ]
            }
        }
    )


class NFTOwnerResponse(BaseModel):
    """Response model for the nft_owner endpoint."""
    mint: str = Field(..., description="Mint address queried", min_length=1)
    owner: Optional[str] = Field(None, description="Current owner wallet, null when no holder exists")
    token_account: Optional[str] = Field(None, description="Token account holding the NFT")


class MetadataAddressResponse(BaseModel):
    """Response model for the metadata_address endpoint."""
    mint: str = Field(..., description="Mint address queried", min_length=1)
    metadata_address: str = Field(..., description="Metadata account PDA")
    edition_address: str = Field(..., description="Master edition account PDA")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "mint": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                "metadata_address": "5x38Kp4hvdomTCnCrAny4UtMUt5rQBdB6px2K1Ui45Wq",
                "edition_address": "..."
            }
        }
    )


class CandyMachineResponse(BaseModel):
    """Response model for the candy_machine endpoint."""
    mint: str = Field(..., description="Mint address queried", min_length=1)
    candy_machine: str = Field(..., description="Address stored at the candy machine offset")


class CandyMachineMintsResponse(BaseModel):
    """Response model for the candy_machine_mints endpoint."""
    candy_machine: str = Field(..., description="Candy machine address queried", min_length=1)
    count: int = Field(..., description="Number of metadata records found", ge=0)
    metadata: List[MetadataRecord] = Field(default_factory=list, description="Decoded metadata records")


# Error response models
class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    error_code: str = Field(..., description="Error code")
    details: Optional[str] = Field(None, description="Additional error details")
    timestamp: str = Field(..., description="Error timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Invalid address",
                "error_code": "INVALID_ADDRESS",
                "details": "Invalid address: 'not-a-key'",
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
    )


# Request log models
class RequestLogResponse(BaseModel):
    """Response model for a single request log entry."""
    id: int = Field(..., description="Log entry ID")
    timestamp: str = Field(..., description="Request timestamp")
    ip_address: str = Field(..., description="Client IP address")
    method: str = Field(..., description="HTTP method")
    endpoint: str = Field(..., description="Request endpoint")
    query_params: Optional[dict] = Field(None, description="Query parameters")
    headers: Optional[dict] = Field(None, description="Request headers")
    response_status: int = Field(..., description="HTTP response status code")
    response_body: Optional[dict] = Field(None, description="Response body")
    response_time_ms: float = Field(..., description="Response time in milliseconds")
    address: Optional[str] = Field(None, description="Owner, mint or candy machine address queried")
    error_message: Optional[str] = Field(None, description="Error message if any")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "timestamp": "2024-01-15T10:30:00Z",
                "ip_address": "192.168.1.1",
                "method": "GET",
                "endpoint": "/nft_metadata",
                "query_params": {"mint": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"},
                "headers": None,
                "response_status": 200,
                "response_body": {"name": "USD Coin"},
                "response_time_ms": 125.5,
                "address": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                "error_message": None
            }
        }
    )


class RequestLogsListResponse(BaseModel):
    """Response model for list of request logs."""
    total_count: int = Field(..., description="Total number of logs for this address")
    address: str = Field(..., description="Address being queried")
    logs: List[RequestLogResponse] = Field(..., description="List of request logs")
