# nft_api/models/__init__.py
from .responses import (
    Creator,
    MetadataData,
    MetadataRecord,
    OwnedNFT,
    OwnedNFTListResponse,
    NFTOwnerResponse,
    MetadataAddressResponse,
    CandyMachineResponse,
    CandyMachineMintsResponse,
    ErrorResponse,
)

__all__ = [
    "Creator",
    "MetadataData",
    "MetadataRecord",
    "OwnedNFT",
    "OwnedNFTListResponse",
    "NFTOwnerResponse",
    "MetadataAddressResponse",
    "CandyMachineResponse",
    "CandyMachineMintsResponse",
    "ErrorResponse",
]
