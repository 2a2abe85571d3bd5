from .address_cache import AddressCache
from .metadata_decoder import decode_metadata, extract_candy_machine_address
from .nft_service import NFTService
from .pda import PdaResolver, find_program_address
from .rpc_gateway import SolanaRpcGateway

__all__ = [
    "AddressCache",
    "decode_metadata",
    "extract_candy_machine_address",
    "NFTService",
    "PdaResolver",
    "find_program_address",
    "SolanaRpcGateway",
]
