import logging
from datetime import datetime, timezone
from typing import Optional, Union

import httpx
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select, func

from nft_api import __version__
from nft_api.config import Config
from nft_api.database import db_manager
from nft_api.errors import (
    AccountNotFound,
    InvalidAddressFormat,
    InvalidSeeds,
    MalformedMetadata,
    NoValidAddressFound,
    RpcError,
)
from nft_api.middlewares import RequestLoggingMiddleware, add_cors_middleware
from nft_api.models.database import RequestLog
from nft_api.models.responses import (
    CandyMachineMintsResponse,
    CandyMachineResponse,
    ErrorResponse,
    MetadataAddressResponse,
    MetadataData,
    MetadataRecord,
    NFTOwnerResponse,
    OwnedNFTListResponse,
    RequestLogResponse,
    RequestLogsListResponse,
)
from nft_api.services.nft_service import NFTService

logger = logging.getLogger(__name__)

# exception type -> (HTTP status, error code)
ERROR_STATUS = {
    InvalidAddressFormat: (400, "INVALID_ADDRESS"),
    InvalidSeeds: (400, "INVALID_SEEDS"),
    AccountNotFound: (404, "ACCOUNT_NOT_FOUND"),
    MalformedMetadata: (422, "MALFORMED_METADATA"),
    NoValidAddressFound: (500, "NO_VALID_ADDRESS"),
    RpcError: (502, "RPC_ERROR"),
    httpx.HTTPError: (502, "RPC_UNAVAILABLE"),
}


def _error_response(status_code: int, error_code: str, exc: Exception) -> JSONResponse:
    body = ErrorResponse(
        error=type(exc).__name__,
        error_code=error_code,
        details=str(exc),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _register_error_handlers(app: FastAPI) -> None:
    for exc_class, (status_code, error_code) in ERROR_STATUS.items():
        async def handler(request: Request, exc: Exception, status_code=status_code, error_code=error_code):
            if status_code >= 500:
                logger.error(f"{request.url.path} failed: {exc}")
            return _error_response(status_code, error_code, exc)
        app.add_exception_handler(exc_class, handler)


def create_app(config: Optional[Config] = None, nft_service: Optional[NFTService] = None) -> FastAPI:
    """Build the API around a single ``NFTService`` (and so a single address cache)."""
    config = config or Config()
    service = nft_service or NFTService()

    app = FastAPI(title="Solana NFT Metadata API", version=__version__)
    app.state.nft_service = service

    @app.on_event("startup")
    async def startup_event():
        """Initialize the request log database when request logging is enabled."""
        if config.LOG_REQUESTS:
            db_manager.initialize(config.DATABASE_URL)
            await db_manager.create_tables()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close the RPC client and database connections."""
        await service.close()
        await db_manager.close()

    app.add_middleware(
        RequestLoggingMiddleware,
        log_requests=config.LOG_REQUESTS,
        log_response_body=config.LOG_RESPONSE_BODY,
        log_request_headers=config.LOG_REQUEST_HEADERS
    )
    add_cors_middleware(app, config.CORS_ORIGINS)
    _register_error_handlers(app)

    @app.get("/")
    async def root() -> dict:
        """Basic health check endpoint."""
        return {"status": "ok", "message": "Solana NFT Metadata API is running"}

    @app.get("/nfts", response_model=OwnedNFTListResponse)
    async def list_nfts(owner: str = Query(..., description="Wallet address whose NFTs to list")):
        """List token accounts of ``owner`` that hold exactly one indivisible token."""
        nfts = await service.list_owned_nfts(owner)
        return OwnedNFTListResponse(owner=owner, count=len(nfts), nfts=nfts)

    @app.get("/nft_metadata", response_model=Union[MetadataRecord, MetadataData])
    async def nft_metadata(
        mint: str = Query(..., description="NFT mint address"),
        full: bool = Query(False, description="Return the whole metadata record instead of the data block"),
    ):
        """Decode the on-chain metadata account of an NFT."""
        if full:
            return await service.get_metadata_record(mint)
        return await service.get_metadata(mint)

    @app.get("/nft_owner", response_model=NFTOwnerResponse)
    async def nft_owner(mint: str = Query(..., description="NFT mint address")):
        """Find the wallet currently holding an NFT; ``owner`` is null when nobody does."""
        return await service.get_owner(mint)

    @app.get("/metadata_address", response_model=MetadataAddressResponse)
    async def metadata_address(mint: str = Query(..., description="NFT mint address")):
        """Derive the metadata and master edition PDAs of a mint without any RPC call."""
        return MetadataAddressResponse(
            mint=mint,
            metadata_address=service.resolver.find_metadata_address(mint),
            edition_address=service.resolver.find_edition_address(mint),
        )

    @app.get("/candy_machine", response_model=CandyMachineResponse)
    async def candy_machine(mint: str = Query(..., description="NFT mint address")):
        """Read the candy machine address embedded in an NFT's metadata account."""
        return CandyMachineResponse(mint=mint, candy_machine=await service.get_candy_machine_address(mint))

    @app.get("/candy_machine_mints", response_model=CandyMachineMintsResponse)
    async def candy_machine_mints(candy_machine: str = Query(..., description="Candy machine address")):
        """List every metadata record minted by a candy machine."""
        records = await service.list_mints_by_authority(candy_machine)
        return CandyMachineMintsResponse(candy_machine=candy_machine, count=len(records), metadata=records)

    @app.get("/cache_stats")
    async def cache_stats() -> dict:
        """Sizes of the public key and derived address caches."""
        return service.get_cache_stats()

    @app.get("/admin/request_logs", response_model=RequestLogsListResponse)
    async def get_request_logs(
        address: str = Query(..., description="Owner, mint or candy machine address to query request logs for"),
        limit: int = Query(100, description="Maximum number of logs to return", ge=1, le=1000),
        offset: int = Query(0, description="Number of logs to skip for pagination", ge=0),
    ):
        """Paginated request logs for one queried address, newest first."""
        if not db_manager.is_initialized:
            raise HTTPException(status_code=503, detail="Request logging is disabled")

        session = await db_manager.get_session()
        try:
            count_query = select(func.count(RequestLog.id)).where(RequestLog.address == address)
            total_count = (await session.execute(count_query)).scalar()

            query = (
                select(RequestLog)
                .where(RequestLog.address == address)
                .order_by(RequestLog.timestamp.desc())
                .limit(limit)
                .offset(offset)
            )
            logs = (await session.execute(query)).scalars().all()
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to retrieve request logs: {str(e)}")
        finally:
            await session.close()

        return RequestLogsListResponse(
            total_count=total_count or 0,
            address=address,
            logs=[RequestLogResponse(**log.to_dict()) for log in logs],
        )

    return app


logging.basicConfig(level=Config.LOG_LEVEL)
app = create_app()
