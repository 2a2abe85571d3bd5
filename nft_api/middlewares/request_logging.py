"""
Middleware for logging requests and responses to database.
"""
import time
import json
import logging
from typing import Dict, Any, Optional
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from nft_api.database import db_manager
from nft_api.models.database import RequestLog

logger = logging.getLogger(__name__)

# Query parameters that carry the address a request is about
ADDRESS_PARAMS = ("owner", "mint", "candy_machine", "address")

SENSITIVE_HEADERS = {
    'authorization',
    'cookie',
    'x-api-key',
    'x-auth-token',
    'authorization-key'
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all requests and responses to database."""

    def __init__(self, app, log_requests: bool = True, log_response_body: bool = True, log_request_headers: bool = False):
        super().__init__(app)
        self.log_requests = log_requests
        self.log_response_body = log_response_body
        self.log_request_headers = log_request_headers

    async def dispatch(self, request: Request, call_next):
        if not self.log_requests or not db_manager.is_initialized:
            return await call_next(request)

        start_time = time.time()
        request_data = self._extract_request_data(request)

        response = await call_next(request)

        body = b""
        if self.log_response_body:
            # The streamed body can only be read once; rebuild the response around it
            body = b"".join([chunk async for chunk in response.body_iterator])
            response = Response(
                content=body,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type,
            )

        response_time_ms = (time.time() - start_time) * 1000
        response_data = self._extract_response_data(response.status_code, body)

        try:
            await self._log_to_database(request_data, response_data, response_time_ms)
        except Exception as e:
            logger.error(f"Failed to log request to database: {e}")

        return response

    def _extract_request_data(self, request: Request) -> Dict[str, Any]:
        """Extract relevant data from request."""
        query_params = dict(request.query_params) if request.query_params else None

        headers = None
        if self.log_request_headers:
            headers = self._filter_headers(dict(request.headers))

        return {
            'ip_address': self._get_client_ip(request),
            'method': request.method,
            'endpoint': str(request.url.path),
            'query_params': query_params,
            'headers': headers,
            'address': self._extract_address(query_params),
        }

    def _extract_response_data(self, status_code: int, body: bytes) -> Dict[str, Any]:
        """Extract relevant data from response."""
        response_body = None
        if body:
            try:
                response_body = json.loads(body.decode())
            except (json.JSONDecodeError, UnicodeDecodeError):
                response_body = {"raw_body": body.decode(errors='replace')}
            if not isinstance(response_body, dict):
                response_body = {"items": response_body}

        error_message = None
        if status_code >= 400:
            if response_body and isinstance(response_body, dict):
                error_message = str(response_body.get('details') or response_body.get('detail') or f"HTTP {status_code}")
            else:
                error_message = f"HTTP {status_code}"

        return {
            'response_status': status_code,
            'response_body': response_body,
            'error_message': error_message
        }

    async def _log_to_database(self, request_data: Dict[str, Any], response_data: Dict[str, Any], response_time_ms: float):
        """Log request/response data to database."""
        session = await db_manager.get_session()
        try:
            session.add(RequestLog(
                response_time_ms=response_time_ms,
                **request_data,
                **response_data,
            ))
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database logging failed: {e}")
            raise
        finally:
            await session.close()

    @staticmethod
    def _extract_address(query_params: Optional[Dict[str, str]]) -> Optional[str]:
        if not query_params:
            return None
        for name in ADDRESS_PARAMS:
            if query_params.get(name):
                return query_params[name]
        return None

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """Get client IP address from request."""
        # Check X-Forwarded-For header first (for proxies/load balancers)
        forwarded_for = request.headers.get('x-forwarded-for')
        if forwarded_for:
            return forwarded_for.split(',')[0].strip()

        real_ip = request.headers.get('x-real-ip')
        if real_ip:
            return real_ip.strip()

        if request.client:
            return request.client.host

        return "unknown"

    @staticmethod
    def _filter_headers(headers: Dict[str, str]) -> Dict[str, str]:
        """Filter sensitive headers from logging."""
        return {
            key: "***REDACTED***" if key.lower() in SENSITIVE_HEADERS else value
            for key, value in headers.items()
        }
