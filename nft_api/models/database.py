"""
Database models for request/response logging.
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON, Float, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
from typing import Dict, Any

Base = declarative_base()


class RequestLog(Base):
    """Model for storing request/response logs."""

    __tablename__ = "request_logs"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ip_address = Column(String(45), nullable=False)  # IPv6 compatible
    method = Column(String(10), nullable=False)
    endpoint = Column(String(500), nullable=False)
    query_params = Column(JSON, nullable=True)
    headers = Column(JSON, nullable=True)
    response_status = Column(Integer, nullable=False)
    response_body = Column(JSON, nullable=True)
    response_time_ms = Column(Float, nullable=False)
    address = Column(String(64), nullable=True, index=True)  # owner, mint or candy machine
    error_message = Column(Text, nullable=True)

    def __repr__(self):
        return f"<RequestLog(id={self.id}, method={self.method}, endpoint={self.endpoint}, status={self.response_status})>"

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary."""
        return {
            'id': self.id,
            'timestamp': self.timestamp.isoformat() if self.timestamp else "",
            'ip_address': self.ip_address,
            'method': self.method,
            'endpoint': self.endpoint,
            'query_params': self.query_params,
            'headers': self.headers,
            'response_status': self.response_status,
            'response_body': self.response_body,
            'response_time_ms': self.response_time_ms,
            'address': self.address,
            'error_message': self.error_message
        }
