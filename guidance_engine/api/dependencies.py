"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from fastapi import Request


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> datetime:
    """Provide the evaluation time when the request does not pin one"""
    return datetime.now()
