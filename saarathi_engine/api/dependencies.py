"""Dependency injection for FastAPI endpoints"""

from datetime import date, datetime, timezone
from fastapi import Depends, Request
from saarathi_engine.config import Settings, settings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_now() -> datetime:
    """Current UTC time; overridden in tests to pin the calendar"""
    return datetime.now(timezone.utc)


def get_today(now: datetime = Depends(get_now)) -> date:
    return now.date()


def get_settings() -> Settings:
    return settings
