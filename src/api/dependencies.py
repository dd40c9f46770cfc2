"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Everything here is built once in the application lifespan and
read back from app.state.
"""

from fastapi import Request
from psycopg_pool import AsyncConnectionPool

from src.domain.verification import VerificationService


def get_pool(request: Request) -> AsyncConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_verification_service(request: Request) -> VerificationService:
    """
    Get the verification service from app state.

    The service and its ledger live for the whole process, so pending
    codes survive between requests.
    """
    return request.app.state.verification_service
