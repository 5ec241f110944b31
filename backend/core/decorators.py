# backend/core/decorators.py

"""
Common decorators for the application
"""

import functools
import logging
from typing import Callable, Any
from fastapi import HTTPException, status

from .exceptions import APIError, ValidationError

logger = logging.getLogger(__name__)


def handle_api_errors(func: Callable) -> Callable:
    """
    Decorator to handle common API errors and convert them to appropriate HTTP responses
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Any:
        try:
            return await func(*args, **kwargs)
        except HTTPException:
            # Re-raise HTTP exceptions as-is
            raise
        except ValueError as e:
            logger.error(f"Value error in {func.__name__}: {str(e)}")
            raise ValidationError(detail=str(e))
        except Exception:
            logger.exception(f"Unexpected error in {func.__name__}")
            raise APIError(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An unexpected error occurred",
                error_code="INTERNAL_ERROR",
            )

    return wrapper
