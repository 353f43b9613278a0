import functools
import logging

from quart import request

from app_init.app_init import BeanFactory
from common.exception.exceptions import UnauthorizedAccessException

logger = logging.getLogger(__name__)


def _get_token_from_header(auth_header: str):
    """
    Extracts the bearer token from the Authorization header.
    Returns None when the header is missing or malformed.
    """
    if not auth_header:
        return None
    parts = auth_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def auth_required(admin: bool = False):
    """
    Decorator to enforce authentication.
    Verifies the bearer token and, when `admin` is set, requires the isAdmin claim.
    The verified claims are passed to the view as the `claims` keyword argument.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            auth_service = BeanFactory().get_services()["auth_service"]

            token = _get_token_from_header(request.headers.get("Authorization"))
            if not token:
                raise UnauthorizedAccessException("Missing Authorization header")

            claims = auth_service.decode_token(token)
            if admin and not claims.get("isAdmin"):
                logger.info(f"Non-admin user {claims.get('userId')} denied on {request.path}")
                raise UnauthorizedAccessException("Admin privileges required")
            kwargs["claims"] = claims
            return await func(*args, **kwargs)

        return wrapper

    return decorator


def get_request_claims():
    """
    Returns the verified claims of the current request, or None when it carries no bearer token.
    A token that is present but invalid is still rejected.
    """
    token = _get_token_from_header(request.headers.get("Authorization"))
    if not token:
        return None
    return BeanFactory().get_services()["auth_service"].decode_token(token)
