from fastapi import Header

from blog_api.exceptions import Unauthenticated
from blog_api.security import TokenError, decode_access_token

BEARER_PREFIX = "Bearer "


def resolve_caller_id(authorization: str | None) -> int:
    """
    Turn an ``Authorization`` header value into the caller's user id.

    Only the id is returned; nothing else from the token payload is
    passed downstream.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthenticated("No token provided")

    token = authorization[len(BEARER_PREFIX):].strip()
    try:
        return decode_access_token(token)
    except TokenError:
        raise Unauthenticated("Token invalid or expired")


async def get_current_user_id(
    authorization: str | None = Header(
        None,
        description="Bearer token issued by /api/auth/register or /api/auth/login.",
    ),
) -> int:
    """
    FastAPI dependency guarding protected routes.

    Usage in a router::

        @router.post("")
        async def create_post(caller_id: int = Depends(get_current_user_id)):
            ...
    """
    return resolve_caller_id(authorization)
