from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from forum.database import get_db
from forum.errors import UnauthenticatedError
from forum.security import CredentialValidator, Identity


def parse_bearer(authorization: str | None) -> str:
    """
    Extract the token from an ``Authorization`` header value.

    The header must be exactly ``"Bearer <token>"``: two tokens separated by
    a single space, the first one literally ``Bearer``.
    """
    if not authorization:
        raise UnauthenticatedError("missing authorization header")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise UnauthenticatedError("invalid token")
    return parts[1]


async def get_identity(
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """
    Authorization guard for mutating routes.

    Usage in a router::

        @router.post("")
        async def create_post(identity: Identity = Depends(get_identity), ...):
            ...

    Any failure raises ``UnauthenticatedError`` before the route body runs,
    so no service function is reached.
    """
    token = parse_bearer(authorization)
    return await CredentialValidator(db).validate_token(token)
