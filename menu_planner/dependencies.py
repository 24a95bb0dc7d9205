from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from typing import Optional

from .database import get_db
from .utils.security import decode_access_token
from .models.user import User
from .core.exception import AuthenticationException

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get the user identified by the bearer token.
    Raises CustomException instead of HTTPException for consistent error handling.

    Example:
        @router.get("/protected")
        async def protected_route(current_user: User = Depends(get_current_user)):
            return {"user_id": current_user.id}
    """
    if credentials is None:
        raise AuthenticationException("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationException("Could not validate credentials")

    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise AuthenticationException("Could not validate credentials")

    try:
        user_id = int(user_id_str)
    except (ValueError, TypeError):
        raise AuthenticationException("Invalid token format")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthenticationException("Could not validate credentials")

    return user
