import asyncio
import logging
from typing import Optional

from fastapi import HTTPException, Request, status

from evermore.db import get_supabase_client


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def resolve_user_id(access_token: str) -> Optional[str]:
    """Ask Supabase Auth who owns this access token. None if nobody does."""
    try:
        response = await asyncio.to_thread(get_supabase_client().auth.get_user, access_token)
    except Exception as e:
        logging.warning(f"Token verification failed: {e}")
        return None
    user = getattr(response, "user", None)
    return getattr(user, "id", None)


async def get_current_user_id(request: Request) -> str:
    """
    A dependency that resolves the current user's ID from the Supabase access
    token in the Authorization header. Raises 401 when the token is missing or
    rejected.
    """
    token = _bearer_token(request)
    if not token:
        logging.warning("Missing bearer token for authentication.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Missing bearer token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = await resolve_user_id(token)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logging.info(f"Authenticated user: {user_id}")
    request.state.user_id = user_id
    return user_id
