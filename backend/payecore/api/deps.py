"""
Shared API dependencies.
Provides reusable FastAPI dependencies for authentication and rules access.
"""

import logging

from fastapi import HTTPException, Header, Depends
from supabase import create_client

from payecore.config import get_settings
from payecore.core.rules_store import RulesStore

logger = logging.getLogger(__name__)

settings = get_settings()


def get_supabase():
    """Get a Supabase client instance."""
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)


def get_rules_store() -> RulesStore:
    """Rules store backed by Supabase, or defaults-only when Supabase is not configured."""
    client = get_supabase() if settings.SUPABASE_URL else None
    return RulesStore(client=client, table=settings.PAYE_RULES_TABLE)


async def get_current_user(authorization: str = Header(...)):
    """
    Validate Supabase JWT token and return the authenticated user.
    Use as a FastAPI dependency: Depends(get_current_user)
    """
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    token = authorization.replace("Bearer ", "")

    try:
        supabase = get_supabase()
        user_response = supabase.auth.get_user(token)
        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        return user_response.user
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=401, detail=f"Authentication failed: {str(e)}")


def get_user_role(user_id: str) -> str | None:
    """Look up the role column for a user in the users table."""
    supabase = get_supabase()
    result = supabase.table("users").select("role").eq(
        "supabase_id", user_id
    ).single().execute()
    return result.data.get("role") if result.data else None


async def require_admin(user=Depends(get_current_user)):
    """Allow the request through only for users holding the admin role."""
    try:
        role = get_user_role(str(user.id))
    except Exception as e:
        logger.warning(f"Role lookup failed for user {user.id}: {e}")
        raise HTTPException(status_code=403, detail="Unable to verify admin role")

    if role != settings.ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
