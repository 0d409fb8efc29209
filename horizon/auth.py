from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from horizon.constants import API_KEY

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
user_id_header = APIKeyHeader(name="X-User-Id", auto_error=False)

MAX_USER_ID_LENGTH = 128


async def verify_api_key(api_key: str = Security(api_key_header)):
    """Verify API key for authentication"""
    if not api_key or api_key != API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key"
        )
    return api_key


async def get_current_user_id(user_id: str = Security(user_id_header)) -> str:
    """Authenticated user id, set by the gateway in front of the API"""
    user_id = (user_id or "").strip()
    if not user_id or len(user_id) > MAX_USER_ID_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return user_id
