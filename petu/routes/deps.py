from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from petu.core.config import settings
from petu.core.exceptions import AuthenticationError
from petu.core.security import decode_access_token

# Optional version that doesn't raise an error when the token is missing
oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)


def get_current_user_id_optional(
    token: Optional[str] = Depends(oauth2_scheme_optional),
) -> Optional[str]:
    """User id from a bearer token issued by ``/api/login``, if any.

    Joining does not require an account, so an unreadable token is treated
    as anonymous. Tokens from the hosted backend are not decodable here.
    """
    if token is None or settings.STORAGE_BACKEND == "hosted":
        return None
    try:
        payload = decode_access_token(token)
    except AuthenticationError:
        return None
    return payload.get("sub")
