import secrets
from fastapi import Header, HTTPException, Request
from starlette.status import HTTP_401_UNAUTHORIZED

def require_api_token(request: Request, authorization: str | None = Header(default=None)):
    """
    Static bearer token check (Authorization: Bearer <API_TOKEN>).
    The token comes from the settings the app was created with.
    """
    expected = request.app.state.settings.API_TOKEN
    if not expected:
        # If unset, we allow requests (dev convenience).
        return
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.strip().encode(), expected.encode()):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid API token")
