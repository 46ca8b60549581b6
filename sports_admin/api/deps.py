from typing import TypeVar

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sports_admin.core.errors import NotFound, SportsAdminError, Unauthorized, ValidationFailed
from sports_admin.core.security import decode_access_token
from sports_admin.db.session import get_db
from sports_admin.models.admin import Admin

bearer_scheme = HTTPBearer(auto_error=False)

OwnedModel = TypeVar("OwnedModel")


def get_current_admin(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Admin:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing authorization token")

    token = credentials.credentials
    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    admin_id = payload.get("sub")
    if not admin_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")

    admin = db.get(Admin, admin_id)
    if not admin:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Admin not found")
    return admin


def get_owned_or_404(db: Session, model: type[OwnedModel], entity_id: str, admin: Admin, detail: str) -> OwnedModel:
    """Load a row of ``model`` belonging to ``admin``; rows of other admins look missing."""
    entity = db.get(model, entity_id)
    if entity is None or entity.admin_id != admin.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return entity


def http_error(exc: SportsAdminError) -> HTTPException:
    """Translate a domain error into the structured HTTP error returned by the API."""
    detail: dict = {"error": exc.code, "message": exc.message}
    if isinstance(exc, ValidationFailed):
        status_code = status.HTTP_400_BAD_REQUEST
        detail["fields"] = exc.fields
    elif isinstance(exc, NotFound):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, Unauthorized):
        status_code = status.HTTP_401_UNAUTHORIZED
    else:
        status_code = status.HTTP_409_CONFLICT
    return HTTPException(status_code=status_code, detail=detail)
