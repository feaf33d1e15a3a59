# app/api/deps.py
from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.enums import Role
from app.domain.errors import NotFoundError, StorageError
from app.services.access_policy import Identity
from app.services.user_service import UserService


def get_identity(
    user_id: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
) -> Identity:
    """Caller identity; the role always comes from the users table, never from the request."""
    try:
        user = UserService(db).get_user(user_id)
    except NotFoundError:
        raise HTTPException(status_code=401, detail="Not authenticated")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch user")
    return Identity(user_id=user.id, role=Role(user.role))
