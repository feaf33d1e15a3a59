from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_identity
from app.data.database import get_db
from app.domain.errors import NotFoundError, StorageError, ValidationError
from app.domain.schemas import UserUpsert, UserRead
from app.services.access_policy import Identity
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead)
def upsert_user(payload: UserUpsert, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.upsert_user(payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save user")


@router.get("/me", response_model=UserRead)
def get_current_user(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.get_user(identity.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to fetch user")
