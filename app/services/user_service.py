from sqlalchemy.orm import Session

from app.data.database import storage_guard, utcnow
from app.data.models.user import UserModel
from app.domain.enums import Role
from app.domain.errors import NotFoundError, ValidationError
from app.domain.schemas import UserUpsert
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)

    def get_user(self, user_id: str) -> UserModel:
        with storage_guard(self.db, "get_user", user_id=user_id):
            user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def upsert_user(self, payload: UserUpsert) -> UserModel:
        #roles come from seed or the database, never from the login payload
        data = payload.model_dump()

        with storage_guard(self.db, "upsert_user", user_id=payload.id):
            if payload.email:
                owner = self.repo.get_user_by_email(payload.email)
                if owner and owner.id != payload.id:
                    raise ValidationError(f"Email {payload.email} is already in use")

            user = self.repo.get_user(payload.id)
            if user:
                for field, value in data.items():
                    setattr(user, field, value)
                user.updated_at = utcnow()
                logger.info(f"Updated user {user.id}")
            else:
                user = self.repo.create_user(UserModel(**data, role=Role.CUSTOMER.value))
                logger.info(f"Created user {user.id}")

            self.repo.commit()
        return user
