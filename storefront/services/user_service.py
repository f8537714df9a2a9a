from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from storefront.data.models.user import UserModel
from storefront.domain.errors import ConflictError, NotFoundError, UnauthorizedError
from storefront.domain.schemas import UserCredentials, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.utils.security import hash_password, verify_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def signup(self, payload: UserCredentials) -> UserRead:
        email = _normalize_email(payload.email)
        if self.repo.get_by_email(email):
            raise ConflictError("Email already exists")

        user = UserModel(email=email, password_hash=hash_password(payload.password))
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Email already exists")

        logger.info(f"Registered user {created.id}")
        return UserRead(id=created.id, email=created.email, created_at=created.created_at)

    def login(self, payload: UserCredentials) -> UserRead:
        user = self.repo.get_by_email(_normalize_email(payload.email))
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(payload.password, user.password_hash):
            logger.warning(f"Invalid password for user {user.id}")
            raise UnauthorizedError("Invalid password")

        return UserRead(id=user.id, email=user.email, created_at=user.created_at)
