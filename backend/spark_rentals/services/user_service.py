"""User service - account lookup, creation and credential checks"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional
from spark_rentals.models.user import User
from spark_rentals.schemas.user import SignupRequest, UserCreate
from spark_rentals.core.roles import Role
from spark_rentals.core.security import get_password_hash, verify_password
from spark_rentals.core.exceptions import InvalidCredentialsError, ResourceAlreadyExistsError
import logging

logger = logging.getLogger(__name__)

# Compared against when the email is unknown so both failure paths cost a bcrypt check.
_DUMMY_HASH = get_password_hash("spark-rentals-timing-equalizer")


class UserService:
    """Service for user accounts"""

    @staticmethod
    def create_user(db: Session, user_data: SignupRequest) -> User:
        """
        Create new user

        Args:
            db: Database session
            user_data: Signup or internal creation data

        Returns:
            Created user

        Raises:
            ResourceAlreadyExistsError: If the email is taken
        """
        if UserService.get_user_by_email(db, user_data.email):
            raise ResourceAlreadyExistsError("User")

        role = user_data.role if isinstance(user_data, UserCreate) else Role.CUSTOMER
        user = User(
            name=user_data.name,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=role.value,
            phone=getattr(user_data, "phone", None),
        )

        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ResourceAlreadyExistsError("User")
        db.refresh(user)

        logger.info(f"Created user id={user.id} (role: {user.role})")
        return user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> User:
        """
        Check credentials against the stored bcrypt hash

        Args:
            db: Database session
            email: Login email (normalized)
            password: Plain password

        Returns:
            Authenticated user

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        user = UserService.get_user_by_email(db, email)

        if not user or not user.password_hash:
            verify_password(password, _DUMMY_HASH)
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info(f"Failed login for user id={user.id}")
            raise InvalidCredentialsError()

        logger.info(f"User authenticated: id={user.id}")
        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email.strip().lower()).first()


# Singleton instance
user_service = UserService()
