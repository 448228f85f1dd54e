# storefront/services/identity.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.enums import Role
from storefront.domain.errors import EmailAlreadyRegistered, InvalidCredentials, NotAuthenticated
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger
from storefront.utils.settings import JWT_ALGORITHM, JWT_EXPIRES_MINUTES, JWT_SECRET

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class Principal:
    subject_id: int
    role: Role


class IdentityProvider:
    """
    Hasla (passlib) + podpisane tokeny bearer (JWT, python-jose).
    Reszta systemu widzi tylko Principal(subject_id, role).
    """

    def __init__(
        self,
        db: Session,
        secret: str = JWT_SECRET,
        algorithm: str = JWT_ALGORITHM,
        expires_minutes: int = JWT_EXPIRES_MINUTES,
    ):
        self.repo = UserRepo(db)
        self.secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def register(self, email: str, password: str, name: str, role: Role = Role.CUSTOMER) -> UserModel:
        email = email.strip().lower()
        if self.repo.get_by_email(email):
            raise EmailAlreadyRegistered()

        user = UserModel(
            email=email,
            password_hash=pwd_context.hash(password),
            name=name,
            role=role.value,
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            self.repo.db.rollback()
            raise EmailAlreadyRegistered()

        logger.info(f"Registered user {created.id} with role {created.role}")
        return created

    def authenticate(self, email: str, password: str) -> Principal:
        user = self.repo.get_by_email(email.strip().lower())
        if not user or not pwd_context.verify(password, user.password_hash):
            raise InvalidCredentials()
        return Principal(subject_id=user.id, role=Role(user.role))

    def get_user(self, principal: Principal) -> UserModel:
        user = self.repo.get_user(principal.subject_id)
        if not user:
            raise NotAuthenticated("User no longer exists")
        return user

    def issue_token(self, principal: Principal) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expires_minutes)
        claims = {
            "sub": str(principal.subject_id),
            "role": principal.role.value,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
            return Principal(subject_id=int(payload["sub"]), role=Role(payload["role"]))
        except (JWTError, KeyError, ValueError):
            raise NotAuthenticated("Invalid or expired token")
