import logging
import uuid
from typing import Any, Optional

from shopfront.core.exceptions import (
    BaseAPIException, ConflictError, InternalServerError, UnauthorizedError, ValidationError
)
from shopfront.core.security import PasswordHasher, TokenService
from shopfront.models.user import AuthToken, User
from shopfront.repositories.token_repository import TokenRepository
from shopfront.repositories.user_repository import UserRepository
from shopfront.schemas.auth_schemas import SignInSchema, SignUpSchema, load_payload
from shopfront.utils.date_utils import DateUtils
from shopfront.utils.validators import ValidationUtils

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """
    Signup and signin flows.

    Business Rules:
    - Usernames are unique
    - Passwords are stored only as bcrypt hashes and never returned
    - Signin failures are indistinguishable to the caller
    """

    def __init__(
        self,
        user_repository: UserRepository,
        token_repository: TokenRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
    ):
        self.user_repo = user_repository
        self.token_repo = token_repository
        self.password_hasher = password_hasher
        self.token_service = token_service
        self._signup_schema = SignUpSchema()
        self._signin_schema = SignInSchema()

    def sign_up(self, payload: Any) -> User:
        """
        Validate and persist a new user.

        Raises:
            ValidationError: malformed body, taken username, or a policy violation
            InternalServerError/StoreError: the record could not be persisted
        """
        data = load_payload(self._signup_schema, payload)
        user_id = str(uuid.uuid4())
        username = data["username"]

        if self.user_repo.find_by_username(username) is not None:
            logger.warning(f"Signup rejected: username '{username}' is taken")
            raise ValidationError(f"Username '{username}' is not available")

        ValidationUtils.validate_phone_number(data["phone_number"])
        ValidationUtils.validate_password(data["password"])
        birth_date = ValidationUtils.validate_date_of_birth(data["dob"])

        user = User(
            id=user_id,
            username=username,
            phone_number=data["phone_number"],
            dob=birth_date.isoformat(),
            password_hash=self.password_hasher.hash(data["password"]),
            created_on=DateUtils.isoformat(DateUtils.now_utc()),
        )

        try:
            self.user_repo.create_if_absent(user)
        except ConflictError:
            # Only reachable on an id collision; not the caller's fault
            raise InternalServerError(f"Failed to create user {user_id}: id already exists")

        created = self.user_repo.get_by_id(user_id)
        if created is None:
            raise InternalServerError(f"User {user_id} missing after create")

        logger.info(f"Created user {user_id} ({username})")
        return created

    def sign_in(self, payload: Any) -> AuthToken:
        """
        Authenticate credentials and issue a bearer token.

        Every failure, including store errors, surfaces as the same
        UnauthorizedError so callers cannot probe for existing usernames.
        """
        try:
            return self._sign_in(payload)
        except UnauthorizedError:
            raise
        except BaseAPIException as e:
            logger.warning(f"Signin failed: {e.internal_message}")
            raise UnauthorizedError(INVALID_CREDENTIALS)
        except Exception as e:
            logger.error(f"Signin failed unexpectedly: {e.__class__.__name__}: {str(e)}")
            raise UnauthorizedError(INVALID_CREDENTIALS)

    def _sign_in(self, payload: Any) -> AuthToken:
        data = load_payload(self._signin_schema, payload)
        username: Optional[str] = data.get("username")
        phone_number: Optional[str] = data.get("phone_number")
        password: Optional[str] = data.get("password")

        if (not username and not phone_number) or not password:
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if username:
            user = self.user_repo.find_by_username(username)
        else:
            user = self.user_repo.find_by_phone_number(phone_number)

        if user is None or not self.password_hasher.verify(password, user.password_hash):
            logger.info("Signin rejected: invalid credentials")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        now = DateUtils.now_utc()
        auth_token = AuthToken(
            id=str(uuid.uuid4()),
            token=self.token_service.issue(user.id, user.username, now=now),
            user_id=user.id,
            created_on=DateUtils.isoformat(now),
            username=user.username,
        )
        self.token_repo.create_if_absent(auth_token)

        logger.info(f"User {user.id} signed in")
        return auth_token
