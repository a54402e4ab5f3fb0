"""Business logic for accounts: registration, login, roles and removal."""
import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import User, utcnow
from ..credentials import CredentialStore, MAX_PASSWORD_BYTES
from ..errors import Conflict, InvalidInput, NotFound, Unauthenticated, store_errors
from ..repositories import UserRepository
from ..roles import DEFAULT_ROLE, Role
from ..validation import clean_text, require_fields, to_id, to_text

logger = logging.getLogger('gamepulse.services.users')


class UserService:
    """Manages the user directory, delegating password handling to a
    :class:`~app.credentials.CredentialStore`.

    Every method that returns an account returns its public view (a dict
    without the ``password`` column).  All methods accept a *db*
    SQLAlchemy session as the first argument so that callers (Flask route
    handlers) control the session lifecycle.
    """

    def __init__(self, credentials: CredentialStore) -> None:
        self._credentials = credentials

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(self, db: Session, email: str, password: str, name: str,
                 role: Optional[str] = None) -> Dict:
        """Create an account.

        Args:
            db:       SQLAlchemy session.
            email:    Login email, unique and compared case-sensitively.
            password: Plain-text password; only its bcrypt hash is stored.
            name:     Display name.
            role:     Optional role value; defaults to ``gamer``.

        Returns:
            The public view of the new account.

        Raises:
            InvalidInput: a field is missing, the role is unknown or the
                password is too long.
            Conflict:     the email is already registered.
        """
        require_fields({'email': email, 'password': password, 'name': name},
                       'email', 'password', 'name')
        email = to_text(email, 'email').strip()
        password = to_text(password, 'password')
        name = to_text(name, 'name')
        parsed_role = Role.parse(role, default=DEFAULT_ROLE)
        if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        users = UserRepository(db)
        with store_errors(db, 'registering user', logger):
            if users.get_by_email(email) is not None:
                raise Conflict('User already exists')
            user = User(
                email=email,
                password=self._credentials.hash(password),
                name=clean_text(name),
                role=parsed_role.value,
                join_date=utcnow(),
            )
            try:
                users.add(user)
                db.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration of the same email
                db.rollback()
                raise Conflict('User already exists')
        logger.info("Registered user %s (role=%s)", user.id, user.role)
        return user.to_public_dict()

    def login(self, db: Session, email: str, password: str) -> Dict:
        """Check *email*/*password* and return the public view.

        Raises:
            InvalidInput:    email or password missing.
            Unauthenticated: unknown email or wrong password (same message).
        """
        require_fields({'email': email, 'password': password}, 'email', 'password')
        email = to_text(email, 'email').strip()
        password = to_text(password, 'password')
        with store_errors(db, 'looking up user for login', logger):
            user = UserRepository(db).get_by_email(email)
        # Unknown emails still pay for one bcrypt check
        credential = user.password if user is not None else self._credentials.dummy_credential
        if not self._credentials.verify(password, credential) or user is None:
            logger.info("Failed login attempt")
            raise Unauthenticated('Invalid credentials')
        return user.to_public_dict()

    def list_public(self, db: Session) -> List[Dict]:
        """Return every account's public view, newest first."""
        with store_errors(db, 'listing users', logger):
            return [u.to_public_dict() for u in UserRepository(db).list_newest_first()]

    def get(self, db: Session, user_id) -> Dict:
        user_id = to_id(user_id, 'user_id')
        with store_errors(db, 'loading user', logger):
            user = UserRepository(db).get(user_id)
            if user is None:
                raise NotFound('User not found')
            return user.to_public_dict()

    def change_role(self, db: Session, user_id, role) -> Dict:
        """Assign *role* to the account.

        Raises:
            InvalidInput: role missing or unknown.
            NotFound:     no such user.
        """
        user_id = to_id(user_id, 'user_id')
        require_fields({'role': role}, 'role')
        parsed_role = Role.parse(role)
        with store_errors(db, 'changing user role', logger):
            user = UserRepository(db).get(user_id)
            if user is None:
                raise NotFound('User not found')
            user.role = parsed_role.value
            db.commit()
            logger.info("User %s role changed to %s", user_id, parsed_role.value)
            return user.to_public_dict()

    def delete_user(self, db: Session, user_id) -> Dict:
        """Remove an account together with its games, sessions and posts."""
        user_id = to_id(user_id, 'user_id')
        users = UserRepository(db)
        with store_errors(db, 'deleting user', logger):
            user = users.get(user_id)
            if user is None:
                raise NotFound('User not found')
            removed = user.to_public_dict()
            users.delete(user)
            db.commit()
        logger.info("Deleted user %s", user_id)
        return removed

    def ensure_account(self, db: Session, email: str, password: str, name: str,
                       role: str = DEFAULT_ROLE.value) -> bool:
        """Create the account unless *email* is already registered.

        Returns:
            ``True`` when a new account was created.
        """
        try:
            self.register(db, email, password, name, role)
        except Conflict:
            return False
        return True
