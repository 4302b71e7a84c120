"""Local user accounts and the signed-in session.

Passwords are stored as salted PBKDF2-SHA256 hashes. The signed-in user is
kept in a small TOML session file so it survives between CLI invocations.
Commands load the session once and pass it on explicitly.
"""

import hashlib
import hmac
import os
import secrets
import tomllib
from datetime import datetime, timezone
from pathlib import Path

import tomli_w

from rupeetrack.domain.models import Session, User
from rupeetrack.errors import AuthenticationError, PersistenceError
from rupeetrack.logging_setup import get_logger
from rupeetrack.store.queries import create_user, get_user, get_user_credentials

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6
HASH_ALGORITHM = "pbkdf2_sha256"
HASH_ITERATIONS = 200_000


def get_xdg_state_home() -> Path:
    """Get XDG state directory, with fallback to ~/.local/state."""
    xdg_state = os.environ.get("XDG_STATE_HOME")
    if xdg_state:
        return Path(xdg_state)
    return Path.home() / ".local" / "state"


def get_session_path() -> Path:
    """Get the session file path (XDG compliant)."""
    return get_xdg_state_home() / "rupeetrack" / "session.toml"


def hash_password(password: str, salt: str | None = None, iterations: int = HASH_ITERATIONS) -> str:
    """Hash a password as "pbkdf2_sha256$iterations$salt$hexdigest"."""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"{HASH_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Check a password against a stored hash."""
    try:
        algorithm, iterations, salt, _ = stored_hash.split("$")
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    candidate = hash_password(password, salt, int(iterations))
    return hmac.compare_digest(candidate, stored_hash)


def _clean_credentials(email: str, password: str) -> tuple[str, str]:
    email = email.strip().lower()
    password = password.strip()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise AuthenticationError(f"Invalid email address: {email or '(empty)'}")
    if not password:
        raise AuthenticationError("Password is required")
    return email, password


def sign_up(email: str, password: str, db_path: Path | None = None) -> User:
    """Register a new user.

    Email and password are trimmed first; the email is lower-cased.

    Raises:
        AuthenticationError: If the email is invalid, the password is too
            short, or the email is already registered.
    """
    email, password = _clean_credentials(email, password)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthenticationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        return create_user(email, hash_password(password), db_path)
    except PersistenceError as e:
        raise AuthenticationError(str(e)) from e


def sign_in(
    email: str,
    password: str,
    db_path: Path | None = None,
    session_path: Path | None = None,
) -> Session:
    """Check credentials and store the session.

    Raises:
        AuthenticationError: If the credentials do not match a user.
    """
    email, password = _clean_credentials(email, password)

    found = get_user_credentials(email, db_path)
    if found is None or not verify_password(password, found[1]):
        logger.warning("Failed sign-in for %s", email)
        raise AuthenticationError("Invalid email or password")

    session = Session(user=found[0], started_at=datetime.now(timezone.utc))
    save_session(session, session_path)
    logger.info("Signed in as %s", email)
    return session


def sign_out(session_path: Path | None = None) -> None:
    """Remove the stored session. Does nothing if no one is signed in."""
    if session_path is None:
        session_path = get_session_path()
    session_path.unlink(missing_ok=True)


def save_session(session: Session, session_path: Path | None = None) -> None:
    """Write the session file with owner-only permissions."""
    if session_path is None:
        session_path = get_session_path()

    session_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "user_id": session.user.id,
        "email": session.user.email,
        "started_at": session.started_at.isoformat(),
    }
    with open(session_path, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(session_path, 0o600)


def load_session(db_path: Path | None = None, session_path: Path | None = None) -> Session | None:
    """Load the stored session.

    Returns:
        The session, or None if there is no session file, it cannot be
        read, or its user no longer exists.
    """
    if session_path is None:
        session_path = get_session_path()

    if not session_path.exists():
        return None

    try:
        with open(session_path, "rb") as f:
            data = tomllib.load(f)
        user_id = data["user_id"]
        started_at = datetime.fromisoformat(data["started_at"])
    except (tomllib.TOMLDecodeError, KeyError, ValueError) as e:
        logger.warning("Ignoring unreadable session file %s: %s", session_path, e)
        return None

    user = get_user(user_id, db_path)
    if user is None:
        return None
    return Session(user=user, started_at=started_at)


def current_user(db_path: Path | None = None, session_path: Path | None = None) -> User | None:
    """The signed-in user, or None."""
    session = load_session(db_path, session_path)
    return session.user if session else None


def require_session(db_path: Path | None = None, session_path: Path | None = None) -> Session:
    """The current session.

    Raises:
        AuthenticationError: If no one is signed in.
    """
    session = load_session(db_path, session_path)
    if session is None:
        raise AuthenticationError("Not signed in. Run 'rupeetrack login' first.")
    return session
