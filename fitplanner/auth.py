"""
Authentication: password accounts with bcrypt and Google ID-token sign-in.

``AuthSession`` is the single source of truth for who is signed in. It is
created once per browser session, handed to the pages, and pushes an
``AuthState`` to every subscriber whenever the signed-in user changes.
"""

import logging
import re
from dataclasses import dataclass

import bcrypt
from google.auth import exceptions as google_auth_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from fitplanner.errors import AuthError
from fitplanner.models import User


logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


@dataclass
class AuthState:
    user: User = None
    loading: bool = False


class AuthSession:
    """Holds the current AuthState and notifies listeners on change."""

    def __init__(self):
        self.state = AuthState(user=None, loading=False)
        self._listeners = []
        self.closed = False

    @property
    def user(self):
        return self.state.user

    def subscribe(self, listener):
        """
        Register ``listener(state)`` and call it once with the current state.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        listener(self.state)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self):
        for listener in list(self._listeners):
            listener(self.state)

    def set_loading(self, loading):
        self.state = AuthState(user=self.state.user, loading=loading)
        self._emit()

    def publish(self, user):
        if self.closed:
            return
        self.state = AuthState(user=user, loading=False)
        self._emit()

    def close(self):
        self._listeners.clear()
        self.closed = True


class PasswordAuthProvider:
    """Signs users in and out against the workout store."""

    def __init__(self, store, session, google_client_id=None, bcrypt_rounds=12):
        self.store = store
        self.session = session
        self.google_client_id = google_client_id
        self.bcrypt_rounds = bcrypt_rounds

    @staticmethod
    def _normalize_email(email):
        normalized = (email or "").strip().lower()
        if not EMAIL_RE.match(normalized):
            raise AuthError("Please enter a valid email address.")
        return normalized

    def _hash_password(self, password):
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def sign_up_with_password(self, email, password):
        """
        Create a password account and sign it in.

        Raises:
            AuthError: Invalid email, short password or email already registered
        """
        email = self._normalize_email(email)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        if self.store.find_user_by_email(email) is not None:
            raise AuthError("An account with this email already exists.")

        user_id = self.store.create_user(email, self._hash_password(password), provider="password")
        user = User(id=user_id, email=email, provider="password")
        logger.info("Created account for user %s", user_id)
        self.session.publish(user)
        return user

    def sign_in_with_password(self, email, password):
        email = self._normalize_email(email)
        found = self.store.find_user_by_email(email)
        if found is None:
            raise AuthError("Invalid email or password.")

        user, password_hash = found
        if not password_hash:
            raise AuthError("This account uses Google sign-in.")
        if not bcrypt.checkpw((password or "").encode("utf-8"), password_hash.encode("utf-8")):
            raise AuthError("Invalid email or password.")

        self.session.publish(user)
        return user

    def _verified_google_email(self, token):
        try:
            claims = google_id_token.verify_oauth2_token(
                token, google_requests.Request(), self.google_client_id
            )
        except ValueError as e:
            logger.warning("Rejected Google ID token: %s", e)
            raise AuthError("Google sign-in failed. Please try again.") from e
        except google_auth_exceptions.GoogleAuthError as e:
            logger.warning("Could not verify Google ID token: %s", e)
            raise AuthError("Could not reach Google to verify your sign-in. Please try again.") from e

        if not claims.get("email") or claims.get("email_verified") is False:
            raise AuthError("Your Google account has no verified email address.")
        return claims["email"].strip().lower()

    def sign_in_with_federated_provider(self, token):
        """
        Sign in with a Google ID token, creating the account on first use.

        The session leaves its loading state however the attempt ends.

        Raises:
            AuthError: Google sign-in not configured, token rejected or Google unreachable
            PersistenceError: The account could not be read or created
        """
        if not self.google_client_id:
            raise AuthError("Google sign-in is not configured.")

        self.session.set_loading(True)
        try:
            email = self._verified_google_email(token)
            found = self.store.find_user_by_email(email)
            if found is None:
                user_id = self.store.create_user(email, None, provider="google")
                user = User(id=user_id, email=email, provider="google")
                logger.info("Created Google account for user %s", user_id)
            else:
                user = found[0]
        finally:
            if self.session.state.loading:
                self.session.set_loading(False)

        self.session.publish(user)
        return user

    def sign_out(self):
        self.session.publish(None)
