"""
Explicit wiring of configuration, store and auth for one browser session.
"""

from dataclasses import dataclass

from fitplanner.auth import AuthSession, PasswordAuthProvider
from fitplanner.config import get_db_path, get_google_client_id
from fitplanner.workout_store import WorkoutStore


@dataclass
class AppContext:
    config: dict
    store: WorkoutStore
    auth_session: AuthSession
    auth_provider: PasswordAuthProvider
    secrets: object = None

    @property
    def user(self):
        return self.auth_session.user


def build_context(config, secrets=None):
    """Open the store, create its schema and wire the auth collaborators."""
    store = WorkoutStore(get_db_path(config))
    store.init_schema()

    session = AuthSession()
    provider = PasswordAuthProvider(
        store,
        session,
        google_client_id=get_google_client_id(config, secrets),
        bcrypt_rounds=int(config["auth"]["bcrypt_rounds"]),
    )
    return AppContext(
        config=config,
        store=store,
        auth_session=session,
        auth_provider=provider,
        secrets=secrets,
    )
