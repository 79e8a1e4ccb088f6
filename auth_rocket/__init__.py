"""Auth Rocket client

Client-side helper for the Auth Rocket service: register, login, token
verification, logout and account deletion, with an observable current
user and bearer-token injection for authenticated requests.
"""

from .errors import (
    AuthError,
    RegistrationFailed,
    LoginFailed,
    VerificationFailed,
    DeletionFailed,
    NotAuthenticated,
)
from .models import AuthConfig, UserCredentials, User
from .observable import BehaviorSubject, Observable, Subscription
from .session import AuthSession
from .storage import KeyValueStore, FileKeyValueStore, MemoryKeyValueStore, TokenStorage

__all__ = [
    "AuthError",
    "RegistrationFailed",
    "LoginFailed",
    "VerificationFailed",
    "DeletionFailed",
    "NotAuthenticated",
    "AuthConfig",
    "UserCredentials",
    "User",
    "BehaviorSubject",
    "Observable",
    "Subscription",
    "AuthSession",
    "KeyValueStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "TokenStorage",
]
