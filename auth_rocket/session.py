"""Auth session: remote auth calls, durable token and observable current user"""

import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from settings import AUTH_API_BASE_URL, CONNECT_TIMEOUT, REQUEST_TIMEOUT, TOKEN_STORE_FILE
from .constants import (
    AUTHORIZATION_HEADER,
    CLIENT_ID_HEADER,
    CLIENT_SECRET_HEADER,
    DELETE_USER_PATH,
    JSON_HEADERS,
    LOGIN_PATH,
    REGISTER_PATH,
    VERIFY_TOKEN_PATH,
)
from .errors import DeletionFailed, LoginFailed, NotAuthenticated, RegistrationFailed, VerificationFailed
from .models import AuthConfig, User, UserCredentials
from .observable import BehaviorSubject, Observable
from .storage import FileKeyValueStore, TokenStorage


logger = logging.getLogger(__name__)

# Failures of a single auth call: transport/status errors and malformed bodies
_CALL_ERRORS = (httpx.HTTPError, KeyError, TypeError, ValueError)


class AuthSession:
    """Client for the Auth Rocket service

    Keeps the bearer token in durable storage and mirrors the signed-in
    user into an observable slot. The two are always cleared together.
    """

    def __init__(
        self,
        config: AuthConfig,
        storage: Optional[TokenStorage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[httpx.Timeout] = None,
    ):
        """Initialize the session

        Args:
            config: Client identity and optional base URL override
            storage: Token storage (file store at TOKEN_STORE_FILE if None)
            transport: Optional httpx transport, e.g. a MockTransport in tests
            timeout: Optional timeout override (REQUEST_TIMEOUT/CONNECT_TIMEOUT by default)
        """
        self.config = config
        self.storage = storage or TokenStorage(FileKeyValueStore(Path(TOKEN_STORE_FILE)))
        self._user: BehaviorSubject[Optional[User]] = BehaviorSubject(None)

        headers = {
            **JSON_HEADERS,
            CLIENT_ID_HEADER: config.client_id,
            CLIENT_SECRET_HEADER: config.client_secret,
        }
        self._client = httpx.AsyncClient(
            base_url=config.base_url or AUTH_API_BASE_URL,
            headers=headers,
            timeout=timeout or httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
            transport=transport,
        )

    async def __aenter__(self) -> "AuthSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client"""
        await self._client.aclose()

    @property
    def current_user(self) -> Optional[User]:
        return self._user.value

    @property
    def is_authenticated(self) -> bool:
        return self._user.value is not None

    async def register(self, credentials: UserCredentials) -> str:
        """Create an account and sign in with the issued token

        Both the client id and the client secret are sent in the body.

        Args:
            credentials: Username and password for the new account

        Returns:
            The issued bearer token

        Raises:
            RegistrationFailed: on any transport, server or verification failure
        """
        payload = {
            **credentials.to_payload(),
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
        }

        try:
            response = await self._client.post(REGISTER_PATH, json=payload)
            response.raise_for_status()
            token = _token_from(response)
            await self._adopt_token(token)
        except (*_CALL_ERRORS, VerificationFailed) as e:
            logger.error(f"Registration failed for {credentials.username}: {e}")
            raise RegistrationFailed(e) from e

        logger.info(f"Registered and signed in as {credentials.username}")
        return token

    async def login(self, credentials: UserCredentials) -> str:
        """Sign in with username and password

        Only the client id is sent in the body (as ``app_id``).

        Args:
            credentials: Username and password

        Returns:
            The issued bearer token

        Raises:
            LoginFailed: on any transport, server or verification failure
        """
        payload = {
            **credentials.to_payload(),
            "app_id": self.config.client_id,
        }

        try:
            response = await self._client.post(LOGIN_PATH, json=payload)
            response.raise_for_status()
            token = _token_from(response)
            await self._adopt_token(token)
        except (*_CALL_ERRORS, VerificationFailed) as e:
            logger.error(f"Login failed for {credentials.username}: {e}")
            raise LoginFailed(e) from e

        logger.info(f"Signed in as {credentials.username}")
        return token

    async def verify_token(self, token: str) -> User:
        """Ask the server who the token belongs to

        Sets the current user on success and clears it on failure. The
        stored token is not touched here.

        Raises:
            VerificationFailed: if the server rejects the token or the call fails
        """
        try:
            response = await self._client.post(VERIFY_TOKEN_PATH, json={"token": token})
            response.raise_for_status()
            user = User.from_dict(response.json())
        except _CALL_ERRORS as e:
            self._user.next(None)
            raise VerificationFailed(e) from e

        logger.debug(f"Token verified for {user.username} ({user.app})")
        self._user.next(user)
        return user

    async def delete_user(self, user_id: int) -> None:
        """Delete an account and end the session

        Raises:
            DeletionFailed: if the call fails; session state is left unchanged
        """
        try:
            response = await self._client.delete(DELETE_USER_PATH.format(user_id=user_id))
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Deleting user {user_id} failed: {e}")
            raise DeletionFailed(e) from e

        logger.info(f"Deleted user {user_id}")
        self._clear_session()

    def logout(self) -> None:
        """Forget the current user and the stored token"""
        self._clear_session()
        logger.info("Signed out")

    def get_user(self) -> Observable[Optional[User]]:
        """Read-only view of the current user; replays the latest value on subscribe"""
        return self._user.as_observable()

    async def restore_session(self) -> Optional[User]:
        """Verify a token left in storage by an earlier session

        A token the server rejects (4xx) is removed from storage. On transport
        or server errors the token is kept for a later attempt and only the
        current user is cleared.

        Returns:
            The signed-in user, or None if there is no usable stored token
        """
        token = self.storage.get_token()
        if not token:
            logger.debug("No stored auth token to restore")
            return None

        try:
            return await self.verify_token(token)
        except VerificationFailed as e:
            if _is_client_error(e.cause):
                logger.info(f"Stored auth token rejected, discarding it: {e}")
                self._clear_session()
            else:
                logger.warning(f"Could not verify stored auth token, keeping it: {e}")
            return None

    async def authenticated_request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[dict] = None,
        **kwargs: Any,
    ) -> Any:
        """Make a request carrying the stored bearer token

        Args:
            method: HTTP method
            url: URL, relative to the base URL or absolute
            headers: Extra headers; Authorization is always overridden
            **kwargs: Passed through to ``httpx.AsyncClient.request``

        Returns:
            Decoded JSON body, the raw text for non-JSON bodies, or None if empty

        Raises:
            NotAuthenticated: no user is signed in (no request is made)
            httpx.HTTPStatusError: non-2xx response; a 401 also ends the session
            httpx.HTTPError: transport failure
        """
        if self._user.value is None:
            raise NotAuthenticated()

        token = self.storage.get_token()
        if not token:
            logger.warning("Signed in but no auth token is stored, ending session")
            self._clear_session()
            raise NotAuthenticated()

        request_headers = httpx.Headers(headers or {})
        request_headers[AUTHORIZATION_HEADER] = f"Bearer {token}"

        try:
            response = await self._client.request(method, url, headers=request_headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                logger.info("Auth token rejected by server, ending session")
                self._clear_session()
            raise

        return _decode_body(response)

    async def _adopt_token(self, token: str) -> None:
        # Persist, then verify; undo the persist on any failure, cancellation included
        self.storage.save_token(token)
        try:
            await self.verify_token(token)
        except BaseException:
            self._clear_session()
            raise

    def _clear_session(self) -> None:
        self._user.next(None)
        self.storage.clear_token()


def _token_from(response: httpx.Response) -> str:
    token = response.json()["token"]
    if not isinstance(token, str) or not token:
        raise ValueError(f"Expected a non-empty token string, got {type(token).__name__}")
    return token


def _is_client_error(error: Optional[BaseException]) -> bool:
    return (
        isinstance(error, httpx.HTTPStatusError)
        and 400 <= error.response.status_code < 500
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
