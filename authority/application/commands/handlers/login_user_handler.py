"""Login User handler.

Flow:
1. Look up user by email or username
2. Reject locked accounts (before the password is even checked)
3. Verify password; on mismatch count the failure (may lock the account)
4. Reset the failure counter and stamp last login
5. Open a device session
6. Mint access token and issue the refresh token bound to the session
7. Return Success(AuthTokens)

Unknown identifier and wrong password produce the same InvalidCredentialsError,
and an unknown identifier still pays for one password verification so both
paths take comparable time.
"""

from datetime import timedelta

from authority.application.commands.auth_commands import LoginUser
from authority.application.dtos import AuthTokens, UserProfile
from authority.application.services import (
    AccessTokenIssuer,
    CredentialStore,
    RefreshTokenLedger,
    SessionRegistry,
)
from authority.core.result import Failure, Result, Success
from authority.domain.errors import InvalidCredentialsError, LockedOutError
from authority.domain.protocols import (
    ClockProtocol,
    IdGeneratorProtocol,
    LoggerProtocol,
    PasswordHashingProtocol,
)

_TIMING_DUMMY_PASSWORD = "timing-equalizer-Passw0rd!"


class LoginUserHandler:
    """Handler for login command.

    Composes the credential store, session registry and refresh token ledger.
    Holds no state of its own apart from the lazily computed dummy hash.
    """

    def __init__(
        self,
        *,
        credential_store: CredentialStore,
        session_registry: SessionRegistry,
        refresh_token_ledger: RefreshTokenLedger,
        access_token_issuer: AccessTokenIssuer,
        password_service: PasswordHashingProtocol,
        clock: ClockProtocol,
        id_generator: IdGeneratorProtocol,
        logger: LoggerProtocol,
        lockout_threshold: int,
        lockout_window: timedelta,
    ) -> None:
        self._credential_store = credential_store
        self._session_registry = session_registry
        self._refresh_token_ledger = refresh_token_ledger
        self._access_token_issuer = access_token_issuer
        self._password_service = password_service
        self._clock = clock
        self._ids = id_generator
        self._logger = logger
        self._lockout_threshold = lockout_threshold
        self._lockout_window = lockout_window
        self._dummy_hash: str | None = None

    async def handle(
        self, cmd: LoginUser
    ) -> Result[AuthTokens, InvalidCredentialsError | LockedOutError]:
        """Handle login command.

        Returns:
            Success(AuthTokens), Failure(InvalidCredentialsError) or
            Failure(LockedOutError).
        """
        log = self._logger.bind(client_ip=cmd.client_ip)

        # Step 1: Look up user
        user = await self._credential_store.find_by_identifier(cmd.identifier)
        if user is None:
            self._burn_verification(cmd.password)
            log.info("login_failed", reason="invalid_credentials")
            return Failure(error=InvalidCredentialsError())

        # Step 2: Lockout window
        now = self._clock.now()
        if user.is_locked(now) and user.locked_until is not None:
            log.warning("login_blocked_locked_out", user_id=str(user.id))
            return Failure(error=LockedOutError(locked_until=user.locked_until))

        # Step 3: Verify password
        if not self._password_service.verify_password(cmd.password, user.password_hash):
            locked = await self._credential_store.record_login_failure(
                user.id, threshold=self._lockout_threshold, window=self._lockout_window
            )
            if locked:
                log.warning("account_locked", user_id=str(user.id))
            log.info("login_failed", reason="invalid_credentials", user_id=str(user.id))
            return Failure(error=InvalidCredentialsError())

        # Step 4: Record success (user keeps the previous login time for the profile)
        await self._credential_store.record_login_success(user.id)

        # Step 5: Open session
        session = await self._session_registry.open(
            user.id,
            client_ip=cmd.client_ip,
            user_agent=cmd.user_agent,
            device_info=cmd.device_info,
            remember_me=cmd.remember_me,
        )

        # Step 6: Mint tokens
        jwt_id = str(self._ids.new_id())
        access_token = self._access_token_issuer.mint(
            user, jwt_id=jwt_id, session_id=session.session_id
        )
        refresh_token = await self._refresh_token_ledger.issue(
            user_id=user.id,
            jwt_id=jwt_id,
            client_ip=cmd.client_ip,
            session_id=session.session_id,
            remember_me=cmd.remember_me,
        )

        log.info("login_succeeded", user_id=str(user.id))

        # Step 7: Return tokens
        return Success(
            value=AuthTokens(
                access_token=access_token,
                refresh_token=refresh_token.token,
                expires_in=self._access_token_issuer.expires_in,
                session_id=session.session_id,
                user=UserProfile.from_user(user),
            )
        )

    def _burn_verification(self, password: str) -> None:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_service.hash_password(
                _TIMING_DUMMY_PASSWORD
            )
        self._password_service.verify_password(password, self._dummy_hash)
