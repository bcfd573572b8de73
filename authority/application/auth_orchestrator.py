"""Auth orchestrator.

The single entry point callers use. Each operation delegates to its handler;
the orchestrator itself holds no persistent state, only the handlers and the
components needed for the maintenance sweep.

Usage:
    auth = create_in_memory_orchestrator(settings)

    registered = await auth.register(RegisterUser(...))
    tokens = await auth.login(LoginUser(identifier="a@x.com", password="..."))
    match await auth.refresh(RefreshTokens(refresh_token=tokens.value.refresh_token)):
        case Success(value=new_tokens):
            ...
        case Failure(error=SecurityViolationError()):
            ...  # force re-login
"""

from dataclasses import dataclass

from authority.application.commands import (
    ChangePassword,
    ConfirmEmail,
    ForgotPassword,
    LoginUser,
    LogoutAllSessions,
    LogoutUser,
    RefreshTokens,
    RegisterUser,
    ResendEmailConfirmation,
    ResetPassword,
    RevokeSession,
)
from authority.application.commands.handlers.change_password_handler import (
    ChangePasswordHandler,
)
from authority.application.commands.handlers.confirm_email_handler import (
    ConfirmEmailHandler,
)
from authority.application.commands.handlers.forgot_password_handler import (
    ForgotPasswordHandler,
)
from authority.application.commands.handlers.login_user_handler import LoginUserHandler
from authority.application.commands.handlers.logout_all_sessions_handler import (
    LogoutAllSessionsHandler,
)
from authority.application.commands.handlers.logout_user_handler import (
    LogoutUserHandler,
)
from authority.application.commands.handlers.refresh_tokens_handler import (
    RefreshTokensHandler,
)
from authority.application.commands.handlers.register_user_handler import (
    RegisterUserHandler,
)
from authority.application.commands.handlers.resend_email_confirmation_handler import (
    ResendEmailConfirmationHandler,
)
from authority.application.commands.handlers.reset_password_handler import (
    ResetPasswordHandler,
)
from authority.application.commands.handlers.revoke_session_handler import (
    RevokeSessionHandler,
)
from authority.application.dtos import (
    AuthTokens,
    RegisteredUser,
    SessionView,
    SweepReport,
    TokenValidation,
)
from authority.application.queries import ListSessions, ValidateAccessToken
from authority.application.queries.handlers.list_sessions_handler import (
    ListSessionsHandler,
)
from authority.application.queries.handlers.validate_access_token_handler import (
    ValidateAccessTokenHandler,
)
from authority.application.services import (
    EmailDispatcher,
    PasswordResetLedger,
    RefreshTokenLedger,
    SessionRegistry,
)
from authority.core.errors import DomainError
from authority.core.result import Result, Success
from authority.domain.protocols import LoggerProtocol


@dataclass(frozen=True, kw_only=True)
class AuthHandlers:
    """The handler set the orchestrator delegates to."""

    register: RegisterUserHandler
    login: LoginUserHandler
    refresh: RefreshTokensHandler
    logout: LogoutUserHandler
    logout_all: LogoutAllSessionsHandler
    change_password: ChangePasswordHandler
    forgot_password: ForgotPasswordHandler
    reset_password: ResetPasswordHandler
    confirm_email: ConfirmEmailHandler
    resend_email_confirmation: ResendEmailConfirmationHandler
    list_sessions: ListSessionsHandler
    revoke_session: RevokeSessionHandler
    validate_access_token: ValidateAccessTokenHandler


class AuthOrchestrator:
    """Facade over the authentication use cases."""

    def __init__(
        self,
        *,
        handlers: AuthHandlers,
        refresh_token_ledger: RefreshTokenLedger,
        password_reset_ledger: PasswordResetLedger,
        session_registry: SessionRegistry,
        email_dispatcher: EmailDispatcher,
        logger: LoggerProtocol,
    ) -> None:
        self._handlers = handlers
        self._refresh_token_ledger = refresh_token_ledger
        self._password_reset_ledger = password_reset_ledger
        self._session_registry = session_registry
        self._email_dispatcher = email_dispatcher
        self._logger = logger

    async def register(self, cmd: RegisterUser) -> Result[RegisteredUser, DomainError]:
        return await self._handlers.register.handle(cmd)

    async def login(self, cmd: LoginUser) -> Result[AuthTokens, DomainError]:
        return await self._handlers.login.handle(cmd)

    async def refresh(self, cmd: RefreshTokens) -> Result[AuthTokens, DomainError]:
        return await self._handlers.refresh.handle(cmd)

    async def logout(self, cmd: LogoutUser) -> Result[None, None]:
        return await self._handlers.logout.handle(cmd)

    async def logout_all(self, cmd: LogoutAllSessions) -> Result[int, None]:
        return await self._handlers.logout_all.handle(cmd)

    async def change_password(self, cmd: ChangePassword) -> Result[int, DomainError]:
        return await self._handlers.change_password.handle(cmd)

    async def forgot_password(self, cmd: ForgotPassword) -> Result[None, None]:
        return await self._handlers.forgot_password.handle(cmd)

    async def reset_password(self, cmd: ResetPassword) -> Result[int, DomainError]:
        return await self._handlers.reset_password.handle(cmd)

    async def confirm_email(self, cmd: ConfirmEmail) -> Result[None, DomainError]:
        return await self._handlers.confirm_email.handle(cmd)

    async def resend_email_confirmation(
        self, cmd: ResendEmailConfirmation
    ) -> Result[None, None]:
        return await self._handlers.resend_email_confirmation.handle(cmd)

    async def list_sessions(
        self, query: ListSessions
    ) -> Result[list[SessionView], None]:
        return await self._handlers.list_sessions.handle(query)

    async def revoke_session(self, cmd: RevokeSession) -> Result[None, DomainError]:
        return await self._handlers.revoke_session.handle(cmd)

    async def validate_access_token(
        self, query: ValidateAccessToken
    ) -> Result[TokenValidation, DomainError]:
        return await self._handlers.validate_access_token.handle(query)

    async def sweep_expired(self) -> Result[SweepReport, None]:
        """Delete expired refresh tokens, reset tokens and sessions.

        Meant for a periodic timer; safe to run alongside live traffic
        because it only touches rows already past expiry.
        """
        report = SweepReport(
            refresh_tokens=await self._refresh_token_ledger.sweep_expired(),
            reset_tokens=await self._password_reset_ledger.sweep_expired(),
            sessions=await self._session_registry.sweep_expired(),
        )
        self._logger.info(
            "expired_credentials_swept",
            refresh_tokens=report.refresh_tokens,
            reset_tokens=report.reset_tokens,
            sessions=report.sessions,
        )
        return Success(value=report)

    async def drain_email(self) -> None:
        """Wait for emails still being delivered in the background.

        Call before shutdown so scheduled deliveries are not dropped.
        """
        await self._email_dispatcher.drain()
