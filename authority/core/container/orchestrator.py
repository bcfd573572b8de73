"""AuthOrchestrator factories (composition root).

Wires the four stores, the handlers and the adapters into one
AuthOrchestrator. Every collaborator can be overridden, which is how tests
inject a controllable clock and deterministic id/token generators.

Usage:
    # Single process, no database
    auth = create_in_memory_orchestrator(settings)

    # Per unit of work, backed by SQLAlchemy
    async with database.get_session() as session:
        auth = create_sqlalchemy_orchestrator(session, settings)
        result = await auth.login(LoginUser(identifier=..., password=...))
"""

from datetime import timedelta
from typing import TYPE_CHECKING

from authority.application.auth_orchestrator import AuthHandlers, AuthOrchestrator
from authority.application.commands.handlers.change_password_handler import (
    ChangePasswordHandler,
)
from authority.application.commands.handlers.confirm_email_handler import (
    ConfirmEmailHandler,
)
from authority.application.commands.handlers.forgot_password_handler import (
    ForgotPasswordHandler,
)
from authority.application.commands.handlers.login_user_handler import (
    LoginUserHandler,
)
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
from authority.application.queries.handlers.list_sessions_handler import (
    ListSessionsHandler,
)
from authority.application.queries.handlers.validate_access_token_handler import (
    ValidateAccessTokenHandler,
)
from authority.application.services import (
    AccessTokenIssuer,
    CredentialStore,
    EmailDispatcher,
    PasswordResetLedger,
    RefreshTokenLedger,
    SessionRegistry,
)
from authority.core.config import Settings, get_settings
from authority.core.container.infrastructure import (
    get_clock,
    get_id_generator,
    get_logger,
    get_password_service,
    get_token_generator,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from authority.domain.protocols import (
        ClockProtocol,
        EmailServiceProtocol,
        IdGeneratorProtocol,
        LoggerProtocol,
        PasswordHashingProtocol,
        PasswordResetTokenRepository,
        RefreshTokenRepository,
        SecretTokenGeneratorProtocol,
        SessionRepository,
        TokenGenerationProtocol,
        UserRepository,
    )


def create_auth_orchestrator(
    settings: Settings,
    *,
    users: "UserRepository",
    refresh_tokens: "RefreshTokenRepository",
    reset_tokens: "PasswordResetTokenRepository",
    sessions: "SessionRepository",
    hasher: "PasswordHashingProtocol | None" = None,
    signer: "TokenGenerationProtocol | None" = None,
    email: "EmailServiceProtocol | None" = None,
    clock: "ClockProtocol | None" = None,
    ids: "IdGeneratorProtocol | None" = None,
    tokens: "SecretTokenGeneratorProtocol | None" = None,
    logger: "LoggerProtocol | None" = None,
) -> AuthOrchestrator:
    """Build an AuthOrchestrator over the given repositories.

    Args:
        settings: Lifetimes, lockout policy, signing key and email link URLs.
        users: User store.
        refresh_tokens: Refresh token store.
        reset_tokens: Password reset token store.
        sessions: Session store.
        hasher: Password hasher (default: bcrypt with settings.bcrypt_rounds).
        signer: Access token service (default: JWTService from settings).
        email: Email sender (default: StubEmailService).
        clock: Time source (default: system UTC clock).
        ids: Row id generator (default: UUIDv7).
        tokens: Opaque token generator (default: 32 random bytes, urlsafe).
        logger: Logger (default: console logger per settings.use_json_logs).

    Returns:
        AuthOrchestrator: Fully wired orchestrator.
    """
    from authority.infrastructure.email.stub_email_service import StubEmailService
    from authority.infrastructure.logging.console_adapter import ConsoleAdapter
    from authority.infrastructure.security.bcrypt_password_service import (
        BcryptPasswordService,
    )
    from authority.infrastructure.security.jwt_service import JWTService

    clock = clock or get_clock()
    ids = ids or get_id_generator()
    tokens = tokens or get_token_generator()
    logger = logger or ConsoleAdapter(use_json=settings.use_json_logs)
    hasher = hasher or BcryptPasswordService(cost_factor=settings.bcrypt_rounds)
    email = email or StubEmailService(logger)
    signer = signer or JWTService(
        settings.secret_key,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        clock=clock,
        algorithm=settings.algorithm,
    )

    remember_me = timedelta(days=settings.remember_me_expire_days)

    credential_store = CredentialStore(
        user_repo=users, clock=clock, id_generator=ids, token_generator=tokens
    )
    email_dispatcher = EmailDispatcher(email_service=email, logger=logger)
    session_registry = SessionRegistry(
        session_repo=sessions,
        clock=clock,
        id_generator=ids,
        token_generator=tokens,
        logger=logger,
        lifetime=timedelta(days=settings.session_expire_days),
        remember_me_lifetime=remember_me,
    )
    refresh_token_ledger = RefreshTokenLedger(
        refresh_token_repo=refresh_tokens,
        clock=clock,
        id_generator=ids,
        token_generator=tokens,
        logger=logger,
        lifetime=timedelta(days=settings.refresh_token_expire_days),
        remember_me_lifetime=remember_me,
    )
    password_reset_ledger = PasswordResetLedger(
        reset_token_repo=reset_tokens,
        clock=clock,
        id_generator=ids,
        token_generator=tokens,
        logger=logger,
        lifetime=timedelta(hours=settings.password_reset_token_expire_hours),
    )
    access_token_issuer = AccessTokenIssuer(
        token_service=signer,
        clock=clock,
        lifetime=timedelta(minutes=settings.access_token_expire_minutes),
    )

    handlers = AuthHandlers(
        register=RegisterUserHandler(
            credential_store,
            hasher,
            logger,
            email_dispatcher=email_dispatcher,
            confirmation_url=settings.email_confirmation_url,
        ),
        login=LoginUserHandler(
            credential_store=credential_store,
            session_registry=session_registry,
            refresh_token_ledger=refresh_token_ledger,
            access_token_issuer=access_token_issuer,
            password_service=hasher,
            clock=clock,
            id_generator=ids,
            logger=logger,
            lockout_threshold=settings.lockout_threshold,
            lockout_window=timedelta(minutes=settings.lockout_window_minutes),
        ),
        refresh=RefreshTokensHandler(
            credential_store=credential_store,
            session_registry=session_registry,
            refresh_token_ledger=refresh_token_ledger,
            access_token_issuer=access_token_issuer,
            clock=clock,
            logger=logger,
        ),
        logout=LogoutUserHandler(
            session_registry=session_registry,
            refresh_token_ledger=refresh_token_ledger,
            logger=logger,
        ),
        logout_all=LogoutAllSessionsHandler(
            session_registry=session_registry,
            refresh_token_ledger=refresh_token_ledger,
            logger=logger,
        ),
        change_password=ChangePasswordHandler(
            credential_store=credential_store,
            refresh_token_ledger=refresh_token_ledger,
            password_service=hasher,
            email_dispatcher=email_dispatcher,
            logger=logger,
        ),
        forgot_password=ForgotPasswordHandler(
            credential_store=credential_store,
            password_reset_ledger=password_reset_ledger,
            email_dispatcher=email_dispatcher,
            logger=logger,
            reset_url=settings.password_reset_url,
        ),
        reset_password=ResetPasswordHandler(
            credential_store=credential_store,
            password_reset_ledger=password_reset_ledger,
            refresh_token_ledger=refresh_token_ledger,
            password_service=hasher,
            email_dispatcher=email_dispatcher,
            logger=logger,
        ),
        confirm_email=ConfirmEmailHandler(
            credential_store=credential_store, logger=logger
        ),
        resend_email_confirmation=ResendEmailConfirmationHandler(
            credential_store=credential_store,
            email_dispatcher=email_dispatcher,
            logger=logger,
            confirmation_url=settings.email_confirmation_url,
        ),
        list_sessions=ListSessionsHandler(session_registry),
        revoke_session=RevokeSessionHandler(
            session_registry=session_registry,
            refresh_token_ledger=refresh_token_ledger,
            logger=logger,
        ),
        validate_access_token=ValidateAccessTokenHandler(
            token_service=signer,
            session_registry=session_registry,
            logger=logger,
        ),
    )

    return AuthOrchestrator(
        handlers=handlers,
        refresh_token_ledger=refresh_token_ledger,
        password_reset_ledger=password_reset_ledger,
        session_registry=session_registry,
        email_dispatcher=email_dispatcher,
        logger=logger,
    )


def create_in_memory_orchestrator(
    settings: Settings | None = None, **overrides: object
) -> AuthOrchestrator:
    """Build an orchestrator over fresh in-memory repositories.

    Args:
        settings: Settings to use (default: process settings).
        **overrides: Keyword arguments forwarded to create_auth_orchestrator
            (clock, ids, tokens, email, hasher, signer, logger, or any
            repository).
    """
    from authority.infrastructure.memory import (
        InMemoryPasswordResetTokenRepository,
        InMemoryRefreshTokenRepository,
        InMemorySessionRepository,
        InMemoryUserRepository,
    )

    repositories: dict[str, object] = {
        "users": InMemoryUserRepository(),
        "refresh_tokens": InMemoryRefreshTokenRepository(),
        "reset_tokens": InMemoryPasswordResetTokenRepository(),
        "sessions": InMemorySessionRepository(),
    }
    repositories.update(overrides)
    return _create(settings, repositories)


def create_sqlalchemy_orchestrator(
    session: "AsyncSession", settings: Settings | None = None, **overrides: object
) -> AuthOrchestrator:
    """Build an orchestrator whose repositories share one AsyncSession.

    Args:
        session: SQLAlchemy async session (one per unit of work).
        settings: Settings to use (default: process settings).
        **overrides: Keyword arguments forwarded to create_auth_orchestrator.
    """
    from authority.infrastructure.persistence.repositories import (
        PasswordResetTokenRepository,
        RefreshTokenRepository,
        SessionRepository,
        UserRepository,
    )

    repositories: dict[str, object] = {
        "users": UserRepository(session),
        "refresh_tokens": RefreshTokenRepository(session),
        "reset_tokens": PasswordResetTokenRepository(session),
        "sessions": SessionRepository(session),
    }
    repositories.update(overrides)
    return _create(settings, repositories)


def _create(settings: Settings | None, arguments: dict[str, object]) -> AuthOrchestrator:
    # Without explicit settings, use the process-wide singletons
    if settings is None:
        settings = get_settings()
        arguments.setdefault("logger", get_logger())
        arguments.setdefault("hasher", get_password_service())
    return create_auth_orchestrator(settings, **arguments)  # type: ignore[arg-type]
