"""Register User handler.

Flow:
1. Validate email, username, display name and password strength
2. Check email/username availability (credential store)
3. Hash password
4. Create user (collisions at insert time fail like the pre-check)
5. Send the email confirmation link in the background
6. Return Success(RegisteredUser)

Any violation is a ValidationError. Duplicate email and duplicate username
share one message so registration cannot be used to discover which is taken.
"""

from urllib.parse import urlencode
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from authority.application.commands.auth_commands import RegisterUser
from authority.application.dtos import RegisteredUser, UserProfile
from authority.application.services import CredentialStore, EmailDispatcher
from authority.application.services.credential_store import duplicate_user_error
from authority.application.services.input_validation import first_validation_error
from authority.core.errors import ValidationError
from authority.core.result import Failure, Result, Success
from authority.domain.protocols import LoggerProtocol, PasswordHashingProtocol
from authority.domain.types import DisplayName, Email, Password, Username


class RegistrationForm(BaseModel):
    """Validated registration input."""

    model_config = ConfigDict(frozen=True)

    email: Email
    username: Username
    display_name: DisplayName
    password: Password


class RegisterUserHandler:
    """Handler for register user command."""

    def __init__(
        self,
        credential_store: CredentialStore,
        password_service: PasswordHashingProtocol,
        logger: LoggerProtocol,
        *,
        email_dispatcher: EmailDispatcher,
        confirmation_url: str,
    ) -> None:
        self._credential_store = credential_store
        self._password_service = password_service
        self._logger = logger
        self._email_dispatcher = email_dispatcher
        self._confirmation_url = confirmation_url

    async def handle(self, cmd: RegisterUser) -> Result[RegisteredUser, ValidationError]:
        """Handle register user command.

        Returns:
            Success(RegisteredUser) or Failure(ValidationError).
        """
        # Step 1: Validate input
        try:
            form = RegistrationForm(
                email=cmd.email,
                username=cmd.username,
                display_name=cmd.display_name,
                password=cmd.password,
            )
        except PydanticValidationError as exc:
            error = first_validation_error(exc)
            self._logger.info("registration_rejected", field=error.field)
            return Failure(error=error)

        # Step 2: Check availability
        if await self._credential_store.email_taken(
            form.email
        ) or await self._credential_store.username_taken(form.username):
            self._logger.info("registration_rejected", reason="duplicate")
            return Failure(error=duplicate_user_error())

        # Steps 3-4: Hash and create (insert-time collisions fail the same way)
        result = await self._credential_store.create(
            email=form.email,
            username=form.username,
            display_name=form.display_name,
            password_hash=self._password_service.hash_password(form.password),
        )

        if isinstance(result, Failure):
            self._logger.info("registration_rejected", reason="duplicate")
            return result

        # Step 5: Confirmation link
        user = result.value
        if user.email_confirmation_token is not None:
            self._email_dispatcher.send_email_confirmation(
                user.email,
                confirmation_link(
                    self._confirmation_url, user.id, user.email_confirmation_token
                ),
                user_id=user.id,
            )

        # Step 6: Return Success
        self._logger.info("user_registered", user_id=str(user.id))
        return Success(value=RegisteredUser(user=UserProfile.from_user(user)))


def confirmation_link(base_url: str, user_id: UUID, token: str) -> str:
    """Build the link a user follows to confirm their email address."""
    return f"{base_url}?{urlencode({'user_id': str(user_id), 'token': token})}"
