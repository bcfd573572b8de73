"""Exception raised by user repositories on a unique-constraint violation.

This is the one storage failure the package expects: the email/username
pre-check at registration is not atomic with the insert, so the repository
reports the collision and the credential store turns it into a
ValidationError.
"""


class DuplicateUserError(Exception):
    """A user with the same email or username already exists."""

    def __init__(self, field: str) -> None:
        super().__init__(f"duplicate user {field}")
        self.field = field
