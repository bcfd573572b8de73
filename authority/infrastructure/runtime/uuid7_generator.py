"""UUIDv7 identifier generator.

Time-ordered UUIDs keep primary-key indexes append-mostly and make ids sort
by creation time.
"""

from uuid import UUID

from uuid_extensions import uuid7


class UUID7Generator:
    """IdGeneratorProtocol implementation backed by uuid7."""

    def new_id(self) -> UUID:
        value: UUID = uuid7()
        return value
