"""Clock and identifier adapters."""

from authority.infrastructure.runtime.system_clock import SystemClock
from authority.infrastructure.runtime.uuid7_generator import UUID7Generator

__all__ = ["SystemClock", "UUID7Generator"]
