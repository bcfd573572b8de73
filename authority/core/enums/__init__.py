"""Core enums package.

Exports all core-level enums for convenient importing.

Usage:
    from authority.core.enums import ErrorCode, Environment
"""

from authority.core.enums.environment import Environment
from authority.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
