"""Core enums package.

Usage:
    from iam_admin.core.enums import ErrorCode, Environment
"""

from iam_admin.core.enums.environment import Environment
from iam_admin.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
