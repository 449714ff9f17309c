"""Runtime environments.

- DEVELOPMENT: local runs, console log renderer
- TESTING: automated test execution
- CI: continuous integration
- PRODUCTION: deployed service, JSON logs
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
