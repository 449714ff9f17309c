"""Exceptions for genuine infrastructure faults.

Expected failures are ``Failure`` values. A store that times out or drops
its connection is not expected, so adapters raise ``InfrastructureFault``
and the command handler boundary converts it back into a value.
"""

from iam_admin.core.errors.common_errors import InfrastructureError


class InfrastructureFault(Exception):
    """Raised by adapters when a backing store or the dispatcher fails.

    Attributes:
        error: Error value describing the fault.
    """

    def __init__(self, error: InfrastructureError) -> None:
        super().__init__(str(error))
        self.error = error

    @property
    def retryable(self) -> bool:
        return self.error.retryable
