"""Data transfer objects returned to transport layers."""

from iam_admin.application.dtos.operation_response import OperationResponse
from iam_admin.application.dtos.rendered_notification import RenderedNotification
from iam_admin.application.dtos.serialization import error_to_data, to_data

__all__ = ["OperationResponse", "RenderedNotification", "error_to_data", "to_data"]
