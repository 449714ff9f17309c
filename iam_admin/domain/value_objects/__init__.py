"""Domain value objects."""

from iam_admin.domain.value_objects.criteria import SEARCH_FIELDS, Criteria
from iam_admin.domain.value_objects.pagination import MAX_PAGE_SIZE, Page, PageRequest
from iam_admin.domain.value_objects.read_model_document import ReadModelDocument

__all__ = ["MAX_PAGE_SIZE", "SEARCH_FIELDS", "Criteria", "Page", "PageRequest", "ReadModelDocument"]
