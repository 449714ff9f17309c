"""Unit tests for hierarchy, template rendering, diffing and key helpers.

Tests cover:
- placement_under and check_parent_assignment (self parent, cycles, depth)
- Placeholder discovery, declared variables, provided values, rendering
- diff_fields normalisation
- Natural-key normalisation and duplicate violations

Architecture:
- Pure domain functions, no mocking required
"""

import pytest

from iam_admin.core.enums import ErrorCode
from iam_admin.core.result import Failure, Success
from iam_admin.domain.errors import duplicate_key_violation, normalize_key
from iam_admin.domain.services import FieldChange, diff_fields
from iam_admin.domain.services.hierarchy import check_parent_assignment, placement_under
from iam_admin.domain.services.template_rendering import (
    check_declared_variables,
    check_values_provided,
    placeholders,
    render,
)


@pytest.mark.unit
class TestPlacement:
    """Test placement_under."""

    def test_root_placement(self):
        """Test a department without parent is a level 1 root."""
        assert placement_under("D1", None, None) == (1, "/D1")

    def test_child_placement(self):
        """Test a child extends the parent's level and path."""
        assert placement_under("D2", 2, "/D0/D1") == (3, "/D0/D1/D2")


@pytest.mark.unit
class TestCheckParentAssignment:
    """Test check_parent_assignment."""

    def test_valid_parent(self):
        """Test a parent within depth and outside the subtree."""
        result = check_parent_assignment("D3", "D2", ["D1"], 2, 10)

        assert result == Success(value=None)

    def test_new_department_skips_identity_checks(self):
        """Test a department being created has no id to collide with."""
        assert isinstance(check_parent_assignment(None, "D2", [], 1, 10), Success)

    def test_self_parent_rejected(self):
        """Test a department cannot be its own parent."""
        result = check_parent_assignment("D1", "D1", [], 1, 10)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_HIERARCHY
        assert result.error.rule == "no_self_parent"
        assert result.error.field == "parent_department_id"

    def test_cycle_rejected(self):
        """Test placing a department under its own descendant."""
        # Arrange: D1 -> D2 -> D3, try moving D1 under D3
        ancestor_chain = ["D2", "D1"]

        # Act
        result = check_parent_assignment("D1", "D3", ancestor_chain, 3, 10)

        # Assert
        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_HIERARCHY
        assert result.error.rule == "no_hierarchy_cycle"
        assert result.error.details == {"ancestor_chain": "D1/D2"}

    def test_depth_limit(self):
        """Test a parent at the maximum depth cannot take children."""
        result = check_parent_assignment(None, "D10", [], 10, 10)

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.HIERARCHY_TOO_DEEP
        assert result.error.rule == "max_hierarchy_depth"

    def test_depth_limit_boundary_passes(self):
        """Test a child landing exactly at the maximum depth is allowed."""
        assert isinstance(check_parent_assignment(None, "D9", [], 9, 10), Success)


@pytest.mark.unit
class TestTemplateRendering:
    """Test placeholder handling."""

    def test_placeholders_unique_in_order(self):
        """Test names are listed once, subject first."""
        names = placeholders("Hi {{name}}", "{{ code }} for {{ name }} {{code}}")

        assert names == ["name", "code"]

    def test_placeholders_ignores_none(self):
        """Test a missing subject contributes nothing."""
        assert placeholders(None, "plain text") == []

    def test_undeclared_variables_rejected(self):
        """Test every undeclared placeholder is named."""
        result = check_declared_variables("{{ a }}", "{{ b }} {{ c }}", ("a",))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.UNDECLARED_TEMPLATE_VARIABLE
        assert result.error.field == "variables"
        assert result.error.message == "Undeclared template variables: b, c"

    def test_declared_variables_pass(self):
        """Test a fully declared template passes (extra declarations allowed)."""
        assert isinstance(
            check_declared_variables(None, "{{ a }}", ("a", "unused")), Success
        )

    def test_missing_values_reported_together(self):
        """Test every missing value is reported in one failure."""
        result = check_values_provided("{{ a }}", "{{ b }} {{ c }}", {"b": 1})

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.MISSING_TEMPLATE_VALUE
        assert result.error.rule == "values_provided"
        assert result.error.message == "Missing values for: a, c"

    def test_render_substitutes_values(self):
        """Test placeholders are replaced with string values."""
        text = render("Hello {{ name }}, code {{code}}", {"name": "Ada", "code": 42})

        assert text == "Hello Ada, code 42"

    def test_render_missing_value_raises(self):
        """Test render without a value raises KeyError."""
        with pytest.raises(KeyError):
            render("{{ name }}", {})


@pytest.mark.unit
class TestDiffFields:
    """Test diff_fields."""

    def test_only_proposed_keys_compared(self):
        """Test keys absent from the proposal are ignored."""
        changes = diff_fields({"a": 1, "b": 2}, {"a": 5})

        assert changes == {"a": FieldChange(old=1, new=5)}

    def test_lists_normalised_to_tuples(self):
        """Test lists compare equal to tuples and are stored as tuples."""
        assert diff_fields({"v": ("x",)}, {"v": ["x"]}) == {}
        assert diff_fields({"v": ("x",)}, {"v": ["y"]}) == {
            "v": FieldChange(old=("x",), new=("y",))
        }


@pytest.mark.unit
class TestNaturalKeys:
    """Test natural-key helpers."""

    def test_email_and_domain_case_insensitive(self):
        """Test case folding applies to email and domain only."""
        assert normalize_key("email", "A@B.com") == "a@b.com"
        assert normalize_key("domain", "Acme.COM") == "acme.com"
        assert normalize_key("code", "ENG") == "ENG"

    @pytest.mark.parametrize(
        ("key", "code", "rule"),
        [
            ("name", ErrorCode.DUPLICATE_NAME, "unique_name"),
            ("code", ErrorCode.DUPLICATE_CODE, "unique_code"),
            ("domain", ErrorCode.DUPLICATE_DOMAIN, "unique_domain"),
            ("email", ErrorCode.DUPLICATE_EMAIL, "unique_email"),
            ("username", ErrorCode.DUPLICATE_USERNAME, "unique_username"),
        ],
    )
    def test_duplicate_key_violation(self, key, code, rule):
        """Test each natural key maps to its code and rule."""
        error = duplicate_key_violation("department", key, "X")

        assert error.code == code
        assert error.rule == rule
        assert error.field == key
        assert error.message == f"department {key} 'X' already exists"
