"""
Unit tests for the SQL fragment helpers and the key allowlist guard.
"""

import pytest

from app.core.exceptions import InvalidInputError
from app.helpers.keys import check_allowed_keys
from app.helpers.sql import bind_params, sql_for_partial_update, sql_for_where_string


class TestPartialUpdate:
    """Tests for sql_for_partial_update"""

    def test_maps_columns_and_keeps_order(self):
        """Test column mapping and placeholder order"""
        set_cols, values = sql_for_partial_update(
            {"firstName": "Aliya", "age": 32},
            {"firstName": "first_name"}
        )

        assert set_cols == '"first_name"=:p1, "age"=:p2'
        assert values == ["Aliya", 32]

    def test_unmapped_fields_used_verbatim(self):
        """Test fields without a mapping"""
        set_cols, values = sql_for_partial_update({"title": "New", "salary": 10})

        assert set_cols == '"title"=:p1, "salary"=:p2'
        assert values == ["New", 10]

    def test_column_count_matches_key_count(self):
        """Test one column and one value per key"""
        data = {f"col{i}": i for i in range(7)}
        set_cols, values = sql_for_partial_update(data)

        assert len(set_cols.split(", ")) == 7
        assert values == list(range(7))

    def test_explicit_none_passes_through(self):
        """Test that None values are kept"""
        set_cols, values = sql_for_partial_update({"logoUrl": None}, {"logoUrl": "logo_url"})

        assert set_cols == '"logo_url"=:p1'
        assert values == [None]

    def test_empty_data_rejected(self):
        """Test an empty update"""
        with pytest.raises(InvalidInputError, match="No data"):
            sql_for_partial_update({})

    def test_bind_params_aligns_with_placeholders(self):
        """Test bind names against placeholders"""
        _, values = sql_for_partial_update({"a": 1, "b": "two"})

        assert bind_params(values) == {"p1": 1, "p2": "two"}
        assert bind_params(values, start=3) == {"p3": 1, "p4": "two"}


class TestWhereString:
    """Tests for sql_for_where_string"""

    def test_empty_yields_no_clause(self):
        """Test that no predicates give no WHERE"""
        assert sql_for_where_string({}) == ""

    def test_single_predicate(self):
        """Test a single predicate"""
        assert sql_for_where_string({"title": "title = :p1"}) == "WHERE title = :p1"

    def test_predicates_joined_in_insertion_order(self):
        """Test AND-joining in insertion order"""
        where = sql_for_where_string({
            "minSalary": "salary >= :p1",
            "hasEquity": "equity > 0",
            "title": "lower(title) LIKE lower(:p2)",
        })

        assert where == "WHERE salary >= :p1 AND equity > 0 AND lower(title) LIKE lower(:p2)"


class TestAllowedKeys:
    """Tests for check_allowed_keys"""

    def test_subset_passes(self):
        """Test an object with only allowed keys"""
        assert check_allowed_keys({"title": "x", "minSalary": 1}, ["title", "minSalary", "hasEquity"]) is None

    def test_empty_object_passes(self):
        """Test an empty object"""
        assert check_allowed_keys({}, ["title"]) is None

    def test_extra_key_named_in_error(self):
        """Test that the rejected key is named"""
        with pytest.raises(InvalidInputError) as exc_info:
            check_allowed_keys({"title": "x", "company_handle": "c1"}, ["title"])

        assert 'Key "company_handle" not allowed' in exc_info.value.message
