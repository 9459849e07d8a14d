"""Shape of the SQL issued for group listings."""

from __future__ import annotations

from sqlalchemy.dialects import postgresql

from connexa.domain.models import GroupFilters
from connexa.infrastructure.persistence.repositories_sqlalchemy import (
    build_group_listing_query,
)


def _case_insensitive_subject_match(sql: str) -> bool:
    # lower(...) LIKE on SQLAlchemy 2.0, ILIKE on 2.1+.
    return "lower(study_groups.subject)" in sql or "study_groups.subject ilike" in sql


def _sql(filters, viewer_id=None) -> str:
    statement = build_group_listing_query(filters, viewer_id)
    return str(statement.compile(dialect=postgresql.dialect())).lower()


def test_listing_only_returns_active_groups_newest_first():
    sql = _sql(GroupFilters())

    assert "study_groups.is_active is true" in sql
    assert sql.rstrip().endswith("order by study_groups.created_at desc, study_groups.id desc")
    assert "left outer join profiles" in sql


def test_membership_flag_requires_viewer():
    anonymous = build_group_listing_query(GroupFilters())
    viewer = build_group_listing_query(GroupFilters(), viewer_id=7)

    assert "is_member" not in anonymous.selected_columns.keys()
    assert "is_member" in viewer.selected_columns.keys()
    assert "member_count" in anonymous.selected_columns.keys()


def test_subject_filter_is_case_insensitive_and_escaped():
    sql = _sql(GroupFilters(subject="50%_off"))

    assert _case_insensitive_subject_match(sql)
    assert "escape '/'" in sql


def test_filters_compose():
    sql = _sql(GroupFilters(subject="calc", created_by=42, member_of=7), viewer_id=7)

    assert "study_groups.created_by =" in sql
    assert _case_insensitive_subject_match(sql)
    # one EXISTS for the projected flag, one for the member_of filter
    assert sql.count("exists") == 2
