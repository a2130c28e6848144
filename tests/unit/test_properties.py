"""Property-based tests for version labels, role ordering and search params."""

from datetime import date, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from src.app.models import AccessRole, SharePermission, TeamRole
from src.app.schemas.search import LayoutSearchParams
from src.app.services.access_resolver import TEAM_ROLE_CAPS, share_role, weaker
from src.app.services.layout_service import version_label

pytestmark = pytest.mark.unit

roles = st.sampled_from(list(AccessRole))


@given(n=st.integers(min_value=0, max_value=10_000))
def test_version_labels_are_distinct_and_increasing(n: int):
    assert version_label(n) != version_label(n + 1)
    assert int(version_label(n).split(".")[1]) == n + 1
    assert version_label(n).startswith("v1.")


@given(a=roles, b=roles)
def test_weaker_is_a_lower_bound(a: AccessRole, b: AccessRole):
    result = weaker(a, b)

    assert result in (a, b)
    assert a.at_least(result)
    assert b.at_least(result)


@given(a=roles, b=roles)
def test_at_least_is_a_total_order(a: AccessRole, b: AccessRole):
    assert a.at_least(b) or b.at_least(a)
    if a.at_least(b) and b.at_least(a):
        assert a == b


@given(permission=st.sampled_from(list(SharePermission)), team_role=st.sampled_from(list(TeamRole)))
def test_team_share_never_exceeds_cap(permission: SharePermission, team_role: TeamRole):
    granted = weaker(share_role(permission.value), TEAM_ROLE_CAPS[team_role])

    assert TEAM_ROLE_CAPS[team_role].at_least(granted)
    assert not granted.at_least(AccessRole.OWNER)


@given(start=st.dates(max_value=date(2100, 1, 1)), span=st.integers(min_value=1, max_value=3650))
@settings(max_examples=50)
def test_reversed_date_range_rejected(start, span):
    with pytest.raises(ValidationError):
        LayoutSearchParams(date_from=start + timedelta(days=span), date_to=start)
