"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, LayoutFactory, ...
"""

from tests.factories.base import BaseFactory, utc_now
from tests.factories.layout import LayoutFactory, LayoutTagFactory, TagFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "utc_now",
    # User
    "DEFAULT_TEST_PASSWORD",
    "UserFactory",
    # Layout graph
    "LayoutFactory",
    "LayoutTagFactory",
    "TagFactory",
]
