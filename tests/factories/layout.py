"""Layout graph factories.

Foreign keys (owner, parent, category) must be passed explicitly.
"""

from uuid import uuid4

from polyfactory import Use

from src.app.models import ROOT_VERSION_LABEL, GeneratedLayout, InputMethod, LayoutTag, Tag
from tests.factories.base import BaseFactory, utc_now


class LayoutFactory(BaseFactory):
    __model__ = GeneratedLayout

    id = Use(uuid4)
    title = Use(lambda: f"Layout {uuid4().hex[:6]}")
    description = "A generated layout"
    generated_code = "<main><h1>Hello</h1></main>"
    input_method = InputMethod.TEXT.value
    additional_context = None
    owner_user_id = None
    category_id = None
    is_public = False
    parent_layout_id = None
    version_number = ROOT_VERSION_LABEL
    changes_description = None
    created_at = Use(utc_now)
    updated_at = Use(utc_now)


class TagFactory(BaseFactory):
    __model__ = Tag

    id = Use(uuid4)
    name = Use(lambda: f"tag-{uuid4().hex[:6]}")
    color = "#10b981"
    description = None
    owner_user_id = None
    created_at = Use(utc_now)


class LayoutTagFactory(BaseFactory):
    __model__ = LayoutTag

    id = Use(uuid4)
    layout_id = None
    tag_id = None
    created_at = Use(utc_now)
