"""
Generic resource pages.

- registry: one ResourceSpec per resource (routes, models, validation, filters)
- api: ResourceAPI, CRUD over a ResourceSpec
- page: ResourcePage, the list/detail page controller
- filters: pure search/filter helpers
"""

from console.resources.api import ResourceAPI
from console.resources.filters import ALL, filter_items, get_path
from console.resources.page import DialogState, PageState, ResourcePage
from console.resources.registry import (
    RESOURCES,
    InsertPosition,
    ResourceEndpoints,
    ResourceSpec,
    get_resource,
)

__all__ = [
    "ALL",
    "DialogState",
    "InsertPosition",
    "PageState",
    "RESOURCES",
    "ResourceAPI",
    "ResourceEndpoints",
    "ResourcePage",
    "ResourceSpec",
    "filter_items",
    "get_path",
    "get_resource",
]
