"""Unit tests for the collection registry."""

import pytest

from services.registry import CollectionRegistry, UnknownCollection, build_registry
from services.schema import BLOG_SCHEMA, FieldKind, FieldRule, define_schema

NOTES_SCHEMA = define_schema("notes", FieldRule("title", FieldKind.STRING))


def test_register_and_lookup():
    registry = CollectionRegistry()
    registry.register("blog", BLOG_SCHEMA)
    assert registry.lookup("blog") is BLOG_SCHEMA
    assert "blog" in registry
    assert len(registry) == 1


def test_register_replaces():
    registry = CollectionRegistry({"blog": BLOG_SCHEMA})
    registry.register("blog", NOTES_SCHEMA)
    assert registry.lookup("blog") is NOTES_SCHEMA


def test_lookup_unknown():
    registry = CollectionRegistry({"blog": BLOG_SCHEMA})
    with pytest.raises(UnknownCollection) as exc_info:
        registry.lookup("nonexistent")
    assert exc_info.value.name == "nonexistent"
    assert exc_info.value.available == ["blog"]


def test_empty_registry_has_no_default():
    with pytest.raises(UnknownCollection):
        CollectionRegistry().lookup("blog")


def test_unknown_collection_is_lookup_error():
    with pytest.raises(LookupError):
        CollectionRegistry().lookup("x")


def test_frozen_rejects_register():
    registry = CollectionRegistry({"blog": BLOG_SCHEMA}).freeze()
    assert registry.frozen
    with pytest.raises(RuntimeError):
        registry.register("notes", NOTES_SCHEMA)
    assert registry.lookup("blog") is BLOG_SCHEMA


def test_names_sorted():
    registry = CollectionRegistry({"notes": NOTES_SCHEMA, "blog": BLOG_SCHEMA})
    assert registry.names() == ["blog", "notes"]


# ---------------------------------------------------------------------------
# build_registry
# ---------------------------------------------------------------------------


def test_build_registry_default():
    registry = build_registry()
    assert registry.frozen
    assert registry.names() == ["blog"]
    assert registry.lookup("blog") is BLOG_SCHEMA


def test_build_registry_strict():
    schema = build_registry(strict=True).lookup("blog")
    assert schema.allow_unknown is False
    assert schema.fields == BLOG_SCHEMA.fields
