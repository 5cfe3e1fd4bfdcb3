"""
Tests for shield.permissions.registry and descriptor models.
"""

from __future__ import annotations

import pytest

from shield.permissions.errors import InvalidSlugError
from shield.permissions.models import (
    RelationDescriptor,
    ResourceDescriptor,
    Role,
    User,
)
from shield.permissions.registry import InMemoryResourceRegistry


def _resource(slug: str, **kwargs) -> ResourceDescriptor:
    return ResourceDescriptor(
        slug=slug,
        display_model=slug.title(),
        fqcn=f"app.admin.resources.{slug}_resource.{slug.title()}Resource",
        **kwargs,
    )


class TestDescriptors:
    def test_resource_slug_cannot_contain_separator(self):
        with pytest.raises(InvalidSlugError):
            _resource("member__history")

    def test_resource_prefixes_deduplicated_in_order(self):
        resource = _resource("member", permission_prefixes=("view", "create", "view"))
        assert resource.permission_prefixes == ("view", "create")

    def test_resource_prefixes_must_be_tuple(self):
        with pytest.raises(ValueError, match="must be a tuple"):
            _resource("member", permission_prefixes=["view"])

    def test_relation_descriptor_derives_slug(self):
        relation = RelationDescriptor(
            owner_resource_slug="member",
            identity="App\\Resources\\MemberResource\\RelationManagers\\HistoryRelationManager",
        )
        assert relation.relation_slug == "history"
        assert relation.identity.endswith(".RelationManagers.HistoryRelationManager")

    def test_role_permissions_normalized(self):
        role = Role(name="editor", permissions=("view_member", "create_member", "view_member"))
        assert role.permissions == ("create_member", "view_member")

    def test_user_requires_id(self):
        with pytest.raises(ValueError):
            User(user_id="")

    def test_frozen(self):
        resource = _resource("member")
        with pytest.raises(AttributeError):
            resource.slug = "other"


class TestInMemoryResourceRegistry:
    def test_listings_are_sorted(self):
        registry = InMemoryResourceRegistry(
            resources=[_resource("post"), _resource("member")],
            pages=["app.pages.Settings", "app.pages.Dashboard"],
            widgets=["app.widgets.StatsOverview"],
            custom_permissions=["send_invite", "export_reports", "send_invite"],
        )
        assert [r.slug for r in registry.list_resources()] == ["member", "post"]
        assert [p.basename for p in registry.list_pages()] == ["Dashboard", "Settings"]
        assert [w.basename for w in registry.list_widgets()] == ["StatsOverview"]
        assert registry.list_custom_permissions() == ("send_invite", "export_reports")

    def test_duplicate_resource_rejected(self):
        registry = InMemoryResourceRegistry(resources=[_resource("member")])
        with pytest.raises(ValueError, match="Duplicate resource slug"):
            registry.register_resource(_resource("member"))

    def test_relation_owner_derived_from_identity(self):
        registry = InMemoryResourceRegistry()
        relation = registry.register_relation_manager(
            "app.admin.resources.member_resource.relation_managers.HistoryRelationManager",
            actions=("view",),
        )
        assert relation.owner_resource_slug == "member"
        assert relation.actions == ("view",)
        assert registry.list_relation_managers() == (relation,)

    def test_relation_owner_explicit(self):
        registry = InMemoryResourceRegistry()
        relation = registry.register_relation_manager("NotesRelationManager", "member")
        assert relation.owner_resource_slug == "member"
        assert relation.relation_slug == "notes"

    def test_relation_without_owner_rejected(self):
        registry = InMemoryResourceRegistry()
        with pytest.raises(InvalidSlugError, match="no discoverable owning resource"):
            registry.register_relation_manager("HistoryRelationManager")

    def test_duplicate_relation_rejected(self):
        registry = InMemoryResourceRegistry()
        registry.register_relation_manager("HistoryRelationManager", "member")
        with pytest.raises(ValueError, match="Duplicate relation manager"):
            registry.register_relation_manager("app.other.HistoryRelationManager", "member")
