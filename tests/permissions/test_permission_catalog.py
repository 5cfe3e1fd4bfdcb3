"""
Tests for shield.permissions.catalog — enumeration, buckets, grouping.
"""

from __future__ import annotations

import logging

import pytest

from shield.permissions.catalog import PermissionCatalog
from shield.permissions.constants import (
    BUCKET_CUSTOM,
    BUCKET_PAGES,
    BUCKET_RELATIONS,
    BUCKET_RESOURCES,
    BUCKET_WIDGETS,
    DEFAULT_RESOURCE_ACTIONS,
)
from shield.permissions.models import ResourceDescriptor
from shield.permissions.provider import InMemoryPermissionStore, seed_permissions
from shield.permissions.registry import InMemoryResourceRegistry
from shield.permissions.settings import ShieldSettings


def _resource(slug: str, prefixes: tuple[str, ...] = ()) -> ResourceDescriptor:
    return ResourceDescriptor(
        slug=slug,
        display_model=slug.replace("-", " ").title(),
        fqcn=f"app.admin.resources.{slug}_resource.Resource",
        permission_prefixes=prefixes,
    )


def _member_registry() -> InMemoryResourceRegistry:
    registry = InMemoryResourceRegistry(
        resources=[_resource("member", ("view", "create"))],
        custom_permissions=["send_invite", "view_member__history"],
    )
    registry.register_relation_manager("HistoryRelationManager", "member", actions=("view",))
    return registry


ENABLED = ShieldSettings(relation_managers_enabled=True)


# ── Enumeration ──────────────────────────────────────────────

class TestEnumeration:
    def test_resource_permissions_use_default_actions(self):
        registry = InMemoryResourceRegistry(resources=[_resource("post"), _resource("member")])
        catalog = PermissionCatalog(registry, ShieldSettings())

        keys = catalog.enumerate_resource_permissions()

        assert len(keys) == 2 * len(DEFAULT_RESOURCE_ACTIONS)
        assert keys[0] == "view_member"
        assert keys[len(DEFAULT_RESOURCE_ACTIONS)] == "view_post"
        assert len(set(keys)) == len(keys)

    def test_resource_length_is_sum_of_action_lists(self):
        resources = [
            _resource("member", ("view", "create")),
            _resource("post", ("view", "update", "delete")),
            _resource("tag"),
        ]
        catalog = PermissionCatalog(InMemoryResourceRegistry(), ShieldSettings())

        keys = catalog.enumerate_resource_permissions(resources)

        assert len(keys) == 2 + 3 + len(DEFAULT_RESOURCE_ACTIONS)

    def test_configured_prefixes_apply(self):
        settings = ShieldSettings(resource_permission_prefixes=("view", "publish"))
        registry = InMemoryResourceRegistry(resources=[_resource("article")])
        catalog = PermissionCatalog(registry, settings)
        assert catalog.enumerate_resource_permissions() == ("view_article", "publish_article")

    def test_relation_permissions_require_feature(self):
        registry = _member_registry()
        assert PermissionCatalog(registry, ShieldSettings()).enumerate_relation_permissions() == ()
        assert PermissionCatalog(registry, ENABLED).enumerate_relation_permissions() == (
            "view_member__history",
        )

    def test_relation_permissions_default_actions(self):
        registry = InMemoryResourceRegistry(resources=[_resource("member")])
        registry.register_relation_manager("PaymentMethodsRelationManager", "member")
        keys = PermissionCatalog(registry, ENABLED).enumerate_relation_permissions()
        assert keys == (
            "view_member__payment_methods",
            "create_member__payment_methods",
            "update_member__payment_methods",
            "delete_member__payment_methods",
        )

    def test_page_and_widget_permissions(self):
        registry = InMemoryResourceRegistry(
            pages=["app.pages.Settings"],
            widgets=["app.widgets.StatsOverview", "app.widgets.LatestOrders"],
        )
        catalog = PermissionCatalog(registry, ShieldSettings())
        assert catalog.enumerate_page_permissions() == ("page_Settings",)
        assert catalog.enumerate_widget_permissions() == (
            "widget_LatestOrders",
            "widget_StatsOverview",
        )

    def test_custom_permissions_merge_settings_and_skip_relation_keys(self):
        settings = ShieldSettings(custom_permissions=("export_reports", "send_invite"))
        catalog = PermissionCatalog(_member_registry(), settings)
        assert catalog.enumerate_custom_permissions() == ("send_invite", "export_reports")


class TestCatalogScenario:
    def test_relation_key_from_custom_list_is_not_duplicated(self):
        catalog = PermissionCatalog(_member_registry(), ENABLED)

        keys = catalog.all_permissions()

        assert set(keys) == {
            "view_member",
            "create_member",
            "send_invite",
            "view_member__history",
        }
        assert len(keys) == 4
        assert catalog.enumerate_custom_permissions() == ("send_invite",)
        assert catalog.classify("view_member__history") == BUCKET_RELATIONS

    def test_relation_key_kept_when_feature_disabled(self):
        catalog = PermissionCatalog(_member_registry(), ShieldSettings())
        keys = catalog.all_permissions()
        assert keys.count("view_member__history") == 1
        assert "send_invite" in keys

    def test_declared_relation_key_seeded_without_resources(self):
        settings = ShieldSettings(
            entities={
                "resources": False,
                "pages": True,
                "widgets": True,
                "custom_permissions": True,
            }
        )
        catalog = PermissionCatalog(_member_registry(), settings)

        keys = catalog.all_permissions()

        assert keys == ("send_invite", "view_member__history")
        store = InMemoryPermissionStore()
        seed_permissions(store, keys)
        assert "view_member__history" in store.permission_keys()

    def test_no_duplicates_across_catalog(self):
        registry = _member_registry()
        registry.register_resource(_resource("post"))
        registry.register_page("app.pages.Settings")
        registry.register_widget("app.widgets.StatsOverview")
        registry.register_custom_permission("view_member")
        keys = PermissionCatalog(registry, ENABLED).all_permissions()
        assert len(keys) == len(set(keys))

    def test_classify_buckets(self):
        registry = _member_registry()
        registry.register_page("app.pages.Settings")
        registry.register_widget("app.widgets.StatsOverview")
        catalog = PermissionCatalog(registry, ENABLED)

        assert catalog.classify("create_member") == BUCKET_RESOURCES
        assert catalog.classify("page_Settings") == BUCKET_PAGES
        assert catalog.classify("widget_StatsOverview") == BUCKET_WIDGETS
        assert catalog.classify("send_invite") == BUCKET_CUSTOM
        assert catalog.classify("anything__else") == BUCKET_RELATIONS

    def test_disabled_entities_are_left_out(self):
        registry = _member_registry()
        registry.register_page("app.pages.Settings")
        settings = ShieldSettings(
            entities={
                "resources": True,
                "pages": False,
                "widgets": True,
                "custom_permissions": False,
            }
        )
        keys = PermissionCatalog(registry, settings).all_permissions()
        assert "page_Settings" not in keys
        assert "send_invite" not in keys
        assert "view_member" in keys


# ── Grouping ─────────────────────────────────────────────────

class TestGrouping:
    def test_groups_by_owner_with_labels(self):
        catalog = PermissionCatalog(InMemoryResourceRegistry(), ENABLED)
        keys = [
            "view_member__history",
            "create_member__payment_methods",
            "view_team_member__notes",
            "view_member",
            "view_ghost__x",
        ]

        grouped = catalog.group_relation_permissions_by_owner(
            keys, owners=["member", "team_member"]
        )

        assert grouped == {
            "member": {
                "view_member__history": "View History",
                "create_member__payment_methods": "Create Payment Methods",
            },
            "team_member": {"view_team_member__notes": "View Notes"},
        }

    def test_owners_default_to_registered_resources(self):
        catalog = PermissionCatalog(_member_registry(), ENABLED)
        grouped = catalog.group_relation_permissions_by_owner(["view_member__history"])
        assert grouped == {"member": {"view_member__history": "View History"}}

    def test_malformed_keys_are_skipped_and_logged(self, caplog):
        catalog = PermissionCatalog(InMemoryResourceRegistry(), ENABLED)
        with caplog.at_level(logging.WARNING, logger="shield.catalog"):
            grouped = catalog.group_relation_permissions_by_owner(
                ["view_member__a__b", "view_member__history"],
                owners=["member"],
            )
        assert grouped == {"member": {"view_member__history": "View History"}}
        assert "view_member__a__b" in caplog.text


# ── Options / sections ───────────────────────────────────────

class TestOptions:
    def test_resource_options_raw_labels(self):
        registry = _member_registry()
        catalog = PermissionCatalog(registry, ENABLED)
        resource = registry.list_resources()[0]
        assert catalog.resource_permission_options(resource) == {
            "view_member": "view_member",
            "create_member": "create_member",
        }

    def test_resource_options_localized_labels(self):
        settings = ShieldSettings(localized_labels=True)
        registry = InMemoryResourceRegistry(resources=[_resource("member", ("view_any",))])
        catalog = PermissionCatalog(registry, settings)
        resource = registry.list_resources()[0]
        assert catalog.resource_permission_options(resource) == {"view_any_member": "View Any"}

    def test_custom_options_localized(self):
        settings = ShieldSettings(localized_labels=True)
        catalog = PermissionCatalog(_member_registry(), settings)
        assert catalog.custom_permission_options() == {"send_invite": "Send Invite"}

    def test_relation_options_read_persisted_keys(self):
        store = InMemoryPermissionStore()
        seed_permissions(
            store,
            ["view_member__history", "update_member__history", "view_post__comments"],
        )
        catalog = PermissionCatalog(_member_registry(), ENABLED, store=store)

        options = catalog.relation_permission_options("member")

        assert options == {
            "update_member__history": "Update History",
            "view_member__history": "View History",
        }

    def test_relation_options_respect_longer_owner_slug(self):
        registry = InMemoryResourceRegistry(
            resources=[_resource("member"), _resource("team_member")]
        )
        store = InMemoryPermissionStore()
        seed_permissions(store, ["view_member__history", "view_team_member__notes"])
        catalog = PermissionCatalog(registry, ENABLED, store=store)

        assert catalog.relation_permission_options("member") == {
            "view_member__history": "View History",
        }
        assert catalog.relation_permission_options("team_member") == {
            "view_team_member__notes": "View Notes",
        }
        sections = {section.slug: section for section in catalog.resource_sections()}
        assert "view_team_member__notes" not in sections["member"].relation_options

    def test_relation_manager_options_from_store(self):
        store = InMemoryPermissionStore()
        seed_permissions(store, ["view_member", "view_member__history", "delete_post__comments"])
        catalog = PermissionCatalog(_member_registry(), ENABLED, store=store)

        assert catalog.relation_manager_permission_options() == {
            "delete_post__comments": "delete_post__comments",
            "view_member__history": "view_member__history",
        }

    def test_relation_manager_options_from_enumeration_localized(self):
        settings = ShieldSettings(relation_managers_enabled=True, localized_labels=True)
        registry = _member_registry()
        registry.register_relation_manager("NotesRelationManager", "member", actions=("update",))
        catalog = PermissionCatalog(registry, settings)

        assert catalog.relation_manager_permission_options() == {
            "view_member__history": "View Member History",
            "update_member__notes": "Update Member Notes",
        }

    def test_relation_options_empty_when_disabled(self):
        catalog = PermissionCatalog(_member_registry(), ShieldSettings())
        assert catalog.relation_permission_options("member") == {}

    def test_sections_with_badges(self):
        registry = _member_registry()
        registry.register_page("app.pages.Settings")
        catalog = PermissionCatalog(registry, ENABLED)

        sections = {section.name: section for section in catalog.sections()}

        assert list(sections) == [BUCKET_RESOURCES, BUCKET_PAGES, BUCKET_CUSTOM]
        assert sections[BUCKET_RESOURCES].badge == 3
        assert sections[BUCKET_PAGES].options == {"page_Settings": "page_Settings"}
        assert sections[BUCKET_CUSTOM].badge == 1

    def test_simple_resource_view_lists_only_resource_keys(self):
        settings = ShieldSettings(relation_managers_enabled=True, simple_resource_permission_view=True)
        catalog = PermissionCatalog(_member_registry(), settings)
        resources = catalog.sections()[0]
        assert resources.name == BUCKET_RESOURCES
        assert set(resources.options) == {"view_member", "create_member"}

    def test_resource_sections(self):
        catalog = PermissionCatalog(_member_registry(), ENABLED)
        (section,) = catalog.resource_sections()
        assert section.slug == "member"
        assert section.label == "Member"
        assert section.relation_options == {"view_member__history": "View History"}


@pytest.mark.parametrize("slugs", [("member",), ("member", "post", "tag")])
def test_catalog_is_recomputed_per_call(slugs):
    registry = InMemoryResourceRegistry(resources=[_resource(s, ("view",)) for s in slugs])
    catalog = PermissionCatalog(registry, ShieldSettings())
    before = catalog.all_permissions()
    registry.register_resource(_resource("zeta", ("view",)))
    after = catalog.all_permissions()
    assert after == before + ("view_zeta",)
