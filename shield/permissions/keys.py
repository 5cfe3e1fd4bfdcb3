"""
Shield Permissions - Permission Key Formatter
=============================================
Pure functions deriving canonical permission keys.

Key forms:
    {action}_{resource_slug}                     resource-scoped
    {action}_{resource_slug}__{relation_slug}    relation-scoped
    {prefix}_{ClassBasename}                     page / widget

The double underscore is reserved as the resource/relation separator.
A key is relation-scoped iff it contains it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from django.utils.text import camel_case_to_spaces

from shield.permissions.constants import (
    ACTION_SEPARATOR,
    DEFAULT_RELATION_ACTIONS,
    DEFAULT_RESOURCE_ACTIONS,
    RELATION_MANAGER_SUFFIX,
    RELATION_SEPARATOR,
)
from shield.permissions.errors import InvalidSlugError, MalformedKeyError

Identity = Union[str, type]

_OWNER_PATTERN = re.compile(
    r"(?:^|\.)resources\.(\w+?)_?resource\.relation_?managers\.",
    re.IGNORECASE,
)
_WORD_SPLIT = re.compile(r"[\s_\-]+")


@dataclass(frozen=True)
class ParsedKey:
    action: str
    resource_slug: str
    relation_slug: Optional[str] = None

    @property
    def is_relation(self) -> bool:
        return self.relation_slug is not None


def _require_segment(value, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidSlugError(str(value), field, "must be a non-empty string")
    if RELATION_SEPARATOR in value:
        raise InvalidSlugError(value, field)
    return value


def identity_path(identity: Identity) -> str:
    """Dotted path for a class or a dotted/backslash identity string."""
    if isinstance(identity, type):
        return f"{identity.__module__}.{identity.__qualname__}"
    if not isinstance(identity, str):
        raise InvalidSlugError(str(identity), "identity", "must be a class or string")
    return identity.strip().replace("\\", ".").strip(".")


def class_basename(identity: Identity) -> str:
    return identity_path(identity).rsplit(".", 1)[-1]


def _snake(value: str) -> str:
    words = _WORD_SPLIT.split(camel_case_to_spaces(value))
    return ACTION_SEPARATOR.join(word for word in words if word)


def relation_slug_for(identity: Identity) -> str:
    """
    Derive the relation slug from a relation manager identity.

    HistoryRelationManager -> history
    PaymentMethodsRelationManager -> payment_methods
    """
    name = class_basename(identity)
    if name.endswith(RELATION_MANAGER_SUFFIX) and name != RELATION_MANAGER_SUFFIX:
        name = name[: -len(RELATION_MANAGER_SUFFIX)]
    slug = _snake(name)
    if not slug:
        raise InvalidSlugError(
            identity_path(identity),
            "relation_manager",
            "does not yield a relation slug",
        )
    return _require_segment(slug, "relation_slug")


def owner_slug_from_identity(identity: Identity) -> Optional[str]:
    """
    Extract the owning resource slug from a relation manager path.

    app.admin.resources.member_resource.relation_managers.HistoryRelationManager -> member
    App\\Admin\\Resources\\BlogPostResource\\RelationManagers\\X -> blog-post
    """
    match = _OWNER_PATTERN.search(identity_path(identity))
    if match is None:
        return None
    slug = _snake(match.group(1)).replace(ACTION_SEPARATOR, "-")
    return slug or None


def format_resource_key(action: str, resource_slug: str) -> str:
    _require_segment(action, "action")
    _require_segment(resource_slug, "resource_slug")
    key = f"{action}{ACTION_SEPARATOR}{resource_slug}"
    if RELATION_SEPARATOR in key:
        raise InvalidSlugError(key, "permission_key", "would form the reserved '__' separator")
    return key


def format_relation_key(
    action: str,
    owner_resource_slug: str,
    relation_manager: Identity,
) -> str:
    resource_key = format_resource_key(action, owner_resource_slug)
    relation_slug = relation_slug_for(relation_manager)
    return f"{resource_key}{RELATION_SEPARATOR}{relation_slug}"


def format_entity_key(prefix: str, identity: Identity) -> str:
    """Page/widget key: prefix joined with the class basename."""
    _require_segment(prefix, "prefix")
    return format_resource_key(prefix, class_basename(identity))


def is_relation_key(key: str) -> bool:
    return RELATION_SEPARATOR in key


def parse_key(
    key: str,
    resource_slug: Optional[str] = None,
    actions: Optional[Iterable[str]] = None,
) -> ParsedKey:
    """
    Split a key into action, resource slug and optional relation slug.

    With resource_slug given, the slug is located as the suffix of the
    resource part. Without it, the longest known action prefix wins, then
    the first underscore, so a slug that itself starts with an action word
    ("any_member" under "view") splits differently from how it was
    formatted. Pass resource_slug whenever an exact round-trip matters.
    """
    if not isinstance(key, str) or not key:
        raise MalformedKeyError(str(key), "key is empty")

    head, separator, relation_slug = key.partition(RELATION_SEPARATOR)
    if separator and not relation_slug:
        raise MalformedKeyError(key, "relation segment is empty")
    if RELATION_SEPARATOR in relation_slug:
        raise MalformedKeyError(key, "more than one relation separator")

    if resource_slug is not None:
        suffix = f"{ACTION_SEPARATOR}{resource_slug}"
        if not head.endswith(suffix) or len(head) <= len(suffix):
            raise MalformedKeyError(key, f"resource slug '{resource_slug}' not found")
        action = head[: -len(suffix)]
        slug = resource_slug
    else:
        known = actions if actions is not None else (
            DEFAULT_RESOURCE_ACTIONS + DEFAULT_RELATION_ACTIONS
        )
        action, slug = "", ""
        for candidate in sorted(set(known), key=len, reverse=True):
            prefix = f"{candidate}{ACTION_SEPARATOR}"
            if head.startswith(prefix) and len(head) > len(prefix):
                action, slug = candidate, head[len(prefix):]
                break
        else:
            action, _, slug = head.partition(ACTION_SEPARATOR)

    if not action or not slug:
        raise MalformedKeyError(key, "no action/slug split")

    return ParsedKey(
        action=action,
        resource_slug=slug,
        relation_slug=relation_slug or None,
    )


def headline(value: str) -> str:
    """view_any -> View Any, SendInvite -> Send Invite."""
    words = _WORD_SPLIT.split(camel_case_to_spaces(value))
    return " ".join(word.capitalize() for word in words if word)


def relation_label(action: str, relation_slug: str) -> str:
    return f"{headline(action)} {headline(relation_slug)}"


def is_relation_key_of(key: str, owner_resource_slug: str) -> bool:
    """True when key is relation-scoped under the given owning resource."""
    head, separator, relation_slug = key.partition(RELATION_SEPARATOR)
    if not separator or not relation_slug:
        return False
    suffix = f"{ACTION_SEPARATOR}{owner_resource_slug}"
    return head.endswith(suffix) and len(head) > len(suffix)
