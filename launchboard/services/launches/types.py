"""Normalized listing record. Same shape for every tier; built once per store fetch and cached."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from launchboard.core.constants import ALWAYS_VISIBLE_TYPES, DEFAULT_CATEGORY, LISTING_BOOSTED, LISTING_PREMIUM, LISTING_REGULAR


@dataclass(frozen=True)
class Listing:
    id: str
    name: str
    launch_date: datetime
    description: str = ""
    website: str = ""
    logo: str | None = None
    category: str = DEFAULT_CATEGORY
    listing_type: str = LISTING_REGULAR
    upvotes: int = 0
    upvoted_by: frozenset[str] = field(default_factory=frozenset)
    do_follow_backlink: bool = False

    @property
    def always_visible(self) -> bool:
        return self.listing_type in ALWAYS_VISIBLE_TYPES

    @property
    def link_rel(self) -> str | None:
        """Outbound link annotation: paid tiers and do-follow listings pass link equity."""
        if self.listing_type in ALWAYS_VISIBLE_TYPES or self.do_follow_backlink:
            return None
        return "nofollow"

    @property
    def badge(self) -> str:
        if self.listing_type == LISTING_PREMIUM:
            return "Premium"
        if self.listing_type == LISTING_BOOSTED:
            return "Boosted"
        return self.category

    def to_dict(self, user_id: str | None = None) -> dict[str, Any]:
        """API shape. has_upvoted is relative to the requesting user (False when anonymous)."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "website": self.website,
            "logo": self.logo,
            "category": self.category,
            "listing_type": self.listing_type,
            "badge": self.badge,
            "launch_date": self.launch_date.isoformat(),
            "upvotes": self.upvotes,
            "has_upvoted": bool(user_id) and user_id in self.upvoted_by,
            "do_follow_backlink": self.do_follow_backlink,
            "rel": self.link_rel,
        }
