"""
Shared data model: the immutable content snapshot every analyzer reads, and
the serialization base used by every audit section.

Sections are plain dataclasses with snake_case attributes. ``to_dict()``
emits the camelCase document consumed by the admin UI and the content
generation pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

# Attribute names whose camelCase form is not a plain title-casing
_KEY_OVERRIDES: Dict[str, str] = {
    "uses_cta": "usesCTA",
    "has_webp": "hasWebP",
}


def camel_key(name: str) -> str:
    """``posts_with_meta_desc`` -> ``postsWithMetaDesc``."""
    if name in _KEY_OVERRIDES:
        return _KEY_OVERRIDES[name]
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _serialize(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {
            camel_key(f.name): _serialize(getattr(value, f.name))
            for f in fields(value)
        }
    if isinstance(value, Mapping):
        return {str(k): _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


class AuditSection:
    """Mixin for audit section dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        return _serialize(self)


# ---------------------------------------------------------------------------
# Content snapshot
# ---------------------------------------------------------------------------

Record = Dict[str, Any]


def _records(items: Any) -> Tuple[Record, ...]:
    """Coerce a fetched collection to a tuple of dict records."""
    if not isinstance(items, (list, tuple)):
        return ()
    return tuple(item for item in items if isinstance(item, dict))


@dataclass(frozen=True)
class ContentSnapshot:
    """
    Everything fetched for one audit.

    Built once per audit and never mutated. Collections that could not be
    fetched are empty tuples, never ``None``.
    """

    posts: Tuple[Record, ...] = ()
    drafts: Tuple[Record, ...] = ()
    pages: Tuple[Record, ...] = ()
    media: Tuple[Record, ...] = ()
    media_total: int = 0
    categories: Tuple[Record, ...] = ()
    tags: Tuple[Record, ...] = ()
    users: Tuple[Record, ...] = ()
    plugins: Tuple[Record, ...] = ()
    themes: Tuple[Record, ...] = ()
    settings: Record = field(default_factory=dict)
    site_name: str = ""
    site_url: str = ""

    @classmethod
    def build(
        cls,
        *,
        posts: Any = (),
        drafts: Any = (),
        pages: Any = (),
        media: Any = (),
        media_total: Optional[int] = None,
        categories: Any = (),
        tags: Any = (),
        users: Any = (),
        plugins: Any = (),
        themes: Any = (),
        settings: Optional[Mapping[str, Any]] = None,
        site_name: str = "",
        site_url: str = "",
    ) -> "ContentSnapshot":
        """Build a snapshot from raw API payloads, tolerating junk."""
        media_records = _records(media)
        total = media_total if isinstance(media_total, int) and media_total > 0 else len(media_records)
        return cls(
            posts=_records(posts),
            drafts=_records(drafts),
            pages=_records(pages),
            media=media_records,
            media_total=total,
            categories=_records(categories),
            tags=_records(tags),
            users=_records(users),
            plugins=_records(plugins),
            themes=_records(themes),
            settings=dict(settings) if isinstance(settings, Mapping) else {},
            site_name=site_name or "",
            site_url=site_url or "",
        )

    @property
    def active_plugins(self) -> Tuple[Record, ...]:
        return tuple(p for p in self.plugins if p.get("status") == "active")

    @property
    def active_theme(self) -> Optional[Record]:
        for theme in self.themes:
            if theme.get("status") == "active":
                return theme
        return None
