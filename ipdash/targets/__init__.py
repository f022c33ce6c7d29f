"""Ping target registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ipdash.targets.base import PingTarget

_TARGET_MAP: dict[str, type[PingTarget]] | None = None


def _load_targets() -> dict[str, type[PingTarget]]:
    from ipdash.targets.cloudflare import CloudflareTarget
    from ipdash.targets.google import GoogleTarget
    from ipdash.targets.opendns import OpenDNSTarget
    from ipdash.targets.quad9 import Quad9Target

    # Insertion order is display order.
    return {
        "google": GoogleTarget,
        "cloudflare": CloudflareTarget,
        "opendns": OpenDNSTarget,
        "quad9": Quad9Target,
    }


def get_target_map() -> dict[str, type[PingTarget]]:
    """Return the mapping of slug → target class, loading lazily."""
    global _TARGET_MAP
    if _TARGET_MAP is None:
        _TARGET_MAP = _load_targets()
    return _TARGET_MAP


def get_target(slug: str) -> PingTarget:
    """Instantiate a target by slug (case-insensitive, not trimmed)."""
    tmap = get_target_map()
    key = slug.lower()
    if key not in tmap:
        raise ValueError(f"Unknown ping target: {slug!r}. Available: {list(tmap)}")
    return tmap[key]()


def list_targets() -> list[PingTarget]:
    """Return one instance of every registered target, in display order."""
    return [cls() for cls in get_target_map().values()]


def create_custom_target(url: str) -> PingTarget:
    """Create a :class:`CustomTarget` for a user-supplied probe URL.

    This is not registered in the static target map, so the HTTP API can
    never be pointed at an arbitrary URL.
    """
    from ipdash.targets.custom import CustomTarget

    return CustomTarget(url)
