"""Centralized cache invalidation helpers for standings payloads."""
from services.report_cache import invalidate_prefix


def invalidate_standings_caches(season_id: str | None = None, series_id: str | None = None) -> None:
    """Invalidate cached payloads affected by result submissions or rebuilds."""
    invalidate_prefix('standings:season:')
    invalidate_prefix('players:')
    invalidate_prefix('tournaments:')
    if series_id:
        invalidate_prefix(f'standings:series:{series_id}')
    if season_id:
        invalidate_prefix(f'qualification:{season_id}:')
