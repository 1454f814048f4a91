"""Service layer package.

Exports high-level services consumed by orchestration / presentation layers.
"""

from .refresh_service import ActivityRefreshService, RefreshServiceConfig

__all__ = ["ActivityRefreshService", "RefreshServiceConfig"]
