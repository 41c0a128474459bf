"""Standard logging tags for consistent log filtering.

Usage:
    from core.logging.tags import TAG_SNAP
    logger.debug("%s Commit skipped: container unmeasured", TAG_SNAP)
"""

# =============================================================================
# Engine Tags
# =============================================================================

TAG_LAYOUT = "[LAYOUT]"
"""Layout model mutations (selection, commits, seeding)."""

TAG_DRAG = "[DRAG]"
"""Drag session lifecycle and pointer routing."""

TAG_SNAP = "[SNAP]"
"""Snap-to-grid computations and commits."""

TAG_CONTAINER = "[CONTAINER]"
"""Container measurement and viewport resizes."""

# =============================================================================
# Status Tags
# =============================================================================

TAG_SKIPPED = "[SKIPPED]"
"""A request that degraded to a silent no-op."""

TAG_FALLBACK = "[FALLBACK]"
"""A configuration value replaced by its default."""
