"""
Structured warning codes for snap computations and CLI runs.
Results carry these keys in `warnings`; map to user-facing messages in the host UI.
"""

# Known warning keys (returned in SnapResult.warnings / ResizeSnapResult.warnings)
SNAPPING_DISABLED = "snapping_disabled"
INVALID_THRESHOLD = "invalid_threshold"
INVALID_GRID_SIZE = "invalid_grid_size"
OBJECT_NOT_FOUND = "object_not_found"
RUN_FAILED = "run_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    SNAPPING_DISABLED: "Snapping is turned off.",
    INVALID_THRESHOLD: "Snap threshold must be positive. Snapping was skipped.",
    INVALID_GRID_SIZE: "Grid size must be positive. Grid snapping was skipped.",
    OBJECT_NOT_FOUND: "The selected object is not in the scene.",
    RUN_FAILED: "Run failed. Check the scene file and inputs.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
