"""
Sync configuration constants.

Contains configuration values for sync behavior that are not
deployment-specific (those live in app.config.Settings).
"""


class SyncConfig:
    """Configuration for sync behavior."""

    # Machine type pulled by the batch sync when none is configured
    DEFAULT_ACTIVITY_TYPE = "rower"

    # Delay before the first scheduled run after startup (seconds)
    BACKGROUND_SYNC_STARTUP_DELAY_SECONDS = 30

    # Pause between accounts in one run (seconds) to stay polite to the API
    API_CALL_DELAY = 0.5
