"""Project-wide constants for the level codec."""


class Config:
    # Canonical format
    FORMAT_VERSION = "1.0.0"  # MAJOR.MINOR.PATCH, only MAJOR is compared
    JSON_INDENT = 2

    # Shareable codes
    SHARE_BUDGET_BYTES = 2000  # safe limit for URLs on most systems
    COMPRESSION_LEVEL = 9
    MAX_CODE_LENGTH = 8 * 1024 * 1024
    MAX_INFLATED_BYTES = 16 * 1024 * 1024

    # Imports
    MAX_IMPORT_BYTES = 16 * 1024 * 1024
    QUICK_CHECK_MAX_GRID = 1000  # loose sanity bound for decoded payloads

    # Grid and field limits
    MIN_GRID_SIZE = 5
    MAX_GRID_SIZE = 100
    MAX_ID_LENGTH = 100
    MAX_NAME_LENGTH = 100
    MAX_AUTHOR_LENGTH = 50
    MAX_DESCRIPTION_LENGTH = 500
    MIN_HEALTH = 1
    MAX_HEALTH = 10
    DEFAULT_HEALTH = 1
    MIN_BALL_SPEED = 0.5
    MAX_BALL_SPEED = 5.0
    MIN_PADDLE_SIZE = 50
    MAX_PADDLE_SIZE = 200

    # Persistence
    STORAGE_NAMESPACE = "levelcode.levels.v1"
    UNTITLED_NAME = "Untitled Level"
