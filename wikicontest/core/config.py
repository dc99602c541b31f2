"""
Contest intake configuration.
All settings come from environment variables so deployments and tests can override them.
"""

import os
from pathlib import Path

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/contest.db")

DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# Automated screening (rule engine) runs after every stored submission
AUTO_SCREENING_ENABLED = os.getenv("AUTO_SCREENING_ENABLED", "true").lower() == "true"

# Author recorded on automated screening events
SCREENING_AUTHOR = os.getenv("SCREENING_AUTHOR", "Wikimedia Contest")

# Owner assigned to newly stored submissions
SUBMISSION_AUTHOR_ID = int(os.getenv("SUBMISSION_AUTHOR_ID", "1"))

# How many times a colliding unique code is regenerated before giving up
UNIQUE_CODE_MAX_ATTEMPTS = int(os.getenv("UNIQUE_CODE_MAX_ATTEMPTS", "5"))

SCHEMA_VALIDATION_STRICT = os.getenv("SCHEMA_VALIDATION_STRICT", "false").lower() == "true"

VERSION = "1.0.0"


def get_db_path() -> str:
    """Database path, read on every call so it can be redirected at runtime."""
    return os.getenv("DB_PATH", DB_PATH)


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def is_auto_screening_enabled():
    """Check if automated rule screening should be registered."""
    return os.getenv("AUTO_SCREENING_ENABLED", "true").lower() == "true"


def get_screening_author():
    return os.getenv("SCREENING_AUTHOR", SCREENING_AUTHOR)


def get_submission_author_id() -> int:
    return int(os.getenv("SUBMISSION_AUTHOR_ID", str(SUBMISSION_AUTHOR_ID)))


def get_unique_code_max_attempts() -> int:
    return int(os.getenv("UNIQUE_CODE_MAX_ATTEMPTS", str(UNIQUE_CODE_MAX_ATTEMPTS)))


def is_schema_validation_strict():
    return os.getenv("SCHEMA_VALIDATION_STRICT", "false").lower() == "true"


def ensure_db_directory():
    """Ensure the database directory exists."""
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    try:
        if get_unique_code_max_attempts() < 1:
            issues.append("UNIQUE_CODE_MAX_ATTEMPTS must be >= 1")
    except ValueError:
        issues.append(f"Invalid UNIQUE_CODE_MAX_ATTEMPTS: {os.getenv('UNIQUE_CODE_MAX_ATTEMPTS')}")

    try:
        get_submission_author_id()
    except ValueError:
        issues.append(f"Invalid SUBMISSION_AUTHOR_ID: {os.getenv('SUBMISSION_AUTHOR_ID')}")

    if not get_screening_author().strip():
        issues.append("SCREENING_AUTHOR cannot be empty")

    return issues
