"""
Structured operation logging for intake and screening.
Submitter personal data is redacted before it reaches a log line.
"""

import logging
from typing import Any, Dict, List

# Submission fields that identify a person
SENSITIVE_FIELDS = [
    'submitter_name',
    'submitter_email',
    'submitter_phone',
    'submitter_wiki_user',
    'submitter_pronouns',
    'submitter_country',
]


class StructuredLogger:
    """Structured logger for intake, hook dispatch and screening operations."""

    def __init__(self, name: str = "wikicontest"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_submission_created(self, submission_id: int, unique_code: str, payload: Dict[str, Any] = None):
        """Log a stored submission."""
        details = {"submission_id": submission_id, "unique_code": unique_code}
        if payload:
            details["payload"] = sanitize_payload(payload)

        self.log_operation("submission.created", "success", details)

    def log_submission_failed(self, unique_code: str, error: Exception, attempt: int = 1):
        """Log a failed submission write."""
        details = {
            "unique_code": unique_code,
            "attempt": attempt,
            "error_type": type(error).__name__,
            "error": str(error)[:100],
        }
        self.log_operation("submission.create", "failed", details, level=logging.ERROR)

    def log_unique_code_collision(self, unique_code: str, attempt: int):
        self.log_operation("submission.unique_code", "collision",
                           {"unique_code": unique_code, "attempt": attempt},
                           level=logging.WARNING)

    def log_audio_meta_rejected(self, reason: str):
        """Log an audio meta blob that could not be parsed."""
        self.log_operation("normalize.audio_file_meta", "ignored", {"reason": reason[:100]},
                           level=logging.WARNING)

    def log_screening_recorded(self, submission_id: int, decision: str, flags: List[str], author: str):
        """Log an appended screening event."""
        details = {
            "submission_id": submission_id,
            "decision": decision,
            "flags": flags,
            "author": author,
        }
        self.log_operation("screening.recorded", "success", details)

    def log_flags_dropped(self, submission_id: int, dropped: List[str]):
        """Log flag codes removed by the allow-list."""
        details = {"submission_id": submission_id, "dropped": dropped}
        self.log_operation("screening.flags", "dropped", details, level=logging.WARNING)

    def log_rule_evaluation(self, submission_id: int, flags: List[str], status: str = "success", details: Dict[str, Any] = None):
        """Log an automated rule engine run."""
        log_details = {"submission_id": submission_id, "flags": flags}
        if details:
            log_details.update(details)

        level = logging.ERROR if status == "failed" else logging.INFO
        self.log_operation("screening.rules", status, log_details, level=level)

    def log_hook_failure(self, event: str, listener: str, error: Exception):
        """Log a listener that raised during dispatch."""
        details = {
            "event": event,
            "listener": listener,
            "error_type": type(error).__name__,
            "error": str(error)[:100],
        }
        self.log_operation(f"hook.{event}", "failed", details, level=logging.ERROR)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for logging."""
    if sensitive_fields is None:
        sensitive_fields = SENSITIVE_FIELDS

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload]
    else:
        return payload


# Global logger instance
logger = StructuredLogger()
