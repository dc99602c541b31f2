"""
Screening results for submissions.

Every screening decision, human or automated, is appended to the submission's
event log. The current state is always recomputed from that log on read.
"""

from typing import Any, Dict, Iterable, Optional

from . import dao, rules
from .config import get_screening_author, is_auto_screening_enabled
from .flags import filter_allowed_flags
from .hooks import register_listener, SUBMISSION_CREATED
from .normalizer import parse_audio_file_meta
from .schema import DECISION_NONE, VOTING_DECISIONS, ScreeningAggregate
from ..util.logging import logger

AUTO_SCREENING_LISTENER = "auto_screening"


def bootstrap():
    """Register automated screening of newly created submissions."""
    if not is_auto_screening_enabled():
        logger.info("Automated screening disabled (AUTO_SCREENING_ENABLED=false)")
        return

    register_listener(SUBMISSION_CREATED, AUTO_SCREENING_LISTENER, inserted_submission)


def record_screening_result(submission_id: int, decision: Optional[str] = DECISION_NONE,
                            flags: Iterable[str] = (), author: Optional[str] = None) -> int:
    """
    Insert a new screening result.

    Args:
        submission_id: Id of the submission being screened
        decision: 'eligible', 'ineligible', or 'none'/None for no decision
        flags: Flag codes to assign; codes missing from the registry are dropped
        author: Who screened; defaults to the configured screening author

    Returns:
        Id of the appended event.
    """
    allowed, dropped = filter_allowed_flags(flags)
    if dropped:
        logger.log_flags_dropped(submission_id, dropped)

    decision = decision or DECISION_NONE
    author = author or get_screening_author()

    event_id = dao.add_screening_event(submission_id, decision, allowed, author)
    logger.log_screening_recorded(submission_id, decision, allowed, author)
    return event_id


def get_screening_results(submission_id: int) -> ScreeningAggregate:
    """
    Get the combined screening state of a submission.

    Eligible/ineligible votes are listed in event order; events without a
    decision are skipped. Flags are the union over every event.
    """
    results = ScreeningAggregate()

    for event in dao.list_screening_events(submission_id):
        if event.decision in VOTING_DECISIONS:
            results.decision.append(event.decision)

        results.flags.update(event.flags)

    return results


def inserted_submission(payload: Dict[str, Any], submission_id: int):
    """
    Assign screening flags to a newly inserted submission, if needed.

    Runs once per submission from the SUBMISSION_CREATED hook. Errors are
    logged and swallowed so the stored submission is unaffected.
    """
    try:
        meta, reason = parse_audio_file_meta((payload or {}).get('audio_file_meta'))
        if meta is None:
            logger.log_rule_evaluation(submission_id, [], status="skipped", details={"reason": reason})
            return

        flags = sorted(rules.evaluate(meta))
        logger.log_rule_evaluation(submission_id, flags)

        if flags:
            record_screening_result(submission_id, None, flags)
    except Exception as e:
        logger.log_rule_evaluation(submission_id, [], status="failed",
                                   details={"error_type": type(e).__name__, "error": str(e)[:100]})
