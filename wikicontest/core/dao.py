"""
Persistence for submissions and their screening events.

Submissions are written once, in a single transaction. Screening events are
append-only: this module has no statement that updates or deletes them.
"""

import json
import sqlite3
from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .db import get_db
from .config import get_submission_author_id, get_unique_code_max_attempts, is_schema_validation_strict
from .errors import SubmissionStoreError, ScreeningStoreError
from .hooks import fire, SUBMISSION_CREATED
from .normalizer import generate_unique_code
from .schema import AudioFileMeta, CreationProcess, Submission, ScreeningEvent, DECISION_NONE, DECISIONS
from ..api.schemas import ScreeningRequest
from ..util.logging import logger

# Tag pair identifying screening results in the event table
SCREENING_EVENT_TYPE = 'workflow'
SCREENING_EVENT_AGENT = 'screening_result'

SUBMISSION_COLUMNS = [
    'id',
    'unique_code',
    'status',
    'submitter_name',
    'submitter_email',
    'submitter_country',
    'submitter_wiki_user',
    'submitter_phone',
    'submitter_pronouns',
    'explanation_creation',
    'explanation_inspiration',
    'creation_process',
    'contributing_authors',
    'audio_file',
    'audio_file_meta',
    'created_at',
]


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _load_json(value: Optional[str], default: Any) -> Any:
    if not value:
        return default
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring undecodable JSON column value: {str(value)[:50]}")
        return default


def _is_unique_code_collision(error: sqlite3.IntegrityError) -> bool:
    return 'unique_code' in str(error)


def _insert_submission(submission: Submission) -> int:
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute(
            '''
            INSERT INTO submissions (
                unique_code, title, status, author_id,
                submitter_name, submitter_email, submitter_country,
                submitter_wiki_user, submitter_phone, submitter_pronouns,
                explanation_creation, explanation_inspiration,
                creation_process, contributing_authors, audio_file, audio_file_meta
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''',
            (
                submission.unique_code,
                submission.title,
                submission.status,
                get_submission_author_id(),
                submission.submitter_name,
                submission.submitter_email,
                submission.submitter_country,
                submission.submitter_wiki_user,
                submission.submitter_phone,
                submission.submitter_pronouns,
                submission.explanation_creation,
                submission.explanation_inspiration,
                json.dumps(asdict(submission.creation_process)),
                json.dumps(list(submission.contributing_authors)),
                submission.audio_file,
                json.dumps(submission.audio_file_meta.to_dict()),
            )
        )
        conn.commit()
        return cursor.lastrowid


def create_submission(submission: Submission) -> int:
    """
    Persist a submission and notify SUBMISSION_CREATED listeners.

    A unique code that collides with an existing one is regenerated, up to
    UNIQUE_CODE_MAX_ATTEMPTS times. Raises SubmissionStoreError if the
    submission could not be written; in that case no row exists for it.
    """
    max_attempts = get_unique_code_max_attempts()
    submission_id = None

    for attempt in range(1, max_attempts + 1):
        try:
            submission_id = _insert_submission(submission)
            break
        except sqlite3.IntegrityError as e:
            if not _is_unique_code_collision(e):
                logger.log_submission_failed(submission.unique_code, e, attempt)
                raise SubmissionStoreError(f"Failed to store submission: {e}", original_error=e) from e
            logger.log_unique_code_collision(submission.unique_code, attempt)
            submission.unique_code = generate_unique_code()
        except sqlite3.Error as e:
            logger.log_submission_failed(submission.unique_code, e, attempt)
            raise SubmissionStoreError(f"Failed to store submission: {e}", original_error=e) from e

    if submission_id is None:
        raise SubmissionStoreError.from_collisions(max_attempts)

    submission.id = submission_id
    payload = submission.to_dict()
    logger.log_submission_created(submission_id, submission.unique_code, payload)

    fire(SUBMISSION_CREATED, payload, submission_id)

    return submission_id


def get_submission(submission_id: int) -> Optional[Submission]:
    """Get a stored submission by id."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"SELECT {', '.join(SUBMISSION_COLUMNS)} FROM submissions WHERE id = ?",
                (submission_id,)
            )
            row = cursor.fetchone()
    except sqlite3.Error as e:
        raise SubmissionStoreError(f"Failed to read submission {submission_id}: {e}", original_error=e) from e

    if not row:
        return None

    data = dict(zip(SUBMISSION_COLUMNS, row))
    data['creation_process'] = CreationProcess(**_load_json(data['creation_process'], {}))
    data['contributing_authors'] = _load_json(data['contributing_authors'], [])
    data['audio_file_meta'] = AudioFileMeta.from_dict(_load_json(data['audio_file_meta'], {}))
    data['created_at'] = _parse_timestamp(data['created_at'])
    return Submission(**data)


def get_submission_count() -> int:
    """Get count of stored submissions."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM submissions")
            result = cursor.fetchone()
            return result[0] if result else 0
    except sqlite3.Error as e:
        logger.error(f"Failed to get submission count: {e}")
        return 0


def add_screening_event(submission_id: int, decision: Optional[str], flags: Iterable[str], author: str) -> int:
    """
    Append a screening event for a submission.

    The decision and flags are stored as a JSON body {"status", "flags"}; the
    flags are duplicated into their own column for querying. Flags must
    already be filtered against the registry. A decision outside DECISIONS
    raises ScreeningStoreError whether or not strict validation is on.
    """
    decision = decision or DECISION_NONE
    flags = list(flags)

    if decision not in DECISIONS:
        logger.error(f"Rejected screening event for submission {submission_id}: unknown decision {decision!r}")
        raise ScreeningStoreError.from_invalid_decision(submission_id, decision)

    if is_schema_validation_strict():
        try:
            ScreeningRequest(decision=decision, flags=flags, author=author)
        except ValidationError as e:
            logger.error(f"Schema validation failed for screening event: {e}")
            raise ScreeningStoreError(f"Invalid screening event: {e}", original_error=e,
                                      submission_id=submission_id) from e

    content = json.dumps({"status": decision, "flags": flags})

    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM submissions WHERE id = ?", (submission_id,))
            if cursor.fetchone() is None:
                raise ScreeningStoreError.from_missing_submission(submission_id)

            cursor.execute(
                '''
                INSERT INTO screening_events (submission_id, event_type, agent, decision, author, content, flags)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ''',
                (submission_id, SCREENING_EVENT_TYPE, SCREENING_EVENT_AGENT,
                 decision, author, content, json.dumps(flags))
            )
            conn.commit()
            return cursor.lastrowid
    except sqlite3.Error as e:
        logger.error(f"Database error during add_screening_event for submission {submission_id}: {e}")
        raise ScreeningStoreError(f"Failed to store screening event: {e}", original_error=e,
                                  submission_id=submission_id) from e


def list_screening_events(submission_id: int) -> List[ScreeningEvent]:
    """List every screening event for a submission, oldest first."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                '''
                SELECT id, submission_id, decision, flags, author, created_at
                FROM screening_events
                WHERE submission_id = ? AND event_type = ? AND agent = ?
                ORDER BY id ASC
                ''',
                (submission_id, SCREENING_EVENT_TYPE, SCREENING_EVENT_AGENT)
            )
            rows = cursor.fetchall()
    except sqlite3.Error as e:
        raise ScreeningStoreError(f"Failed to read screening events: {e}", original_error=e,
                                  submission_id=submission_id) from e

    events = []
    for event_id, sub_id, decision, flags, author, created_at in rows:
        events.append(ScreeningEvent(
            id=event_id,
            submission_id=sub_id,
            decision=decision,
            flags=tuple(_load_json(flags, [])),
            author=author,
            created_at=_parse_timestamp(created_at),
        ))
    return events


def get_screening_event_body(event_id: int) -> Dict[str, Any]:
    """Decoded JSON body of a single screening event."""
    with get_db() as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT content FROM screening_events WHERE id = ?", (event_id,))
        row = cursor.fetchone()
    return _load_json(row[0], {}) if row else {}
