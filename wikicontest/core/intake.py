"""
Handle a form submitted through the contest entry form.
"""

from typing import Dict, Optional, Union

from . import dao
from .field_mapper import resolve
from .normalizer import normalize
from .schema import FormSchema, Submission


def process_entry(entry: Dict[str, Optional[str]], form: Union[FormSchema, Dict]) -> Submission:
    """
    Turn a validated form entry into a stored submission.

    The entry is resolved against the form's labels, normalized, and written
    to the submission store, which fires SUBMISSION_CREATED on success.
    Store failures propagate as SubmissionStoreError.
    """
    if isinstance(form, dict):
        form = FormSchema.from_dict(form)

    record = resolve(form, entry)
    submission = normalize(record)
    dao.create_submission(submission)
    return submission
