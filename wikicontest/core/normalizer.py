"""
Build a Submission from a label-keyed form record.
"""

import json
import math
import re
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from .schema import AudioFileMeta, CreationProcess, Submission
from ..util.logging import logger

CONTRIBUTOR_SLOTS = [f"contributor_{n}" for n in range(1, 9)]

SUBMITTER_FIELDS = [
    'submitter_name',
    'submitter_email',
    'submitter_country',
    'submitter_wiki_user',
    'submitter_phone',
    'submitter_pronouns',
]

EXPLANATION_FIELDS = ['explanation_creation', 'explanation_inspiration']

CREATION_PROCESS_FIELDS = [
    'all_original_sounds',
    'cc0_or_public_domain',
    'used_prerecorded_sounds',
    'used_soundpack_library',
    'used_samples',
    'source_urls',
]

_TAG_RE = re.compile(r'<[^>]*>')
_SCRIPT_RE = re.compile(r'<(script|style)[^>]*?>.*?</\1>', re.IGNORECASE | re.DOTALL)
_OCTET_RE = re.compile(r'%[a-fA-F0-9]{2}')
_INT_RE = re.compile(r'^\s*([+-]?\d+)')
_FLOAT_RE = re.compile(r'^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def _strip_octets(text: str) -> str:
    # Removing one octet can expose another, e.g. "%%4141"
    while _OCTET_RE.search(text):
        text = _OCTET_RE.sub('', text)
    return text


def _strip_tags(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, (dict, list)):
        return ''
    text = str(value)
    text = _SCRIPT_RE.sub('', text)
    return _TAG_RE.sub('', text)


def sanitize_text_field(value: Any) -> str:
    """Plain single-line text: tags, line breaks, url octets and extra whitespace removed."""
    text = _strip_tags(value)
    text = _strip_octets(text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip()


def sanitize_textarea_field(value: Any) -> str:
    """Like sanitize_text_field, but line breaks survive."""
    text = _strip_tags(value)
    text = _strip_octets(text)
    lines = [re.sub(r'[ \t\f\v]+', ' ', line).strip() for line in text.splitlines()]
    return '\n'.join(lines).strip()


def absint(value: Any) -> int:
    """Non-negative integer; negative or unparseable input becomes 0."""
    if isinstance(value, bool):
        number = int(value)
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value) if math.isfinite(value) else 0
    elif isinstance(value, str):
        match = _INT_RE.match(value)
        number = int(match.group(1)) if match else 0
    else:
        number = 0
    return max(number, 0)


def floatval(value: Any) -> float:
    """Floating point value; unparseable or non-finite input becomes 0.0."""
    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _FLOAT_RE.match(value)
        number = float(match.group(1)) if match else 0.0
    else:
        number = 0.0
    return number if math.isfinite(number) else 0.0


# Allowed audio meta keys and the sanitizer applied to each
AUDIO_META_SANITIZERS: Dict[str, Callable[[Any], Any]] = {
    'name': sanitize_text_field,
    'type': sanitize_text_field,
    'size': absint,
    'sampleRate': absint,
    'numberOfChannels': absint,
    'duration': floatval,
}


def parse_audio_file_meta(raw: Any) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Decode the audio meta blob posted by the submission form.

    Returns (data, None) on success and (None, reason) when the blob is
    missing or not a JSON object. Both outcomes are expected.
    """
    if raw is None or raw == '':
        return None, "missing"

    if isinstance(raw, dict):
        return raw, None

    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        return None, f"invalid JSON: {e}"

    if not isinstance(data, dict):
        return None, f"expected an object, got {type(data).__name__}"

    return data, None


def sanitize_audio_file_meta(data: Optional[Dict[str, Any]]) -> AudioFileMeta:
    """Keep allowed keys only, sanitizing each one that is present."""
    if not data:
        return AudioFileMeta()

    sanitized = {
        key: sanitizer(data[key])
        for key, sanitizer in AUDIO_META_SANITIZERS.items()
        if data.get(key) is not None
    }
    return AudioFileMeta.from_dict(sanitized)


def collect_contributing_authors(record: Dict[str, Any]) -> List[str]:
    """Non-empty contributor slot values, in slot order."""
    authors = []
    for slot in CONTRIBUTOR_SLOTS:
        name = sanitize_text_field(record.get(slot))
        if name:
            authors.append(name)
    return authors


def generate_unique_code() -> str:
    return uuid.uuid4().hex


def normalize(record: Dict[str, Any], unique_code: Optional[str] = None) -> Submission:
    """
    Extract and sanitize the expected submission fields from a resolved record.

    Missing text fields default to an empty string, a missing audio file to
    None, and a missing or malformed audio meta blob to empty metadata.
    """
    meta_data, reason = parse_audio_file_meta(record.get('audio_file_meta'))
    if reason and reason != "missing":
        logger.log_audio_meta_rejected(reason)

    creation_process = CreationProcess(**{
        name: sanitize_textarea_field(record.get(name))
        for name in CREATION_PROCESS_FIELDS
    })

    text_fields = {name: sanitize_text_field(record.get(name)) for name in SUBMITTER_FIELDS}
    text_fields.update({name: sanitize_textarea_field(record.get(name)) for name in EXPLANATION_FIELDS})

    audio_file = record.get('audio_file')

    return Submission(
        unique_code=unique_code or generate_unique_code(),
        status='draft',
        creation_process=creation_process,
        contributing_authors=collect_contributing_authors(record),
        audio_file=str(audio_file) if audio_file else None,
        audio_file_meta=sanitize_audio_file_meta(meta_data),
        **text_fields,
    )
