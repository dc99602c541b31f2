"""
Automatic screening rules applied to a submission's audio metadata.
"""

from typing import Any, Dict, Optional, Set, Union

from .flags import SOUND_TOO_SHORT, SOUND_TOO_LONG, BITRATE_TOO_LOW
from .normalizer import sanitize_audio_file_meta
from .schema import AudioFileMeta

MIN_DURATION_SEC = 1.0
MAX_DURATION_SEC = 4.0

# Bitrate is approximated as sample rate times a fixed 32-bit sample depth.
# This treats sample rate as if it were bitrate; kept as-is until the
# intended threshold is confirmed.
ASSUMED_BITS_PER_SAMPLE = 32
MIN_BITRATE = 192 * 1024


def _coerce_meta(meta: Union[AudioFileMeta, Dict[str, Any], None]) -> Optional[AudioFileMeta]:
    if meta is None:
        return None
    if isinstance(meta, AudioFileMeta):
        return meta
    if isinstance(meta, dict):
        # Raw form values may be strings; coerce them the way intake does
        return sanitize_audio_file_meta(meta)
    return None


def evaluate(meta: Union[AudioFileMeta, Dict[str, Any], None]) -> Set[str]:
    """
    Evaluate every rule against the metadata and return the flags that fire.

    Rules are independent and may co-fire. A rule whose input field is absent
    is skipped; absent or empty metadata yields no flags at all.
    """
    meta = _coerce_meta(meta)
    if meta is None or meta.is_empty():
        return set()

    flags = set()

    if meta.duration is not None:
        if meta.duration < MIN_DURATION_SEC:
            flags.add(SOUND_TOO_SHORT)

        if meta.duration > MAX_DURATION_SEC:
            flags.add(SOUND_TOO_LONG)

    if meta.sample_rate is not None:
        if meta.sample_rate * ASSUMED_BITS_PER_SAMPLE < MIN_BITRATE:
            flags.add(BITRATE_TOO_LOW)

    return flags
