"""
Screening flag registry.
"""

from typing import Dict, Iterable, List, Tuple

SOUND_TOO_SHORT = 'sound_too_short'
SOUND_TOO_LONG = 'sound_too_long'
BITRATE_TOO_LOW = 'bitrate_too_low'


def get_available_flags() -> Dict[str, str]:
    """
    Define screening flags available to screening results.

    Returns:
        Ordered mapping of flag code to human-readable label.
    """
    return {
        # Automatic checks.
        SOUND_TOO_SHORT: '< 1s duration',
        SOUND_TOO_LONG: '> 4s duration',
        BITRATE_TOO_LOW: 'Bitrate too low',
    }


def filter_allowed_flags(flags: Iterable[str]) -> Tuple[List[str], List[str]]:
    """
    Split flags into (allowed, dropped) against the registry.

    Order of first appearance is kept and duplicates are removed.
    """
    available = get_available_flags()
    allowed, dropped = [], []
    for flag in flags:
        target = allowed if flag in available else dropped
        if flag not in target:
            target.append(flag)
    return allowed, dropped
