"""
Data shapes for form intake and screening.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Dict, List, Optional, Set

DECISION_ELIGIBLE = "eligible"
DECISION_INELIGIBLE = "ineligible"
DECISION_NONE = "none"

DECISIONS = [DECISION_ELIGIBLE, DECISION_INELIGIBLE, DECISION_NONE]

# Decisions counted as votes in the aggregate
VOTING_DECISIONS = [DECISION_ELIGIBLE, DECISION_INELIGIBLE]


@dataclass(frozen=True)
class SubInputDefinition:
    key: str
    label: str


@dataclass(frozen=True)
class FieldDefinition:
    id: str
    label: str
    admin_label: Optional[str] = None
    inputs: tuple = ()  # SubInputDefinition, empty for single-value fields

    @property
    def resolved_label(self) -> str:
        """Admin label if set, the user-facing label otherwise."""
        return self.admin_label or self.label


@dataclass(frozen=True)
class FormSchema:
    fields: tuple  # FieldDefinition, in form order
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict) -> 'FormSchema':
        """Build a schema from the forms platform's JSON shape."""
        fields = []
        for raw_field in data.get('fields') or []:
            inputs = tuple(
                SubInputDefinition(key=str(raw_input.get('key') or ''), label=str(raw_input.get('label') or ''))
                for raw_input in (raw_field.get('inputs') or [])
            )
            fields.append(FieldDefinition(
                id=str(raw_field['id']),
                label=str(raw_field.get('label') or ''),
                admin_label=raw_field.get('admin_label') or raw_field.get('adminLabel') or None,
                inputs=inputs,
            ))

        form_id = data.get('id')
        return cls(fields=tuple(fields), id=str(form_id) if form_id is not None else None)


@dataclass
class AudioFileMeta:
    """Client-reported audio properties. Absent keys stay None and are not stored."""
    name: Optional[str] = None
    type: Optional[str] = None
    size: Optional[int] = None
    sample_rate: Optional[int] = None
    number_of_channels: Optional[int] = None
    duration: Optional[float] = None

    # Attribute name -> key used by the submission form and in storage
    WIRE_KEYS = {
        'name': 'name',
        'type': 'type',
        'size': 'size',
        'sample_rate': 'sampleRate',
        'number_of_channels': 'numberOfChannels',
        'duration': 'duration',
    }

    def to_dict(self) -> Dict:
        return {
            wire_key: getattr(self, attr)
            for attr, wire_key in self.WIRE_KEYS.items()
            if getattr(self, attr) is not None
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'AudioFileMeta':
        return cls(**{
            attr: data[wire_key]
            for attr, wire_key in cls.WIRE_KEYS.items()
            if wire_key in data
        })

    def is_empty(self) -> bool:
        return not self.to_dict()


@dataclass
class CreationProcess:
    all_original_sounds: str = ''
    cc0_or_public_domain: str = ''
    used_prerecorded_sounds: str = ''
    used_soundpack_library: str = ''
    used_samples: str = ''
    source_urls: str = ''


@dataclass
class Submission:
    unique_code: str
    status: str = 'draft'
    submitter_name: str = ''
    submitter_email: str = ''
    submitter_country: str = ''
    submitter_wiki_user: str = ''
    submitter_phone: str = ''
    submitter_pronouns: str = ''
    explanation_creation: str = ''
    explanation_inspiration: str = ''
    creation_process: CreationProcess = field(default_factory=CreationProcess)
    contributing_authors: List[str] = field(default_factory=list)
    audio_file: Optional[str] = None
    audio_file_meta: AudioFileMeta = field(default_factory=AudioFileMeta)
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def title(self) -> str:
        return f"Submission {self.unique_code}"

    def to_dict(self) -> Dict:
        """Convert to the payload shape handed to listeners and API clients."""
        data = asdict(self)
        data['title'] = self.title
        data['audio_file_meta'] = self.audio_file_meta.to_dict()
        if isinstance(self.created_at, datetime):
            data['created_at'] = self.created_at.isoformat()
        return data


@dataclass(frozen=True)
class ScreeningEvent:
    id: int
    submission_id: int
    decision: str
    flags: tuple
    author: str
    created_at: datetime


@dataclass
class ScreeningAggregate:
    """Current screening state, recomputed from the full event history."""
    decision: List[str] = field(default_factory=list)
    flags: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict:
        return {"decision": list(self.decision), "flags": sorted(self.flags)}
