"""
Request and response models for the contest intake API.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from ..core.schema import DECISIONS, DECISION_NONE


class SubInputModel(BaseModel):
    key: Optional[str] = None
    label: str = ''


class FormFieldModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str = ''
    admin_label: Optional[str] = Field(default=None, alias='adminLabel')
    inputs: Optional[List[SubInputModel]] = None

    @field_validator('id', mode='before')
    @classmethod
    def id_as_string(cls, v):
        # Composite ids like "21.3" must stay strings, numbers are coerced to text
        return str(v)


class FormSchemaModel(BaseModel):
    id: Optional[str] = None
    fields: List[FormFieldModel]

    @field_validator('id', mode='before')
    @classmethod
    def form_id_as_string(cls, v):
        return None if v is None else str(v)


class EntrySubmissionRequest(BaseModel):
    form: FormSchemaModel
    entry: Dict[str, Optional[str]]

    @field_validator('entry', mode='before')
    @classmethod
    def entry_values_as_text(cls, v):
        if not isinstance(v, dict):
            return v
        return {str(key): (None if value is None else str(value)) for key, value in v.items()}


class EntrySubmissionResponse(BaseModel):
    success: bool
    id: int
    unique_code: str
    flags: List[str]


class ScreeningRequest(BaseModel):
    decision: Optional[str] = DECISION_NONE
    flags: List[str] = []
    author: Optional[str] = None

    @field_validator('decision')
    @classmethod
    def decision_must_be_valid(cls, v):
        if v is None:
            return DECISION_NONE
        if v not in DECISIONS:
            raise ValueError(f'decision must be one of: {DECISIONS}')
        return v

    @field_validator('author')
    @classmethod
    def author_must_not_be_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError('author cannot be empty')
        return v


class ScreeningResponse(BaseModel):
    success: bool
    id: int
    flags: List[str]


class ScreeningResultsResponse(BaseModel):
    submission_id: int
    decision: List[str]
    flags: List[str]


class ScreeningEventResponse(BaseModel):
    id: int
    decision: str
    flags: List[str]
    author: Optional[str]
    created_at: Optional[datetime]


class ScreeningEventListResponse(BaseModel):
    submission_id: int
    events: List[ScreeningEventResponse]


class FlagListResponse(BaseModel):
    flags: Dict[str, str]


class AudioMetaFieldResponse(BaseModel):
    field_id: Optional[str]


class SubmissionResponse(BaseModel):
    id: int
    unique_code: str
    title: str
    status: str
    submitter_name: str
    submitter_email: str
    submitter_country: str
    submitter_wiki_user: str
    submitter_phone: str
    submitter_pronouns: str
    explanation_creation: str
    explanation_inspiration: str
    creation_process: Dict[str, str]
    contributing_authors: List[str]
    audio_file: Optional[str]
    audio_file_meta: Dict[str, Any]
    created_at: Optional[datetime]


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    submission_count: int
