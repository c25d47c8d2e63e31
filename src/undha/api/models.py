"""Pydantic models for API."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class TranslateRequestModel(BaseModel):
    """Request to resolve a phrase."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., description="Source text")
    speech_register: str = Field(
        "plain", alias="register", description="plain, polite or honorific"
    )
    strategy: Literal["table", "external", "hybrid"] = Field(
        "hybrid", description="Resolution strategy"
    )
    direction: Literal["forward", "reverse"] = Field(
        "forward", description="forward: base -> register, reverse: register -> base"
    )
    timeout: Optional[float] = Field(
        None, gt=0, description="Seconds allowed for the external call"
    )


class MatchModel(BaseModel):
    """Lexicon evidence for one token."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    position: int
    surface_form: str
    lemma: str
    speech_register: str = Field(..., alias="register")
    confidence: float
    exact: bool


class TranslationModel(BaseModel):
    """Resolution result with provenance."""

    model_config = ConfigDict(populate_by_name=True)

    original_text: str
    translated_text: str
    confidence: float = Field(..., description="0.0-1.0 aggregate confidence")
    method: str = Field(..., description="Component that produced the text")
    strategy: str = Field(..., description="Requested strategy")
    speech_register: str = Field(..., alias="register")
    direction: str
    matches: List[MatchModel] = Field(default_factory=list)
    untranslated: List[str] = Field(default_factory=list)
    degraded: bool = False
    external_error: Optional[str] = None
    processing_time: float = 0.0


class LookupModel(BaseModel):
    """Exact lookup result."""

    model_config = ConfigDict(populate_by_name=True)

    query: str
    speech_register: str = Field(..., alias="register")
    direction: str
    result: str = Field(..., description="Surface form or base gloss")
    matched_register: str


class EntryModel(BaseModel):
    """A lexicon entry with effective register forms."""

    id: str
    base: str
    plain: str
    polite: str
    honorific: str


class SearchResponseModel(BaseModel):
    query: str
    count: int
    entries: List[EntryModel]


class StatsModel(BaseModel):
    total_entries: int
    registers: List[str]
    forms_per_register: Dict[str, int]
    fallbacks_per_register: Dict[str, int]
    skipped_records: int


class HealthModel(BaseModel):
    """Health check response."""

    status: str
    version: str
    lexicon_entries: int
    responder: str
