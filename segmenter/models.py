from __future__ import annotations

import json
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import JSON_INDENT


class Row(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    center: str


class FieldMapping(BaseModel):
    """Platform field codes for one (brand, category) pair."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pref_field: str = Field(alias="pref")
    center_field: str = Field(alias="center")
    unsub_field: str = Field(alias="unsub")

    @field_validator("pref_field", "center_field", "unsub_field", mode="before")
    @classmethod
    def _code_as_str(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return str(value)
        return value


class Criterion(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["criteria"] = "criteria"
    field: str
    operator: Literal["equals", "empty"]
    value: str


class CriteriaGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["and", "or"]
    children: List[Union[Criterion, CriteriaGroup]] = Field(default_factory=list)


class SegmentationDocument(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    contact_criteria: CriteriaGroup = Field(alias="contactCriteria")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=JSON_INDENT, ensure_ascii=False)


class ReportItem(BaseModel):
    segment: Optional[str] = None
    row: Optional[int] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    chunk: Optional[int] = None
    path: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class Artifact(BaseModel):
    segment: str
    brand: str
    category: str
    chunk: int
    rows: int
    filename: str
    path: Optional[str] = None


class SegmentationReport(BaseModel):
    source: str
    artifacts: List[Artifact] = Field(default_factory=list)
    warnings: List[ReportItem] = Field(default_factory=list)
    errors: List[ReportItem] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class SegmentationOutput(BaseModel):
    artifact: Artifact
    document: Dict[str, Any]


class SegmentationResponse(BaseModel):
    outputs: List[SegmentationOutput] = Field(default_factory=list)
    report: SegmentationReport


class ValidationIssue(BaseModel):
    path: str
    message: str


class ValidationResponse(BaseModel):
    ok: bool
    errors: List[ValidationIssue] = Field(default_factory=list)


class HealthResponse(BaseModel):
    ok: bool = True
