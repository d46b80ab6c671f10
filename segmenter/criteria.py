"""Criteria-tree construction for segmentation documents."""

from __future__ import annotations

from typing import Sequence

from .models import CriteriaGroup, Criterion, FieldMapping, Row, SegmentationDocument
from .rules import PREFERENCE_VALUE


def segment_name(brand: str, category: str) -> str:
    return f"{brand} {category}"


def build_criteria(rows: Sequence[Row], mapping: FieldMapping) -> CriteriaGroup:
    """
    Root is always `and` over, in this order:
    - preference flag equals "True"
    - unsubscribe field empty
    - `or` of one center-field leaf per row (input order, value = str(id))

    The platform reads these children positionally.
    """
    centers = CriteriaGroup(
        type="or",
        children=[
            Criterion(field=mapping.center_field, operator="equals", value=str(row.id))
            for row in rows
        ],
    )
    return CriteriaGroup(
        type="and",
        children=[
            Criterion(field=mapping.pref_field, operator="equals", value=PREFERENCE_VALUE),
            Criterion(field=mapping.unsub_field, operator="empty", value=""),
            centers,
        ],
    )


def build_document(rows: Sequence[Row], mapping: FieldMapping, name: str) -> SegmentationDocument:
    return SegmentationDocument(name=name, contact_criteria=build_criteria(rows, mapping))
