"""Group ingested rows by center, resolve brands, and plan one segment per (brand, category)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import MappingNotFoundError
from .mappings import BrandMappingTable, CenterBrandMap
from .models import FieldMapping, ReportItem, Row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentPlan:
    brand: str
    category: str
    mapping: FieldMapping
    rows: Tuple[Row, ...]


def group_by_center(rows: Iterable[Row]) -> Dict[str, List[Row]]:
    groups: Dict[str, List[Row]] = {}
    for row in rows:
        groups.setdefault(row.center, []).append(row)
    return groups


def group_by_brand(
    groups: Dict[str, List[Row]],
    resolver: CenterBrandMap,
    segment: Optional[str] = None,
) -> Tuple[Dict[str, List[Row]], List[ReportItem]]:
    """Merge center groups onto their resolved brand; unresolved centers are skipped."""
    brands: Dict[str, List[Row]] = {}
    warnings: List[ReportItem] = []
    for center, center_rows in groups.items():
        brand = resolver.resolve(center)
        if brand is None:
            logger.warning("No brand mapping found for center %r (%d rows). Skipping.", center, len(center_rows))
            warnings.append(
                ReportItem(
                    segment=segment,
                    issue="unmapped_center",
                    value=center,
                    action=f"skipped_{len(center_rows)}_rows",
                )
            )
            continue
        brands.setdefault(brand, []).extend(center_rows)
    return brands, warnings


def plan_segments(
    rows: Sequence[Row],
    table: BrandMappingTable,
    resolver: CenterBrandMap,
    categories: Optional[Sequence[str]] = None,
    segment: Optional[str] = None,
) -> Tuple[List[SegmentPlan], List[ReportItem]]:
    """
    Every row of a brand goes into every category variant of that brand;
    the input carries no per-row category.

    `categories` restricts (and orders) the variants produced. A requested
    category the table lacks for a brand is a warning, never an error.
    """
    brands, warnings = group_by_brand(group_by_center(rows), resolver, segment=segment)
    plans: List[SegmentPlan] = []
    for brand, brand_rows in brands.items():
        if not brand_rows:
            continue
        if brand not in table:
            logger.warning("No field mapping found for brand: %s. Skipping.", brand)
            warnings.append(
                ReportItem(
                    segment=segment,
                    brand=brand,
                    issue="mapping_not_found",
                    value=str(len(brand_rows)),
                    action="skipped",
                )
            )
            continue
        wanted = list(categories) if categories is not None else table.categories(brand)
        for category in wanted:
            try:
                mapping = table.lookup(brand, category)
            except MappingNotFoundError as exc:
                logger.warning("%s. Skipping.", exc.detail)
                warnings.append(
                    ReportItem(
                        segment=segment,
                        brand=brand,
                        category=exc.category,
                        issue="mapping_not_found",
                        value=str(len(brand_rows)),
                        action="skipped",
                    )
                )
                continue
            plans.append(SegmentPlan(brand=brand, category=category, mapping=mapping, rows=tuple(brand_rows)))
    return plans, warnings
