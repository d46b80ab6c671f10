"""
Segmentation orchestration.

file -> segments (one per CSV / per worksheet) -> brand/category plans
-> chunks -> one SegmentationDocument (and artifact) per chunk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .chunking import artifact_name, ensure_output_dir, split_rows, write_document
from .config import Settings
from .criteria import build_document, segment_name
from .errors import WriteError
from .grouping import plan_segments
from .ingest import Segment, detect_format, load_segments, parse_segments
from .mappings import BrandMappingTable, CenterBrandMap
from .models import (
    Artifact,
    ReportItem,
    SegmentationDocument,
    SegmentationOutput,
    SegmentationReport,
    SegmentationResponse,
)

logger = logging.getLogger(__name__)


def build_segment_documents(
    segment: Segment,
    table: BrandMappingTable,
    resolver: CenterBrandMap,
    settings: Settings,
) -> Tuple[List[Tuple[Artifact, SegmentationDocument]], List[ReportItem]]:
    plans, warnings = plan_segments(
        segment.rows,
        table,
        resolver,
        categories=settings.categories,
        segment=segment.name,
    )
    outputs: List[Tuple[Artifact, SegmentationDocument]] = []
    for plan in plans:
        chunks = split_rows(plan.rows, settings.chunk_threshold, settings.split_policy)
        for index, chunk in enumerate(chunks, start=1):
            document = build_document(chunk, plan.mapping, segment_name(plan.brand, plan.category))
            artifact = Artifact(
                segment=segment.name,
                brand=plan.brand,
                category=plan.category,
                chunk=index,
                rows=len(chunk),
                filename=artifact_name(plan.brand, plan.category, index),
            )
            outputs.append((artifact, document))
    return outputs, warnings


def process_segments(
    segments: Sequence[Segment],
    source: str,
    output_dir: Optional[Path] = None,
    settings: Optional[Settings] = None,
    table: Optional[BrandMappingTable] = None,
    resolver: Optional[CenterBrandMap] = None,
) -> Tuple[SegmentationReport, List[SegmentationOutput]]:
    """
    Build every document for `segments`; write them when `output_dir` is given.

    A failed write is recorded against its artifact and the remaining
    artifacts are still written, unless `settings.strict_writes` is set.
    """
    settings = settings or Settings()
    if table is None:
        table = settings.brand_table()
    if resolver is None:
        resolver = settings.center_map()

    report = SegmentationReport(source=source)
    outputs: List[SegmentationOutput] = []
    written: Dict[str, Artifact] = {}

    if output_dir is not None:
        output_dir = ensure_output_dir(Path(output_dir)).resolve()

    for segment in segments:
        report.warnings.extend(segment.warnings)
        built, warnings = build_segment_documents(segment, table, resolver, settings)
        report.warnings.extend(warnings)
        for artifact, document in built:
            outputs.append(SegmentationOutput(artifact=artifact, document=document.to_dict()))
            if output_dir is None:
                report.artifacts.append(artifact)
                continue

            previous = written.get(artifact.filename)
            if previous is not None and previous.segment != segment.name:
                _record_overwrite(report, written, artifact, previous, built)

            target = output_dir / artifact.filename
            try:
                write_document(document, target)
            except WriteError as exc:
                if settings.strict_writes:
                    raise WriteError(
                        str(target),
                        detail=exc.detail,
                        brand=artifact.brand,
                        category=artifact.category,
                        chunk=artifact.chunk,
                    ) from exc
                logger.error("Failed to write %s: %s", target, exc.detail)
                report.errors.append(
                    ReportItem(
                        segment=segment.name,
                        brand=artifact.brand,
                        category=artifact.category,
                        chunk=artifact.chunk,
                        path=str(target),
                        issue="write_failed",
                        value=exc.detail,
                        action="skipped",
                    )
                )
                continue
            artifact = artifact.model_copy(update={"path": str(target)})
            written[artifact.filename] = artifact
            report.artifacts.append(artifact)

    return report, outputs


def _record_overwrite(
    report: SegmentationReport,
    written: Dict[str, Artifact],
    artifact: Artifact,
    previous: Artifact,
    built: Sequence[Tuple[Artifact, SegmentationDocument]],
) -> None:
    """
    Drop the replaced artifact from the report. On the first collision for a
    (brand, category), also flag chunks of the earlier segment that this
    segment will not replace: the directory then holds a mixed chunk set.
    """
    logger.warning("%s from %r overwrites output of %r", artifact.filename, artifact.segment, previous.segment)
    report.artifacts[:] = [a for a in report.artifacts if a.filename != artifact.filename]
    report.warnings.append(
        ReportItem(
            segment=artifact.segment,
            brand=artifact.brand,
            category=artifact.category,
            chunk=artifact.chunk,
            path=previous.path,
            issue="artifact_overwritten",
            value=previous.segment,
            action="replaced",
        )
    )
    if artifact.chunk != 1:
        return
    pair = (artifact.brand, artifact.category)
    replacing = {a.filename for a, _ in built if (a.brand, a.category) == pair}
    stale = sorted(
        name
        for name, other in written.items()
        if other.segment == previous.segment and (other.brand, other.category) == pair and name not in replacing
    )
    if stale:
        logger.warning("%s %s now mixes chunks from %r and %r", *pair, previous.segment, artifact.segment)
        report.warnings.append(
            ReportItem(
                segment=artifact.segment,
                brand=artifact.brand,
                category=artifact.category,
                issue="mixed_chunk_set",
                value=", ".join(stale),
                action=f"kept_from_{previous.segment}",
            )
        )


def process_file(
    path: Path,
    output_dir: Path,
    settings: Optional[Settings] = None,
    table: Optional[BrandMappingTable] = None,
    resolver: Optional[CenterBrandMap] = None,
) -> SegmentationReport:
    """Segment one `.csv` or `.xlsx` file into JSON artifacts under `output_dir`."""
    settings = settings or Settings()
    detect_format(str(path))
    segments = load_segments(Path(path), settings.on_bad_row)
    report, _ = process_segments(segments, str(path), output_dir, settings, table, resolver)
    logger.info(
        "Processed %s: %d artifact(s), %d warning(s), %d error(s)",
        path,
        len(report.artifacts),
        len(report.warnings),
        len(report.errors),
    )
    return report


def segment_bytes(raw: bytes, filename: str, settings: Optional[Settings] = None) -> SegmentationResponse:
    """In-memory variant for uploads; nothing is written."""
    settings = settings or Settings()
    segments = parse_segments(raw, filename, settings.on_bad_row)
    report, outputs = process_segments(segments, filename, None, settings)
    return SegmentationResponse(outputs=outputs, report=report)
