"""Segmenter error taxonomy."""

from __future__ import annotations

from typing import Optional


class SegmenterError(RuntimeError):
    """Base error; `code` is stable, `detail` is for humans."""

    code = "SEGMENTER_ERROR"

    def __init__(self, detail: Optional[str] = None, **context: object) -> None:
        self.detail = detail
        self.context = {k: v for k, v in context.items() if v is not None}
        for key, value in context.items():
            setattr(self, key, value)
        message = f"{self.code}: {detail}" if detail else self.code
        super().__init__(message)


class FormatError(SegmenterError):
    code = "UNSUPPORTED_FORMAT"

    def __init__(self, path: str, detail: Optional[str] = None) -> None:
        super().__init__(
            detail or f"Unsupported file type for {path}. Only .xlsx and .csv files are supported.",
            path=path,
        )


class IngestionError(SegmenterError):
    code = "INGESTION_FAILED"

    def __init__(
        self,
        detail: str,
        path: Optional[str] = None,
        segment: Optional[str] = None,
        row: Optional[int] = None,
    ) -> None:
        super().__init__(detail, path=path, segment=segment, row=row)


class MappingNotFoundError(SegmenterError):
    code = "MAPPING_NOT_FOUND"

    def __init__(self, brand: str, category: str) -> None:
        super().__init__(
            f"No field mapping for brand {brand!r}, category {category!r}",
            brand=brand,
            category=category,
        )


class WriteError(SegmenterError):
    code = "WRITE_FAILED"

    def __init__(
        self,
        path: str,
        detail: Optional[str] = None,
        brand: Optional[str] = None,
        category: Optional[str] = None,
        chunk: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"{path}: {detail}" if detail else path,
            path=path,
            brand=brand,
            category=category,
            chunk=chunk,
        )


class ConfigError(SegmenterError):
    code = "CONFIG_INVALID"


class SchemaValidationError(SegmenterError):
    code = "SCHEMA_FAIL"

    def __init__(self, detail: str, issues: Optional[list] = None) -> None:
        super().__init__(detail)
        self.issues = issues or []
