"""
Deterministic segmentation rules.

This file exists to make policy constants explicit and enforceable.
"""

CHUNK_THRESHOLD = 200

# "halve": one two-way split (ceil(n/2) + remainder) once a row set exceeds
# CHUNK_THRESHOLD. Chunks may still exceed the threshold when n > 2 * threshold.
# "bounded": k = ceil(n / CHUNK_THRESHOLD) near-equal chunks.
SPLIT_HALVE = "halve"
SPLIT_BOUNDED = "bounded"
SPLIT_POLICY = SPLIT_HALVE

ON_BAD_ROW_ABORT = "abort"
ON_BAD_ROW_SKIP = "skip"

CSV_EXTENSION = ".csv"
XLSX_EXTENSION = ".xlsx"
SUPPORTED_EXTENSIONS = (CSV_EXTENSION, XLSX_EXTENSION)

CSV_DELIMITER = ","
OUTPUT_ENCODING = "utf-8"
JSON_INDENT = 2

PREFERENCE_VALUE = "True"
