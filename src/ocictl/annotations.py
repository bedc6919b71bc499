"""
Manifest annotation loading.

Annotations reach a command from exactly one of two sources: repeated
``--annotation key=value`` flags, or an ``--annotations-file`` holding a JSON
object keyed by scope. Flag annotations always land under the
``$manifest`` scope.
"""
from __future__ import annotations

import json
from typing import Dict, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

__all__ = [
    "MANIFEST_SCOPE",
    "AnnotationSet",
    "AnnotationError",
    "AnnotationConflictError",
    "AnnotationFormatError",
    "AnnotationDuplicationError",
    "AnnotationFileError",
    "load_manifest_annotations",
    "parse_annotation_flags",
]

MANIFEST_SCOPE = "$manifest"

AnnotationSet = Dict[str, Dict[str, str]]

_ANNOTATION_FILE_SHAPE = TypeAdapter(Dict[str, Dict[str, str]])


class AnnotationError(ValueError):
    """Base class for invalid annotation input."""
    pass


class AnnotationConflictError(AnnotationError):
    """Annotations were given both as flags and as a file."""

    def __init__(self) -> None:
        super().__init__("annotations cannot be specified via flags and file at the same time")


class AnnotationFormatError(AnnotationError):
    """A flag annotation is not a ``key=value`` pair."""

    def __init__(self, entry: str) -> None:
        super().__init__(f"annotation MUST be a key-value pair, got {entry!r}")
        self.entry = entry


class AnnotationDuplicationError(AnnotationError):
    """The same annotation key was given more than once."""

    def __init__(self, key: str) -> None:
        super().__init__(f"found annotation key, {key}, more than once: annotation key duplication")
        self.key = key


class AnnotationFileError(AnnotationError):
    """The annotations file is not a JSON object of scope -> {key: value}."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"invalid annotations file {path}: {reason}")
        self.path = path


def load_manifest_annotations(annotations_file: Optional[str],
                              raw_annotations: Optional[Sequence[str]]) -> AnnotationSet:
    """
    Build the annotation set for one invocation.

    Args:
        annotations_file: Path to a JSON annotations file (empty/None when unused)
        raw_annotations: ``key=value`` strings from repeated flags

    Returns:
        Mapping of scope to annotation key/value pairs; empty when neither
        source is given

    Raises:
        AnnotationConflictError: If both sources are given
        AnnotationFormatError: If a flag entry lacks ``=``
        AnnotationDuplicationError: If a flag key repeats
        AnnotationFileError: If the file is not valid JSON of the right shape
        OSError: If the file cannot be opened or read
    """
    if annotations_file and raw_annotations:
        raise AnnotationConflictError()

    if annotations_file:
        return _decode_annotations_file(annotations_file)

    if raw_annotations:
        return {MANIFEST_SCOPE: parse_annotation_flags(raw_annotations)}

    return {}


def parse_annotation_flags(raw_annotations: Sequence[str]) -> Dict[str, str]:
    """
    Turn ``key=value`` flag entries into a mapping.

    Splits each entry on the first ``=`` only and trims surrounding
    whitespace from both sides, so ``"x = y"`` becomes ``{"x": "y"}``.
    """
    parsed: Dict[str, str] = {}
    for entry in raw_annotations:
        parts = entry.split("=", 1)
        if len(parts) != 2:
            raise AnnotationFormatError(entry)

        key, value = parts[0].strip(), parts[1].strip()
        if key in parsed:
            raise AnnotationDuplicationError(key)
        parsed[key] = value

    return parsed


def _decode_annotations_file(path: str) -> AnnotationSet:
    # Keys repeated inside the file are not rejected; json keeps the last one.
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise AnnotationFileError(path, str(e)) from e

    # A JSON null decodes to an empty set
    if data is None:
        return {}

    try:
        return _ANNOTATION_FILE_SHAPE.validate_python(data, strict=True)
    except ValidationError as e:
        raise AnnotationFileError(path, "expected an object of scope -> {key: value} strings") from e
