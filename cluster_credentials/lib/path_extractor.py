"""Dotted-path lookup across structured entities and embedded JSON documents.

A walk visits three kinds of node:

- structured entity: a class declaring ``FIELDS`` (serialized name -> attribute)
- embedded document: ``RawExtension`` or raw ``bytes`` holding JSON, decoded
  only when a further segment has to be resolved inside it
- mapping: an already decoded JSON object

Every failure raises ``PathResolutionError`` tagged with the offending segment.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from .cluster import RawExtension
from .errors import PathResolutionError


def parse_path(path: str) -> list[str]:
    """Split a dotted path into segments, rejecting empty paths and segments."""
    if not isinstance(path, str) or not path.strip():
        raise PathResolutionError(str(path or ""), reason="path is empty")

    segments = path.split(".")
    _check_segments(segments, path)
    return segments


def _check_segments(segments: Sequence[str], path: str) -> None:
    if not segments:
        raise PathResolutionError(path, reason="path is empty")
    for index, segment in enumerate(segments):
        if not isinstance(segment, str) or not segment.strip():
            raise PathResolutionError(path, reason=f"segment {index} is empty")


def decode_document(raw: bytes, path: str, segment: str, index: int) -> Any:
    """Deserialize an embedded JSON document reached while resolving ``segment``."""
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PathResolutionError(
            path, segment, index, f"cannot be resolved: embedded document is not valid JSON ({e})"
        ) from e


def _unwrap_document(node: Any, path: str, segment: str, index: int) -> Any:
    """Turn an embedded document node into its decoded value; other nodes pass through."""
    if isinstance(node, RawExtension):
        if node.raw is None:
            raise PathResolutionError(path, segment, index, "cannot be resolved: document is empty")
        node = node.raw
    if isinstance(node, (bytes, bytearray)):
        return decode_document(bytes(node), path, segment, index)
    return node


def _step(node: Any, segment: str, index: int, path: str) -> Any:
    if node is None:
        raise PathResolutionError(path, segment, index, "cannot be resolved: parent is unset")

    node = _unwrap_document(node, path, segment, index)

    if isinstance(node, Mapping):
        if segment not in node:
            raise PathResolutionError(path, segment, index, "is not a key of the document")
        return node[segment]

    fields = getattr(type(node), "FIELDS", None)
    if fields is not None:
        attribute = fields.get(segment)
        if attribute is None:
            raise PathResolutionError(
                path, segment, index, f"is not a field of {type(node).__name__}"
            )
        return getattr(node, attribute)

    raise PathResolutionError(
        path, segment, index, f"cannot be resolved: {type(node).__name__} value has no fields"
    )


def extract(root: Any, path: str | Sequence[str]) -> Any:
    """Resolve a dotted path against ``root``.

    Args:
        root: Structured entity, mapping, or embedded document to start from
        path: Dotted path string or pre-split segments

    Returns:
        The node at the end of the path, as-is (entity, mapping, string, ...)

    Raises:
        PathResolutionError: If the path is empty or any segment cannot be resolved
    """
    if path is None or isinstance(path, str):
        path_string = path or ""
        segments = parse_path(path_string)
    else:
        segments = list(path)
        path_string = ".".join(str(segment) for segment in segments)
        _check_segments(segments, path_string)

    node = root
    for index, segment in enumerate(segments):
        node = _step(node, segment, index, path_string)
    return node


def as_mapping(node: Any, path: str) -> Mapping[str, Any]:
    """Interpret an extracted node as a JSON object, decoding embedded documents."""
    segment = path.rsplit(".", 1)[-1] if path else ""
    index = path.count(".") if path else 0

    if node is None:
        raise PathResolutionError(path, segment, index, "resolves to an unset value")

    node = _unwrap_document(node, path, segment, index)
    if not isinstance(node, Mapping):
        raise PathResolutionError(
            path, segment, index, f"resolves to {type(node).__name__}, expected an object"
        )
    return node
