# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Shared helpers for walking an OpenAPI document.

Schema nodes stay plain dicts so unknown keywords survive every pass untouched;
`classify` tells the passes which shape a node has.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any

SCHEMA_REF_PREFIX = "#/components/schemas/"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

COMPOSITION_KEYS = ("allOf", "anyOf", "oneOf")

PRIMITIVE_TYPES = ("string", "integer", "number", "boolean", "null")


class NodeKind(Enum):
    REFERENCE = "reference"
    COMPOSITION = "composition"
    OBJECT = "object"
    ARRAY = "array"
    PRIMITIVE = "primitive"
    UNKNOWN = "unknown"


def classify(node: Any) -> NodeKind:
    """Return the shape of a schema node. Anything unrecognized is UNKNOWN."""
    if not isinstance(node, dict):
        return NodeKind.UNKNOWN
    if "$ref" in node:
        return NodeKind.REFERENCE
    if any(key in node for key in COMPOSITION_KEYS):
        return NodeKind.COMPOSITION

    node_type = node.get("type")
    if node_type == "array":
        return NodeKind.ARRAY
    if node_type == "object" or "properties" in node or "additionalProperties" in node:
        return NodeKind.OBJECT
    if node_type in PRIMITIVE_TYPES:
        return NodeKind.PRIMITIVE
    return NodeKind.UNKNOWN


def is_reference(node: Any) -> bool:
    return classify(node) is NodeKind.REFERENCE


def is_nullable(node: Any) -> bool:
    return isinstance(node, dict) and node.get("nullable") is True


def ref_name(ref: str) -> str:
    """`#/components/schemas/Foo` -> `Foo`."""
    return ref.rsplit("/", 1)[-1]


def schema_ref(name: str) -> str:
    return f"{SCHEMA_REF_PREFIX}{name}"


def resolve_pointer(document: dict[str, Any], segments: list[str]) -> Any | None:
    """Follow a list of keys from the document root; None when any key is missing."""
    current: Any = document
    for segment in segments:
        if isinstance(current, dict) and segment in current:
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return None
    return current


def resolve_ref(document: dict[str, Any], ref: str) -> Any | None:
    """Resolve a local `#/...` reference. External references are never resolved."""
    if not ref.startswith("#"):
        return None
    segments = [part for part in ref.split("/") if part not in ("#", "")]
    segments = [part.replace("~1", "/").replace("~0", "~") for part in segments]
    return resolve_pointer(document, segments)


def get_component_schemas(document: dict[str, Any]) -> dict[str, Any] | None:
    components = document.get("components")
    if not isinstance(components, dict):
        return None
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, dict) else None


def iter_operations(document: dict[str, Any]) -> Iterator[tuple[str, str, dict[str, Any]]]:
    """Yield (path, method, operation) for every operation, skipping path-level keys."""
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if method.lower() in HTTP_METHODS and isinstance(operation, dict):
                yield path, method, operation


def iter_refs(obj: Any) -> Iterator[dict[str, Any]]:
    """Yield every mapping in the tree that carries a string `$ref`."""
    if isinstance(obj, dict):
        if isinstance(obj.get("$ref"), str):
            yield obj
        for value in obj.values():
            yield from iter_refs(value)
    elif isinstance(obj, list):
        for item in obj:
            yield from iter_refs(item)
