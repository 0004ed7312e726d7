# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Return type hints for the SDK operation templates.

For every operation the success responses are inspected and the model(s) the
generated method returns are written next to the operation:

- ``x-return-types``: distinct type names, e.g. ``["User[]"]`` or ``["null", "Error"]``
- ``x-return-types-union``: the same list as a ``|`` union, list types collapsed to ``array``
- ``x-return-types-displayReturn``: whether the method returns a list
- ``x-phpdoc``: docblock hint of the last typed response
- ``x-returnable``: whether any success response carries a body
"""

from dataclasses import dataclass, field
from typing import Any

from .log import get_logger
from .schema_nodes import NodeKind, classify, iter_operations, ref_name, resolve_ref

logger = get_logger(name=__name__, category="preprocess::return_types")

BINARY_SCHEMA = {"type": "string", "format": "binary"}

_PRIMITIVE_RETURN_TYPES = {"boolean": "boolean", "string": "string", "integer": "integer", "number": "float"}


@dataclass
class ReturnTypeHint:
    types: list[str] = field(default_factory=list)
    phpdoc: dict[str, Any] | None = field(default_factory=dict)

    @classmethod
    def single(cls, type_name: str, doc_return: Any = None) -> "ReturnTypeHint":
        return cls(types=[type_name], phpdoc={"return": type_name if doc_return is None else doc_return})


def is_success_status(status_code: str | int) -> bool:
    if status_code == "default":
        return True
    try:
        code = int(status_code)
    except (TypeError, ValueError):
        return False
    return 200 <= code <= 299


def select_response_schema(response: dict[str, Any]) -> dict[str, Any] | None:
    """Pick the schema of a response: JSON first, then problem+json, then PDF as a binary string."""
    content = response.get("content")
    if not isinstance(content, dict):
        return None

    for media_type in ("application/json", "application/problem+json"):
        media = content.get(media_type)
        if isinstance(media, dict) and isinstance(media.get("schema"), dict):
            return media["schema"]

    if "application/pdf" in content:
        return dict(BINARY_SCHEMA)
    return None


def _unwrap_single_ref(schema: dict[str, Any]) -> dict[str, Any]:
    """`allOf: [{$ref}, {description...}]` left by the ref normalizer types as the reference itself."""
    members = schema.get("allOf")
    if not isinstance(members, list):
        return schema
    refs = [member for member in members if classify(member) is NodeKind.REFERENCE]
    typed = [member for member in members if isinstance(member, dict) and classify(member) is not NodeKind.UNKNOWN]
    if len(refs) == 1 and len(typed) == 1:
        return refs[0]
    return schema


def _model(ref: str, namespace: str) -> str:
    return f"{namespace}{ref_name(ref)}"


def _pagination_item_ref(schema: dict[str, Any]) -> str | None:
    """The model ref of an `{"items": ...}` envelope, whether `items` is a ref or an array of refs."""
    if schema.get("type") != "object":
        return None
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return None
    items = properties.get("items")
    if classify(items) is NodeKind.REFERENCE:
        return items["$ref"]
    if classify(items) is NodeKind.ARRAY and classify(items.get("items")) is NodeKind.REFERENCE:
        return items["items"]["$ref"]
    return None


def collect_main_refs(schema: dict[str, Any], openapi_schema: dict[str, Any], namespace: str = "") -> ReturnTypeHint:
    """Derive the return type of one response schema."""
    schema = _unwrap_single_ref(schema)
    kind = classify(schema)

    if kind is NodeKind.REFERENCE:
        resolved = resolve_ref(openapi_schema, schema["$ref"])
        if resolved is None:
            logger.warning(f"Cannot resolve {schema['$ref']}, return type degraded to void")
            return ReturnTypeHint(types=["void"], phpdoc=None)
        if classify(resolved) is NodeKind.ARRAY and classify(resolved.get("items")) is NodeKind.REFERENCE:
            return ReturnTypeHint.single(_model(resolved["items"]["$ref"], namespace) + "[]")
        return ReturnTypeHint.single(_model(schema["$ref"], namespace))

    schema_type = schema.get("type")
    if schema_type == "array":
        items = schema.get("items")
        if classify(items) is NodeKind.REFERENCE:
            return ReturnTypeHint.single(_model(items["$ref"], namespace) + "[]")
        if isinstance(items, dict) and isinstance(items.get("type"), str):
            return ReturnTypeHint.single(items["type"] + "[]")
        return ReturnTypeHint()

    if schema_type == "object":
        additional = schema.get("additionalProperties")
        if isinstance(additional, dict):
            if classify(additional) is NodeKind.REFERENCE:
                return ReturnTypeHint.single(f"array<string,{_model(additional['$ref'], namespace)}>")
            if additional.get("type") == "object" and "properties" in additional:
                return ReturnTypeHint(phpdoc={"return": True})
            if isinstance(additional.get("type"), str):
                return ReturnTypeHint.single(f"array<string,{additional['type']}>")
            return ReturnTypeHint()
        return ReturnTypeHint.single("object")

    if schema_type in _PRIMITIVE_RETURN_TYPES:
        return ReturnTypeHint.single(_PRIMITIVE_RETURN_TYPES[schema_type], doc_return=False)

    return ReturnTypeHint()


def _drop_ref_defaults(operation: dict[str, Any]) -> None:
    """A `default` beside a reference in a request body confuses the generator's model defaults."""
    request_body = operation.get("requestBody")
    if not isinstance(request_body, dict):
        return
    content = request_body.get("content")
    media = content.get("application/json") if isinstance(content, dict) else None
    schema = media.get("schema") if isinstance(media, dict) else None
    if not isinstance(schema, dict) or not isinstance(schema.get("properties"), dict):
        return

    for prop in schema["properties"].values():
        if classify(prop) is NodeKind.REFERENCE:
            prop.pop("default", None)
        elif classify(prop) is NodeKind.COMPOSITION and _unwrap_single_ref(prop) is not prop:
            for member in prop["allOf"]:
                if isinstance(member, dict):
                    member.pop("default", None)


def annotate_operation(operation: dict[str, Any], openapi_schema: dict[str, Any], namespace: str = "") -> None:
    if operation.get("operationId"):
        operation["x-property-id-kebab"] = operation["operationId"]
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and isinstance(tags[0], str):
        operation["x-tag-id-kebab"] = "-".join(tags[0].split())

    _drop_ref_defaults(operation)

    return_types: list[str] = []
    phpdoc: dict[str, Any] | None = {}
    returnable = False

    responses = operation.get("responses")
    if not isinstance(responses, dict):
        responses = {}

    for status_code, response in responses.items():
        if not is_success_status(status_code) or not isinstance(response, dict):
            continue
        if response.get("content"):
            returnable = True

        schema = select_response_schema(response)
        if schema is None:
            return_types.append("void")
            continue

        pagination_ref = _pagination_item_ref(schema)
        if pagination_ref is not None:
            hint = ReturnTypeHint(types=[_model(pagination_ref, namespace) + "[]"], phpdoc=None)
        else:
            hint = collect_main_refs(schema, openapi_schema, namespace)
        return_types.extend(hint.types)
        phpdoc = hint.phpdoc

    return_types = list(dict.fromkeys(return_types))
    # void|Error means the call may return nothing
    if "void" in return_types and len(return_types) > 1:
        return_types = list(dict.fromkeys("null" if t == "void" else t for t in return_types))

    operation["x-return-types"] = return_types

    union = "|".join(dict.fromkeys("array" if t.endswith("[]") else t for t in return_types))
    if union and union != "object":
        operation["x-return-types-union"] = union
    else:
        operation.pop("x-return-types-union", None)

    operation["x-return-types-displayReturn"] = any(t.endswith("[]") or "array<" in t for t in return_types)
    operation["x-phpdoc"] = phpdoc
    operation["x-returnable"] = returnable


def annotate_return_types(openapi_schema: dict[str, Any], namespace: str = "") -> int:
    """Annotate every operation. Returns the number of operations annotated."""
    count = 0
    for path, method, operation in iter_operations(openapi_schema):
        annotate_operation(operation, openapi_schema, namespace)
        logger.debug(f"{method} {path} => {operation.get('x-return-types')}")
        count += 1
    return count
