# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Rewrites `$ref` nodes that carry sibling keywords.

OpenAPI 3.0 ignores every keyword placed next to a `$ref`, and the SDK generator
drops them silently. Wrapping the node in an `allOf` keeps the reference and the
extra keywords as two separate members.
"""

from typing import Any

from .log import get_logger

logger = get_logger(name=__name__, category="preprocess::refs")


def _split_ref(node: dict[str, Any]) -> dict[str, Any] | None:
    extra_keys = {key: value for key, value in node.items() if key != "$ref"}
    if not extra_keys:
        return None
    return {"allOf": [{"$ref": node["$ref"]}, extra_keys]}


def normalize_ref_siblings(openapi_schema: dict[str, Any]) -> int:
    """
    Replace every `{"$ref": ..., <extra>}` node with `{"allOf": [{"$ref": ...}, {<extra>}]}`.

    The walk is top-down and updates containers in place. Once a node has been
    split, only the two new members are visited.

    Returns:
        The number of nodes rewritten
    """
    rewritten = 0

    def fix(obj: Any) -> Any:
        nonlocal rewritten
        if isinstance(obj, dict):
            if "$ref" in obj:
                replacement = _split_ref(obj)
                if replacement is not None:
                    rewritten += 1
                    replacement["allOf"] = [fix(member) for member in replacement["allOf"]]
                    return replacement
            for key, value in obj.items():
                obj[key] = fix(value)
        elif isinstance(obj, list):
            for i, item in enumerate(obj):
                obj[i] = fix(item)
        return obj

    for key, value in openapi_schema.items():
        openapi_schema[key] = fix(value)

    if rewritten:
        logger.info(f"Wrapped {rewritten} $ref nodes with sibling keys into allOf")
    return rewritten
