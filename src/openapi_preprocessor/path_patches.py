# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Hand-written additions and removals of operations, and the guards that must hold
before they are applied.
"""

import copy
from typing import Any

from .config import OperationRemoval, PathFragment, PreconditionGuard
from .errors import GuardViolation
from .log import get_logger
from .schema_nodes import resolve_pointer

logger = get_logger(name=__name__, category="preprocess::paths")


def check_guards(openapi_schema: dict[str, Any], guards: list[PreconditionGuard]) -> None:
    """
    Raise GuardViolation when a guarded field exists in the input.

    Each guard marks a field whose appearance upstream means some hand-written SDK
    code should start using it. Drop the guard once that code has been updated.
    """
    for guard in guards:
        if resolve_pointer(openapi_schema, guard.pointer) is not None:
            raise GuardViolation("/".join(guard.pointer), guard.message)


def insert_path_fragment(openapi_schema: dict[str, Any], fragment: PathFragment) -> bool:
    """Add a hand-written operation unless the upstream schema already has it. Returns True when added."""
    paths = openapi_schema.setdefault("paths", {})
    method = fragment.method.lower()
    path_item = paths.get(fragment.path)

    if path_item is not None and fragment.skip_if_path_exists:
        logger.info(f"The path {fragment.path} already exists, no changes made")
        return False
    if isinstance(path_item, dict) and method in path_item:
        logger.info(f"The {method.upper()} already exists on {fragment.path}, no changes made")
        return False

    if not isinstance(path_item, dict):
        logger.info(f"The path {fragment.path} does not exist, creating it")
        path_item = paths[fragment.path] = {}
    path_item[method] = copy.deepcopy(fragment.operation)

    if fragment.schemas:
        schemas = openapi_schema.setdefault("components", {}).setdefault("schemas", {})
        for name, schema_def in fragment.schemas.items():
            if name not in schemas:
                schemas[name] = copy.deepcopy(schema_def)

    logger.info(f"{method.upper()} operation added for {fragment.path}")
    return True


def remove_operation(openapi_schema: dict[str, Any], removal: OperationRemoval) -> bool:
    """Remove one verb from one path. Silent when either is absent."""
    path_item = (openapi_schema.get("paths") or {}).get(removal.path)
    method = removal.method.lower()
    if not isinstance(path_item, dict) or method not in path_item:
        return False
    del path_item[method]
    logger.info(f"{method.upper()} operation removed from {removal.path}")
    return True
