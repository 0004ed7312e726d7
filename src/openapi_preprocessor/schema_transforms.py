# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Small schema fixes applied between the larger passes.
"""

from typing import Any

from .log import get_logger
from .schema_nodes import get_component_schemas, iter_operations, ref_name

logger = get_logger(name=__name__, category="preprocess::transforms")


def remove_empty_parameters(openapi_schema: dict[str, Any]) -> int:
    """Drop `parameters: []`, which the generator turns into an empty argument list."""
    removed = 0
    for _path, _method, operation in iter_operations(openapi_schema):
        if operation.get("parameters") == []:
            del operation["parameters"]
            removed += 1
    return removed


def _is_empty_schema(schema_def: Any) -> bool:
    if not isinstance(schema_def, dict):
        return True
    return not any(schema_def.get(key) for key in ("properties", "oneOf", "allOf", "anyOf"))


def replace_empty_responses(openapi_schema: dict[str, Any], accepted_response_ref: str) -> int:
    """
    Point JSON responses that reference a missing or property-less schema at the
    generic accepted response, so the SDK method still returns a model.
    """
    schemas = get_component_schemas(openapi_schema) or {}
    replaced = 0

    for path, method, operation in iter_operations(openapi_schema):
        responses = operation.get("responses")
        if not isinstance(responses, dict):
            continue

        for status_code, response in responses.items():
            if not isinstance(response, dict):
                continue
            media = (response.get("content") or {}).get("application/json")
            schema = media.get("schema") if isinstance(media, dict) else None
            if not isinstance(schema, dict) or not isinstance(schema.get("$ref"), str):
                continue
            if schema["$ref"] == accepted_response_ref:
                continue

            name = ref_name(schema["$ref"])
            if _is_empty_schema(schemas.get(name)):
                media["schema"] = {"$ref": accepted_response_ref}
                replaced += 1
                logger.info(
                    f"Replaced empty $ref {name} with {ref_name(accepted_response_ref)} "
                    f"for {method} {path} [{status_code}]"
                )

    return replaced


def _rename_key(obj: dict[str, Any], old: str, new: str) -> bool:
    if old not in obj:
        return False
    obj[new] = obj.pop(old)
    return True


def rename_internal_flags(openapi_schema: dict[str, Any]) -> int:
    """`x-internal` hides an element from the generator entirely; keep it only as documentation."""
    renamed = 0
    for _path, _method, operation in iter_operations(openapi_schema):
        renamed += _rename_key(operation, "x-internal", "x-internal-doc")
    for schema in (get_component_schemas(openapi_schema) or {}).values():
        if isinstance(schema, dict):
            renamed += _rename_key(schema, "x-internal", "x-internal-doc")
    return renamed


def rename_deprecated_flags(openapi_schema: dict[str, Any]) -> int:
    """Move `deprecated` to `x-deprecated` so the templates decide how to render it."""
    renamed = 0
    for _path, _method, operation in iter_operations(openapi_schema):
        renamed += _rename_key(operation, "deprecated", "x-deprecated")

    for schema in (get_component_schemas(openapi_schema) or {}).values():
        properties = schema.get("properties") if isinstance(schema, dict) else None
        if not isinstance(properties, dict):
            continue
        for prop in properties.values():
            if isinstance(prop, dict) and prop.get("deprecated"):
                renamed += _rename_key(prop, "deprecated", "x-deprecated")
    return renamed


def add_unique_discriminator_models(openapi_schema: dict[str, Any]) -> int:
    """List each discriminated model once; several mapping values may share one schema."""
    count = 0
    for schema_name, schema in (get_component_schemas(openapi_schema) or {}).items():
        if not isinstance(schema, dict):
            continue
        discriminator = schema.get("discriminator")
        mapping = discriminator.get("mapping") if isinstance(discriminator, dict) else None
        if not isinstance(mapping, dict):
            continue

        unique_models = list(dict.fromkeys(ref_name(ref) for ref in mapping.values() if isinstance(ref, str)))
        schema["x-uniqueDiscriminatorModels"] = unique_models
        count += 1
        logger.info(f"Add x-uniqueDiscriminatorModels on {schema_name}: {', '.join(unique_models)}")
    return count
