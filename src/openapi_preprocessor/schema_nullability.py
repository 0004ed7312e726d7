# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Nullability fixes for component schemas.

The route variant schemas (proxy, redirect, upstream, ...) are deserialized into
one model family by the SDKs, so every variant must expose every property, and a
property that may be null in one variant must be nullable in all of them.
"""

import copy
from typing import Any

from .log import get_logger
from .schema_nodes import get_component_schemas, is_nullable, is_reference

logger = get_logger(name=__name__, category="preprocess::nullability")


def _present_variants(openapi_schema: dict[str, Any], route_variants: list[str]) -> list[tuple[str, dict[str, Any]]]:
    schemas = get_component_schemas(openapi_schema) or {}
    present = []
    for name in route_variants:
        schema = schemas.get(name)
        if not isinstance(schema, dict):
            logger.warning(f"Schema '{name}' not found, skipped")
            continue
        present.append((name, schema))
    return present


def _properties(schema: dict[str, Any]) -> dict[str, Any]:
    properties = schema.get("properties")
    return properties if isinstance(properties, dict) else {}


def collect_variant_properties(variants: list[tuple[str, dict[str, Any]]]) -> dict[str, Any]:
    """Union of the variants' properties; the first variant defining a name is the donor."""
    all_properties: dict[str, Any] = {}
    for variant_name, schema in variants:
        for prop_name, prop_def in _properties(schema).items():
            if prop_name not in all_properties:
                all_properties[prop_name] = prop_def
                logger.debug(f"Found property: {prop_name} (from {variant_name})")
    return all_properties


def make_nullable_copy(prop_def: Any) -> dict[str, Any]:
    """Clone a property definition as nullable. References are wrapped, never mutated."""
    if is_reference(prop_def):
        return {"anyOf": [{"$ref": prop_def["$ref"]}, {"type": "null"}], "nullable": True}
    nullable_prop = copy.deepcopy(prop_def) if isinstance(prop_def, dict) else {}
    nullable_prop["nullable"] = True
    return nullable_prop


def propagate_nullability(openapi_schema: dict[str, Any], route_variants: list[str]) -> dict[str, list[str]]:
    """
    Give every route variant the same property surface.

    Missing properties are cloned from the donor as nullable, `id` is always
    nullable, and a property nullable in any sibling becomes nullable here too.

    Returns:
        Variant name -> descriptions of the properties added or changed
    """
    variants = _present_variants(openapi_schema, route_variants)
    all_properties = collect_variant_properties(variants)
    changes: dict[str, list[str]] = {}

    for variant_name, schema in variants:
        if not isinstance(schema.get("properties"), dict):
            schema["properties"] = {}
        properties = schema["properties"]
        changed: list[str] = []

        for prop_name, donor in all_properties.items():
            if prop_name not in properties:
                properties[prop_name] = make_nullable_copy(donor)
                changed.append(prop_name)
                continue

            current = properties[prop_name]
            if not isinstance(current, dict):
                continue

            if prop_name == "id" and not is_nullable(current):
                current["nullable"] = True
                changed.append(f"{prop_name} (forced nullable)")

            for other_name, other_schema in variants:
                if other_name == variant_name:
                    continue
                other = _properties(other_schema).get(prop_name)
                if is_nullable(other):
                    if not is_nullable(current):
                        current["nullable"] = True
                        changed.append(f"{prop_name} (made nullable because nullable in {other_name})")
                    break

        changes[variant_name] = changed
        if changed:
            logger.info(f"{variant_name}: added {len(changed)} nullable properties: {', '.join(changed)}")
        else:
            logger.info(f"{variant_name}: no properties added")

    return changes


def clean_required_properties(openapi_schema: dict[str, Any], route_variants: list[str]) -> dict[str, int]:
    """Drop `required` entries that are missing or nullable. Returns variant -> removed count."""
    removed: dict[str, int] = {}
    for variant_name, schema in _present_variants(openapi_schema, route_variants):
        required = schema.get("required")
        if not isinstance(required, list):
            continue

        properties = _properties(schema)
        kept = [
            name for name in required if isinstance(properties.get(name), dict) and not is_nullable(properties[name])
        ]
        if len(kept) != len(required):
            schema["required"] = kept
            removed[variant_name] = len(required) - len(kept)
            logger.info(f"{variant_name}: removed {removed[variant_name]} required properties that became nullable")
    return removed


def fix_nullable_required(openapi_schema: dict[str, Any]) -> int:
    """Nullable object properties must not list required sub-properties."""
    fixed = 0
    for schema in (get_component_schemas(openapi_schema) or {}).values():
        if not isinstance(schema, dict):
            continue
        for prop in _properties(schema).values():
            if is_nullable(prop) and "required" in prop:
                del prop["required"]
                fixed += 1
    return fixed


def mark_datetime_properties(openapi_schema: dict[str, Any]) -> int:
    """Flag every component property with `x-isDateTime` for the model templates."""
    marked = 0
    for schema in (get_component_schemas(openapi_schema) or {}).values():
        if not isinstance(schema, dict) or "properties" not in schema:
            continue
        for prop_name, prop in _properties(schema).items():
            if not isinstance(prop, dict):
                continue
            if prop.get("type") == "string" and prop.get("format") == "date-time":
                prop["x-isDateTime"] = True
                marked += 1
            elif "$ref" not in prop and prop_name != "_links":
                prop["x-isDateTime"] = False
    logger.info(f"DateTime marking completed, {marked} date-time properties found")
    return marked


def nullability_report(openapi_schema: dict[str, Any], route_variants: list[str]) -> dict[str, tuple[int, int]]:
    """Variant -> (total properties, nullable properties)."""
    schemas = get_component_schemas(openapi_schema) or {}
    report = {}
    for name in route_variants:
        schema = schemas.get(name)
        if not isinstance(schema, dict):
            continue
        properties = _properties(schema)
        report[name] = (len(properties), sum(1 for prop in properties.values() if is_nullable(prop)))
    return report
