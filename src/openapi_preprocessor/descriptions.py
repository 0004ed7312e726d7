# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Pre-wrapped descriptions for the SDK doc comments.

Mustache templates cannot wrap text, so every description is rendered once here
into a list of lines stored under ``x-description``. The original ``description``
is left as is.
"""

import re
import textwrap
from typing import Any

from .log import get_logger
from .schema_nodes import COMPOSITION_KEYS, get_component_schemas, iter_operations

logger = get_logger(name=__name__, category="preprocess::descriptions")

_INTERNAL_LINK = re.compile(r"\[([^\]]+)\]\((#[^)]+)\)")
_BR_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def _absolute_link(match: re.Match, base_url: str) -> str:
    text, anchor = match.group(1), match.group(2)
    url = f"{base_url}{anchor}".replace("~1", "/").replace("%7B", "{").replace("%7D", "}")
    return f"{text} ({url})"


def normalize_description(description: str, base_url: str) -> str:
    """Rewrite internal links and collapse the text to a single line."""
    description = _INTERNAL_LINK.sub(lambda m: _absolute_link(m, base_url), description)
    description = description.replace("%2F", "/")
    description = _BR_TAG.sub("", description)
    return _WHITESPACE.sub(" ", description).strip()


def wrap_text(text: str, width: int) -> list[str]:
    """Wrap on spaces only; a word longer than `width` keeps a line of its own."""
    lines = textwrap.wrap(text, width=width, break_long_words=False, break_on_hyphens=False)
    return lines or [""]


def preprocess_description(description: str, base_url: str, width: int) -> list[str]:
    return wrap_text(normalize_description(description, base_url), width)


def format_schema_descriptions(schema: Any, base_url: str, width: int) -> int:
    """Add `x-description` to a schema, its properties, array items and composition members."""
    if not isinstance(schema, dict):
        return 0

    count = 0
    description = schema.get("description")
    if isinstance(description, str) and description:
        schema["x-description"] = preprocess_description(description, base_url, width)
        count += 1

    properties = schema.get("properties")
    if isinstance(properties, dict):
        for prop in properties.values():
            count += format_schema_descriptions(prop, base_url, width)

    items = schema.get("items")
    if isinstance(items, dict):
        count += format_schema_descriptions(items, base_url, width)

    for key in COMPOSITION_KEYS:
        members = schema.get(key)
        if isinstance(members, list):
            for member in members:
                count += format_schema_descriptions(member, base_url, width)

    return count


def format_descriptions(
    openapi_schema: dict[str, Any],
    base_url: str,
    width: int = 113,
    parameter_width: int = 80,
) -> int:
    """
    Pre-wrap the descriptions of operations, component schemas and component parameters.

    Returns:
        The number of `x-description` entries written
    """
    count = 0
    for _path, _method, operation in iter_operations(openapi_schema):
        description = operation.get("description")
        if isinstance(description, str) and description:
            operation["x-description"] = preprocess_description(description, base_url, width)
            count += 1
        for parameter in operation.get("parameters") or []:
            count += format_schema_descriptions(parameter, base_url, parameter_width)

    for schema in (get_component_schemas(openapi_schema) or {}).values():
        count += format_schema_descriptions(schema, base_url, width)

    parameters = (openapi_schema.get("components") or {}).get("parameters")
    if isinstance(parameters, dict):
        for parameter in parameters.values():
            count += format_schema_descriptions(parameter, base_url, parameter_width)
    else:
        logger.debug("No components.parameters to format")

    logger.info(f"Wrapped {count} descriptions")
    return count
