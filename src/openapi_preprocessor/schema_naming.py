# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Canonical schema and tag names.

Generated SDK class names come straight from the schema keys, so `api_token`
and `SSHKey` must become `ApiToken` and `SshKey` before the generator runs.
"""

import re
from typing import Any

from .log import get_logger
from .schema_nodes import SCHEMA_REF_PREFIX, get_component_schemas, iter_operations

logger = get_logger(name=__name__, category="preprocess::naming")

_SEPARATORS = re.compile(r"[_\-\s]+")


def _replace_acronyms(name: str, acronyms: dict[str, str]) -> str:
    for acronym, replacement in acronyms.items():
        name = name.replace(acronym, replacement)
    return name


def canonical_name(name: str, acronyms: dict[str, str]) -> str:
    """
    PascalCase a schema name.

    Examples:
        api_token -> ApiToken
        SSHKey -> SshKey
        ApiToken -> ApiToken
        V_PN -> Vpn
    """
    name = _replace_acronyms(name, acronyms)
    parts = [part for part in _SEPARATORS.split(name) if part]
    # joining may form a new acronym, e.g. V_PN
    return _replace_acronyms("".join(part[0].upper() + part[1:] for part in parts) or name, acronyms)


def canonical_tag(tag: str, acronyms: dict[str, str]) -> str:
    """Tags keep their spaces (they become kebab ids later); only acronyms and the first letter change."""
    tag = _replace_acronyms(tag, acronyms)
    return tag[:1].upper() + tag[1:]


def rewrite_schema_refs(obj: Any, rename_map: dict[str, str]) -> int:
    """Point every `#/components/schemas/<old>` reference at its new name. Returns the rewrite count."""
    ref_map = {f"{SCHEMA_REF_PREFIX}{old}": f"{SCHEMA_REF_PREFIX}{new}" for old, new in rename_map.items()}
    count = 0

    def update(node: Any) -> None:
        nonlocal count
        if isinstance(node, dict):
            for key, value in node.items():
                if key == "$ref" and isinstance(value, str):
                    if value in ref_map:
                        node[key] = ref_map[value]
                        count += 1
                        logger.debug(f"$ref updated: {value} -> {ref_map[value]}")
                else:
                    if key == "mapping" and isinstance(value, dict):
                        # discriminator mappings hold bare reference strings
                        for mapped_key, target in value.items():
                            if isinstance(target, str) and target in ref_map:
                                value[mapped_key] = ref_map[target]
                                count += 1
                    update(value)
        elif isinstance(node, list):
            for item in node:
                update(item)

    update(obj)
    return count


def rename_schemas(openapi_schema: dict[str, Any], acronyms: dict[str, str]) -> int:
    """
    Rename every component schema to its canonical name and update all references.

    Key order of `components.schemas` is preserved.

    Returns:
        The number of references rewritten
    """
    schemas = get_component_schemas(openapi_schema)
    if schemas is None:
        logger.warning("No schemas found in components.schemas")
        return 0

    renamed: dict[str, Any] = {}
    rename_map: dict[str, str] = {}
    for name, schema_def in schemas.items():
        new_name = canonical_name(name, acronyms)
        if new_name != name:
            rename_map[name] = new_name
            logger.info(f"Rename schema '{name}' -> '{new_name}'")
        if new_name in renamed:
            logger.warning(f"Schema '{name}' collides with an existing '{new_name}', the later definition wins")
        renamed[new_name] = schema_def

    if not rename_map:
        return 0

    openapi_schema["components"]["schemas"] = renamed
    count = rewrite_schema_refs(openapi_schema, rename_map)
    logger.info(f"{count} $ref updated")
    return count


def rename_tags(openapi_schema: dict[str, Any], acronyms: dict[str, str]) -> int:
    """Canonicalize operation tags and the root tag list. Returns how many tags changed."""
    changed = 0
    for _path, _method, operation in iter_operations(openapi_schema):
        tags = operation.get("tags")
        if not isinstance(tags, list):
            continue
        for i, tag in enumerate(tags):
            if isinstance(tag, str):
                new_tag = canonical_tag(tag, acronyms)
                if new_tag != tag:
                    tags[i] = new_tag
                    changed += 1

    for tag_def in openapi_schema.get("tags") or []:
        if isinstance(tag_def, dict) and isinstance(tag_def.get("name"), str):
            new_name = canonical_tag(tag_def["name"], acronyms)
            if new_name != tag_def["name"]:
                tag_def["name"] = new_name
                changed += 1
    return changed
