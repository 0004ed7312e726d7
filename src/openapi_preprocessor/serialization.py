# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Reading and writing the OpenAPI document.

These are the only functions of the package that touch the filesystem.
"""

import io
import json
from pathlib import Path
from typing import Any

import yaml
from ruamel.yaml import YAML
from ruamel.yaml.representer import RepresenterError
from ruamel.yaml.scalarstring import LiteralScalarString

from .errors import InputError, WriteError
from .log import get_logger
from .schema_refs import normalize_ref_siblings

logger = get_logger(name=__name__, category="preprocess::io")

YAML_SUFFIXES = (".yaml", ".yml")


class _SchemaLoader(yaml.SafeLoader):
    """Safe loader that leaves timestamps as strings, the way JSON input carries them."""


_SchemaLoader.yaml_implicit_resolvers = {
    first_char: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in YAML_SUFFIXES


def load(path: str | Path, replacements: dict[str, str] | None = None) -> dict[str, Any]:
    """
    Read and parse an OpenAPI document, then split `$ref` nodes that carry siblings.

    Args:
        path: JSON document (`.yaml`/`.yml` files are parsed as YAML)
        replacements: Literal text replacements applied before parsing

    Raises:
        InputError: The file is missing, unreadable or does not hold a mapping
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise InputError(str(path), "schema file does not exist") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(str(path), str(e)) from e

    for old, new in (replacements or {}).items():
        content = content.replace(old, new)

    try:
        openapi_schema = yaml.load(content, Loader=_SchemaLoader) if _is_yaml(path) else json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InputError(str(path), f"unable to parse schema: {e}") from e

    if not isinstance(openapi_schema, dict) or not openapi_schema:
        raise InputError(str(path), "unable to parse schema: the document root must be a non-empty mapping")

    normalize_ref_siblings(openapi_schema)
    return openapi_schema


def force_empty_objects(data: Any, empty_array_keys: set[str] | frozenset[str], key: Any = None) -> Any:
    """
    Return a copy of `data` where every empty mapping is an explicit `{}`.

    Containers stored under a key of `empty_array_keys` are written as `[]` when
    empty, e.g. `security: [{"BearerAuth": []}]`.
    """
    keep_as_array = key in empty_array_keys
    if isinstance(data, dict):
        if not data:
            return [] if keep_as_array else {}
        return {k: force_empty_objects(v, empty_array_keys, k) for k, v in data.items()}
    if isinstance(data, list):
        if not data:
            return []
        return [force_empty_objects(item, empty_array_keys, i) for i, item in enumerate(data)]
    return data


def _convert_multiline_strings_to_literal(obj: Any) -> Any:
    """Recursively convert multi-line strings to LiteralScalarString for YAML block scalar formatting."""
    if isinstance(obj, str) and "\n" in obj:
        return LiteralScalarString(obj)
    elif isinstance(obj, dict):
        return {key: _convert_multiline_strings_to_literal(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_convert_multiline_strings_to_literal(item) for item in obj]
    return obj


def dumps(openapi_schema: dict[str, Any], empty_array_keys: set[str] | frozenset[str] = frozenset()) -> str:
    """Encode as pretty JSON, keys in insertion order, slashes left unescaped."""
    return json.dumps(force_empty_objects(openapi_schema, empty_array_keys), indent=4)


def _dump_yaml(data: Any) -> str:
    yaml_writer = YAML()
    yaml_writer.default_flow_style = False
    yaml_writer.width = 4096
    yaml_writer.allow_unicode = True
    stream = io.StringIO()
    yaml_writer.dump(_convert_multiline_strings_to_literal(data), stream)
    return stream.getvalue()


def save(
    openapi_schema: dict[str, Any], path: str | Path, empty_array_keys: set[str] | frozenset[str] = frozenset()
) -> None:
    """
    Write the document as JSON, or as YAML when `path` ends in `.yaml`/`.yml`.

    Raises:
        WriteError: The document cannot be encoded or the file cannot be written
    """
    path = Path(path)
    try:
        if _is_yaml(path):
            content = _dump_yaml(force_empty_objects(openapi_schema, empty_array_keys))
        else:
            content = dumps(openapi_schema, empty_array_keys)
    except (TypeError, ValueError, RepresenterError) as e:
        raise WriteError(str(path), f"unable to encode schema: {e}") from e

    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise WriteError(str(path), e.strerror or str(e)) from e

    logger.info(f"Modified schema saved: {path}")
