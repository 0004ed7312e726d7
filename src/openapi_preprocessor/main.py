#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Main entry point for the OpenAPI SDK preprocessor.
"""

import argparse
from dataclasses import dataclass, field
from typing import Any

from openapi_spec_validator import validate_spec
from openapi_spec_validator.exceptions import OpenAPISpecValidatorError
from termcolor import cprint

from . import (
    descriptions,
    path_patches,
    return_types,
    schema_naming,
    schema_nullability,
    schema_transforms,
    serialization,
)
from .config import PreprocessorConfig, load_config
from .errors import PreprocessError
from .log import setup_logging

DEFAULT_INPUT = "./resources/openapi/openapispec-upsun.json"


@dataclass
class PreprocessReport:
    refs_renamed: int = 0
    tags_renamed: int = 0
    nullability_changes: dict[str, list[str]] = field(default_factory=dict)
    required_removed: dict[str, int] = field(default_factory=dict)
    fragments_added: list[str] = field(default_factory=list)
    operations_removed: list[str] = field(default_factory=list)
    responses_replaced: int = 0
    operations_annotated: int = 0
    descriptions_wrapped: int = 0


def preprocess_schema(openapi_schema: dict[str, Any], config: PreprocessorConfig) -> PreprocessReport:
    """
    Run every pass over a loaded document, in place.

    The order matters: names are canonical before return types are read from them,
    and nullability is settled before required lists are cleaned.

    Raises:
        GuardViolation: A guarded field appeared in the input; nothing has been changed
    """
    report = PreprocessReport()

    path_patches.check_guards(openapi_schema, config.guards)

    report.refs_renamed = schema_naming.rename_schemas(openapi_schema, config.acronyms)
    report.tags_renamed = schema_naming.rename_tags(openapi_schema, config.acronyms)

    report.nullability_changes = schema_nullability.propagate_nullability(openapi_schema, config.route_variants)
    schema_nullability.mark_datetime_properties(openapi_schema)
    report.required_removed = schema_nullability.clean_required_properties(openapi_schema, config.route_variants)

    for fragment in config.early_fragments:
        if path_patches.insert_path_fragment(openapi_schema, fragment):
            report.fragments_added.append(f"{fragment.method.upper()} {fragment.path}")
    for removal in config.removals:
        if path_patches.remove_operation(openapi_schema, removal):
            report.operations_removed.append(f"{removal.method.upper()} {removal.path}")

    schema_transforms.remove_empty_parameters(openapi_schema)
    report.responses_replaced = schema_transforms.replace_empty_responses(
        openapi_schema, config.accepted_response_ref
    )

    for fragment in config.late_fragments:
        if path_patches.insert_path_fragment(openapi_schema, fragment):
            report.fragments_added.append(f"{fragment.method.upper()} {fragment.path}")

    schema_nullability.fix_nullable_required(openapi_schema)
    schema_transforms.rename_internal_flags(openapi_schema)
    schema_transforms.rename_deprecated_flags(openapi_schema)

    report.operations_annotated = return_types.annotate_return_types(openapi_schema, config.model_namespace)
    report.descriptions_wrapped = descriptions.format_descriptions(
        openapi_schema,
        config.docs_base_url,
        width=config.description_width,
        parameter_width=config.parameter_description_width,
    )
    schema_transforms.add_unique_discriminator_models(openapi_schema)

    return report


def default_output_path(input_path: str) -> str:
    return input_path.replace(".json", "-sdks.json")


def validate_openapi_schema(schema: dict[str, Any]) -> bool:
    """Report whether the processed document is still valid OpenAPI. Never fails the run."""
    try:
        validate_spec(schema)
        cprint("Processed schema is valid", "green")
        return True
    except OpenAPISpecValidatorError as e:
        cprint(f"Processed schema validation failed: {e}", "yellow")
        return False
    except Exception as e:
        cprint(f"Processed schema validation error: {e}", "yellow")
        return False


def _print_report(openapi_schema: dict[str, Any], config: PreprocessorConfig, report: PreprocessReport) -> None:
    cprint("\nModification report:", "cyan")
    for variant, (total, nullable) in schema_nullability.nullability_report(
        openapi_schema, config.route_variants
    ).items():
        print(f"  → {variant}: {total} total properties, {nullable} nullable")
    print(f"  → {report.refs_renamed} schema references renamed, {report.tags_renamed} tags renamed")
    for fragment in report.fragments_added:
        print(f"  → added {fragment}")
    for removed in report.operations_removed:
        print(f"  → removed {removed}")
    print(f"  → {report.responses_replaced} empty responses replaced")
    print(f"  → {report.operations_annotated} operations annotated")
    print(f"  → {report.descriptions_wrapped} descriptions wrapped")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the OpenAPI SDK preprocessor."""
    parser = argparse.ArgumentParser(description="Patch an OpenAPI schema for SDK generation")
    parser.add_argument("input", nargs="?", default=DEFAULT_INPUT, help="Path to the OpenAPI JSON schema")
    parser.add_argument("output", nargs="?", help="Output path (default: <input>-sdks.json)")
    parser.add_argument("--config", help="YAML file overriding the default configuration")
    parser.add_argument("--validate", action="store_true", help="Validate the processed schema before saving")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level of the individual passes",
    )

    args = parser.parse_args(argv)
    output = args.output or default_output_path(args.input)
    setup_logging(args.log_level)

    cprint("Starting OpenAPI schema preprocessing", "cyan")
    print(f"Input: {args.input}")
    print(f"Output: {output}")

    try:
        config = load_config(args.config)
        openapi_schema = serialization.load(args.input, config.text_replacements)
        report = preprocess_schema(openapi_schema, config)
        if args.validate:
            validate_openapi_schema(openapi_schema)
        serialization.save(openapi_schema, output, frozenset(config.empty_array_keys))
    except PreprocessError as e:
        cprint(f"Error: {e}", "red")
        return 1

    _print_report(openapi_schema, config, report)
    cprint("\nPreprocessing completed successfully!", "green")
    print(f"You can now use '{output}' with openapi-generator-cli in your SDKs")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
