# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from . import _patch_fragments as fragments
from .errors import InputError


class PreconditionGuard(BaseModel):
    """Aborts the run when `pointer` resolves in the input document."""

    pointer: list[str] = Field(description="Path segments from the document root")
    message: str = Field(description="Names the hand-written code that must be reviewed")


class PathFragment(BaseModel):
    path: str
    method: str
    operation: dict[str, Any]
    schemas: dict[str, Any] = Field(
        default_factory=dict,
        description="Component schemas the operation depends on, added when missing",
    )
    skip_if_path_exists: bool = Field(
        default=False,
        description="Skip when the path exists at all, not only when the verb does",
    )


class OperationRemoval(BaseModel):
    path: str
    method: str


class PreprocessorConfig(BaseModel):
    route_variants: list[str] = Field(
        default_factory=lambda: ["ProxyRoute", "RedirectRoute", "UpstreamRoute"],
        description="Schemas that must expose the same, mutually nullable, property surface",
    )
    acronyms: dict[str, str] = Field(
        default_factory=lambda: {"API": "Api", "SSH": "Ssh", "MFA": "Mfa", "TLS": "Tls", "VPN": "Vpn"},
    )
    text_replacements: dict[str, str] = Field(
        default_factory=lambda: {"HTTP access permissions": "Http access permissions"},
        description="Literal replacements applied to the raw input before parsing",
    )
    docs_base_url: str = "https://docs.upsun.com/api/"
    model_namespace: str = Field(default="", description="Prefix of model class names in return type hints")
    description_width: int = 113
    parameter_description_width: int = 80
    empty_array_keys: list[str] = Field(
        default_factory=lambda: ["BearerAuth"],
        description="Keys whose empty value is written as [] instead of {}",
    )
    accepted_response_ref: str = "#/components/schemas/AcceptedResponse"
    guards: list[PreconditionGuard] = Field(
        default_factory=lambda: [
            PreconditionGuard(
                pointer=fragments.PROJECT_SUBSCRIPTION_ID_POINTER,
                message=(
                    "Project.subscription.id has been introduced, please review ProjectTask.delete, "
                    "SupportTicketTask.listCategories and SupportTicketTask.listPriorities to use it"
                ),
            )
        ]
    )
    early_fragments: list[PathFragment] = Field(
        default_factory=lambda: [
            PathFragment(path=fragments.ORG_ADDONS_PATH, method="patch", operation=fragments.ORG_ADDONS_PATCH)
        ]
    )
    late_fragments: list[PathFragment] = Field(
        default_factory=lambda: [
            PathFragment(
                path=fragments.DEPLOYMENTS_NEXT_PATH,
                method="patch",
                operation=fragments.DEPLOYMENTS_NEXT_PATCH,
                schemas={"ResourceConfig": fragments.RESOURCE_CONFIG_SCHEMA},
                skip_if_path_exists=True,
            )
        ]
    )
    removals: list[OperationRemoval] = Field(
        default_factory=lambda: [OperationRemoval(path=fragments.PROJECT_PATH, method="delete")]
    )


def load_config(path: str | Path | None = None) -> PreprocessorConfig:
    """Build the configuration, applying overrides from a YAML file when given."""
    if path is None:
        return PreprocessorConfig()

    try:
        with open(path) as f:
            overrides = yaml.safe_load(f) or {}
    except OSError as e:
        raise InputError(str(path), e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise InputError(str(path), f"invalid YAML: {e}") from e

    if not isinstance(overrides, dict):
        raise InputError(str(path), "configuration root must be a mapping")

    try:
        return PreprocessorConfig.model_validate(overrides)
    except ValidationError as e:
        raise InputError(str(path), f"invalid configuration: {e}") from e
