# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Hand-written path fragments that the upstream schema does not publish yet.
"""

from typing import Any

ORG_ADDONS_PATH = "/organizations/{organization_id}/addons"

DEPLOYMENTS_NEXT_PATH = "/projects/{projectId}/environments/{environmentId}/deployments/next"

PROJECT_PATH = "/projects/{projectId}"

PROJECT_SUBSCRIPTION_ID_POINTER = ["components", "schemas", "Project", "properties", "subscription", "properties", "id"]


def _error_response(description: str) -> dict[str, Any]:
    return {
        "description": description,
        "content": {"application/problem+json": {"schema": {"$ref": "#/components/schemas/Error"}}},
    }


def _path_param(name: str) -> dict[str, Any]:
    return {"name": name, "in": "path", "required": True, "schema": {"type": "string"}}


def _resource_entry(kind: str, default_count: int) -> dict[str, Any]:
    return {
        "type": "object",
        "additionalProperties": {
            "type": "object",
            "properties": {
                "resources": {"$ref": "#/components/schemas/ResourceConfig"},
                "instance_count": {
                    "type": "integer",
                    "nullable": True,
                    "description": f"Number of instances to run for the {kind}",
                    "example": default_count,
                },
                "disk": {
                    "type": "integer",
                    "nullable": True,
                    "title": "Disk Size",
                    "description": f"Size of the disk in Bytes for the {kind}",
                    "example": 1024,
                },
            },
        },
    }


ORG_ADDONS_PATCH: dict[str, Any] = {
    "summary": "Update organization add-ons",
    "description": "Updates the add-ons configuration for an organization.",
    "operationId": "update-org-addons",
    "tags": ["Add-ons"],
    "parameters": [{"$ref": "#/components/parameters/OrganizationIDName"}],
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "user_management": {
                            "type": "string",
                            "description": "The user management level to apply.",
                            "enum": ["standard", "enhanced"],
                            "example": "standard",
                        },
                        "support_level": {
                            "type": "string",
                            "description": "The support level to apply.",
                            "enum": ["basic", "premium"],
                            "example": "basic",
                        },
                    },
                    "additionalProperties": False,
                    # at least one of the properties must be present
                    "minProperties": 1,
                }
            }
        },
    },
    "responses": {
        "200": {
            "description": "Add-ons updated successfully",
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/OrganizationAddonsObject"}}},
        },
        "400": _error_response("Bad Request"),
        "403": _error_response("Forbidden"),
        "404": _error_response("Not Found"),
    },
    "x-vendor": "upsun",
}

DEPLOYMENTS_NEXT_PATCH: dict[str, Any] = {
    "summary": "Update the next deployment",
    "description": "Update resources for either webapps, services, or workers in the next deployment.",
    "parameters": [_path_param("projectId"), _path_param("environmentId")],
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "webapps": _resource_entry("webapp", 2),
                        "services": _resource_entry("service", 1),
                        "workers": _resource_entry("worker", 1),
                    },
                }
            }
        },
    },
    "responses": {
        "default": {
            "description": "Deployment successfully updated",
            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/AcceptedResponse"}}},
        }
    },
    "tags": ["Deployment"],
    "operationId": "update-projects-environments-deployments-next",
}

RESOURCE_CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "profile_size": {
            "type": "string",
            "nullable": True,
            "description": 'Profile size (e.g. "0.5", "1", "2")',
            "example": "2",
        }
    },
}
