# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

import json

import pytest


@pytest.fixture
def openapi_schema():
    """A small document shaped like the upstream Upsun schema."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Upsun API", "version": "1.0"},
        "security": [{"BearerAuth": []}],
        "tags": [{"name": "HTTP access permissions"}, {"name": "API tokens"}],
        "paths": {
            "/projects/{projectId}": {
                "parameters": [{"$ref": "#/components/parameters/ProjectId"}],
                "get": {
                    "operationId": "get-projects",
                    "tags": ["Project"],
                    "description": "Retrieve the details of a single project.",
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Project"}}},
                        }
                    },
                },
                "delete": {
                    "operationId": "delete-projects",
                    "tags": ["Project"],
                    "responses": {"204": {"description": "Deleted"}},
                },
            },
            "/users/{userId}/api-tokens": {
                "get": {
                    "operationId": "list-api-tokens",
                    "tags": ["API tokens"],
                    "parameters": [],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "array",
                                        "items": {"$ref": "#/components/schemas/api_token"},
                                    }
                                }
                            },
                        }
                    },
                }
            },
            "/organizations/{organization_id}/addons": {
                "get": {
                    "operationId": "get-org-addons",
                    "tags": ["Add-ons"],
                    "responses": {
                        "200": {
                            "description": "OK",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/OrganizationAddonsObject"}
                                }
                            },
                        }
                    },
                }
            },
        },
        "components": {
            "securitySchemes": {"BearerAuth": {"type": "http", "scheme": "bearer"}},
            "parameters": {
                "ProjectId": {
                    "name": "projectId",
                    "in": "path",
                    "required": True,
                    "description": "The ID of the project.",
                    "schema": {"type": "string"},
                }
            },
            "schemas": {
                "Project": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "string"},
                        "created_at": {"type": "string", "format": "date-time"},
                        "subscription": {"type": "object", "properties": {"license_uri": {"type": "string"}}},
                    },
                },
                "api_token": {
                    "type": "object",
                    "description": "An API token.",
                    "properties": {"id": {"type": "string"}, "name": {"type": "string"}},
                },
                "OrganizationAddonsObject": {
                    "type": "object",
                    "properties": {"available": {"type": "object", "properties": {}}},
                },
                "AcceptedResponse": {
                    "type": "object",
                    "properties": {"status": {"type": "string"}, "code": {"type": "integer"}},
                },
                "Error": {"type": "object", "properties": {"title": {"type": "string"}}},
                "ProxyRoute": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "string"},
                        "to": {"type": "string"},
                        "tls": {"$ref": "#/components/schemas/TLSSettings"},
                    },
                    "required": ["id", "to", "tls"],
                },
                "RedirectRoute": {
                    "type": "object",
                    "properties": {"to": {"type": "string", "nullable": True}, "redirects": {"type": "object"}},
                    "required": ["to", "redirects"],
                },
                "UpstreamRoute": {
                    "type": "object",
                    "properties": {"upstream": {"type": "string"}},
                    "required": ["upstream"],
                },
                "TLSSettings": {"type": "object", "properties": {"strict_transport_security": {"type": "object"}}},
            },
        },
    }


@pytest.fixture
def schema_file(tmp_path, openapi_schema):
    path = tmp_path / "openapispec-upsun.json"
    path.write_text(json.dumps(openapi_schema))
    return path
