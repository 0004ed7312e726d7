# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

import pytest

from openapi_preprocessor.config import PreprocessorConfig
from openapi_preprocessor.schema_naming import canonical_name, canonical_tag, rename_schemas, rename_tags

ACRONYMS = PreprocessorConfig().acronyms


@pytest.mark.parametrize(
    "name,expected",
    [
        ("api_token", "ApiToken"),
        ("user", "User"),
        ("ApiToken", "ApiToken"),
        ("SSHKey", "SshKey"),
        ("TLSSettings", "TlsSettings"),
        ("MFAEnforcement", "MfaEnforcement"),
        ("VPNConfiguration", "VpnConfiguration"),
        ("API_key", "ApiKey"),
        ("Deployment-Input", "DeploymentInput"),
        ("V_PN", "Vpn"),
    ],
)
def test_canonical_name(name, expected):
    assert canonical_name(name, ACRONYMS) == expected
    assert canonical_name(expected, ACRONYMS) == expected


def test_canonical_tag_keeps_spaces():
    assert canonical_tag("API tokens", ACRONYMS) == "Api tokens"
    assert canonical_tag("Http access permissions", ACRONYMS) == "Http access permissions"
    assert canonical_tag("add-ons", ACRONYMS) == "Add-ons"


def test_rename_schemas_rewrites_refs(openapi_schema):
    count = rename_schemas(openapi_schema, ACRONYMS)

    schemas = openapi_schema["components"]["schemas"]
    assert "ApiToken" in schemas and "api_token" not in schemas
    assert "TlsSettings" in schemas and "TLSSettings" not in schemas
    items = openapi_schema["paths"]["/users/{userId}/api-tokens"]["get"]["responses"]["200"]["content"][
        "application/json"
    ]["schema"]["items"]
    assert items == {"$ref": "#/components/schemas/ApiToken"}
    assert schemas["ProxyRoute"]["properties"]["tls"] == {"$ref": "#/components/schemas/TlsSettings"}
    assert count == 2


def test_rename_schemas_preserves_order(openapi_schema):
    before = list(openapi_schema["components"]["schemas"])

    rename_schemas(openapi_schema, ACRONYMS)

    after = list(openapi_schema["components"]["schemas"])
    assert after == [canonical_name(name, ACRONYMS) for name in before]


def test_rename_schemas_is_idempotent(openapi_schema):
    rename_schemas(openapi_schema, ACRONYMS)

    assert rename_schemas(openapi_schema, ACRONYMS) == 0


def test_rename_only_touches_exact_refs():
    doc = {
        "components": {"schemas": {"api_token": {"type": "object"}}},
        "paths": {"/a": {"get": {"x-ref": {"$ref": "#/components/schemas/api_token_list"}}}},
    }

    assert rename_schemas(doc, ACRONYMS) == 0
    assert doc["paths"]["/a"]["get"]["x-ref"]["$ref"] == "#/components/schemas/api_token_list"


def test_rename_updates_discriminator_mapping():
    doc = {
        "components": {
            "schemas": {
                "Integration": {
                    "discriminator": {"propertyName": "type", "mapping": {"vpn": "#/components/schemas/VPNIntegration"}}
                },
                "VPNIntegration": {"type": "object"},
            }
        }
    }

    assert rename_schemas(doc, ACRONYMS) == 1
    mapping = doc["components"]["schemas"]["Integration"]["discriminator"]["mapping"]
    assert mapping == {"vpn": "#/components/schemas/VpnIntegration"}


def test_rename_without_schemas_is_a_no_op():
    doc = {"paths": {}}

    assert rename_schemas(doc, ACRONYMS) == 0
    assert doc == {"paths": {}}


def test_rename_tags(openapi_schema):
    changed = rename_tags(openapi_schema, ACRONYMS)

    assert openapi_schema["paths"]["/users/{userId}/api-tokens"]["get"]["tags"] == ["Api tokens"]
    assert [tag["name"] for tag in openapi_schema["tags"]] == ["HTTP access permissions", "Api tokens"]
    assert changed == 2
