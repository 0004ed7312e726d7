# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

import pytest

from openapi_preprocessor import _patch_fragments as fragments
from openapi_preprocessor.config import OperationRemoval, PathFragment, PreconditionGuard, PreprocessorConfig
from openapi_preprocessor.errors import GuardViolation
from openapi_preprocessor.path_patches import check_guards, insert_path_fragment, remove_operation


@pytest.fixture
def config():
    return PreprocessorConfig()


def test_guard_passes_without_subscription_id(openapi_schema, config):
    check_guards(openapi_schema, config.guards)


def test_guard_fails_when_subscription_id_appears(openapi_schema, config):
    subscription = openapi_schema["components"]["schemas"]["Project"]["properties"]["subscription"]
    subscription["properties"]["id"] = {"type": "string"}

    with pytest.raises(GuardViolation, match="ProjectTask.delete") as exc_info:
        check_guards(openapi_schema, config.guards)
    assert exc_info.value.pointer == "components/schemas/Project/properties/subscription/properties/id"


def test_custom_guard():
    guard = PreconditionGuard(pointer=["info", "x-beta"], message="review the beta client")

    with pytest.raises(GuardViolation, match="review the beta client"):
        check_guards({"info": {"x-beta": False}}, [guard])


def test_addons_patch_is_added_next_to_existing_get(openapi_schema, config):
    (fragment,) = config.early_fragments

    assert insert_path_fragment(openapi_schema, fragment) is True

    path_item = openapi_schema["paths"][fragments.ORG_ADDONS_PATH]
    assert list(path_item) == ["get", "patch"]
    assert path_item["patch"]["operationId"] == "update-org-addons"


def test_existing_verb_is_not_replaced(openapi_schema, config):
    (fragment,) = config.early_fragments
    openapi_schema["paths"][fragments.ORG_ADDONS_PATH]["patch"] = {"operationId": "upstream-patch"}

    assert insert_path_fragment(openapi_schema, fragment) is False
    assert openapi_schema["paths"][fragments.ORG_ADDONS_PATH]["patch"] == {"operationId": "upstream-patch"}


def test_deployments_next_adds_path_and_schema(openapi_schema, config):
    (fragment,) = config.late_fragments

    assert insert_path_fragment(openapi_schema, fragment) is True
    assert insert_path_fragment(openapi_schema, fragment) is False

    operation = openapi_schema["paths"][fragments.DEPLOYMENTS_NEXT_PATH]["patch"]
    assert operation["operationId"] == "update-projects-environments-deployments-next"
    assert openapi_schema["components"]["schemas"]["ResourceConfig"] == fragments.RESOURCE_CONFIG_SCHEMA


def test_skip_when_path_exists(openapi_schema, config):
    (fragment,) = config.late_fragments
    openapi_schema["paths"][fragments.DEPLOYMENTS_NEXT_PATH] = {"get": {"responses": {}}}

    assert insert_path_fragment(openapi_schema, fragment) is False
    assert "patch" not in openapi_schema["paths"][fragments.DEPLOYMENTS_NEXT_PATH]
    assert "ResourceConfig" not in openapi_schema["components"]["schemas"]


def test_inserted_operation_is_a_copy():
    fragment = PathFragment(path="/a", method="POST", operation={"tags": ["A"]})
    doc = {}

    insert_path_fragment(doc, fragment)
    doc["paths"]["/a"]["post"]["tags"].append("B")

    assert fragment.operation == {"tags": ["A"]}


def test_remove_project_delete(openapi_schema, config):
    (removal,) = config.removals

    assert remove_operation(openapi_schema, removal) is True
    assert remove_operation(openapi_schema, removal) is False
    assert "delete" not in openapi_schema["paths"]["/projects/{projectId}"]
    assert "get" in openapi_schema["paths"]["/projects/{projectId}"]


def test_remove_missing_path_is_silent():
    assert remove_operation({"paths": {}}, OperationRemoval(path="/nope", method="delete")) is False
