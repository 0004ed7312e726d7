# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

import pytest

from openapi_preprocessor.config import PreprocessorConfig, load_config
from openapi_preprocessor.errors import InputError


def test_defaults():
    config = load_config()

    assert config.route_variants == ["ProxyRoute", "RedirectRoute", "UpstreamRoute"]
    assert config.description_width == 113
    assert config.parameter_description_width == 80
    assert config.empty_array_keys == ["BearerAuth"]
    assert [guard.pointer[-3:] for guard in config.guards] == [["subscription", "properties", "id"]]


def test_default_lists_are_independent():
    first = PreprocessorConfig()
    second = PreprocessorConfig()

    first.route_variants.append("OtherRoute")

    assert second.route_variants == ["ProxyRoute", "RedirectRoute", "UpstreamRoute"]


def test_yaml_overrides(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "description_width: 100\n"
        "guards: []\n"
        "removals:\n"
        "  - path: /projects/{projectId}\n"
        "    method: patch\n"
    )

    config = load_config(path)

    assert config.description_width == 100
    assert config.guards == []
    assert config.removals[0].method == "patch"
    assert config.parameter_description_width == 80


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert load_config(path) == PreprocessorConfig()


@pytest.mark.parametrize("content", ["- a\n- b\n", "description_width: wide\n", "a: [\n"])
def test_invalid_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(InputError):
        load_config(path)


def test_missing_config(tmp_path):
    with pytest.raises(InputError):
        load_config(tmp_path / "missing.yaml")
