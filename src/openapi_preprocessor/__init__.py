# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
OpenAPI preprocessor for SDK generation.

This module normalizes an OpenAPI 3.0 document so that openapi-generator
templates can consume it: canonical names, consistent nullability across route
variants, return type hints and pre-wrapped descriptions.
"""

__all__ = ["preprocess_schema", "main"]


def __getattr__(name: str):
    if name in {"preprocess_schema", "main"}:
        from .main import main as _main
        from .main import preprocess_schema as _preprocess_schema

        return {"preprocess_schema": _preprocess_schema, "main": _main}[name]
    raise AttributeError(name)
