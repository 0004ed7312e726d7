# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Fatal errors raised while preprocessing an OpenAPI document.

Anything that is not fatal (a missing schema, a missing properties map) is
logged by the pass that hit it and never raised.
"""


class PreprocessError(Exception):
    """Base class for errors that abort a preprocessing run."""


class InputError(PreprocessError):
    """The input document is missing, unreadable or not valid JSON/YAML."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read schema '{path}': {reason}")


class GuardViolation(PreprocessError):
    """A field that needs manual review of hand-written SDK code has appeared upstream."""

    def __init__(self, pointer: str, message: str):
        self.pointer = pointer
        super().__init__(message)


class WriteError(PreprocessError):
    """The processed document could not be written."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to write file '{path}': {reason}")
