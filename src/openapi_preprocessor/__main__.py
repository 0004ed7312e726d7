# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

"""
Entry point for running the openapi_preprocessor module as a package.
"""

from .main import main

if __name__ == "__main__":
    raise SystemExit(main())
