# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the terms described in the LICENSE file in
# the root directory of this source tree.

import logging

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER_NAME = "openapi_preprocessor"
_configured = False


class CategoryAdapter(logging.LoggerAdapter):
    """Prefixes every record with the category it was logged under."""

    def process(self, msg, kwargs):
        return f"[{self.extra['category']}] {msg}", kwargs


def setup_logging(level: str | int = logging.INFO, console: Console | None = None) -> None:
    """Attach a rich handler to the package logger. Calling it again only changes the level."""
    global _configured

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(level)
    if _configured:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str, category: str = "preprocess") -> CategoryAdapter:
    if not name.startswith(_ROOT_LOGGER_NAME):
        name = f"{_ROOT_LOGGER_NAME}.{name}"
    return CategoryAdapter(logging.getLogger(name), {"category": category})
