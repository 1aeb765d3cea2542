"""Constants used across the inline-snippets package."""

from __future__ import annotations

import re

# Supported host
GITHUB_HOST = "github.com"
GITHUB_BLOB_PREFIX = f"https://{GITHUB_HOST}/"
RAW_CONTENT_HOST = "raw.githubusercontent.com"
BLOB_SEGMENT = "blob"

# Line-range fragment anchors, e.g. "L8" in "#L8-L16"
LINE_ANCHOR_PATTERN = re.compile(r"^L([0-9]+)$")

# Configuration defaults
DEFAULT_INLINE_MARKER = "inline"
DEFAULT_TIMEOUT = 10.0
URL_PLACEHOLDER = "<url>"

# CLI limits
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
TREE_EXTENSIONS = (".json",)
