# src/cache/fingerprint.py — v1
"""Transform options fingerprinting and cache key construction.

The fingerprint is a SHA-256 over a canonical JSON rendering of the
options: every field present, keys sorted, compact separators. Field
insertion order of the caller's input therefore never reaches the digest.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from imgresizer.core.models import AdapterKind, TransformOptions

CACHE_KEY_NAMESPACE = "transform"


def canonical_options(options: TransformOptions | Mapping[str, Any]) -> str:
    """Serialize options to their canonical JSON form.

    Mappings are validated into TransformOptions first so that defaults are
    filled in and ``{"width": 10}`` equals ``TransformOptions(width=10)``.
    """
    if not isinstance(options, TransformOptions):
        options = TransformOptions.model_validate(dict(options))
    return json.dumps(
        options.model_dump(mode="json"),
        sort_keys=True,
        separators=(",", ":"),
    )


def hash_options(options: TransformOptions | Mapping[str, Any]) -> str:
    """Return the hex SHA-256 fingerprint of transform options."""
    return hashlib.sha256(canonical_options(options).encode("utf-8")).hexdigest()


def build_cache_key(
    image_id: str,
    options: TransformOptions | Mapping[str, Any],
    adapter_kind: AdapterKind,
) -> str:
    """Compose ``transform:{id}:{adapter}:{fingerprint}``."""
    return f"{CACHE_KEY_NAMESPACE}:{image_id}:{AdapterKind(adapter_kind).value}:{hash_options(options)}"
