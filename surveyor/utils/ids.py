# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import json
from hashlib import sha256
from typing import Any

ID_LENGTH = 16


def stable_id(value: Any) -> str:
    """Derive a deterministic identifier from a JSON-serializable value.

    Mappings are serialized with sorted keys so that the same logical value always produces
    the same identifier, independent of insertion order.

    Args:
        value (Any): The canonical identity of an artifact.

    Returns:
        str: The first 16 hex characters of the sha256 digest of the canonical JSON form.
    """
    canonical = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return sha256(canonical.encode("utf-8")).hexdigest()[:ID_LENGTH]
