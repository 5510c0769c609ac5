"""
Tamper-evident hashing for audit log entries.
"""

import hashlib
import json
from typing import Any, Dict, Union

from pydantic import BaseModel


def canonical_json(payload: Union[Dict[str, Any], BaseModel]) -> str:
    """
    Serialize a payload to a stable JSON string.

    Pydantic models are dumped by alias in JSON mode so a stored
    VerificationResult hashes the same as the response the caller received.
    """
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))


def hash_payload(payload: Union[Dict[str, Any], BaseModel]) -> str:
    """SHA-256 hex digest of the canonical JSON form of ``payload``."""
    return hashlib.sha256(canonical_json(payload).encode()).hexdigest()
