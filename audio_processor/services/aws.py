"""Shared AWS helpers for the Bedrock and Transcribe clients."""

from __future__ import annotations

import base64
from typing import Any, Optional

import boto3


def decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret (base64 ``access:secret``) into its parts."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip())
    except ValueError:
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


def create_boto3_client(
    service_name: str,
    *,
    region_name: str,
    credentials: tuple[str, str] | None = None,
) -> Any:
    """Instantiate a boto3 client, using explicit credentials when provided."""

    client_kwargs: dict[str, Any] = {"region_name": region_name}
    if credentials:
        client_kwargs["aws_access_key_id"] = credentials[0]
        client_kwargs["aws_secret_access_key"] = credentials[1]
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client", "decode_bedrock_api_key"]
