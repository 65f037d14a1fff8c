"""Shared AWS helpers for service clients."""

from __future__ import annotations

from typing import Any

import boto3

from voxplan.config.settings import StorageConfig


def create_boto3_client(
    service_name: str,
    config: StorageConfig,
    *,
    region_name: str | None = None,
) -> Any:
    """Instantiate a boto3 client using configured credentials if available."""

    client_kwargs: dict[str, Any] = {"region_name": region_name or config.region}
    if config.access_key and config.secret_key:
        client_kwargs["aws_access_key_id"] = config.access_key
        client_kwargs["aws_secret_access_key"] = config.secret_key
    if config.endpoint_url:
        client_kwargs["endpoint_url"] = config.endpoint_url
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client"]
