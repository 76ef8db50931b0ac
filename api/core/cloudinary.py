"""
Cloudinary HTTP client helpers.

Used endpoints (https://api.cloudinary.com/v1_1/<cloud>/...):
- POST /image/upload   -> {"secure_url": ..., "public_id": ..., "bytes": ...}
- POST /image/destroy  -> {"result": "ok" | "not found"}

Requests are signed: sha1 over the sorted `key=value` pairs joined by `&`,
followed by the API secret.
"""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from typing import Any

import httpx

API_BASE_URL = "https://api.cloudinary.com/v1_1"

# Parameters Cloudinary leaves out of the signature.
_UNSIGNED_PARAMS = {"file", "api_key", "resource_type", "cloud_name"}


# Storage failures are explicit and separable from other runtime errors.
class CloudinaryError(RuntimeError):
    pass


@dataclass(frozen=True)
class Credentials:
    cloud_name: str
    api_key: str
    api_secret: str

    def validate(self) -> None:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise CloudinaryError("Cloudinary credentials are not configured.")


@dataclass(frozen=True)
class StoredAsset:
    url: str
    public_id: str
    bytes: int


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    to_sign = "&".join(
        f"{key}={params[key]}"
        for key in sorted(params)
        if key not in _UNSIGNED_PARAMS and params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def _signed_form(params: dict[str, Any], credentials: Credentials) -> dict[str, str]:
    form = {k: str(v) for (k, v) in params.items() if v not in (None, "")}
    form["timestamp"] = str(int(time.time()))
    form["signature"] = sign_params(form, credentials.api_secret)
    form["api_key"] = credentials.api_key
    return form


def _context_arg(context: dict[str, str] | None) -> str | None:
    if not context:
        return None
    # `=` and `|` are the separators, so they must not leak from values.
    return "|".join(
        f"{k}={str(v).replace('|', '_').replace('=', '_')}" for (k, v) in context.items()
    )


async def upload_image(
    *,
    credentials: Credentials,
    data: bytes,
    public_id: str,
    content_type: str = "image/webp",
    tags: list[str] | None = None,
    context: dict[str, str] | None = None,
    timeout_s: float = 60.0,
) -> StoredAsset:
    """
    Upload raw image bytes under `public_id` and return the stored asset.
    """
    credentials.validate()
    if not data:
        raise CloudinaryError("Refusing to upload an empty image.")

    form = _signed_form(
        {
            "public_id": public_id,
            "tags": ",".join(tags) if tags else None,
            "context": _context_arg(context),
        },
        credentials,
    )
    filename = public_id.rsplit("/", 1)[-1]

    try:
        async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=timeout_s) as client:
            resp = await client.post(
                f"/{credentials.cloud_name}/image/upload",
                data=form,
                files={"file": (filename, data, content_type)},
            )
    except httpx.HTTPError as exc:
        raise CloudinaryError(f"Cloudinary upload request failed: {exc}") from exc

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        raise CloudinaryError(f"Cloudinary upload failed: {resp.status_code} {body}")

    payload: dict[str, Any] = resp.json()
    url = payload.get("secure_url") or payload.get("url")
    stored_id = payload.get("public_id")
    if not isinstance(url, str) or not isinstance(stored_id, str):
        raise CloudinaryError("Cloudinary returned no asset reference.")

    try:
        stored_bytes = int(payload.get("bytes") or len(data))
    except (TypeError, ValueError):
        stored_bytes = len(data)
    return StoredAsset(url=url, public_id=stored_id, bytes=stored_bytes)


async def destroy_image(
    *,
    credentials: Credentials,
    public_id: str,
    timeout_s: float = 60.0,
) -> bool:
    """
    Delete an uploaded image. Returns True only when Cloudinary answers "ok".
    """
    credentials.validate()
    public_id = (public_id or "").strip()
    if not public_id:
        raise CloudinaryError("public_id is empty.")

    form = _signed_form({"public_id": public_id}, credentials)

    try:
        async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=timeout_s) as client:
            resp = await client.post(f"/{credentials.cloud_name}/image/destroy", data=form)
    except httpx.HTTPError as exc:
        raise CloudinaryError(f"Cloudinary destroy request failed: {exc}") from exc

    if resp.status_code != 200:
        body = resp.text[:500]
        raise CloudinaryError(f"Cloudinary destroy failed: {resp.status_code} {body}")

    data: dict[str, Any] = resp.json()
    return data.get("result") == "ok"
