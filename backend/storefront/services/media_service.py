# Overview: Service-layer operations for locally stored media; uploads, URL qualification and cleanup.

"""
Media references come in two shapes:

- Local:    "uploads/used-products/used-product-<ms>-<rand>.png"
            Written by this server under UPLOAD_FOLDER; this server deletes them.
- External: "https://res.cloudinary.com/..."
            Hosted elsewhere; never touched here.

A local reference may also appear qualified with SERVER_URL
("http://localhost:5000/uploads/..."), which still points at our own file.
"""

from __future__ import annotations

import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..validation import ValidationError


USED_PRODUCT_MEDIA_DIR = "used-products"
ALLOWED_MIMETYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")


@dataclass(frozen=True)
class MediaCleanupWarning:
    """A local file that could not be removed. Logged, never raised."""
    reference: str
    reason: str

    def to_dict(self) -> dict:
        return {"reference": self.reference, "reason": self.reason}


def has_scheme(reference: str) -> bool:
    return bool(_SCHEME_RE.match(reference))


def _normalize(reference: str) -> str:
    ref = reference.replace("\\", "/")
    while ref.startswith("./"):
        ref = ref[2:]
    return ref.lstrip("/")


def upload_root() -> Path:
    return Path(current_app.config["UPLOAD_FOLDER"]).resolve()


def qualify_reference(reference: str, server_url: str | None = None) -> str:
    """Prefix scheme-less references with the configured server URL."""
    if has_scheme(reference):
        return reference
    base = (server_url or current_app.config["SERVER_URL"]).rstrip("/")
    return f"{base}/{_normalize(reference)}"


def qualify_references(references: Iterable[str]) -> list[str]:
    return [qualify_reference(ref) for ref in references]


def _relative_local_reference(reference: str) -> str | None:
    prefix = current_app.config["LOCAL_MEDIA_PREFIX"]
    ref = reference.replace("\\", "/")
    if has_scheme(ref):
        qualified_prefix = qualify_reference(prefix)
        if not ref.startswith(qualified_prefix):
            return None
        return ref[len(qualified_prefix):]
    ref = _normalize(ref)
    if not ref.startswith(prefix):
        return None
    return ref[len(prefix):]


def is_local_reference(reference: str) -> bool:
    return _relative_local_reference(reference) is not None


def local_path_for(reference: str) -> Path | None:
    """
    Map a local reference to its file under UPLOAD_FOLDER.

    Returns None for external references and for paths that would resolve
    outside the upload root.
    """
    relative = _relative_local_reference(reference)
    if relative is None or not relative:
        return None
    root = upload_root()
    path = (root / relative).resolve()
    if not path.is_relative_to(root):
        return None
    return path


def save_upload(upload: FileStorage) -> str:
    """
    Store one uploaded image and return its local reference.

    Raises:
        ValidationError: not an image, or larger than MAX_IMAGE_BYTES
    """
    filename = secure_filename(upload.filename or "")
    ext = Path(filename).suffix.lower().lstrip(".")
    allowed = current_app.config["ALLOWED_IMAGE_EXTENSIONS"]
    if ext not in allowed or upload.mimetype not in ALLOWED_MIMETYPES:
        raise ValidationError(f"Images only ({', '.join(sorted(allowed))})")

    name = f"used-product-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}.{ext}"
    target_dir = upload_root() / USED_PRODUCT_MEDIA_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / name
    upload.save(target)

    max_bytes = current_app.config["MAX_IMAGE_BYTES"]
    if target.stat().st_size > max_bytes:
        target.unlink()
        raise ValidationError(f"Image {filename} exceeds {max_bytes} bytes")

    return f"{current_app.config['LOCAL_MEDIA_PREFIX']}{USED_PRODUCT_MEDIA_DIR}/{name}"


def delete_local_media(references: Iterable[str]) -> list[MediaCleanupWarning]:
    """
    Best-effort removal of locally stored files.

    External references are skipped silently. Each failure becomes a
    MediaCleanupWarning; the loop always runs to the end.
    """
    warnings: list[MediaCleanupWarning] = []
    for ref in references:
        if not is_local_reference(ref):
            continue
        path = local_path_for(ref)
        if path is None:
            warnings.append(MediaCleanupWarning(ref, "path outside upload folder"))
            continue
        try:
            path.unlink()
        except FileNotFoundError:
            warnings.append(MediaCleanupWarning(ref, "file not found"))
        except OSError as exc:
            warnings.append(MediaCleanupWarning(ref, exc.strerror or str(exc)))

    for w in warnings:
        current_app.logger.warning("Media cleanup skipped %s: %s", w.reference, w.reason)
    return warnings
