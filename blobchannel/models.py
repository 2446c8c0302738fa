"""Pydantic models describing upload targets."""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote, urlparse

from pydantic import BaseModel, ConfigDict, Field

_UPLOAD_OPTION_WIRE_NAMES = {
    "if_generation_match": "ifGenerationMatch",
    "if_metageneration_match": "ifMetagenerationMatch",
    "predefined_acl": "predefinedAcl",
    "user_project": "userProject",
    "kms_key_name": "kmsKeyName",
}


class BlobInfo(BaseModel):
    """Identity of the object being uploaded.

    Attributes:
        bucket: Name of the bucket holding the object.
        name: Object name within the bucket.
        content_type: Optional MIME type of the object.
        generation: Optional object generation.
    """

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(min_length=1)
    name: str = Field(min_length=1)
    content_type: str | None = None
    generation: int | None = None

    @property
    def blob_id(self) -> str:
        """Return the ``bucket/name`` identifier of the object."""
        return f"{self.bucket}/{self.name}"

    @classmethod
    def from_signed_url(cls, signed_url: str) -> BlobInfo:
        """Derive the target object from a pre-signed URL.

        The URL path is expected to look like ``/<bucket>/<object name>``;
        the query string (signature, expiry) is ignored.

        Args:
            signed_url: Pre-signed upload URL.

        Returns:
            The BlobInfo addressed by the URL.

        Raises:
            ValueError: If the URL path does not name both a bucket and an object.
        """
        path = urlparse(signed_url).path or ""
        bucket, _, name = path.lstrip("/").partition("/")
        if not bucket or not name:
            raise ValueError(f"Signed URL does not address an object: {signed_url!r}")
        return cls(bucket=unquote(bucket), name=unquote(name))


class UploadOptions(BaseModel):
    """Backend-specific options sent when opening an upload session."""

    model_config = ConfigDict(frozen=True)

    if_generation_match: int | None = None
    if_metageneration_match: int | None = None
    predefined_acl: str | None = None
    user_project: str | None = None
    kms_key_name: str | None = None

    def as_rpc_params(self) -> dict[str, Any]:
        """Return the options that are set, keyed by their wire names."""
        return {
            _UPLOAD_OPTION_WIRE_NAMES[field_name]: value
            for field_name, value in self.model_dump(exclude_none=True).items()
        }
