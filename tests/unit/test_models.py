"""Tests for upload target models and storage errors."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from blobchannel.exceptions import StorageError
from blobchannel.models import BlobInfo, UploadOptions
from blobchannel.storage_options import StorageOptions


def test_blob_info_value_semantics() -> None:
    first = BlobInfo(bucket="b", name="n")
    second = BlobInfo(bucket="b", name="n")

    assert first == second
    assert hash(first) == hash(second)
    assert first.blob_id == "b/n"
    assert first != BlobInfo(bucket="b", name="n", content_type="text/plain")


def test_blob_info_requires_bucket_and_name() -> None:
    with pytest.raises(ValidationError):
        BlobInfo(bucket="", name="n")


def test_blob_info_from_signed_url() -> None:
    url = (
        "https://storage.example.com/test-bucket/dir/file%201.txt"
        "?GoogleAccessId=client&Expires=1553839761&Signature=MJUBXAZ7"
    )

    assert BlobInfo.from_signed_url(url) == BlobInfo(
        bucket="test-bucket", name="dir/file 1.txt"
    )


@pytest.mark.parametrize(
    "url",
    ["http://www.test.com/", "http://www.test.com/bucket-only", "not a url"],
)
def test_blob_info_from_signed_url_without_object(url: str) -> None:
    with pytest.raises(ValueError, match="does not address an object"):
        BlobInfo.from_signed_url(url)


def test_upload_options_rpc_params() -> None:
    options = UploadOptions(
        if_generation_match=0,
        predefined_acl="private",
        kms_key_name="projects/p/keys/k",
    )

    assert options.as_rpc_params() == {
        "ifGenerationMatch": 0,
        "predefinedAcl": "private",
        "kmsKeyName": "projects/p/keys/k",
    }
    assert UploadOptions().as_rpc_params() == {}
    assert UploadOptions() == UploadOptions()


def test_storage_options_equality_ignores_cached_rpc() -> None:
    factory = MagicMock(return_value=MagicMock())
    first = StorageOptions(project_id="p", rpc_factory=factory)
    second = StorageOptions(project_id="p", rpc_factory=factory)

    first.get_rpc()

    assert first == second
    assert hash(first) == hash(second)
    assert first != StorageOptions(project_id="other", rpc_factory=factory)


def test_storage_options_caches_rpc() -> None:
    rpc = MagicMock()
    factory = MagicMock(return_value=rpc)
    options = StorageOptions(rpc_factory=factory)

    assert options.get_rpc() is rpc
    assert options.get_rpc() is rpc
    factory.assert_called_once_with(options)


def test_storage_error_always_has_message() -> None:
    assert StorageError().message == StorageError.DEFAULT_MESSAGE
    assert StorageError("").message == StorageError.DEFAULT_MESSAGE


def test_storage_error_wrap() -> None:
    cause = OSError("disk")
    error = StorageError("already storage")

    wrapped = StorageError.wrap(cause, "wrapped")

    assert wrapped.message == "wrapped"
    assert wrapped.__cause__ is cause
    assert StorageError.wrap(error, "ignored") is error
