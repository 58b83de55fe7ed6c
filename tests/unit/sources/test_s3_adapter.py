# tests/unit/sources/test_s3_adapter.py — v1
"""Tests for sources/s3_adapter.py — mocked S3 client."""

from __future__ import annotations

import io
from unittest.mock import MagicMock, patch

import pytest

from imgresizer.core.models import AdapterKind
from imgresizer.sources.s3_adapter import S3ImageAdapter


class _ClientError(Exception):
    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.response = {"Error": {"Code": code}}


@pytest.fixture
def s3_store():
    return {"originals/cats/1.jpg": b"jpeg-bytes"}


@pytest.fixture
def mock_s3_adapter(s3_store):
    """Create S3ImageAdapter with mocked boto3 client."""
    mock_client = MagicMock()
    mock_client.exceptions.ClientError = _ClientError
    mock_client.calls = []

    def get_object(Bucket, Key):
        mock_client.calls.append((Bucket, Key))
        if Key == "originals/forbidden.jpg":
            raise _ClientError("AccessDenied")
        if Key not in s3_store:
            raise _ClientError("NoSuchKey")
        return {"Body": io.BytesIO(s3_store[Key])}

    mock_client.get_object = get_object

    with patch("imgresizer.sources.s3_adapter.S3ImageAdapter.__init__", return_value=None):
        adapter = S3ImageAdapter.__new__(S3ImageAdapter)
        adapter._s3 = mock_client
        adapter._bucket = "test-bucket"
        adapter._prefix = "originals/"

    return adapter


class TestS3ImageAdapter:
    def test_kind(self):
        assert S3ImageAdapter.kind is AdapterKind.S3

    @pytest.mark.asyncio
    async def test_fetch(self, mock_s3_adapter):
        assert await mock_s3_adapter.fetch("cats/1.jpg") == b"jpeg-bytes"
        assert mock_s3_adapter._s3.calls == [("test-bucket", "originals/cats/1.jpg")]

    @pytest.mark.asyncio
    async def test_leading_slash_stripped(self, mock_s3_adapter):
        assert await mock_s3_adapter.fetch("/cats/1.jpg") == b"jpeg-bytes"

    @pytest.mark.asyncio
    async def test_missing_is_none(self, mock_s3_adapter):
        assert await mock_s3_adapter.fetch("cats/2.jpg") is None

    @pytest.mark.asyncio
    async def test_other_errors_raise(self, mock_s3_adapter):
        with pytest.raises(_ClientError):
            await mock_s3_adapter.fetch("forbidden.jpg")

    def test_init_builds_client(self):
        mock_boto3 = MagicMock()
        with patch.dict("sys.modules", {"boto3": mock_boto3}):
            adapter = S3ImageAdapter(
                bucket="b", prefix="imgs", region="eu-west-1",
                endpoint_url="http://minio:9000",
            )
        mock_boto3.client.assert_called_once_with(
            "s3", region_name="eu-west-1", endpoint_url="http://minio:9000"
        )
        assert adapter._prefix == "imgs/"
        assert adapter._full_key("x.png") == "imgs/x.png"

    def test_import_error_without_boto3(self):
        with patch.dict("sys.modules", {"boto3": None}):
            with pytest.raises(ImportError, match="boto3"):
                S3ImageAdapter(bucket="b")
