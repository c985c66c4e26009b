import pytest
import tempfile
import shutil
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from botocore.exceptions import ClientError


SKYLINE_SIZE = 383767


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


@pytest.fixture
def temp_storage_path():
    """Create a temporary directory for local storage tests."""
    tmpdir = tempfile.mkdtemp(prefix="test_beycloud_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def skyline_bytes():
    """Deterministic stand-in for a 383767-byte JPEG."""
    header = b"\xff\xd8\xff\xe0"
    body = bytes(i % 251 for i in range(SKYLINE_SIZE - len(header)))
    return header + body


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_objects():
    """In-memory object table backing the mocked S3 client."""
    return {}


@pytest.fixture
def mock_s3_client(s3_objects):
    """AsyncMock S3 client whose calls read and write s3_objects."""
    client = AsyncMock()

    async def head_object(Bucket, Key):
        if Key not in s3_objects:
            raise _client_error("404", "HeadObject")
        obj = s3_objects[Key]
        return {
            "ContentLength": len(obj["Body"]),
            "LastModified": obj["LastModified"],
            "ContentType": obj.get("ContentType", "binary/octet-stream"),
        }

    async def put_object(Bucket, Key, Body, ContentType=None):
        s3_objects[Key] = {
            "Body": Body,
            "LastModified": datetime.now(timezone.utc),
        }
        if ContentType:
            s3_objects[Key]["ContentType"] = ContentType
        return {}

    async def get_object(Bucket, Key):
        if Key not in s3_objects:
            raise _client_error("NoSuchKey", "GetObject")
        body = AsyncMock()
        body.read = AsyncMock(return_value=s3_objects[Key]["Body"])
        return {"Body": body}

    async def delete_object(Bucket, Key):
        s3_objects.pop(Key, None)
        return {}

    async def list_objects_v2(Bucket, MaxKeys, Prefix=""):
        keys = sorted(k for k in s3_objects if k.startswith(Prefix))[:MaxKeys]
        return {
            "Contents": [
                {
                    "Key": k,
                    "Size": len(s3_objects[k]["Body"]),
                    "LastModified": s3_objects[k]["LastModified"],
                }
                for k in keys
            ]
        }

    async def generate_presigned_url(ClientMethod, Params, ExpiresIn):
        return (
            f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}"
            f"?X-Amz-Expires={ExpiresIn}&X-Amz-Signature=test"
        )

    client.head_object = AsyncMock(side_effect=head_object)
    client.put_object = AsyncMock(side_effect=put_object)
    client.get_object = AsyncMock(side_effect=get_object)
    client.delete_object = AsyncMock(side_effect=delete_object)
    client.list_objects_v2 = AsyncMock(side_effect=list_objects_v2)
    client.generate_presigned_url = AsyncMock(side_effect=generate_presigned_url)
    return client


@pytest.fixture
def mock_s3_session(mock_s3_client):
    """aioboto3-style session whose client() is an async context manager."""
    session = MagicMock()
    session.client = MagicMock()
    session.client.return_value.__aenter__ = AsyncMock(return_value=mock_s3_client)
    session.client.return_value.__aexit__ = AsyncMock(return_value=None)
    return session


@pytest.fixture
def azure_blobs():
    """In-memory blob table backing the mocked Azure container client."""
    return {}


@pytest.fixture
def mock_container_client(azure_blobs):
    """MagicMock ContainerClient whose blob clients read and write azure_blobs."""
    container = MagicMock()

    def get_blob_client(name):
        blob = MagicMock()
        blob.account_name = "testaccount"
        blob.url = f"https://testaccount.blob.core.windows.net/photos/{name}"

        async def exists():
            return name in azure_blobs

        async def upload_blob(data, overwrite=False, content_settings=None):
            azure_blobs[name] = {
                "data": data,
                "content_type": content_settings.content_type if content_settings else None,
                "last_modified": datetime.now(timezone.utc),
            }

        async def download_blob():
            stream = MagicMock()
            stream.readall = AsyncMock(return_value=azure_blobs[name]["data"])
            return stream

        async def delete_blob():
            del azure_blobs[name]

        async def get_blob_properties():
            return _blob_properties(name, azure_blobs[name])

        blob.exists = AsyncMock(side_effect=exists)
        blob.upload_blob = AsyncMock(side_effect=upload_blob)
        blob.download_blob = AsyncMock(side_effect=download_blob)
        blob.delete_blob = AsyncMock(side_effect=delete_blob)
        blob.get_blob_properties = AsyncMock(side_effect=get_blob_properties)
        return blob

    def list_blobs(name_starts_with=None):
        async def iterate():
            for name in sorted(azure_blobs):
                if name_starts_with and not name.startswith(name_starts_with):
                    continue
                yield _blob_properties(name, azure_blobs[name])
        return iterate()

    container.get_blob_client = MagicMock(side_effect=get_blob_client)
    container.list_blobs = MagicMock(side_effect=list_blobs)
    return container


def _blob_properties(name, blob):
    return SimpleNamespace(
        name=name,
        size=len(blob["data"]),
        last_modified=blob["last_modified"],
        content_settings=SimpleNamespace(content_type=blob["content_type"]),
    )


@pytest.fixture
def gcs_blobs():
    """In-memory blob table backing the mocked GCS client."""
    return {}


@pytest.fixture
def mock_gcs_client(gcs_blobs):
    """MagicMock google.cloud.storage.Client over gcs_blobs."""
    client = MagicMock()
    bucket = MagicMock()

    def make_blob(name):
        blob = MagicMock()
        blob.name = name
        stored = gcs_blobs.get(name)
        blob.size = len(stored["data"]) if stored else None
        blob.updated = stored["updated"] if stored else None
        blob.content_type = stored["content_type"] if stored else None

        def upload_from_string(data, content_type=None):
            gcs_blobs[name] = {
                "data": data,
                "content_type": content_type,
                "updated": datetime.now(timezone.utc),
            }

        blob.exists = MagicMock(side_effect=lambda: name in gcs_blobs)
        blob.upload_from_string = MagicMock(side_effect=upload_from_string)
        blob.download_as_bytes = MagicMock(side_effect=lambda: gcs_blobs[name]["data"])
        blob.delete = MagicMock(side_effect=lambda: gcs_blobs.pop(name))
        blob.generate_signed_url = MagicMock(
            side_effect=lambda version, expiration, method: (
                f"https://storage.googleapis.com/photos/{name}"
                f"?X-Goog-Expires={int(expiration.total_seconds())}"
            )
        )
        return blob

    def list_blobs(bucket_name, prefix=None, max_results=None):
        names = sorted(n for n in gcs_blobs if not prefix or n.startswith(prefix))
        return iter([make_blob(n) for n in names[:max_results]])

    bucket.blob = MagicMock(side_effect=make_blob)
    bucket.get_blob = MagicMock(side_effect=lambda name: make_blob(name) if name in gcs_blobs else None)
    client.bucket = MagicMock(return_value=bucket)
    client.list_blobs = MagicMock(side_effect=list_blobs)
    return client
