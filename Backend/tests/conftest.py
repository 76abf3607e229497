from datetime import datetime, timezone
from urllib.parse import quote

import pytest
from fastapi.testclient import TestClient

from object_gateway.core.config import Settings
from object_gateway.main import create_app
from object_gateway.services.storage import ObjectLister

T1 = datetime(2021, 3, 4, 5, 6, 7, tzinfo=timezone.utc)


class FakeS3:
    """
    In-memory stand-in for the two boto3 S3 calls the gateway makes.
    `pages` maps a continuation token (None for the first page) to a response dict.
    """

    def __init__(self, pages=None, fail_on=None):
        self.pages = pages or {None: {"IsTruncated": False}}
        self.fail_on = fail_on or {}
        self.list_calls = []
        self.presign_calls = []

    def list_objects_v2(self, **kwargs):
        self.list_calls.append(kwargs)
        token = kwargs.get("ContinuationToken")
        if token in self.fail_on:
            raise self.fail_on[token]
        return self.pages[token]

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        self.presign_calls.append((ClientMethod, Params, ExpiresIn))
        return f"https://signed.example/{quote(Params['Key'])}?X-Amz-Expires={ExpiresIn}&X-Amz-Signature=abc"


@pytest.fixture
def photos_s3():
    return FakeS3(pages={
        None: {
            "Contents": [{"Key": "photos/a.jpg", "Size": 2048, "LastModified": T1}],
            "CommonPrefixes": [{"Prefix": "photos/2020/"}],
            "IsTruncated": False,
        },
    })


@pytest.fixture
def make_client():
    def _make(s3):
        app = create_app(Settings(S3_BUCKET_NAME="test-bucket"), lister=ObjectLister(s3, "test-bucket"))
        return TestClient(app)
    return _make
