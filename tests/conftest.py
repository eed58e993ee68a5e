import pytest


class FakeBlob:
    def __init__(self, data=None):
        self.data = data
        self.content_type = None

    def download_as_text(self):
        return self.data

    def upload_from_string(self, data, content_type=None):
        self.data = data
        self.content_type = content_type


class FakeBucket:
    def __init__(self):
        self.blobs = {}

    def blob(self, name):
        return self.blobs.setdefault(name, FakeBlob())


class FakeClient:
    def __init__(self):
        self.buckets = {}

    def bucket(self, name):
        return self.buckets.setdefault(name, FakeBucket())


@pytest.fixture
def storage_client(monkeypatch):
    client = FakeClient()
    monkeypatch.setattr('google.cloud.storage.Client', lambda *a, **k: client)
    return client
