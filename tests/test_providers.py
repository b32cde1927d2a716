"""
Tests for the provider adapters with their HTTP/SDK clients replaced.
"""
import base64
from types import SimpleNamespace

import httpx
import pytest
from botocore.exceptions import ClientError
from openai import APIConnectionError

from app.core.errors import ProviderError, StorageError
from app.llm.openai_provider import OpenAIImageEditor, OpenAIProvider
from app.services.image_provider import ClipDropImageProvider
from app.services.object_storage import S3ObjectStorage, decode_data_url


# ============================================
# ClipDrop
# ============================================

def clipdrop_with(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ClipDropImageProvider(api_key="test-key", base_url="https://clipdrop.test", client=client)


def test_clipdrop_text_to_image():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-api-key"]
        seen["body"] = request.read()
        return httpx.Response(200, content=b"\x89PNG data")

    provider = clipdrop_with(handler)

    assert provider.text_to_image("a blue whale") == b"\x89PNG data"
    assert seen["url"] == "https://clipdrop.test/text-to-image/v1"
    assert seen["key"] == "test-key"
    assert b"a blue whale" in seen["body"]


def test_clipdrop_remove_background_uploads_file():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = request.read()
        return httpx.Response(200, content=b"cutout")

    provider = clipdrop_with(handler)

    assert provider.remove_background(b"IMAGEBYTES", filename="dog.png") == b"cutout"
    assert seen["url"].endswith("/remove-background/v1")
    assert b'name="image_file"' in seen["body"]
    assert b"IMAGEBYTES" in seen["body"]


def test_clipdrop_error_status_is_provider_error():
    provider = clipdrop_with(lambda request: httpx.Response(402, text="out of credits"))

    with pytest.raises(ProviderError):
        provider.text_to_image("anything")


def test_clipdrop_transport_error_is_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError):
        clipdrop_with(handler).text_to_image("anything")


def test_clipdrop_requires_key(monkeypatch):
    monkeypatch.setattr("app.services.image_provider.CLIPDROP_API_KEY", None)

    with pytest.raises(ValueError):
        ClipDropImageProvider()


# ============================================
# S3 storage
# ============================================

class FakeS3Client:
    def __init__(self, error=None):
        self.error = error
        self.puts = []

    def put_object(self, **kwargs):
        if self.error:
            raise self.error
        self.puts.append(kwargs)

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        return f"https://signed.test/{Params['Key']}?expires={ExpiresIn}"


def test_storage_returns_public_url():
    client = FakeS3Client()
    storage = S3ObjectStorage(bucket="assets", public_base_url="https://cdn.test/", client=client)

    url = storage.store(b"png-bytes")

    put = client.puts[0]
    assert put["Bucket"] == "assets"
    assert put["ContentType"] == "image/png"
    assert put["Key"].startswith("creations/") and put["Key"].endswith(".png")
    assert url == f"https://cdn.test/{put['Key']}"


def test_storage_presigns_without_public_base():
    client = FakeS3Client()
    storage = S3ObjectStorage(bucket="assets", public_base_url="", client=client)

    url = storage.store(b"png-bytes")

    assert url.startswith("https://signed.test/creations/")


def test_storage_accepts_data_url():
    client = FakeS3Client()
    storage = S3ObjectStorage(bucket="assets", public_base_url="https://cdn.test", client=client)
    data_url = "data:image/jpeg;base64," + base64.b64encode(b"jpeg-bytes").decode()

    url = storage.store(data_url)

    assert client.puts[0]["Body"] == b"jpeg-bytes"
    assert client.puts[0]["ContentType"] == "image/jpeg"
    assert url.endswith(".jpg")


def test_storage_failure_is_storage_error():
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
    storage = S3ObjectStorage(bucket="assets", public_base_url="https://cdn.test", client=FakeS3Client(error))

    with pytest.raises(StorageError):
        storage.store(b"png-bytes")


def test_storage_requires_bucket(monkeypatch):
    monkeypatch.setattr("app.core.config.S3_BUCKET", None)

    with pytest.raises(ValueError):
        S3ObjectStorage(client=FakeS3Client())


def test_decode_data_url_rejects_garbage():
    with pytest.raises(StorageError):
        decode_data_url("https://example.com/not-a-data-url.png")


# ============================================
# OpenAI SDK
# ============================================

class FakeCompletions:
    def __init__(self, content="Generated text", error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(
            choices=[SimpleNamespace(message=message, finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=12, completion_tokens=34),
        )


def fake_openai(completions=None, images=None):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions), images=images)


def test_openai_provider_chat():
    completions = FakeCompletions()
    provider = OpenAIProvider(default_model="gemini-test", client=fake_openai(completions))

    response = provider.chat([{"role": "user", "content": "hi"}], max_tokens=100)

    assert response.content == "Generated text"
    assert response.tokens_in == 12
    assert response.tokens_out == 34
    assert completions.kwargs["model"] == "gemini-test"
    assert completions.kwargs["max_tokens"] == 100


def test_openai_provider_error_is_provider_error():
    error = APIConnectionError(request=httpx.Request("POST", "https://llm.test/chat/completions"))
    provider = OpenAIProvider(client=fake_openai(FakeCompletions(error=error)))

    with pytest.raises(ProviderError):
        provider.chat([{"role": "user", "content": "hi"}])


def test_image_editor_decodes_result():
    class FakeImages:
        def edit(self, **kwargs):
            self.kwargs = kwargs
            return SimpleNamespace(data=[SimpleNamespace(b64_json=base64.b64encode(b"edited").decode())])

    images = FakeImages()
    editor = OpenAIImageEditor(model="gpt-image-1", client=fake_openai(images=images))

    assert editor.remove_object(b"raw", "car", filename="street.png") == b"edited"
    assert "car" in images.kwargs["prompt"]
    assert images.kwargs["image"] == ("street.png", b"raw")


def test_image_editor_empty_result_is_provider_error():
    class EmptyImages:
        def edit(self, **kwargs):
            return SimpleNamespace(data=[])

    editor = OpenAIImageEditor(client=fake_openai(images=EmptyImages()))

    with pytest.raises(ProviderError):
        editor.remove_object(b"raw", "car")
