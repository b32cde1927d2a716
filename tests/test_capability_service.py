"""
Tests for capability dispatch and input validation.
"""
import fitz
import pytest

from app.core.capabilities import Capability
from app.core.errors import ProviderError, ValidationError
from app.services.capability_service import (
    BLOG_TITLE_MAX_TOKENS,
    DEFAULT_ARTICLE_LENGTH,
    CapabilityInvoker,
    CapabilityRequest,
)
from app.services.resume_parser import parse_resume


def make_pdf(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_article_uses_requested_length(invoker, fake_llm):
    result = invoker.invoke(Capability.ARTICLE, CapabilityRequest(prompt="Remote work", length=600, publish=True))

    assert result.content == "Hello there"
    assert result.prompt == "Remote work"
    assert result.publish is True
    assert fake_llm.calls[0]["max_tokens"] == 600
    assert fake_llm.calls[0]["messages"] == [{"role": "user", "content": "Remote work"}]


def test_article_default_length(invoker, fake_llm):
    invoker.invoke(Capability.ARTICLE, CapabilityRequest(prompt="Remote work"))

    assert fake_llm.calls[0]["max_tokens"] == DEFAULT_ARTICLE_LENGTH


def test_blog_title_is_short(invoker, fake_llm):
    invoker.invoke(Capability.BLOG_TITLE, CapabilityRequest(prompt="Keyword: travel"))

    assert fake_llm.calls[0]["max_tokens"] == BLOG_TITLE_MAX_TOKENS


def test_image_is_stored_and_url_returned(invoker, fake_images, fake_storage):
    result = invoker.invoke(Capability.IMAGE, CapabilityRequest(prompt="A lighthouse at dusk"))

    assert fake_images.calls == [("text_to_image", "A lighthouse at dusk")]
    assert fake_storage.objects[result.content] == b"\x89PNG generated"


def test_remove_background_records_fixed_prompt(invoker, fake_storage):
    result = invoker.invoke(
        Capability.REMOVE_BACKGROUND,
        CapabilityRequest(file_bytes=b"raw", filename="cat.png", content_type="image/png"),
    )

    assert result.prompt == "Remove background from image"
    assert fake_storage.objects[result.content] == b"\x89PNG no-background"


def test_remove_object_records_object_name(invoker, fake_editor):
    result = invoker.invoke(
        Capability.REMOVE_OBJECT,
        CapabilityRequest(file_bytes=b"raw", filename="street.png", object_name=" car "),
    )

    assert fake_editor.calls == ["car"]
    assert result.prompt == "Removed car from image"


def test_remove_object_rejects_multiple_words(invoker, fake_editor):
    with pytest.raises(ValidationError):
        invoker.invoke(
            Capability.REMOVE_OBJECT,
            CapabilityRequest(file_bytes=b"raw", object_name="red car"),
        )
    assert fake_editor.calls == []


@pytest.mark.parametrize("capability", [Capability.ARTICLE, Capability.BLOG_TITLE, Capability.IMAGE])
def test_prompt_required(invoker, capability):
    with pytest.raises(ValidationError):
        invoker.invoke(capability, CapabilityRequest(prompt=""))


def test_article_length_must_be_positive(invoker):
    with pytest.raises(ValidationError):
        invoker.invoke(Capability.ARTICLE, CapabilityRequest(prompt="x", length=0))


@pytest.mark.parametrize(
    "capability",
    [Capability.REMOVE_BACKGROUND, Capability.REMOVE_OBJECT, Capability.RESUME_REVIEW],
)
def test_file_required(invoker, capability):
    with pytest.raises(ValidationError):
        invoker.invoke(capability, CapabilityRequest(object_name="car"))


def test_resume_size_limit(fake_llm):
    invoker = CapabilityInvoker(text_llm=fake_llm, max_resume_bytes=1024)

    with pytest.raises(ValidationError):
        invoker.invoke(Capability.RESUME_REVIEW, CapabilityRequest(file_bytes=b"x" * 2048))
    assert fake_llm.calls == []


def test_resume_review_sends_extracted_text(invoker, fake_llm):
    result = invoker.invoke(
        Capability.RESUME_REVIEW,
        CapabilityRequest(file_bytes=make_pdf("Jane Doe - Senior Python Developer"), filename="cv.pdf"),
    )

    assert result.prompt == "Review the uploaded resume"
    assert "Jane Doe" in fake_llm.calls[0]["messages"][0]["content"]


def test_unreadable_resume_rejected(invoker, fake_llm):
    with pytest.raises(ValidationError):
        invoker.invoke(Capability.RESUME_REVIEW, CapabilityRequest(file_bytes=b"definitely not a pdf"))
    assert fake_llm.calls == []


def test_parse_resume_extracts_text():
    assert "Python" in parse_resume(make_pdf("Python, SQL, FastAPI"))


def test_missing_provider_is_a_provider_error():
    invoker = CapabilityInvoker()

    with pytest.raises(ProviderError):
        invoker.invoke(Capability.ARTICLE, CapabilityRequest(prompt="hello"))


def test_provider_failure_propagates(failing_llm):
    invoker = CapabilityInvoker(text_llm=failing_llm)

    with pytest.raises(ProviderError):
        invoker.invoke(Capability.BLOG_TITLE, CapabilityRequest(prompt="hello"))
