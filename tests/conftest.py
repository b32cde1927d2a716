"""
Shared fixtures: in-memory SQLite store, identity provider, ledger, and fake
generative providers.
"""
import itertools

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.errors import ProviderError
from app.core.security import create_access_token, decode_access_token
from app.db.base import Base
from app.db.models.user import User
import app.db.models  # noqa: F401
from app.llm.provider import ImageEditor, LLMProvider, LLMResponse
from app.services.capability_service import CapabilityInvoker
from app.services.container import ServiceContainer
from app.services.creation_ledger import CreationLedger
from app.services.identity_provider import IdentityProvider, SqlIdentityProvider
from app.services.image_provider import ImageProvider
from app.services.object_storage import ObjectStorage


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeLLM(LLMProvider):
    def __init__(self, content="Hello there", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def chat(self, messages, model=None, temperature=0.7, max_tokens=None, **kwargs):
        self.calls.append({"messages": messages, "max_tokens": max_tokens})
        if self.error:
            raise self.error
        return LLMResponse(content=self.content, model="fake-model")


class FakeImageProvider(ImageProvider):
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def text_to_image(self, prompt):
        self.calls.append(("text_to_image", prompt))
        if self.error:
            raise self.error
        return b"\x89PNG generated"

    def remove_background(self, image, filename="image.png", content_type="image/png"):
        self.calls.append(("remove_background", filename))
        if self.error:
            raise self.error
        return b"\x89PNG no-background"


class FakeImageEditor(ImageEditor):
    def __init__(self):
        self.calls = []

    def remove_object(self, image, object_name, filename="image.png"):
        self.calls.append(object_name)
        return b"\x89PNG edited"


class FakeStorage(ObjectStorage):
    def __init__(self):
        self.objects = {}
        self._ids = itertools.count(1)

    def store(self, data, content_type="image/png"):
        url = f"https://cdn.test/creations/{next(self._ids)}.png"
        self.objects[url] = data
        return url


class DictIdentityProvider(IdentityProvider):
    """Identity provider kept in a dict; uses the read-then-write increment."""

    def __init__(self, users=None):
        self.users = users or {}

    def verify_credential(self, token):
        return decode_access_token(token)

    def has_entitlement(self, user_id, plan_name):
        return self.users[user_id].get("plan", "free") == plan_name

    def get_metadata(self, user_id):
        return dict(self.users[user_id].get("metadata", {}))

    def set_metadata(self, user_id, values):
        self.users[user_id].setdefault("metadata", {}).update(values)


@pytest.fixture
def engine():
    """Create a fresh database for each test."""
    test_engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def identity(session_factory):
    return SqlIdentityProvider(session_factory)


@pytest.fixture
def ledger(session_factory):
    return CreationLedger(session_factory)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_images():
    return FakeImageProvider()


@pytest.fixture
def fake_editor():
    return FakeImageEditor()


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def invoker(fake_llm, fake_images, fake_editor, fake_storage):
    return CapabilityInvoker(
        text_llm=fake_llm,
        image_provider=fake_images,
        image_editor=fake_editor,
        storage=fake_storage,
    )


@pytest.fixture
def services(identity, ledger, invoker):
    return ServiceContainer.create(identity=identity, ledger=ledger, invoker=invoker, free_limit=10)


@pytest.fixture
def make_user(session_factory):
    """Insert a user directly and return (user_id, bearer token)."""
    counter = itertools.count(1)

    def _make(plan="free", free_usage=None, metadata=None):
        n = next(counter)
        db = session_factory()
        try:
            user = User(
                full_name=f"Test User {n}",
                email=f"user{n}@example.com",
                plan=plan,
                free_usage=free_usage,
                private_metadata=metadata or {},
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            user_id = user.id
        finally:
            db.close()
        return user_id, create_access_token({"sub": user_id})

    return _make


@pytest.fixture
def failing_llm():
    return FakeLLM(error=ProviderError())


@pytest.fixture
def dict_identity():
    return DictIdentityProvider
