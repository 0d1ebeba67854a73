import base64
from types import SimpleNamespace

import pytest
from google.genai import types

# A small 1x1 PNG image
SAMPLE_IMAGE_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9pQn2wAAAABJRU5ErkJggg=="
)
SAMPLE_IMAGE_BYTES = base64.b64decode(SAMPLE_IMAGE_BASE64)


def image_response(data=SAMPLE_IMAGE_BYTES, mime_type="image/png", text=None):
    parts = []
    if text:
        parts.append(types.Part(text=text))
    parts.append(types.Part(inline_data=types.Blob(data=data, mime_type=mime_type)))
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=parts))]
    )


def text_response(*texts):
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(role="model", parts=[types.Part(text=t) for t in texts])
            )
        ]
    )


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeAsyncClient:
    def __init__(self, models: FakeModels):
        self.models = models
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True


class FakeClientFactory:
    """Stands in for genai.Client; records every client built and its key."""

    def __init__(self, models: FakeModels):
        self.models = models
        self.api_keys = []
        self.clients = []

    def __call__(self, api_key):
        self.api_keys.append(api_key)
        client = FakeAsyncClient(self.models)
        self.clients.append(client)
        return SimpleNamespace(aio=client)


class FakeProvider:
    def __init__(self, selected=False, api_key="test-key"):
        self.selected = selected
        self.key = api_key
        self.events = []

    async def is_selected(self):
        self.events.append("is_selected")
        return self.selected

    async def request_selection(self):
        self.events.append("request_selection")

    def api_key(self):
        return self.key

    @property
    def selection_count(self):
        return self.events.count("request_selection")


@pytest.fixture
def models():
    return FakeModels(response=image_response())


@pytest.fixture
def client_factory(models):
    return FakeClientFactory(models)
