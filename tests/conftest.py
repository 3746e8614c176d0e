import json

import pytest
from fastapi.testclient import TestClient

from recipe_assistant.api import deps
from recipe_assistant.main import create_app
from recipe_assistant.services.exceptions import UpstreamError


class FakeCompleter:
    """Returns canned model text (or raises) and records the prompts it saw."""

    def __init__(self, reply="[]", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeOCR:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    def recognize(self, image_bytes):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.text


def recipes_reply(*recipes, fenced=False):
    text = json.dumps({"recipes": list(recipes)})
    return f"```json\n{text}\n```" if fenced else text


@pytest.fixture
def env(tmp_path, monkeypatch):
    # isolate data dir for this test run
    d = tmp_path / "data"
    d.mkdir()
    monkeypatch.setenv("DATA_DIR", str(d))
    monkeypatch.setenv("OPENAI_API_KEY", "test")  # never reaches the network in tests
    monkeypatch.setenv("DEFAULT_USER_ID", "demo-user")
    return d


@pytest.fixture
def completer():
    return FakeCompleter()


@pytest.fixture
def ocr():
    return FakeOCR()


@pytest.fixture
def client(env, completer, ocr):
    app = create_app()
    app.dependency_overrides[deps.get_recipe_completer] = lambda: completer
    app.dependency_overrides[deps.get_extract_completer] = lambda: completer
    app.dependency_overrides[deps.get_ocr] = lambda: ocr
    with TestClient(app) as c:
        yield c


@pytest.fixture
def offline_completer():
    return FakeCompleter(error=UpstreamError("connection refused"))
