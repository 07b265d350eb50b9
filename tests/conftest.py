import json

import httpx
import pytest


class FakeCrowdinClient:
    """Records calls and answers with a canned response."""

    def __init__(self, status_code=200, text="<success/>"):
        self.response = httpx.Response(status_code, text=text)
        self.calls = []

    async def update_file(self, project_id, credentials, files, update_option=None):
        self.calls.append(("update", project_id, credentials, dict(files), update_option))
        return self.response

    async def add_file(self, project_id, credentials, files):
        self.calls.append(("add", project_id, credentials, dict(files)))
        return self.response


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run inside an empty temporary directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_settings(workdir):
    def _write(data, name="appsettings.json"):
        path = workdir / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def make_file(workdir):
    def _make(relative, content="key=value\n"):
        path = workdir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path.relative_to(workdir))

    return _make


@pytest.fixture
def fake_client():
    return FakeCrowdinClient()


@pytest.fixture
def make_client():
    return FakeCrowdinClient
