import httpx
import pytest

from crowdin_client.api import CrowdinClient
from crowdin_client.config import AccountCredentials, ProjectCredentials
from crowdin_client.files import build_file_set

API = "https://api.crowdin.com/api/"
CREDENTIALS = ProjectCredentials(project_id="demo", project_key="secret")


def recording_transport(requests, status_code=200, text="<success/>"):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, text=text)

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_update_file_posts_multipart_files(make_file):
    make_file("en/strings.json", '{"hello": "Hello"}')
    requests = []

    async with CrowdinClient(API, transport=recording_transport(requests)) as client:
        response = await client.update_file(
            "demo", CREDENTIALS, build_file_set(["en/strings.json"])
        )

    assert response.status_code == 200
    [request] = requests
    assert request.method == "POST"
    assert request.url.path == "/api/project/demo/update-file"
    assert request.url.params["key"] == "secret"
    assert b'name="files[strings.json]"; filename="strings.json"' in request.content
    assert b'{"hello": "Hello"}' in request.content
    assert b"update_option" not in request.content


@pytest.mark.asyncio
async def test_update_file_sends_update_option(make_file):
    make_file("a.txt")
    requests = []

    async with CrowdinClient(API, transport=recording_transport(requests)) as client:
        await client.update_file(
            "demo", CREDENTIALS, build_file_set(["a.txt"]), "update_as_unapproved"
        )

    assert b'name="update_option"' in requests[0].content
    assert b"update_as_unapproved" in requests[0].content


@pytest.mark.asyncio
async def test_add_file_posts_to_add_endpoint(make_file):
    make_file("a.txt")
    make_file("b.txt")
    requests = []

    async with CrowdinClient(API, transport=recording_transport(requests)) as client:
        await client.add_file("demo", CREDENTIALS, build_file_set(["a.txt", "b.txt"]))

    [request] = requests
    assert request.url.path == "/api/project/demo/add-file"
    assert b'name="files[a.txt]"' in request.content
    assert b'name="files[b.txt]"' in request.content


@pytest.mark.asyncio
async def test_account_credentials_travel_as_query_params():
    requests = []
    credentials = AccountCredentials(login_name="me", account_key="k")

    async with CrowdinClient(API, transport=recording_transport(requests)) as client:
        await client.add_file("demo", credentials, {})

    params = requests[0].url.params
    assert params["login"] == "me"
    assert params["account-key"] == "k"


@pytest.mark.asyncio
async def test_failure_response_is_returned_not_raised():
    requests = []
    transport = recording_transport(requests, status_code=400, text="bad request")

    async with CrowdinClient(API, transport=transport) as client:
        response = await client.update_file("demo", CREDENTIALS, {})

    assert response.status_code == 400
    assert response.text == "bad request"


@pytest.mark.asyncio
async def test_missing_local_file_raises(workdir):
    requests = []

    async with CrowdinClient(API, transport=recording_transport(requests)) as client:
        with pytest.raises(FileNotFoundError):
            await client.update_file("demo", CREDENTIALS, build_file_set(["missing.txt"]))

    assert requests == []


@pytest.mark.asyncio
async def test_transport_errors_propagate():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with CrowdinClient(API, transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(httpx.ConnectError):
            await client.add_file("demo", CREDENTIALS, {})
