"""Minimal async client for the Crowdin v1 project file API."""

import contextlib
import logging
from types import TracebackType

import httpx

from crowdin_client.config import Credentials
from crowdin_client.files import FileSet

logger = logging.getLogger(__name__)

# Values accepted by the ``update_option`` parameter of update-file.
UPDATE_OPTIONS = (
    "clear_translations_and_approvals",
    "update_as_unapproved",
    "update_without_changes",
)


class CrowdinClient:
    """Thin wrapper around ``httpx.AsyncClient`` rooted at the Crowdin API URL.

    Use as an async context manager so the underlying connection pool is
    closed once the single request has completed.
    """

    def __init__(
        self,
        base_url: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = 60.0,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url or "",
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "CrowdinClient":
        await self._http.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self._http.__aexit__(exc_type, exc, tb)

    async def update_file(
        self,
        project_id: str,
        credentials: Credentials,
        files: FileSet,
        update_option: str | None = None,
    ) -> httpx.Response:
        """Upload new versions of files that already exist in the project."""
        data = {}
        if update_option:
            data["update_option"] = update_option
        return await self._post_files(
            f"project/{project_id}/update-file", credentials, files, data
        )

    async def add_file(
        self,
        project_id: str,
        credentials: Credentials,
        files: FileSet,
    ) -> httpx.Response:
        """Upload files that are not yet part of the project."""
        return await self._post_files(
            f"project/{project_id}/add-file", credentials, files, {}
        )

    async def _post_files(
        self,
        path: str,
        credentials: Credentials,
        files: FileSet,
        data: dict[str, str],
    ) -> httpx.Response:
        """POST ``files`` as multipart ``files[<name>]`` fields.

        Local files are opened just before the request and closed as soon
        as it completes.

        Raises:
            FileNotFoundError: If a local file does not exist.
            httpx.HTTPError: On transport failures.
        """
        logger.debug("POST %s with files: %s", path, ", ".join(files) or "(none)")

        with contextlib.ExitStack() as stack:
            multipart = {
                f"files[{name}]": (name, stack.enter_context(open(local, "rb")))
                for name, local in files.items()
            }
            response = await self._http.post(
                path,
                params=credentials.query_params(),
                data=data or None,
                files=multipart or None,
            )

        logger.debug("%s responded with HTTP %d", path, response.status_code)
        return response
