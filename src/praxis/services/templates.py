"""Template bundle download and extraction.

The bundle is the .agents/ tree of the upstream repository, downloaded as
a GitHub tarball and read entirely in memory. Nothing is extracted to disk
here; the result is a mapping of project-relative path to file content.
"""

import io
import logging
import tarfile

import httpx

from praxis.models.config import FetchConfig, load_fetch_config
from praxis.services.components import BUNDLE_ROOT

logger = logging.getLogger(__name__)

USER_AGENT = "praxis-cli"


class TemplateFetchError(Exception):
    """Raised when the template bundle cannot be obtained."""


class TemplateHTTPError(TemplateFetchError):
    """Raised when the download returns a non-success status.

    Attributes:
        status_code: HTTP status code of the response.
    """

    def __init__(self, status_code: int) -> None:
        """Initialize TemplateHTTPError.

        Args:
            status_code: HTTP status code of the response.
        """
        self.status_code = status_code
        hint = " You may be rate-limited." if status_code == 403 else ""
        super().__init__(f"GitHub API returned status {status_code}.{hint}")


class TemplateTooLargeError(TemplateFetchError):
    """Raised when the archive exceeds the configured size ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        """Initialize TemplateTooLargeError.

        Args:
            size: Declared or received size in bytes.
            limit: Maximum accepted size in bytes.
        """
        self.size = size
        self.limit = limit
        super().__init__(f"Template archive is too large ({size} bytes, limit {limit} bytes)")


class TemplateExtractError(TemplateFetchError):
    """Raised when the downloaded archive cannot be read."""


def download_tarball(config: FetchConfig, client: httpx.Client | None = None) -> bytes:
    """Download the repository tarball, enforcing the size ceiling.

    Args:
        config: Fetch settings.
        client: Optional preconfigured httpx client.

    Returns:
        The raw archive bytes.

    Raises:
        TemplateHTTPError: On a non-200 final response.
        TemplateTooLargeError: If Content-Length or the body exceed the limit.
        TemplateFetchError: On network failures.
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=config.timeout_s)

    try:
        with client.stream(
            "GET",
            config.tarball_url,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        ) as response:
            if response.status_code != 200:
                raise TemplateHTTPError(response.status_code)

            declared = response.headers.get("Content-Length", "")
            if declared.isdigit() and int(declared) > config.max_download_bytes:
                raise TemplateTooLargeError(int(declared), config.max_download_bytes)

            buffer = bytearray()
            for chunk in response.iter_bytes():
                buffer.extend(chunk)
                if len(buffer) > config.max_download_bytes:
                    raise TemplateTooLargeError(len(buffer), config.max_download_bytes)
    except httpx.HTTPError as e:
        raise TemplateFetchError(f"Failed to download templates: {e}") from e
    finally:
        if owns_client:
            client.close()

    logger.debug(f"Downloaded {len(buffer)} bytes from {config.tarball_url}")
    return bytes(buffer)


def extract_templates(data: bytes, bundle_root: str = BUNDLE_ROOT) -> dict[str, str]:
    """Read the bundle files out of a tarball.

    The first path component (GitHub's "<owner>-<repo>-<sha>/" wrapper) is
    stripped and only regular files under bundle_root are kept.

    Args:
        data: Raw tarball bytes (any compression tarfile understands).
        bundle_root: Top-level directory to keep.

    Returns:
        Mapping of relative path (e.g. ".agents/skills/x/SKILL.md") to content.

    Raises:
        TemplateExtractError: If the archive is corrupt or a file is not UTF-8.
    """
    prefix = f"{bundle_root}/"
    files: dict[str, str] = {}

    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:*") as tar:
            for member in tar.getmembers():
                if not member.isfile():
                    continue

                parts = member.name.removeprefix("./").split("/")[1:]
                relative_path = "/".join(parts)
                if not relative_path.startswith(prefix):
                    continue

                extracted = tar.extractfile(member)
                if extracted is None:
                    continue
                files[relative_path] = extracted.read().decode("utf-8")
    except (tarfile.TarError, OSError, EOFError) as e:
        raise TemplateExtractError(f"Failed to extract templates: {e}") from e
    except UnicodeDecodeError as e:
        raise TemplateExtractError(f"Template file is not valid UTF-8: {e}") from e

    return files


def fetch_templates(
    config: FetchConfig | None = None, client: httpx.Client | None = None
) -> dict[str, str]:
    """Download and extract the latest template bundle.

    Args:
        config: Fetch settings (defaults to load_fetch_config()).
        client: Optional preconfigured httpx client.

    Returns:
        Mapping of relative path to content.

    Raises:
        TemplateFetchError: If downloading or extracting fails.
    """
    if config is None:
        config = load_fetch_config()

    files = extract_templates(download_tarball(config, client))
    logger.info(f"Fetched {len(files)} template file(s)")
    return files
