"""
GitHub Release Client - Create a release and upload an asset over the REST API
"""

from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

import requests

from nsis_build.config.build_config import GITHUB_API_URL
from nsis_build.utils.exceptions import PublishError
from nsis_build.utils.logger import get_logger

logger = get_logger(__name__)


class GitHubReleaseClient:
    """Minimal client for the two release endpoints the build needs."""

    def __init__(
        self,
        token: str,
        api_url: str = GITHUB_API_URL,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "GitHubReleaseClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def create_release(
        self,
        repository: str,
        tag: str,
        body: str = "",
        draft: bool = True,
        name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create a release for a tag.

        Args:
            repository: "owner/name"
            tag: Tag name; GitHub creates the tag if it does not exist
            body: Release notes
            draft: Create as draft
            name: Release title (default: the tag)

        Returns:
            The release JSON returned by GitHub
        """
        url = f"{self.api_url}/repos/{repository}/releases"
        payload = {
            "tag_name": tag,
            "name": name or tag,
            "body": body,
            "draft": draft,
        }
        logger.info(f"[GITHUB] Creating {'draft ' if draft else ''}release '{tag}' in {repository}")
        release = self._request("create_release", "POST", url, json=payload)
        logger.debug(f"[GITHUB] Release id={release.get('id')} url={release.get('html_url')}")
        return release

    def upload_asset(
        self,
        release: Dict[str, Any],
        asset_name: str,
        stream: BinaryIO,
        content_type: str = "application/octet-stream"
    ) -> Dict[str, Any]:
        """
        Upload a file stream as a release asset.

        Args:
            release: Release JSON from create_release (needs "upload_url")
            asset_name: File name shown on the release page
            stream: Open binary stream with the asset content
            content_type: MIME type of the asset

        Returns:
            The asset JSON returned by GitHub
        """
        upload_url = release.get("upload_url")
        if not upload_url:
            raise PublishError("upload_asset", "Release has no upload_url")
        # upload_url is a URI template like ".../assets{?name,label}"
        upload_url = upload_url.split("{", 1)[0]

        logger.info(f"[GITHUB] Uploading asset '{asset_name}'")
        return self._request(
            "upload_asset",
            "POST",
            upload_url,
            params={"name": asset_name},
            data=stream,
            headers={"Content-Type": content_type},
        )

    def upload_file(self, release: Dict[str, Any], path: Path) -> Dict[str, Any]:
        """Upload a local file as a release asset."""
        with open(path, 'rb') as stream:
            return self.upload_asset(release, path.name, stream)

    def _request(self, operation: str, method: str, url: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise PublishError(operation, f"Request to '{url}' failed", original_error=e)

        if response.status_code >= 400:
            message = response.reason or "GitHub API error"
            try:
                message = response.json().get("message", message)
            except ValueError:
                pass
            raise PublishError(operation, message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise PublishError(operation, "GitHub returned a non-JSON response", original_error=e)
