"""GitHub API client (GraphQL for Projects, REST for issues)."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import time
from collections.abc import Iterator
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "api.github.com"


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthError(GitHubClientError):
    """Authentication failed."""

    pass


class GitHubNotFoundError(GitHubClientError):
    """Resource not found."""

    pass


class GitHubForbiddenError(GitHubClientError):
    """Permission denied."""

    pass


class GitHubRateLimitError(GitHubClientError):
    """Rate limit exceeded."""

    pass


class GitHubClient:
    """GitHub API client.

    Provides a thin wrapper around the GitHub APIs with:
    - GraphQL queries/mutations (Projects v2 boards)
    - REST requests with page-number pagination (issues, comments, labels)
    - Token authentication (from env var or gh CLI)
    - Enterprise support via custom base_url
    - Error mapping to a small exception hierarchy

    Calls are never retried; a failed call raises.
    """

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL):
        """Initialize the GitHub client.

        Args:
            token: GitHub personal access token
            base_url: API host (default: api.github.com, use custom for Enterprise)
        """
        self.token = token
        self.base_url = base_url
        self._graphql_url = f"https://{base_url}/graphql"
        if base_url == DEFAULT_BASE_URL:
            self._rest_url = f"https://{base_url}"
        else:
            self._rest_url = f"https://{base_url}/api/v3"
        self._client = httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/vnd.github+json",
            },
            timeout=30.0,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @classmethod
    def from_environment(cls, base_url: str = DEFAULT_BASE_URL) -> GitHubClient:
        """Create a client from environment variables or gh CLI.

        Tries in order:
        1. PROJECTS_TOKEN environment variable (needs project scope)
        2. GITHUB_TOKEN environment variable
        3. gh auth token (if gh CLI is installed and authenticated)

        Raises:
            GitHubAuthError: If no token is available
        """
        for var in ("PROJECTS_TOKEN", "GITHUB_TOKEN"):
            token = os.environ.get(var)
            if token:
                logger.debug("Using token from %s environment variable", var)
                return cls(token, base_url)

        try:
            result = subprocess.run(
                ["gh", "auth", "token"],
                capture_output=True,
                text=True,
                check=True,
            )
            token = result.stdout.strip()
            if token:
                logger.debug("Using token from gh CLI")
                return cls(token, base_url)
        except (subprocess.CalledProcessError, FileNotFoundError):
            logger.debug("gh CLI not available or not authenticated")

        logger.error("No GitHub token found")
        raise GitHubAuthError(
            "No GitHub token found. Either:\n"
            "  - Set PROJECTS_TOKEN or GITHUB_TOKEN environment variable\n"
            "  - Run 'gh auth login' to authenticate with GitHub CLI"
        )

    # --- GraphQL ---

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query or mutation.

        Args:
            query: GraphQL query/mutation string
            variables: Query variables

        Returns:
            Response data (the 'data' field from GraphQL response)

        Raises:
            GitHubAuthError: Authentication failed
            GitHubNotFoundError: Resource not found
            GitHubForbiddenError: Permission denied
            GitHubRateLimitError: Rate limit exceeded
            GitHubClientError: Other errors
        """
        # "query GetProject" -> "GetProject"
        op_match = re.search(r"(?:query|mutation)\s+(\w+)", query)
        op_name = op_match.group(1) if op_match else "anonymous"

        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        logger.debug("GraphQL %s: variables=%s", op_name, variables)

        start_time = time.monotonic()
        try:
            response = self._client.post(self._graphql_url, json=payload)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("GraphQL %s failed after %.0fms: %s", op_name, elapsed_ms, e)
            raise GitHubClientError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        label = f"GraphQL {op_name}"
        self._check_status(response, label, elapsed_ms)
        result = self._decode(response, label, elapsed_ms)

        if "errors" in result:
            errors = result["errors"]
            error_messages = [e.get("message", str(e)) for e in errors]

            for error in errors:
                error_type = error.get("type", "")
                message = error.get("message", "")

                if error_type == "NOT_FOUND" or "not found" in message.lower():
                    logger.error("%s: Not Found - %s (%.0fms)", label, message, elapsed_ms)
                    raise GitHubNotFoundError(message)
                if error_type == "FORBIDDEN" or "permission" in message.lower():
                    logger.error("%s: Forbidden - %s (%.0fms)", label, message, elapsed_ms)
                    raise GitHubForbiddenError(message)

            logger.error("%s: errors=%s (%.0fms)", label, error_messages, elapsed_ms)
            raise GitHubClientError(f"GraphQL errors: {'; '.join(error_messages)}")

        logger.info("%s: 200 OK (%.0fms)", label, elapsed_ms)
        return result.get("data") or {}

    def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL query (alias for execute)."""
        return self.execute(query, variables)

    def mutate(self, mutation: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute a GraphQL mutation (alias for execute)."""
        return self.execute(mutation, variables)

    # --- REST ---

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Execute a REST request.

        Args:
            method: HTTP method (GET, POST, PATCH, ...)
            path: API path starting with '/', e.g. '/repos/acme/app/issues'
            params: Query string parameters
            json: JSON request body

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            Same exceptions as execute()
        """
        label = f"REST {method} {path}"
        logger.debug("%s: params=%s", label, params)

        start_time = time.monotonic()
        try:
            response = self._client.request(
                method, f"{self._rest_url}{path}", params=params, json=json
            )
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s failed after %.0fms: %s", label, elapsed_ms, e)
            raise GitHubClientError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000
        self._check_status(response, label, elapsed_ms)

        if response.status_code == 204 or not response.content:
            logger.info("%s: %d (%.0fms)", label, response.status_code, elapsed_ms)
            return None

        result = self._decode(response, label, elapsed_ms)
        logger.info("%s: %d (%.0fms)", label, response.status_code, elapsed_ms)
        return result

    def paginate(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        per_page: int = 100,
    ) -> Iterator[Any]:
        """Iterate over every item of a paginated REST list endpoint.

        Pages are requested until one comes back shorter than per_page.
        """
        page = 1
        while True:
            page_params = {**(params or {}), "per_page": per_page, "page": page}
            data = self.request("GET", path, params=page_params) or []
            yield from data
            if len(data) < per_page:
                break
            page += 1

    # --- Internal ---

    def _check_status(self, response: httpx.Response, label: str, elapsed_ms: float) -> None:
        """Map HTTP error statuses to client exceptions."""
        if response.status_code == 401:
            logger.error("%s: 401 Unauthorized (%.0fms)", label, elapsed_ms)
            raise GitHubAuthError(
                "Authentication failed. Check your GITHUB_TOKEN / PROJECTS_TOKEN.\n"
                "Required scopes: read:project, project, repo"
            )
        if response.status_code == 403:
            if "rate limit" in response.text.lower():
                logger.error("%s: 403 Rate Limited (%.0fms)", label, elapsed_ms)
                raise GitHubRateLimitError("GitHub API rate limit exceeded. Try again later.")
            logger.error("%s: 403 Forbidden (%.0fms)", label, elapsed_ms)
            raise GitHubForbiddenError(
                "Permission denied. Check that your token has the required scopes:\n"
                "  - read:project (for reading project data)\n"
                "  - project (for modifying project items)\n"
                "  - repo (for issue operations)"
            )
        if response.status_code == 404:
            logger.error("%s: 404 Not Found (%.0fms)", label, elapsed_ms)
            raise GitHubNotFoundError("Resource not found")

        if response.status_code >= 400:
            logger.error("%s: HTTP %d (%.0fms)", label, response.status_code, elapsed_ms)
            raise GitHubClientError(f"HTTP {response.status_code}: {response.text}")

    def _decode(self, response: httpx.Response, label: str, elapsed_ms: float) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s: Invalid JSON response (%.0fms)", label, elapsed_ms)
            raise GitHubClientError(f"Invalid JSON response: {e}") from e
