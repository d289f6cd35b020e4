from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import PublishError
from .settings import TriggerContext

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


def deploy_comment(deploy: dict[str, Any]) -> str:
    url = deploy.get("deploy_ssl_url") or deploy.get("ssl_url") or deploy.get("url")
    return f"Published on {url} as production"


def require_commit(trigger: TriggerContext) -> None:
    if trigger.token is None or not trigger.repository or not trigger.sha:
        raise PublishError(
            "GITHUB_TOKEN, GITHUB_REPOSITORY and GITHUB_SHA are needed to comment on the commit"
        )


def comment_on_commit(
    trigger: TriggerContext,
    body: str,
    *,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """
    Post `body` as a comment on the commit that triggered the run.
    """
    require_commit(trigger)

    owns_client = client is None
    if client is None:
        client = httpx.Client(
            base_url=GITHUB_API,
            headers={
                "Authorization": f"Bearer {trigger.token.get_secret_value()}",
                "Accept": "application/vnd.github+json",
            },
            timeout=httpx.Timeout(30.0),
        )
    try:
        response = client.post(
            f"/repos/{trigger.repository}/commits/{trigger.sha}/comments",
            json={"body": body},
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PublishError(
                f"GitHub commit comment failed with {response.status_code}: "
                f"{response.text[:200]}"
            ) from exc
    finally:
        if owns_client:
            client.close()

    logger.info("Commented deploy URL on commit %s", trigger.sha[:12])
    return response.json()
