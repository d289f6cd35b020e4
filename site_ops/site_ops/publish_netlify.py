from __future__ import annotations

import argparse
import io
import logging
import zipfile
from pathlib import Path
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_delay,
    wait_fixed,
)

from sitegen.sources.config import load_site_config

from ._utils import configure_logging
from .errors import PublishError
from .settings import NetlifySettings

logger = logging.getLogger(__name__)

READY_STATE = "ready"
ERROR_STATE = "error"


def zip_directory(folder: Path) -> bytes:
    """Zip `folder` in memory with paths relative to it."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(folder.rglob("*")):
            if path.is_file():
                archive.write(path, path.relative_to(folder).as_posix())
    return buffer.getvalue()


def require_credentials(settings: NetlifySettings) -> None:
    if settings.auth_token is None or not settings.site_id:
        raise PublishError("NETLIFY_AUTH_TOKEN and NETLIFY_SITE_ID must be set")


def _is_pending(deploy: dict[str, Any]) -> bool:
    return deploy.get("state") not in (READY_STATE, ERROR_STATE)


def _log_poll(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    state = outcome.result().get("state") if outcome and not outcome.failed else "?"
    logger.info(
        "Netlify deploy is %s (check %d); waiting", state, retry_state.attempt_number
    )


def _timed_out(retry_state: RetryCallState) -> dict[str, Any]:
    elapsed = retry_state.seconds_since_start or 0.0
    raise PublishError(f"Netlify deploy not ready after {elapsed:.0f}s")


def _get_deploy(client: httpx.Client, deploy_id: str) -> dict[str, Any]:
    response = client.get(f"/deploys/{deploy_id}")
    _raise_for_status(response)
    return response.json()


def _raise_for_status(response: httpx.Response) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise PublishError(
            f"Netlify API {exc.request.method} {exc.request.url.path} failed "
            f"with {response.status_code}: {response.text[:200]}"
        ) from exc


def publish_to_netlify(
    folder: Path,
    settings: NetlifySettings,
    *,
    message: str,
    timeout: float = 180.0,
    poll_interval: float = 2.0,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """
    Upload `folder` as a production deploy and wait until Netlify reports it
    ready. The upload is attempted once; only the status check repeats.
    """
    require_credentials(settings)
    if not folder.is_dir():
        raise PublishError(f"Publish folder not found: {folder}")

    logger.info("==> publish %s to Netlify site %s", folder, settings.site_id)
    payload = zip_directory(folder)

    owns_client = client is None
    if client is None:
        client = httpx.Client(
            base_url=settings.api_url,
            headers={
                "Authorization": f"Bearer {settings.auth_token.get_secret_value()}"
            },
            timeout=httpx.Timeout(timeout),
        )
    try:
        response = client.post(
            f"/sites/{settings.site_id}/deploys",
            params={"title": message},
            content=payload,
            headers={"Content-Type": "application/zip"},
        )
        _raise_for_status(response)
        deploy = response.json()
        deploy_id = deploy["id"]
        logger.info("Created Netlify deploy %s (%d bytes)", deploy_id, len(payload))

        if _is_pending(deploy):
            retryer = Retrying(
                retry=retry_if_result(_is_pending),
                stop=stop_after_delay(timeout),
                wait=wait_fixed(poll_interval),
                before_sleep=_log_poll,
                retry_error_callback=_timed_out,
            )
            deploy = retryer(_get_deploy, client, deploy_id)
    finally:
        if owns_client:
            client.close()

    if deploy.get("state") == ERROR_STATE:
        raise PublishError(
            f"Netlify deploy {deploy_id} failed: {deploy.get('error_message') or 'unknown error'}"
        )

    logger.info("Netlify deploy ready: %s", deploy.get("deploy_ssl_url") or deploy_id)
    return deploy


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = argparse.ArgumentParser(
        prog="publish-netlify",
        description="Deploy the rendered site to Netlify.",
    )
    parser.add_argument("site_dir", nargs="?", default=".", type=Path)
    args = parser.parse_args(argv)

    config = load_site_config(args.site_dir)
    publish_to_netlify(
        args.site_dir / config.output_dir,
        NetlifySettings(),
        message=config.publish.deploy_message,
        timeout=config.publish.netlify_timeout,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
