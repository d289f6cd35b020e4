"""Tests for the deploy-URL commit comment."""

import json

import pytest
import respx

from site_ops.commit_comment import comment_on_commit, deploy_comment
from site_ops.errors import PublishError
from site_ops.settings import TriggerContext

COMMENTS = "https://api.github.com/repos/org/blog/commits/abc123/comments"


@pytest.fixture
def trigger() -> TriggerContext:
    return TriggerContext(
        ref="refs/heads/master", repository="org/blog", token="gh-token", sha="abc123"
    )


def test_deploy_comment_prefers_ssl_url() -> None:
    deploy = {"url": "http://a.netlify.app", "deploy_ssl_url": "https://b.netlify.app"}
    assert deploy_comment(deploy) == "Published on https://b.netlify.app as production"


@respx.mock
def test_comment_posts_to_commit(trigger: TriggerContext) -> None:
    route = respx.post(COMMENTS).respond(201, json={"id": 7})

    comment = comment_on_commit(trigger, "Published on https://x as production")

    assert comment == {"id": 7}
    request = route.calls.last.request
    assert request.headers["Authorization"] == "Bearer gh-token"
    assert request.headers["Accept"] == "application/vnd.github+json"
    assert json.loads(request.content) == {"body": "Published on https://x as production"}


@respx.mock
def test_comment_http_error(trigger: TriggerContext) -> None:
    respx.post(COMMENTS).respond(403, text="Resource not accessible by integration")

    with pytest.raises(PublishError, match="403"):
        comment_on_commit(trigger, "body")


def test_comment_needs_sha(trigger: TriggerContext) -> None:
    with pytest.raises(PublishError, match="GITHUB_SHA"):
        comment_on_commit(trigger.model_copy(update={"sha": ""}), "body")
