from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field
from pathlib import Path

from sitegen.build import BuildResult, build
from sitegen.sources.config import load_site_config

from ._utils import configure_logging
from .commit_comment import comment_on_commit, deploy_comment, require_commit
from .preview import PreviewArtifact, package_preview
from .provision import install_dependencies
from .publish_github import commit_message, github_target, publish_to_branch
from .publish_netlify import publish_to_netlify, require_credentials
from .settings import NetlifySettings, TriggerContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    build: BuildResult
    published: list[str] = field(default_factory=list)
    preview: PreviewArtifact | None = None


def run_pipeline(
    site_dir: Path,
    *,
    trigger: TriggerContext,
    netlify: NetlifySettings | None = None,
    skip_install: bool = False,
    work_dir: Path | None = None,
) -> PipelineResult:
    """
    Install, clean, rename, render, then publish (primary branch) or package
    a preview (any other ref). Any failing step aborts the run.
    """
    logger.info("==> %s on %s", trigger.event_name, trigger.branch or trigger.ref)
    site_root = site_dir.resolve()
    config = load_site_config(site_root)

    if skip_install:
        logger.info("Skipping dependency install")
    else:
        install_dependencies(config.dependencies)

    result = build(site_root)

    publish = config.publish
    if not trigger.is_primary(publish.primary_branch):
        logger.info(
            "Ref %r is not %s; packaging preview instead of publishing",
            trigger.ref,
            publish.primary_branch,
        )
        artifact = package_preview(
            result.output_root, work_dir or site_root, config.preview.name
        )
        return PipelineResult(build=result, preview=artifact)

    # Checked before the branch push; destinations have no rollback.
    netlify_settings = netlify if netlify is not None else NetlifySettings()
    require_credentials(netlify_settings)
    target = github_target(trigger, publish.branch)
    if publish.commit_comment:
        require_commit(trigger)

    published: list[str] = []
    publish_to_branch(
        result.output_root,
        target,
        message=commit_message(trigger, publish.branch),
    )
    published.append(f"branch:{publish.branch}")

    deploy = publish_to_netlify(
        result.output_root,
        netlify_settings,
        message=publish.deploy_message,
        timeout=publish.netlify_timeout,
    )
    published.append("netlify")

    if publish.commit_comment:
        comment_on_commit(trigger, deploy_comment(deploy))
        published.append("commit-comment")

    return PipelineResult(build=result, published=published)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="build-site",
        description="Render the blog and publish it, or package a preview.",
    )
    parser.add_argument("site_dir", nargs="?", default=".", type=Path)
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Do not pip install the dependencies listed in _site.yml.",
    )
    parser.add_argument(
        "--ref",
        help="Git ref that triggered the run (default: $GITHUB_REF).",
    )
    parser.add_argument(
        "--work-dir",
        type=Path,
        help="Where the preview folder and archive are written (default: site dir).",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    trigger = TriggerContext(ref=args.ref) if args.ref else TriggerContext()
    result = run_pipeline(
        args.site_dir,
        trigger=trigger,
        skip_install=args.skip_install,
        work_dir=args.work_dir,
    )

    if result.preview is not None:
        print(result.preview.archive)
    else:
        logger.info("Published to %s", ", ".join(result.published))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
