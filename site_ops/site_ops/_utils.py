from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import Iterable, Literal

logger = logging.getLogger(__name__)


def run_logged(
    cmd: Iterable[str],
    *,
    capture_output: bool = False,
    text: bool = True,
    check: bool = True,
    echo: Literal["always", "on_error", "never"] = "always",
    secrets: Iterable[str] = (),
    **kwargs: object,
) -> subprocess.CompletedProcess[str]:
    """
    Run a subprocess, mirroring stdout/stderr to the caller even on failure.
    Returns the CompletedProcess; raises CalledProcessError when check=True.
    Values in `secrets` are masked in the logged command line.
    """
    cmd_list = list(cmd)
    logger.debug("$ %s", _mask(" ".join(cmd_list), secrets))
    result = subprocess.run(
        cmd_list,
        capture_output=capture_output,
        text=text,
        **kwargs,  # type: ignore[arg-type]
    )
    if capture_output and (
        echo == "always" or (echo == "on_error" and result.returncode != 0)
    ):
        if result.stdout:
            sys.stdout.write(_mask(result.stdout, secrets))
        if result.stderr:
            sys.stderr.write(_mask(result.stderr, secrets))
    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode,
            [_mask(part, secrets) for part in cmd_list],
            output=result.stdout,
            stderr=result.stderr,
        )
    return result


def _mask(value: str, secrets: Iterable[str]) -> str:
    for secret in secrets:
        if secret:
            value = value.replace(secret, "***")
    return value


def ensure(commands: Iterable[str]) -> None:
    for name in commands:
        if shutil.which(name) is None:
            sys.stderr.write(f"missing dependency: {name}\n")
            sys.exit(1)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO, format="%(message)s"
    )
