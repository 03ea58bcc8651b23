"""Build metadata reported by the health check and the protocol metadata document.

CI sets APP_VERSION and GIT_COMMIT. Local runs fall back to "dev" and the
short SHA of the working tree, when there is one.
"""

import os
import subprocess


def _git_short_sha() -> str:
    try:
        return subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],  # noqa: S607
            text=True,
            stderr=subprocess.DEVNULL,
        ).strip()
    except (FileNotFoundError, subprocess.CalledProcessError):
        return "dev"


APP_VERSION: str = os.environ.get("APP_VERSION", "dev")
GIT_COMMIT: str = os.environ.get("GIT_COMMIT") or _git_short_sha()


def version_string() -> str:
    """APP_VERSION with the commit appended, e.g. "1.4.0+3f2a9c1"."""
    return f"{APP_VERSION}+{GIT_COMMIT}"
