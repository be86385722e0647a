from __future__ import annotations

import os
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("agendatop")
    except PackageNotFoundError:
        return "0.1.0-dev"


APP_VERSION = os.getenv("APP_VERSION") or _package_version()
GIT_SHA = os.getenv("GIT_SHA", "local")
BUILD_TIME_UTC = os.getenv("BUILD_TIME_UTC") or datetime.now(UTC).isoformat()
