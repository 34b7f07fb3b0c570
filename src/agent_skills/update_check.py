"""
Check PyPI for a newer agent-skills release.

Best-effort: network problems and malformed responses mean "no update".
"""

import logging
import re

import httpx

from agent_skills import __version__

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi/agent-skills/json"
UPDATE_CHECK_TIMEOUT = 5.0


def get_current_version() -> str:
    return __version__


def parse_version(value: str) -> tuple[int, ...]:
    """Leading numeric release components of a version string.

    Examples:
        >>> parse_version("1.10.2")
        (1, 10, 2)
        >>> parse_version("2.0.0rc1")
        (2, 0, 0)
    """
    parts = []
    for piece in value.strip().lstrip("v").split("."):
        match = re.match(r"\d+", piece)
        if match is None:
            break
        parts.append(int(match.group()))
    return tuple(parts)


def is_final_release(value: str) -> bool:
    """Whether a version string is a plain numeric release such as 1.2.0."""
    return re.fullmatch(r"v?\d+(\.\d+)*", value.strip()) is not None


async def _fetch_latest_version(client: httpx.AsyncClient) -> str:
    response = await client.get(PYPI_URL)
    response.raise_for_status()
    return str(response.json()["info"]["version"])


async def check_for_updates(
    current_version: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> str | None:
    """
    Look up the latest release on PyPI.

    Args:
        current_version: Version to compare against. Defaults to the installed one.
        client: HTTP client to use. A short-lived one is created when omitted.

    Returns:
        The newer version string, or None when up to date or on any failure.
    """
    current = current_version or get_current_version()

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=UPDATE_CHECK_TIMEOUT) as owned:
                latest = await _fetch_latest_version(owned)
        else:
            latest = await _fetch_latest_version(client)
    except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
        logger.debug(f"Update check failed: {e}")
        return None

    if not is_final_release(latest):
        logger.debug(f"Ignoring pre-release {latest}")
        return None

    if parse_version(latest) > parse_version(current):
        logger.info(f"Update available: {current} -> {latest}")
        return latest
    return None
