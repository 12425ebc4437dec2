"""Latest-release resolution from the JDT milestone index."""

import logging
import re
from typing import List, NamedTuple

from javalsp.errors import VersionResolutionError
from javalsp.utils.http import IndexClient

logger = logging.getLogger("javalsp.resolver")

MILESTONES_PATH = "/jdtls/milestones"

# Width every version component is zero-padded to in a sort key
KEY_WIDTH = 6

_MILESTONE_LINK_RE = re.compile(r"""<a href=['"]/jdtls/milestones/(\d+)\.(\d+)\.(\d+)['"]>""")


class ResolvedRelease(NamedTuple):
    """A resolved server version and the page listing its downloads."""

    version: str
    detail_url: str


def version_sort_key(major: str, minor: str, patch: str) -> str:
    """Encode a version triple so that string ordering is numeric ordering.

    Args:
        major: Major component, decimal digits.
        minor: Minor component, decimal digits.
        patch: Patch component, decimal digits.

    Returns:
        The zero-padded components followed by ``-`` and the dotted version
        exactly as it was written.

    Raises:
        VersionResolutionError: If a component does not fit the key width.
    """
    version = ".".join((major, minor, patch))
    padded = [str(int(component)) for component in (major, minor, patch)]
    if any(len(part) > KEY_WIDTH for part in padded):
        raise VersionResolutionError(f"Version component too large: {version}")
    return "".join(part.zfill(KEY_WIDTH) for part in padded) + "-" + version


def parse_versions(body: str) -> List[str]:
    """Return the sort keys of every milestone link in ``body``, unsorted."""
    return [version_sort_key(*match) for match in _MILESTONE_LINK_RE.findall(body)]


def resolve_latest_version(body: str) -> str:
    """Pick the highest version linked from a milestone index page.

    Raises:
        VersionResolutionError: If the page contains no milestone links.
    """
    keys = sorted(parse_versions(body))
    if not keys:
        raise VersionResolutionError("No milestone versions found in the index page")

    return keys[-1].split("-", 1)[1]


def milestone_url(index_url: str, version: str) -> str:
    """Build the detail page URL for ``version``."""
    return f"{index_url.rstrip('/')}{MILESTONES_PATH}/{version}"


def fetch_latest_release(client: IndexClient, index_url: str) -> ResolvedRelease:
    """Fetch the milestone index and resolve the latest release.

    Args:
        client: Client used for the request.
        index_url: Base URL of the download host.

    Returns:
        The latest version and its detail page URL.
    """
    body = client.fetch_text(f"{index_url.rstrip('/')}{MILESTONES_PATH}")
    version = resolve_latest_version(body)
    logger.info(f"Latest version: {version}")
    return ResolvedRelease(version, milestone_url(index_url, version))
