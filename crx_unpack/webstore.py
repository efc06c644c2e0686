"""Download CRX packages from the Chrome Web Store update service."""
import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import requests

from .errors import DownloadError

logger = logging.getLogger(__name__)

UPDATE_URL = "https://clients2.google.com/service/update2/crx"


class ProductId(str, enum.Enum):
    CHROME_CRX = "chromecrx"
    CHROMIUM_CRX = "chromiumcrx"


class OperatingSystem(str, enum.Enum):
    WINDOWS = "win"
    LINUX = "linux"
    MAC = "mac"
    CHROME_OS = "cros"
    OPENBSD = "openbsd"
    ANDROID = "android"


class Architecture(str, enum.Enum):
    ARM = "arm"
    X86_32 = "x86-32"
    X86_64 = "x86-64"


@dataclass
class UpdateQuery:
    """Query parameters understood by the update service."""

    extension_id: str
    response: str = "redirect"
    os: OperatingSystem = OperatingSystem.WINDOWS
    arch: Architecture = Architecture.X86_64
    os_arch: Architecture = Architecture.X86_64
    nacl_arch: Architecture = Architecture.X86_64
    prod: ProductId = ProductId.CHROME_CRX
    # Chromium on Arch Linux reports "unknown", which the service accepts
    prodchannel: str = "unknown"
    # the store answers 204 to versions older than 31.0.1609.0
    prodversion: str = "9999.0.9999.0"
    acceptformat: str = "crx2,crx3"

    def params(self) -> List[Tuple[str, str]]:
        return [
            ("response", self.response),
            ("os", OperatingSystem(self.os).value),
            ("arch", Architecture(self.arch).value),
            ("os_arch", Architecture(self.os_arch).value),
            ("nacl_arch", Architecture(self.nacl_arch).value),
            ("prod", ProductId(self.prod).value),
            ("prodchannel", self.prodchannel),
            ("prodversion", self.prodversion),
            ("acceptformat", self.acceptformat),
            ("x", f"id={self.extension_id}&uc"),
        ]


def download(query: UpdateQuery, session: Optional[requests.Session] = None,
             timeout: float = 30) -> bytes:
    """Fetch the raw CRX bytes for ``query``.

    A caller supplied ``session`` is left open; otherwise a private one is
    created and closed again.
    """
    if session is None:
        with requests.Session() as own_session:
            return download(query, session=own_session, timeout=timeout)

    logger.debug("Downloading extension %s", query.extension_id)
    try:
        response = session.get(UPDATE_URL, params=query.params(), timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise DownloadError(f"Cannot download extension {query.extension_id}: {e}") from e

    if not response.content:
        # the service replies 204 No Content for unknown ids
        raise DownloadError(
            f"Empty response for extension {query.extension_id} (HTTP {response.status_code})")
    logger.debug("Downloaded %d bytes for %s", len(response.content), query.extension_id)
    return response.content
