"""
downloader.py

Responsibility: Fetch ADD URLs to the local filesystem.

This module must be the only place that:
- Decides whether an ADD source is remote
- Sends HTTP requests
- Interprets HTTP responses and write errors

There is no retry or resume; any failure is a DownloadFailure and ends the run.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from urllib.parse import unquote, urlparse

import requests

from dockerrun import __version__
from dockerrun.errors import DownloadFailure

SUPPORTED_SCHEMES = ("http", "https")


def is_remote(source: str) -> bool:
    """True when `source` is a URL this downloader can fetch."""
    parsed = urlparse(source)
    return parsed.scheme.lower() in SUPPORTED_SCHEMES and bool(parsed.netloc)


def target_path(url: str, destination: str | Path, *, as_directory: bool = False) -> Path:
    """
    Where the download for `url` lands.

    A destination that is (or is marked as) a directory receives the file
    under the URL's basename; anything else is the file path itself.
    """
    dest = Path(destination)
    if not (as_directory or dest.is_dir()):
        return dest
    name = posixpath.basename(unquote(urlparse(url).path))
    if not name:
        raise DownloadFailure(f"Cannot derive a file name from {url}; give ADD a file destination")
    return dest / name


class Downloader:
    def __init__(self, *, timeout: float = 60, chunk_size: int = 64 * 1024) -> None:
        self._timeout = timeout
        self._chunk_size = chunk_size

    def _headers(self) -> dict[str, str]:
        return {"User-Agent": f"dockerrun/{__version__}"}

    def fetch(self, url: str, destination: Path) -> Path:
        """
        Stream `url` into the file `destination`, creating parent directories.
        """
        try:
            r = requests.get(url, headers=self._headers(), stream=True, timeout=self._timeout)
        except requests.RequestException as e:
            raise DownloadFailure(f"Download of {url} failed: {e}") from e

        with r:
            if not 200 <= r.status_code < 300:
                raise DownloadFailure(f"Download of {url} failed: HTTP {r.status_code} {r.reason or ''}".rstrip())
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                with destination.open("wb") as f:
                    for chunk in r.iter_content(chunk_size=self._chunk_size):
                        if chunk:
                            f.write(chunk)
            except requests.RequestException as e:
                raise DownloadFailure(f"Download of {url} failed: {e}") from e
            except OSError as e:
                raise DownloadFailure(f"Cannot write {destination}: {e}") from e

        return destination
