"""Descarga del cliente Meterian (`meterian-cli.jar`).

El jar se cachea en disco junto a su ETag; las siguientes cargas hacen una
petición condicional y reutilizan la copia local si el servidor responde 304.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TextIO

import httpx

logger = logging.getLogger(__name__)

CLIENT_JAR_NAME = "meterian-cli.jar"
DOWNLOAD_PATH = "/downloads/meterian-cli.jar"


class ClientDownloadError(Exception):
    """Raised when the client jar cannot be downloaded and no cached copy exists."""


class ClientDownloader:
    """Descarga (o reutiliza) el jar del cliente desde `base_url`."""

    def __init__(
        self,
        http_client: httpx.Client,
        base_url: str,
        log: TextIO | None = None,
        cache_dir: Path | None = None,
    ) -> None:
        self._http = http_client
        self._url = base_url.rstrip("/") + DOWNLOAD_PATH
        self._log = log
        self._cache_dir = cache_dir or Path.home() / ".meterian"

    @property
    def jar_path(self) -> Path:
        return self._cache_dir / CLIENT_JAR_NAME

    @property
    def etag_path(self) -> Path:
        return self._cache_dir / f"{CLIENT_JAR_NAME}.etag"

    def _say(self, message: str) -> None:
        logger.info(message)
        if self._log is not None:
            self._log.write(message + "\n")
            self._log.flush()

    def _cached_etag(self) -> str | None:
        if not (self.jar_path.exists() and self.etag_path.exists()):
            return None
        etag = self.etag_path.read_text(encoding="utf-8").strip()
        return etag or None

    def load(self) -> Path:
        """Devuelve la ruta al jar, descargándolo si hace falta."""

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        headers: dict[str, str] = {}
        etag = self._cached_etag()
        if etag:
            headers["If-None-Match"] = etag

        try:
            return self._download(headers)
        except (httpx.HTTPError, ClientDownloadError) as exc:
            if self.jar_path.exists():
                logger.warning("Unable to update the client (%s), using cached copy", exc)
                self._say(f"Using cached client at {self.jar_path}")
                return self.jar_path
            if isinstance(exc, ClientDownloadError):
                raise
            raise ClientDownloadError(f"Unable to download client from {self._url}: {exc}") from exc

    def _download(self, headers: dict[str, str]) -> Path:
        self._say(f"Downloading client from {self._url}")
        with self._http.stream("GET", self._url, headers=headers) as response:
            if response.status_code == 304:
                self._say("Client is up to date")
                return self.jar_path
            if not response.is_success:
                raise ClientDownloadError(
                    f"Unable to download client from {self._url}: HTTP {response.status_code}"
                )

            fd, tmp_name = tempfile.mkstemp(dir=self._cache_dir, suffix=".part")
            tmp_path = Path(tmp_name)
            try:
                with os.fdopen(fd, "wb") as out:
                    for chunk in response.iter_bytes():
                        out.write(chunk)
                os.replace(tmp_path, self.jar_path)
            finally:
                tmp_path.unlink(missing_ok=True)
            new_etag = response.headers.get("ETag")

        if new_etag:
            self.etag_path.write_text(new_etag, encoding="utf-8")
        else:
            self.etag_path.unlink(missing_ok=True)

        self._say(f"Client downloaded to {self.jar_path}")
        return self.jar_path
