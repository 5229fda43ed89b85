import logging
import os
import time
import uuid
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Optional

import httpx


class QRCodeProvider:
    """Turns a URL into a durable reference to a QR image.

    Contract: ``fetch_reference`` is best effort. It returns ``None`` on any
    provider, network or storage failure and never raises, and every
    implementation bounds its own network time. Callers can therefore invoke
    it on their critical path without guarding it.

    ``discard`` drops an image whose link was never stored.
    """

    def fetch_reference(self, data: str) -> Optional[str]:
        raise NotImplementedError

    def discard(self, reference: str) -> None:
        pass

    def close(self) -> None:
        pass


class NullQRCodeProvider(QRCodeProvider):
    """Used when QR images are disabled."""

    def fetch_reference(self, data: str) -> Optional[str]:
        return None


class LocalAssetStore:
    """Writes images under MEDIA_PATH; they are served from ``/media``."""

    def __init__(self, media_path: str, base_url: str):
        self.media_path = media_path
        self.base_url = base_url.rstrip("/")

    def put_png(self, content: bytes) -> str:
        os.makedirs(self.media_path, exist_ok=True)
        filename = f"{uuid.uuid4()}.png"
        with open(os.path.join(self.media_path, filename), "wb") as fh:
            fh.write(content)
        return f"{self.base_url}/media/{filename}"

    def delete(self, reference: str) -> bool:
        prefix = f"{self.base_url}/media/"
        if not reference.startswith(prefix):
            return False
        filename = reference[len(prefix):]
        if not filename or os.path.basename(filename) != filename:
            return False
        try:
            os.remove(os.path.join(self.media_path, filename))
        except FileNotFoundError:
            return False
        return True


class HttpQRCodeProvider(QRCodeProvider):
    """QR images from an api.qrserver.com compatible endpoint.

    ``timeout`` is a deadline for the whole fetch, redirects and a slowly
    streamed body included. The download runs on a worker thread and the
    caller stops waiting once the deadline passes; the worker abandons the
    body at the same point. Images are only written from the caller's thread,
    so a late download never leaves a file behind.
    """

    def __init__(self, client: httpx.Client, assets: LocalAssetStore, api_url: str,
                 timeout: float = 5.0, logger: Optional[logging.Logger] = None,
                 max_workers: int = 4):
        self.client = client
        self.assets = assets
        self.api_url = api_url
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="qr-fetch")

    def _params(self, data: str) -> dict:
        return {
            "color": "000000",
            "bgcolor": "FFFFFF",
            "data": data,
            "qzone": "0",
            "margin": "0",
            "size": "250x250",
            "ecc": "L",
        }

    def _download(self, data: str, deadline: float) -> Optional[bytes]:
        try:
            with self.client.stream("GET", self.api_url, params=self._params(data)) as response:
                if response.status_code != httpx.codes.OK:
                    self.logger.warning("QR provider returned %s for %s", response.status_code, data[:50])
                    return None
                chunks = []
                for chunk in response.iter_bytes():
                    if time.monotonic() > deadline:
                        return None
                    chunks.append(chunk)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self.logger.warning("QR provider unreachable for %s: %s", data[:50], e)
            return None

        content = b"".join(chunks)
        if not content:
            self.logger.warning("QR provider returned an empty image for %s", data[:50])
            return None
        return content

    def fetch_reference(self, data: str) -> Optional[str]:
        deadline = time.monotonic() + self.timeout
        future = self.executor.submit(self._download, data, deadline)
        try:
            content = future.result(timeout=self.timeout)
        except FutureTimeout:
            self.logger.warning("QR provider exceeded %.1fs for %s", self.timeout, data[:50])
            return None
        if content is None or time.monotonic() > deadline:
            return None

        try:
            reference = self.assets.put_png(content)
        except OSError:
            self.logger.warning("Could not store QR image for %s", data[:50], exc_info=True)
            return None

        self.logger.info("qrCodeUrl: %s", reference)
        return reference

    def discard(self, reference: str) -> None:
        try:
            if self.assets.delete(reference):
                self.logger.info("Discarded QR image %s", reference)
        except OSError:
            self.logger.warning("Could not discard QR image %s", reference, exc_info=True)

    def close(self) -> None:
        self.executor.shutdown(wait=False)
        self.client.close()
