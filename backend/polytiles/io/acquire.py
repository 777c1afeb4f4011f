"""Fetch the raw .shp bytes of a tiling source."""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path

import httpx
from tqdm import tqdm

from polytiles.models.sources import Encoding, LocalSource, OnlineSource, Source

logger = logging.getLogger(__name__)

_USER_AGENT = "polytiles/0.1"
_CHUNK = 1 << 16


class SourceError(RuntimeError):
    """The source could not be read, downloaded or unpacked."""


def download(url: str, client: httpx.Client | None = None, progress: bool = True) -> bytes:
    """Download a resource, streaming it behind a byte progress bar."""
    own_client = client is None
    client = client or httpx.Client(timeout=60.0, follow_redirects=True)
    try:
        with client.stream("GET", url, headers={"User-Agent": _USER_AGENT}) as resp:
            resp.raise_for_status()
            total = int(resp.headers.get("Content-Length", 0)) or None
            buf = bytearray()
            with tqdm(
                total=total,
                unit="B",
                unit_scale=True,
                desc=f"Downloading {url}",
                disable=not progress,
            ) as bar:
                for chunk in resp.iter_bytes(_CHUNK):
                    buf.extend(chunk)
                    bar.update(len(chunk))
    except httpx.HTTPError as e:
        raise SourceError(f"download of {url} failed: {e}") from e
    finally:
        if own_client:
            client.close()

    logger.info("Downloaded %s (%d bytes)", url, len(buf))
    return bytes(buf)


def extract_shp(archive: bytes) -> bytes:
    """Return the first ``.shp`` member of a ZIP archive."""
    try:
        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            for info in zf.infolist():
                if info.is_dir() or not info.filename.lower().endswith(".shp"):
                    continue
                logger.info("Extracting %s (%d bytes)", info.filename, info.file_size)
                return zf.read(info)
    except zipfile.BadZipFile as e:
        raise SourceError(f"not a ZIP archive: {e}") from e
    raise SourceError("archive contains no .shp file")


def load_source(
    source: Source, client: httpx.Client | None = None, progress: bool = True
) -> bytes:
    """Read a source into memory and unpack it according to its encoding."""
    if isinstance(source, LocalSource):
        try:
            data = Path(source.path).read_bytes()
        except OSError as e:
            raise SourceError(f"cannot read {source.path}: {e}") from e
    elif isinstance(source, OnlineSource):
        data = download(source.url, client=client, progress=progress)
    else:
        raise TypeError(f"unknown source type: {type(source).__name__}")

    if source.encoding is Encoding.ZIP:
        data = extract_shp(data)
    return data
