"""Fetch remote files to disk and merge separate video and audio streams."""

from __future__ import annotations

import subprocess
from pathlib import Path

import requests

_CHUNK_SIZE = 64 * 1024


class MergeError(RuntimeError):
    """ffmpeg failed to merge the streams."""


class Downloader:
    """Downloads with a session that carries the headers the server expects.

    No credentials are needed once a URL is known, but requests without the
    usual default headers are refused.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self.session = session if session is not None else requests.Session()

    def fetch(self, url: str, path: str | Path) -> None:
        """Stream ``url`` into ``path``, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as file:
            with self.session.get(url, stream=True) as response:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    file.write(chunk)

    def merge(
        self,
        video_path: str | Path,
        audio_path: str | Path,
        output_path: str | Path,
    ) -> None:
        """Combine a video and an audio stream into ``output_path`` with ffmpeg."""
        result = subprocess.run(
            [
                "ffmpeg",
                "-i",
                str(video_path),
                "-i",
                str(audio_path),
                "-c",
                "copy",
                "-y",
                str(output_path),
            ],
            capture_output=True,
        )
        if result.returncode != 0:
            try:
                message = result.stderr.decode("utf-8")
            except UnicodeDecodeError:
                message = "ffmpeg error"
            raise MergeError(message)