"""Frame sources (camera or video file) and a live multi-window viewer."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterator, Mapping

import imageio.v3 as iio
import matplotlib.pyplot as plt
import numpy as np


class VideoOpenError(OSError):
    """Raised when a camera or a video file cannot be opened."""


def _to_bgr(frame) -> np.ndarray:
    arr = np.asarray(frame)
    if arr.ndim == 3 and arr.shape[2] >= 3:
        return np.ascontiguousarray(arr[..., 2::-1])
    return arr


def _for_display(image) -> np.ndarray:
    arr = np.asarray(image)
    if arr.ndim == 3:
        return np.ascontiguousarray(arr[..., ::-1])
    return arr


class VideoSource:
    """Frames from a camera index, a video file, or an iterable of BGR frames.

    Camera and file frames are delivered in BGR order. Iteration stops at
    the end of the stream or at the first empty frame.
    """

    def __init__(self, source):
        self._closed = False
        self._pending: list[np.ndarray] = []
        self._raw = None
        if isinstance(source, bool):
            raise TypeError("video source must be a camera index, a path or frames")
        if isinstance(source, int):
            self._iterator = self._open(f"<video{source}>", f"camera {source}")
        elif isinstance(source, (str, os.PathLike)):
            self._iterator = self._open(source, os.fspath(source))
        else:
            try:
                self._iterator = iter(source)
            except TypeError as exc:
                raise TypeError(
                    "video source must be a camera index, a path or frames"
                ) from exc

    def _open(self, uri, label: str) -> Iterator[np.ndarray]:
        try:
            raw = iio.imiter(uri)
            first = next(raw, None)
        except Exception as exc:
            raise VideoOpenError(f"could not open {label}") from exc
        self._raw = raw
        if first is not None:
            self._pending.append(_to_bgr(first))
        return (_to_bgr(frame) for frame in raw)

    def frames(self) -> Iterator[np.ndarray]:
        """Iterate over the remaining frames."""
        if self._closed:
            raise RuntimeError("video source is closed")
        return self._iterate()

    def _iterate(self) -> Iterator[np.ndarray]:
        while not self._closed:
            if self._pending:
                frame = self._pending.pop(0)
            else:
                frame = next(self._iterator, None)
                if frame is None:
                    return
            arr = np.asarray(frame)
            if arr.size == 0:
                return
            yield arr

    def close(self) -> None:
        """Release the underlying stream."""
        self._closed = True
        self._pending.clear()
        for stream in (self._iterator, self._raw):
            closer = getattr(stream, "close", None)
            if closer is not None:
                closer()

    def __enter__(self) -> VideoSource:
        return self

    def __exit__(self, *args) -> None:
        self.close()


class _LiveWindows:
    """Titled windows refreshed frame by frame; ESC or closing one stops."""

    def __init__(self, interval: float = 0.03):
        self.interval = interval
        self._figures: dict[str, object] = {}
        self._artists: dict[str, object] = {}
        self._stop = False

    def _on_key(self, event) -> None:
        if event.key == "escape":
            self._stop = True

    def _on_close(self, event) -> None:
        self._stop = True

    def show(self, windows: Mapping[str, np.ndarray]) -> bool:
        """Draw every image; return False once the user asked to stop."""
        plt.ion()
        for title, image in windows.items():
            data = _for_display(image)
            artist = self._artists.get(title)
            if artist is None:
                fig = plt.figure(num=title)
                ax = fig.add_subplot(1, 1, 1)
                ax.set_axis_off()
                if data.ndim == 2:
                    artist = ax.imshow(data, cmap="gray", vmin=0, vmax=255)
                else:
                    artist = ax.imshow(data)
                fig.canvas.mpl_connect("key_press_event", self._on_key)
                fig.canvas.mpl_connect("close_event", self._on_close)
                self._figures[title] = fig
                self._artists[title] = artist
            else:
                artist.set_data(data)
        plt.pause(self.interval)
        return not self._stop

    def close(self) -> None:
        for fig in self._figures.values():
            plt.close(fig)
        self._figures.clear()
        self._artists.clear()

    def __enter__(self) -> _LiveWindows:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def main(argv=None) -> int:
    """Show the live camera image until ESC is pressed."""
    parser = argparse.ArgumentParser(
        prog="visionlab-camera", description="Show the live camera image."
    )
    parser.add_argument("--camera", type=int, default=0, help="camera index")
    args = parser.parse_args(argv)

    try:
        source = VideoSource(args.camera)
    except VideoOpenError:
        print("Error: could not open the camera", file=sys.stderr)
        return 1

    print("Press ESC to quit")
    with source, _LiveWindows(interval=0.03) as view:
        for frame in source.frames():
            if not view.show({"Camera": frame}):
                break
        else:
            print("Empty frame")
    return 0


if __name__ == "__main__":
    sys.exit(main())