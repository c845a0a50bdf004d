"""Loading, annotating and showing 8-bit BGR images."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

import imageio.v3 as iio
import matplotlib.pyplot as plt
import numpy as np

GREEN = (0, 255, 0)


class ImageLoadError(ValueError):
    """Raised when an image file cannot be read or decoded."""


def _to_8bit(arr: np.ndarray) -> np.ndarray:
    if arr.dtype == np.uint8:
        return arr
    if arr.dtype == np.uint16:
        return (arr >> 8).astype(np.uint8)
    if arr.dtype == np.bool_:
        return arr.astype(np.uint8) * 255
    return np.clip(arr, 0, 255).astype(np.uint8)


def load_image(path) -> np.ndarray:
    """Read an image file as an H x W x 3 uint8 array in BGR order."""
    try:
        data = iio.imread(path)
    except Exception as exc:
        raise ImageLoadError(f"could not load image {path!s}") from exc

    arr = np.asarray(data)
    if arr.ndim == 4:
        arr = arr[0]
    if arr.size == 0 or arr.ndim not in (2, 3):
        raise ImageLoadError(f"could not load image {path!s}")

    arr = _to_8bit(arr)
    if arr.ndim == 2:
        arr = np.stack([arr, arr, arr], axis=-1)
    elif arr.shape[2] in (1, 2):
        arr = np.repeat(arr[..., :1], 3, axis=2)
    elif arr.shape[2] >= 4:
        arr = arr[..., :3]
    return np.ascontiguousarray(arr[..., ::-1])


def _box_coords(box) -> tuple[int, int, int, int]:
    if all(hasattr(box, name) for name in ("x", "y", "width", "height")):
        return int(box.x), int(box.y), int(box.width), int(box.height)
    x, y, w, h = box
    return int(x), int(y), int(w), int(h)


def draw_boxes(
    image,
    boxes: Iterable,
    color: Sequence[int] = GREEN,
    thickness: int = 2,
) -> np.ndarray:
    """Return a copy of ``image`` with a rectangle outline for every box.

    A box is an ``(x, y, width, height)`` sequence or an object with those
    attributes.
    """
    if thickness < 1:
        raise ValueError("thickness must be at least 1")
    out = np.array(image, copy=True)
    height, width = out.shape[:2]
    if out.ndim == 3:
        value = np.asarray(color, dtype=out.dtype)[: out.shape[2]]
    else:
        value = np.asarray(color, dtype=out.dtype)[0]

    before = (thickness - 1) // 2
    after = thickness // 2

    def paint(top: int, bottom: int, left: int, right: int) -> None:
        top, left = max(top, 0), max(left, 0)
        bottom, right = min(bottom, height - 1), min(right, width - 1)
        if top <= bottom and left <= right:
            out[top : bottom + 1, left : right + 1] = value

    for box in boxes:
        x, y, w, h = _box_coords(box)
        if w <= 0 or h <= 0:
            continue
        x1, y1 = x + w - 1, y + h - 1
        paint(y - before, y + after, x - before, x1 + after)
        paint(y1 - before, y1 + after, x - before, x1 + after)
        paint(y - before, y1 + after, x - before, x + after)
        paint(y - before, y1 + after, x1 - before, x1 + after)
    return out


def show_images(windows: Mapping[str, np.ndarray]) -> None:
    """Show each image in its own titled window and wait until all are closed.

    Three-channel images are taken as BGR; two-dimensional ones as grayscale.
    """
    items = list(windows.items())
    if not items:
        raise ValueError("no images to show")

    figures = []
    try:
        for title, image in items:
            arr = np.asarray(image)
            fig = plt.figure(num=title)
            figures.append(fig)
            ax = fig.add_subplot(1, 1, 1)
            if arr.ndim == 2:
                ax.imshow(arr, cmap="gray", vmin=0, vmax=255)
            else:
                ax.imshow(np.ascontiguousarray(arr[..., ::-1]))
            ax.set_axis_off()
        plt.show()
    finally:
        for fig in figures:
            plt.close(fig)