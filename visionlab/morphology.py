"""Binary mask helpers: gray conversion, elliptical morphology and regions."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import ndimage


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height


def to_gray(frame) -> np.ndarray:
    """Convert a BGR frame to 8-bit gray; a single-channel frame is copied."""
    arr = np.asarray(frame)
    if arr.ndim == 2:
        return arr.astype(np.uint8, copy=True)
    if arr.ndim == 3 and arr.shape[2] == 1:
        return arr[..., 0].astype(np.uint8, copy=True)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError(f"expected a gray or BGR frame, got shape {arr.shape}")
    data = arr.astype(np.float64)
    gray = 0.299 * data[..., 2] + 0.587 * data[..., 1] + 0.114 * data[..., 0]
    return np.clip(np.rint(gray), 0, 255).astype(np.uint8)


def ellipse_kernel(size: int) -> np.ndarray:
    """Elliptical structuring element of ``size`` x ``size`` as a bool array."""
    if size < 1:
        raise ValueError("kernel size must be at least 1")
    r = size // 2
    inv_r2 = 1.0 / (r * r) if r else 0.0
    kernel = np.zeros((size, size), dtype=bool)
    for i, row in enumerate(kernel):
        dy = i - r
        if abs(dy) <= r:
            dx = int(round(r * np.sqrt((r * r - dy * dy) * inv_r2)))
            row[max(r - dx, 0) : min(r + dx + 1, size)] = True
    return kernel


def _erode(mask: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return ndimage.grey_erosion(mask, footprint=kernel, mode="constant", cval=255)


def _dilate(mask: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    return ndimage.grey_dilation(mask, footprint=kernel, mode="constant", cval=0)


def opening(mask, kernel) -> np.ndarray:
    """Erosion followed by dilation."""
    arr = np.asarray(mask, dtype=np.uint8)
    return _dilate(_erode(arr, kernel), kernel)


def closing(mask, kernel) -> np.ndarray:
    """Dilation followed by erosion."""
    arr = np.asarray(mask, dtype=np.uint8)
    return _erode(_dilate(arr, kernel), kernel)


def find_regions(mask, min_area: float) -> list[Rect]:
    """Bounding boxes of the outer contours whose enclosed area is at least
    ``min_area``.

    The area is that of the polygon through the centres of the boundary
    pixels, so a filled w x h block encloses (w - 1) * (h - 1).
    """
    arr = np.asarray(mask)
    if arr.ndim != 2:
        raise ValueError("mask must be two-dimensional")
    labels, _ = ndimage.label(arr != 0, structure=np.ones((3, 3), dtype=bool))
    boxes = []
    for index, slices in enumerate(ndimage.find_objects(labels), start=1):
        if slices is None:
            continue
        component = ndimage.binary_fill_holes(labels[slices] == index)
        count = int(component.sum())
        inner = ndimage.binary_erosion(component, border_value=0)
        boundary = count - int(inner.sum())
        area = max(count - boundary / 2.0 - 1.0, 0.0)
        if area >= min_area:
            ys, xs = slices
            boxes.append(Rect(xs.start, ys.start, xs.stop - xs.start, ys.stop - ys.start))
    return boxes