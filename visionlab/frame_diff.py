"""Foreground detection by differencing against a background frame."""

from __future__ import annotations

import numpy as np

from visionlab.morphology import (
    Rect,
    closing,
    ellipse_kernel,
    find_regions,
    opening,
    to_gray,
)


class FrameDifferencer:
    """Thresholded absolute difference against a (slowly updated) background."""

    def __init__(self, threshold: int, min_area: float, learning_rate: float = 0.0):
        self.threshold = threshold
        self.min_area = min_area
        self.learning_rate = learning_rate
        self._kernel = ellipse_kernel(5)
        self._background: np.ndarray | None = None

    @property
    def background(self) -> np.ndarray | None:
        return None if self._background is None else self._background.copy()

    def set_background(self, frame) -> None:
        """Use ``frame`` (converted to gray) as the background."""
        self._background = to_gray(frame)

    def _gray_for(self, frame) -> np.ndarray:
        if self._background is None:
            raise RuntimeError("background has not been set")
        gray = to_gray(frame)
        if gray.shape != self._background.shape:
            raise ValueError("frame size does not match the background")
        return gray

    def process(self, frame) -> np.ndarray:
        """Binary foreground mask (0 or 255) for ``frame``."""
        gray = self._gray_for(frame)
        diff = np.abs(self._background.astype(np.int16) - gray.astype(np.int16))
        mask = np.where(diff > self.threshold, 255, 0).astype(np.uint8)
        mask = opening(mask, self._kernel)
        return closing(mask, self._kernel)

    def regions(self, mask) -> list[Rect]:
        """Bounding boxes of mask regions at least ``min_area`` large."""
        return find_regions(mask, self.min_area)

    def update_background(self, frame) -> None:
        """Blend ``frame`` into the background; no-op when the rate is not positive."""
        if self.learning_rate <= 0.0:
            return
        gray = self._gray_for(frame)
        a = self.learning_rate
        blended = self._background * (1.0 - a) + gray * a
        self._background = np.clip(np.rint(blended), 0, 255).astype(np.uint8)