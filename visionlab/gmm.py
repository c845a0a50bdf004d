"""Adaptive Gaussian-mixture background subtraction with shadow detection."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from visionlab.morphology import (
    Rect,
    closing,
    ellipse_kernel,
    find_regions,
    opening,
)

_N_MIXTURES = 5
_BACKGROUND_RATIO = 0.9
_VAR_THRESHOLD_GEN = 9.0
_VAR_INIT = 15.0
_VAR_MIN = 4.0
_VAR_MAX = 5 * _VAR_INIT
_COMPLEXITY_REDUCTION = 0.05
_SHADOW_TAU = 0.5
_SHADOW_VALUE = 127


@dataclass
class GMMConfig:
    """Settings of the mixture model and of the mask clean-up."""

    history: int = 500
    var_threshold: float = 16.0
    detect_shadows: bool = True
    min_area: int = 1500
    morph_open_k: int = 3
    morph_close_k: int = 7


class _MixtureModel:
    """Per-pixel mixture of Gaussians, modes kept sorted by weight."""

    def __init__(self, history: int, var_threshold: float, detect_shadows: bool):
        if history < 1:
            raise ValueError("history must be at least 1")
        self.history = history
        self.var_threshold = var_threshold
        self.detect_shadows = detect_shadows
        self.frames = 0
        self.shape: tuple[int, ...] | None = None
        self.gray = False

    def _init(self, data: np.ndarray) -> None:
        h, w, c = data.shape
        self.shape = data.shape
        self.weights = np.zeros((h, w, _N_MIXTURES))
        self.means = np.zeros((h, w, _N_MIXTURES, c))
        self.vars = np.zeros((h, w, _N_MIXTURES))
        self.active = np.zeros((h, w, _N_MIXTURES), dtype=bool)
        self.frames = 0

    def apply(self, frame) -> np.ndarray:
        arr = np.asarray(frame)
        self.gray = arr.ndim == 2
        data = (arr[..., np.newaxis] if self.gray else arr).astype(np.float64)
        if data.ndim != 3:
            raise ValueError(f"unsupported frame shape {arr.shape}")
        if self.shape != data.shape:
            self._init(data)

        self.frames += 1
        alpha = 1.0 / min(2 * self.frames, self.history)
        alpha1 = 1.0 - alpha
        prune = -alpha * _COMPLEXITY_REDUCTION
        tb = self.var_threshold

        shape2 = data.shape[:2]
        total = np.zeros(shape2)
        fits = np.zeros(shape2, dtype=bool)
        background = np.zeros(shape2, dtype=bool)

        for m in range(_N_MIXTURES):
            act = self.active[..., m]
            w = np.where(act, alpha1 * self.weights[..., m] + prune, 0.0)
            var = self.vars[..., m]
            diff = self.means[..., m, :] - data
            dist2 = (diff * diff).sum(axis=-1)
            candidate = act & ~fits
            background |= candidate & (total < _BACKGROUND_RATIO) & (dist2 < tb * var)
            match = candidate & (dist2 < _VAR_THRESHOLD_GEN * var)
            w = np.where(match, w + alpha, w)
            k = np.where(match, alpha / np.where(match, w, 1.0), 0.0)
            self.means[..., m, :] -= k[..., np.newaxis] * diff
            new_var = np.clip(var + k * (dist2 - var), _VAR_MIN, _VAR_MAX)
            self.vars[..., m] = np.where(match, new_var, var)
            fits |= match
            dead = act & (w < -prune)
            w = np.where(dead, 0.0, w)
            self.active[..., m] = act & ~dead
            total += w
            self.weights[..., m] = w

        positive = total > 0
        self.weights = np.where(
            positive[..., np.newaxis],
            self.weights / np.where(positive, total, 1.0)[..., np.newaxis],
            self.weights,
        )

        self._add_modes(~fits, data, alpha, alpha1)
        self._sort()

        mask = np.where(background, 0, 255).astype(np.uint8)
        if self.detect_shadows:
            shadow = ~background & self._shadows(data)
            mask[shadow] = _SHADOW_VALUE
        return mask

    def _add_modes(self, need: np.ndarray, data, alpha: float, alpha1: float) -> None:
        if not need.any():
            return
        count = self.active.sum(axis=-1)
        slot = np.where(count < _N_MIXTURES, count, _N_MIXTURES - 1)
        first = need & (count == 0)
        others = need & ~first
        scale = np.ones(need.shape + (_N_MIXTURES,))
        scale[others] = alpha1
        self.weights *= scale
        ys, xs = np.nonzero(need)
        s = slot[ys, xs]
        self.weights[ys, xs, s] = np.where(first[ys, xs], 1.0, alpha)
        self.means[ys, xs, s, :] = data[ys, xs, :]
        self.vars[ys, xs, s] = _VAR_INIT
        self.active[ys, xs, s] = True

    def _sort(self) -> None:
        key = np.where(self.active, -self.weights, np.inf)
        order = np.argsort(key, axis=-1, kind="stable")
        self.weights = np.take_along_axis(self.weights, order, axis=-1)
        self.vars = np.take_along_axis(self.vars, order, axis=-1)
        self.active = np.take_along_axis(self.active, order, axis=-1)
        self.means = np.take_along_axis(self.means, order[..., np.newaxis], axis=2)

    def _shadows(self, data: np.ndarray) -> np.ndarray:
        shape2 = data.shape[:2]
        result = np.zeros(shape2, dtype=bool)
        done = np.zeros(shape2, dtype=bool)
        t_weight = np.zeros(shape2)
        tb = self.var_threshold
        for m in range(_N_MIXTURES):
            live = self.active[..., m] & ~done
            mean = self.means[..., m, :]
            num = (mean * data).sum(axis=-1)
            den = (mean * mean).sum(axis=-1)
            done |= live & (den == 0)
            live &= den != 0
            in_range = live & (num <= den) & (num >= _SHADOW_TAU * den)
            a = np.where(in_range, num / np.where(den == 0, 1.0, den), 0.0)
            d = a[..., np.newaxis] * mean - data
            dist2a = (d * d).sum(axis=-1)
            hit = in_range & (dist2a < tb * self.vars[..., m] * a * a)
            result |= hit
            done |= hit
            t_weight = np.where(live & ~hit, t_weight + self.weights[..., m], t_weight)
            done |= live & (t_weight > _BACKGROUND_RATIO)
        return result

    def background(self) -> np.ndarray | None:
        if self.shape is None or self.frames == 0:
            return None
        shape2 = self.shape[:2]
        acc = np.zeros(self.shape)
        total = np.zeros(shape2)
        done = np.zeros(shape2, dtype=bool)
        for m in range(_N_MIXTURES):
            live = self.active[..., m] & ~done
            w = np.where(live, self.weights[..., m], 0.0)
            acc += w[..., np.newaxis] * self.means[..., m, :]
            total += w
            done |= live & (total > _BACKGROUND_RATIO)
        safe = np.where(total > 0, total, 1.0)[..., np.newaxis]
        out = np.clip(np.rint(acc / safe), 0, 255).astype(np.uint8)
        return out[..., 0] if self.gray else out


class GMMSegmenter:
    """Mixture-of-Gaussians foreground segmentation with mask clean-up."""

    def __init__(self, config: GMMConfig | None = None):
        self.config = config if config is not None else GMMConfig()
        self._model = _MixtureModel(
            self.config.history, self.config.var_threshold, self.config.detect_shadows
        )
        self._kernel_open = ellipse_kernel(self.config.morph_open_k)
        self._kernel_close = ellipse_kernel(self.config.morph_close_k)

    def apply(self, frame) -> np.ndarray:
        """Update the model with ``frame``; return the shadow-free 0/255 mask."""
        raw = self._model.apply(frame)
        mask = np.where(raw > 200, 255, 0).astype(np.uint8)
        mask = opening(mask, self._kernel_open)
        return closing(mask, self._kernel_close)

    def regions(self, mask) -> list[Rect]:
        """Bounding boxes of mask regions at least ``min_area`` large."""
        return find_regions(mask, self.config.min_area)

    def background(self) -> np.ndarray | None:
        """Current background estimate, or None before any frame."""
        return self._model.background()