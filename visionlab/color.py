"""Per-pixel colour transforms on 8-bit BGR images."""

from __future__ import annotations

import numpy as np


def _as_bgr(image) -> np.ndarray:
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise TypeError(f"expected an 8-bit image, got dtype {arr.dtype}")
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError(f"expected an H x W x 3 BGR image, got shape {arr.shape}")
    return arr


def _to_uint8(values: np.ndarray) -> np.ndarray:
    """Truncate toward zero and clamp into the 8-bit range."""
    return np.clip(np.trunc(values), 0, 255).astype(np.uint8)


def _hsv_components(arr: np.ndarray):
    """Hue in degrees, saturation and value in [0, 1]."""
    b = arr[..., 0] / 255.0
    g = arr[..., 1] / 255.0
    r = arr[..., 2] / 255.0
    cmax = np.maximum(r, np.maximum(g, b))
    cmin = np.minimum(r, np.minimum(g, b))
    delta = cmax - cmin

    safe_delta = np.where(delta == 0, 1.0, delta)
    hue = np.where(
        cmax == r,
        60 * np.fmod((g - b) / safe_delta, 6),
        np.where(
            cmax == g,
            60 * ((b - r) / safe_delta + 2),
            60 * ((r - g) / safe_delta + 4),
        ),
    )
    hue = np.where(delta == 0, 0.0, hue)
    hue = np.where(hue < 0, hue + 360, hue)

    safe_max = np.where(cmax == 0, 1.0, cmax)
    sat = np.where(cmax == 0, 0.0, delta / safe_max)
    return hue, sat, cmax


def bgr_to_gray(image) -> np.ndarray:
    """Luma from BGR with weights 0.299, 0.587, 0.114, truncated."""
    arr = _as_bgr(image).astype(np.float64)
    gray = 0.299 * arr[..., 2] + 0.587 * arr[..., 1] + 0.114 * arr[..., 0]
    return _to_uint8(gray)


def bgr_to_yuv(image) -> np.ndarray:
    """YUV with U and V offset by 128, rounded and saturated to 8 bits."""
    arr = _as_bgr(image).astype(np.float64)
    b, g, r = arr[..., 0], arr[..., 1], arr[..., 2]
    y = 0.299 * r + 0.587 * g + 0.114 * b
    u = -0.147 * r - 0.289 * g + 0.436 * b + 128
    v = 0.615 * r - 0.515 * g - 0.100 * b + 128
    yuv = np.stack([y, u, v], axis=-1).astype(np.float32)
    return np.clip(np.rint(yuv), 0, 255).astype(np.uint8)


def bgr_to_hsv(image) -> np.ndarray:
    """HSV in the 8-bit convention: H in [0, 180), S and V in [0, 255]."""
    hue, sat, val = _hsv_components(_as_bgr(image))
    return _to_uint8(np.stack([hue / 2, sat * 255, val * 255], axis=-1))


def boost_saturation(image, factor: float = 1.5) -> np.ndarray:
    """Scale saturation by ``factor`` (capped at 1) and convert back to BGR."""
    if factor < 0:
        raise ValueError("saturation factor must not be negative")
    hue, sat, val = _hsv_components(_as_bgr(image))
    sat = np.minimum(sat * factor, 1.0)

    c = val * sat
    x = c * (1 - np.abs(np.fmod(hue / 60.0, 2) - 1))
    m = val - c
    zero = np.zeros_like(c)

    sectors = [hue < 60, hue < 120, hue < 180, hue < 240, hue < 300]
    r1 = np.select(sectors, [c, x, zero, zero, x], default=c)
    g1 = np.select(sectors, [x, c, c, x, zero], default=zero)
    b1 = np.select(sectors, [zero, zero, x, c, c], default=x)

    out = np.stack([(b1 + m) * 255, (g1 + m) * 255, (r1 + m) * 255], axis=-1)
    return _to_uint8(out)


def gray_world(image) -> tuple[np.ndarray, tuple[float, float, float]]:
    """White balance under the gray-world assumption.

    Returns the corrected image and the (B, G, R) scale factors.
    """
    arr = _as_bgr(image)
    if arr.size == 0:
        raise ValueError("cannot balance an empty image")
    means = arr.reshape(-1, 3).mean(axis=0)
    if np.any(means == 0):
        raise ValueError("a colour channel has zero mean; cannot balance")
    gray = (means[0] + means[1] + means[2]) / 3.0
    factors = gray / means
    corrected = _to_uint8(arr * factors)
    return corrected, (float(factors[0]), float(factors[1]), float(factors[2]))


def gamma_table(gamma: float) -> np.ndarray:
    """Lookup table of 256 entries mapping v to 255 * (v / 255) ** gamma."""
    if gamma <= 0:
        raise ValueError("gamma must be greater than 0")
    normalised = np.arange(256) / 255.0
    return _to_uint8(255 * np.power(normalised, gamma))


def apply_gamma(image, gamma: float) -> np.ndarray:
    """Apply gamma correction to every channel through a lookup table."""
    arr = _as_bgr(image)
    return gamma_table(gamma)[arr]


def correct_vignette(image, k: float) -> np.ndarray:
    """Brighten by 1 / (1 - k * d**2), d the distance to the centre over the
    centre-to-corner distance."""
    if k >= 1:
        raise ValueError("k must be less than 1")
    arr = _as_bgr(image)
    rows, cols = arr.shape[:2]
    if arr.size == 0:
        return arr.copy()
    cx = cols / 2.0
    cy = rows / 2.0
    dmax = np.sqrt(cx * cx + cy * cy)
    dx = np.arange(cols)[np.newaxis, :] - cx
    dy = np.arange(rows)[:, np.newaxis] - cy
    dnorm = np.sqrt(dx * dx + dy * dy) / dmax
    factor = 1.0 / (1.0 - k * dnorm * dnorm)
    return _to_uint8(arr * factor[..., np.newaxis])


def kmeans_segment(image, k: int, iterations: int = 10, rng=None) -> np.ndarray:
    """Quantise colours with k-means; each pixel takes its centroid's colour.

    Centroids start at randomly picked pixels. ``rng`` may be a seed or a
    numpy Generator.
    """
    if k < 1:
        raise ValueError("number of clusters must be at least 1")
    if iterations < 0:
        raise ValueError("iterations must not be negative")
    arr = _as_bgr(image)
    pixels = arr.reshape(-1, 3).astype(np.float32)
    total = len(pixels)
    if total == 0:
        raise ValueError("cannot cluster an empty image")

    generator = np.random.default_rng(rng)
    centroids = pixels[generator.integers(0, total, size=k)].copy()
    labels = np.zeros(total, dtype=np.intp)

    for _ in range(iterations):
        diff = pixels[:, np.newaxis, :] - centroids[np.newaxis, :, :]
        labels = (diff * diff).sum(axis=2).argmin(axis=1)

        counts = np.bincount(labels, minlength=k)
        sums = np.stack(
            [np.bincount(labels, weights=pixels[:, c], minlength=k) for c in range(3)],
            axis=1,
        )
        filled = counts > 0
        centroids[filled] = (sums[filled] / counts[filled, np.newaxis]).astype(
            np.float32
        )

    palette = _to_uint8(centroids)
    return palette[labels].reshape(arr.shape)