"""Command line for the colour exercises: pick an image, transform, show."""

from __future__ import annotations

import argparse
import sys

import numpy as np

from visionlab import color
from visionlab.display import ImageLoadError, load_image, show_images
from visionlab.filechooser import choose_file

CHOOSER_TITLE = "Select an image"


def _number(value, prompt: str, kind):
    if value is not None:
        return value
    try:
        text = input(prompt)
    except EOFError as exc:
        raise ValueError("no value was entered") from exc
    try:
        return kind(text.strip())
    except ValueError as exc:
        raise ValueError(f"invalid number: {text.strip()!r}") from exc


def _convert(args, image) -> dict[str, np.ndarray]:
    return {
        "Original": image,
        "Grayscale": color.bgr_to_gray(image),
        "HSV": color.bgr_to_hsv(image),
        "YUV": color.bgr_to_yuv(image),
    }


def _hsv(args, image) -> dict[str, np.ndarray]:
    return {"Original (BGR)": image, "HSV": color.bgr_to_hsv(image)}


def _saturation(args, image) -> dict[str, np.ndarray]:
    return {
        "Original": image,
        "Saturation boosted": color.boost_saturation(image, args.factor),
    }


def _kmeans(args, image) -> dict[str, np.ndarray]:
    clusters = _number(args.clusters, "Number of clusters (K): ", int)
    segmented = color.kmeans_segment(image, clusters, args.iterations, args.seed)
    return {"Original": image, "K-means segmentation": segmented}


def _grayworld(args, image) -> dict[str, np.ndarray]:
    corrected, (fb, fg, fr) = color.gray_world(image)
    print(f"Factor B: {fb:g}")
    print(f"Factor G: {fg:g}")
    print(f"Factor R: {fr:g}")
    return {"Original": image, "Gray world white balance": corrected}


def _gamma(args, image) -> dict[str, np.ndarray]:
    gamma = _number(args.gamma, "Gamma value (e.g. 0.5, 1.0, 2.0): ", float)
    if gamma <= 0:
        raise ValueError("Gamma must be greater than 0.")
    return {"Original": image, "Gamma correction": color.apply_gamma(image, gamma)}


def _vignette(args, image) -> dict[str, np.ndarray]:
    k = _number(args.k, "Value of k (e.g. 0.5 - 0.8): ", float)
    return {"Original": image, "Vignette correction": color.correct_vignette(image, k)}


def build_parser() -> argparse.ArgumentParser:
    """Argument parser with one sub-command per colour transform."""
    parser = argparse.ArgumentParser(
        prog="visionlab-color",
        description="Apply a colour transform to an image and show the result.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    def add(name: str, handler, help_text: str) -> argparse.ArgumentParser:
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument(
            "image", nargs="?", help="image file; a file dialog opens if omitted"
        )
        sub.set_defaults(handler=handler)
        return sub

    add("convert", _convert, "grayscale, HSV and YUV conversions")
    add("hsv", _hsv, "BGR to HSV conversion")

    sub = add("saturation", _saturation, "increase saturation")
    sub.add_argument("--factor", type=float, default=1.5)

    sub = add("kmeans", _kmeans, "k-means colour segmentation")
    sub.add_argument("--clusters", "-k", type=int, default=None)
    sub.add_argument("--iterations", type=int, default=10)
    sub.add_argument("--seed", type=int, default=None)

    add("grayworld", _grayworld, "gray world white balance")

    sub = add("gamma", _gamma, "gamma correction")
    sub.add_argument("--gamma", type=float, default=None)

    sub = add("vignette", _vignette, "vignetting correction")
    sub.add_argument("--k", type=float, default=None)

    return parser


def main(argv=None) -> int:
    """Run one colour transform; return the process exit status."""
    args = build_parser().parse_args(argv)

    path = args.image or choose_file(CHOOSER_TITLE)
    if not path:
        print("No image was selected.", file=sys.stderr)
        return 1

    try:
        image = load_image(path)
    except ImageLoadError:
        print("Error loading the image.", file=sys.stderr)
        return 1

    try:
        windows = args.handler(args, image)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    show_images(windows)
    return 0


if __name__ == "__main__":
    sys.exit(main())