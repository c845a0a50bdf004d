"""Command lines for background segmentation by frame differencing or GMM."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Iterable

import numpy as np

from visionlab.display import draw_boxes
from visionlab.filechooser import choose_file
from visionlab.frame_diff import FrameDifferencer
from visionlab.gmm import GMMConfig, GMMSegmenter
from visionlab.video import VideoOpenError, VideoSource, _LiveWindows

CHOOSER_TITLE = "Select a video"
FRAME_DIFF_THRESHOLD = 40
FRAME_DIFF_MIN_AREA = 2000

MENU = "Select mode:\n1 - Camera\n2 - Select video"


def select_source(option, chooser=choose_file):
    """Camera index 0 for option 1, a chosen file path for option 2."""
    if option == 1:
        return 0
    if option == 2:
        path = chooser(CHOOSER_TITLE)
        if not path:
            raise ValueError("No file was selected.")
        return path
    raise ValueError("Invalid option.")


def run_frame_diff(frames: Iterable, on_frame: Callable) -> int:
    """Segment frames against the first one.

    ``on_frame(windows, boxes)`` receives the images to show and the
    detected boxes; returning False stops. Returns the frames processed.
    """
    stream = iter(frames)
    first = next(stream, None)
    if first is None:
        raise ValueError("Could not capture the first frame.")

    differencer = FrameDifferencer(FRAME_DIFF_THRESHOLD, FRAME_DIFF_MIN_AREA, 0.0)
    differencer.set_background(first)

    count = 0
    for frame in stream:
        mask = differencer.process(frame)
        boxes = differencer.regions(mask)
        windows = {
            "Frame + boxes": draw_boxes(frame, boxes),
            "Binary mask": mask,
        }
        count += 1
        if on_frame(windows, boxes) is False:
            break
    return count


def run_gmm(frames: Iterable, on_frame: Callable) -> int:
    """Segment frames with a Gaussian-mixture background model.

    ``on_frame(windows, boxes)`` as in :func:`run_frame_diff`. Returns the
    frames processed.
    """
    segmenter = GMMSegmenter(GMMConfig())
    count = 0
    for frame in frames:
        mask = segmenter.apply(frame)
        boxes = segmenter.regions(mask)
        windows: dict[str, np.ndarray] = {
            "GMM - Frame + boxes": draw_boxes(frame, boxes),
            "GMM - Clean mask": mask,
        }
        background = segmenter.background()
        if background is not None:
            windows["GMM - Estimated background"] = background
        count += 1
        if on_frame(windows, boxes) is False:
            break
    return count


def _parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "option", nargs="?", help="1 for the camera, 2 for a video file"
    )
    parser.add_argument(
        "--video", help="video file to use instead of the file dialog"
    )
    return parser


def _option(args) -> int:
    text = args.option
    if text is None:
        if args.video:
            return 2
        print(MENU)
        try:
            text = input("Option: ")
        except EOFError as exc:
            raise ValueError("Invalid option.") from exc
    try:
        return int(text.strip())
    except ValueError as exc:
        raise ValueError("Invalid option.") from exc


def _run(argv, parser: argparse.ArgumentParser, runner: Callable) -> int:
    args = parser.parse_args(argv)
    try:
        option = _option(args)
        chooser = (lambda title: args.video) if args.video else choose_file
        source = select_source(option, chooser)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        video = VideoSource(source)
    except VideoOpenError:
        print("Could not open the video source.", file=sys.stderr)
        return 1

    with video, _LiveWindows(interval=0.01) as view:
        try:
            runner(video.frames(), lambda windows, boxes: view.show(windows))
        except ValueError as exc:
            print(str(exc), file=sys.stderr)
            return 1
    return 0


def main_frame_diff(argv=None) -> int:
    """Frame-differencing segmentation of a camera or video stream."""
    parser = _parser(
        "visionlab-framediff", "Foreground segmentation by frame differencing."
    )
    return _run(argv, parser, run_frame_diff)


def main_gmm(argv=None) -> int:
    """Gaussian-mixture segmentation of a camera or video stream."""
    parser = _parser(
        "visionlab-gmm", "Foreground segmentation with a Gaussian mixture model."
    )
    return _run(argv, parser, run_gmm)


if __name__ == "__main__":
    sys.exit(main_frame_diff())