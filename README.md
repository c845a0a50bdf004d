# visionlab

Small, readable image-processing routines written directly on NumPy
arrays, together with command-line tools to try them on your own images
and videos.

Images are handled as `uint8` arrays in BGR channel order, with shape
`(rows, cols, 3)` for colour and `(rows, cols)` for grey.

## What is included

Colour (`visionlab.color`):

- `bgr_to_gray`, `bgr_to_yuv`, `bgr_to_hsv`: per-pixel colour-space
  conversions. HSV uses the 8-bit convention of hue in `[0, 180)` and
  saturation and value in `[0, 255]`.
- `boost_saturation(image, factor=1.5)`: scales saturation in HSV space
  (capped at 1) and converts back to BGR.
- `gray_world(image)`: white balance by the grey-world assumption. Returns
  the corrected image and the `(B, G, R)` scale factors; raises
  `ValueError` for an empty image or a channel with zero mean.
- `gamma_table(gamma)` and `apply_gamma(image, gamma)`: gamma correction
  through a 256-entry lookup table; `gamma` must be greater than 0.
- `correct_vignette(image, k)`: radial brightening with the factor
  `1 / (1 - k * d²)`, where `d` is the distance to the centre divided by
  the centre-to-corner distance; `k` must be less than 1.
- `kmeans_segment(image, k, iterations=10, rng=None)`: k-means colour
  quantisation with centroids started at random pixels; `rng` is a seed or
  a NumPy `Generator`.

Background subtraction:

- `visionlab.frame_diff.FrameDifferencer(threshold, min_area,
  learning_rate=0.0)`: `set_background` stores a grey background,
  `process` returns a 0/255 mask of pixels differing by more than
  `threshold`, cleaned with elliptical opening and closing, `regions`
  returns bounding boxes of large regions, and `update_background` blends
  a frame into the background when `learning_rate` is positive.
- `visionlab.gmm.GMMSegmenter(config=None)`: a per-pixel Gaussian-mixture
  background model with shadow detection, configured through
  `visionlab.gmm.GMMConfig` (`history`, `var_threshold`, `detect_shadows`,
  `min_area`, `morph_open_k`, `morph_close_k`). `apply` returns a
  shadow-free cleaned mask, `regions` the boxes of large regions and
  `background` the estimated background image (or `None` before any
  frame).

Mask helpers live in `visionlab.morphology` (`to_gray`, `ellipse_kernel`,
`opening`, `closing`, `find_regions`, `Rect`).

Input and output:

- `visionlab.display.load_image(path)` reads an image file as BGR
  (raising `ImageLoadError` on failure), `draw_boxes` outlines boxes on a
  copy of an image, and `show_images` shows titled images in windows until
  they are closed.
- `visionlab.video.VideoSource` yields BGR frames from a camera index, a
  video file or any iterable of frames; it is a context manager. Reading
  cameras and video files goes through imageio and needs an imageio plugin
  that can read video.
- `visionlab.filechooser.choose_file(title)` opens a `zenity` file
  dialog and returns the chosen path or `None`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command-line tools

```
visionlab-color COMMAND [IMAGE] [options]
```

Applies one colour operation to an image and shows the original next to
the result. When `IMAGE` is omitted, a `zenity` file chooser is opened.
Commands:

- `convert`: greyscale, HSV and YUV side by side.
- `hsv`: BGR to HSV.
- `saturation [--factor F]`: saturation boost (default 1.5).
- `kmeans [-k K] [--iterations N] [--seed S]`: k-means segmentation;
  asks for K when not given.
- `grayworld`: grey-world white balance; prints the three factors.
- `gamma [--gamma G]`: gamma correction; asks for the value when not
  given.
- `vignette [--k K]`: vignetting correction; asks for `k` when not given.

```
visionlab-camera [--camera N]
```

Shows the live feed from a camera (index 0 by default). Press ESC or close
the window to quit.

```
visionlab-framediff [1|2] [--video PATH]
visionlab-gmm [1|2] [--video PATH]
```

Background subtraction on the camera (option `1`) or a video file
(option `2`, picked with the file chooser unless `--video` is given). With
no option, a menu asks for one. Each shows the frame with green boxes
around moving regions and the binary mask; `visionlab-gmm` also shows the
estimated background. Frame differencing uses the first frame as the
background, a threshold of 40 and a minimum area of 2000. Press ESC to
stop.

## Using the library

```python
from visionlab.display import load_image, show_images
from visionlab.color import apply_gamma, gray_world

image = load_image("photo.png")
balanced, factors = gray_world(image)
show_images({
    "Original": image,
    "Gamma 0.5": apply_gamma(image, 0.5),
    "Gray world": balanced,
})
```

Background subtraction on a sequence of frames:

```python
from visionlab.frame_diff import FrameDifferencer

differ = FrameDifferencer(40, 2000, 0.0)
differ.set_background(first_frame)
for frame in later_frames:
    mask = differ.process(frame)
    for box in differ.regions(mask):
        print(box.x, box.y, box.width, box.height)
```

## What it does not do

The tools only show their results on screen: nothing writes processed
images, masks or videos to disk. The file chooser needs `zenity`; without
it, pass paths on the command line.