import io

import matplotlib

matplotlib.use("Agg")

import imageio.v3 as iio
import matplotlib.pyplot as plt
import numpy as np
import pytest

from visionlab import color
from visionlab.color_cli import build_parser, main


@pytest.fixture
def rgb():
    return np.random.default_rng(3).integers(0, 256, size=(6, 8, 3), dtype=np.uint8)


@pytest.fixture
def image_path(tmp_path, rgb):
    path = tmp_path / "img.png"
    iio.imwrite(path, rgb)
    return str(path)


@pytest.fixture
def bgr(rgb):
    return np.ascontiguousarray(rgb[..., ::-1])


@pytest.fixture
def shown(monkeypatch):
    plt.close("all")
    captured = {}

    def fake_show(*args, **kwargs):
        for num in plt.get_fignums():
            fig = plt.figure(num)
            captured[fig.get_label()] = np.asarray(
                fig.axes[0].images[0].get_array()
            )

    monkeypatch.setattr(plt, "show", fake_show)
    return captured


def test_parser_defaults():
    parser = build_parser()
    assert parser.parse_args(["saturation", "a.png"]).factor == 1.5
    args = parser.parse_args(["kmeans", "a.png"])
    assert args.iterations == 10
    assert args.clusters is None


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_hsv_command(image_path, bgr, shown):
    assert main(["hsv", image_path]) == 0
    assert set(shown) == {"Original (BGR)", "HSV"}
    assert np.array_equal(shown["HSV"], color.bgr_to_hsv(bgr)[..., ::-1])
    assert np.array_equal(shown["Original (BGR)"], bgr[..., ::-1])


def test_convert_command(image_path, bgr, shown):
    assert main(["convert", image_path]) == 0
    assert set(shown) == {"Original", "Grayscale", "HSV", "YUV"}
    assert np.array_equal(shown["Grayscale"], color.bgr_to_gray(bgr))
    assert np.array_equal(shown["YUV"], color.bgr_to_yuv(bgr)[..., ::-1])


def test_saturation_command(image_path, bgr, shown):
    assert main(["saturation", image_path, "--factor", "2"]) == 0
    expected = color.boost_saturation(bgr, 2.0)
    assert np.array_equal(shown["Saturation boosted"], expected[..., ::-1])


def test_kmeans_command_with_seed(image_path, bgr, shown):
    assert main(["kmeans", image_path, "--clusters", "3", "--seed", "1"]) == 0
    expected = color.kmeans_segment(bgr, 3, 10, 1)
    assert np.array_equal(shown["K-means segmentation"], expected[..., ::-1])


def test_kmeans_rejects_zero_clusters(image_path, shown, capsys):
    assert main(["kmeans", image_path, "--clusters", "0"]) == 1
    assert shown == {}


def test_grayworld_prints_factors(image_path, bgr, shown, capsys):
    assert main(["grayworld", image_path]) == 0
    out = capsys.readouterr().out
    corrected, factors = color.gray_world(bgr)
    assert f"Factor B: {factors[0]:g}" in out
    assert f"Factor R: {factors[2]:g}" in out
    assert np.array_equal(shown["Gray world white balance"], corrected[..., ::-1])


def test_gamma_prompts_for_value(image_path, bgr, shown, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("2\n"))
    assert main(["gamma", image_path]) == 0
    expected = color.apply_gamma(bgr, 2.0)
    assert np.array_equal(shown["Gamma correction"], expected[..., ::-1])


def test_gamma_must_be_positive(image_path, shown, capsys):
    assert main(["gamma", image_path, "--gamma", "0"]) == 1
    assert "Gamma must be greater than 0." in capsys.readouterr().err
    assert shown == {}


def test_gamma_invalid_input(image_path, shown, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("abc\n"))
    assert main(["gamma", image_path]) == 1
    assert shown == {}


def test_vignette_prompts_for_k(image_path, bgr, shown, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("0.5\n"))
    assert main(["vignette", image_path]) == 0
    expected = color.correct_vignette(bgr, 0.5)
    assert np.array_equal(shown["Vignette correction"], expected[..., ::-1])


def test_unreadable_image_fails(tmp_path, shown, capsys):
    assert main(["hsv", str(tmp_path / "missing.png")]) == 1
    assert "Error loading the image." in capsys.readouterr().err
    assert shown == {}