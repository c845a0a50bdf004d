import imageio.v3
import numpy as np
import pytest

from visionlab.video import VideoOpenError, VideoSource, main


def _frame(value, shape=(4, 5, 3)):
    return np.full(shape, value, dtype=np.uint8)


def _produce(count):
    for value in range(count):
        yield _frame(value)


def _recording_imiter(opened, frame):
    def fake_imiter(uri, **kwargs):
        opened.append(uri)
        yield frame
        yield frame

    return fake_imiter


def _failing_imiter(uri, **kwargs):
    raise OSError("no device")
    yield  # pragma: no cover


def test_frames_from_list_in_order():
    frames = [_frame(10), _frame(20), _frame(30)]
    with VideoSource(frames) as video:
        got = list(video.frames())
    assert len(got) == 3
    for expected, actual in zip(frames, got):
        assert np.array_equal(expected, actual)


def test_iteration_stops_at_empty_frame():
    frames = [_frame(1), np.zeros((0, 0, 3), dtype=np.uint8), _frame(2)]
    got = list(VideoSource(frames).frames())
    assert len(got) == 1
    assert np.array_equal(got[0], frames[0])


def test_frames_after_close_raises():
    video = VideoSource([_frame(1)])
    video.close()
    with pytest.raises(RuntimeError):
        video.frames()


def test_context_manager_closes_generator_source():
    gen = _produce(5)
    with VideoSource(gen) as video:
        first = next(video.frames())
    assert np.array_equal(first, _frame(0))
    assert next(gen, "done") == "done"


def test_missing_file_raises_open_error(tmp_path):
    with pytest.raises(VideoOpenError):
        VideoSource(tmp_path / "missing.mp4")


def test_bool_source_rejected():
    with pytest.raises(TypeError):
        VideoSource(True)


def test_non_iterable_source_rejected():
    with pytest.raises(TypeError):
        VideoSource(3.5)


def test_camera_frames_converted_to_bgr(monkeypatch):
    opened = []
    rgb = np.zeros((2, 2, 3), dtype=np.uint8)
    rgb[..., 0] = 200
    rgb[..., 2] = 7

    monkeypatch.setattr(imageio.v3, "imiter", _recording_imiter(opened, rgb))
    with VideoSource(2) as video:
        got = list(video.frames())
    assert opened == ["<video2>"]
    assert len(got) == 2
    assert np.array_equal(got[0], rgb[..., ::-1])


def test_main_reports_unavailable_camera(monkeypatch, capsys):
    monkeypatch.setattr(imageio.v3, "imiter", _failing_imiter)
    assert main(["--camera", "1"]) == 1
    assert "could not open the camera" in capsys.readouterr().err