import subprocess
from unittest import mock

from visionlab.filechooser import choose_file


def _completed(stdout, returncode=0):
    return subprocess.CompletedProcess(
        args=["zenity"], returncode=returncode, stdout=stdout, stderr=""
    )


def test_returns_selected_path_without_newline():
    with mock.patch("visionlab.filechooser.subprocess.run") as run:
        run.return_value = _completed("/tmp/picture.png\n")
        assert choose_file("Pick") == "/tmp/picture.png"


def test_command_passes_title_as_single_argument():
    with mock.patch("visionlab.filechooser.subprocess.run") as run:
        run.return_value = _completed("/tmp/a.png\n")
        selected = choose_file("Select an image please")
        command = run.call_args.args[0]
    assert selected == "/tmp/a.png"
    assert command == [
        "zenity",
        "--file-selection",
        "--title=Select an image please",
    ]


def test_cancelled_dialog_gives_none():
    with mock.patch("visionlab.filechooser.subprocess.run") as run:
        run.return_value = _completed("", returncode=1)
        assert choose_file("Pick") is None


def test_missing_program_gives_none():
    with mock.patch(
        "visionlab.filechooser.subprocess.run",
        side_effect=FileNotFoundError("zenity"),
    ):
        assert choose_file("Pick") is None


def test_path_with_spaces_is_kept():
    with mock.patch("visionlab.filechooser.subprocess.run") as run:
        run.return_value = _completed("/home/me/my photos/cat 1.jpg\r\n")
        assert choose_file() == "/home/me/my photos/cat 1.jpg"