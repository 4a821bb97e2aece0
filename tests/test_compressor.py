import numpy as np
import os, sys
import pytest
from PIL import Image
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
from image_compressor import (
    ImageLoadFailure,
    ImageWriteFailure,
    compress_image,
    load_image,
    save_image,
)
from image_compressor.cli import main, parse_count
from kmeans import InvalidConfiguration

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def _write_image(path, pixels):
    array = np.array(pixels, dtype=np.uint8)
    Image.fromarray(array).save(path)
    return path


def _black_white(tmp_path):
    return _write_image(tmp_path / "bw.png", [[BLACK, BLACK], [WHITE, WHITE]])


def _read_pixels(path):
    with Image.open(path) as img:
        return np.asarray(img.convert('RGB')).reshape(-1, 3)


def test_two_clusters_preserve_black_and_white(tmp_path):
    src = _black_white(tmp_path)
    out = tmp_path / "out.png"
    palette = compress_image(src, out, 2, 10, random_state=0)

    assert sorted(map(tuple, palette.tolist())) == [(0.0, 0.0, 0.0), (255.0, 255.0, 255.0)]
    assert [tuple(p) for p in _read_pixels(out).tolist()] == [BLACK, BLACK, WHITE, WHITE]


def test_single_cluster_truncates_mean(tmp_path):
    src = _black_white(tmp_path)
    out = tmp_path / "out.png"
    palette = compress_image(src, out, 1, 1, random_state=0)

    np.testing.assert_array_equal(palette, [[127.5, 127.5, 127.5]])
    assert [tuple(p) for p in _read_pixels(out).tolist()] == [(127, 127, 127)] * 4


def test_compression_is_repeatable(tmp_path):
    rng = np.random.default_rng(1)
    src = _write_image(tmp_path / "noise.png", rng.integers(0, 256, size=(12, 9, 3)))
    out1, out2 = tmp_path / "a.png", tmp_path / "b.png"
    compress_image(src, out1, 4, 5, random_state=3)
    compress_image(src, out2, 4, 5, random_state=3)

    pixels = _read_pixels(out1)
    np.testing.assert_array_equal(pixels, _read_pixels(out2))
    assert len({tuple(p) for p in pixels.tolist()}) <= 4


def test_grayscale_keeps_one_channel(tmp_path):
    src = _write_image(tmp_path / "gray.png", [[0, 10, 200], [210, 5, 250]])
    out = tmp_path / "gray_out.png"
    palette = compress_image(src, out, 2, 5, random_state=0)
    assert palette.shape == (2, 1)
    with Image.open(out) as img:
        assert img.mode == 'L'


def test_invalid_cluster_count(tmp_path):
    src = _black_white(tmp_path)
    with pytest.raises(InvalidConfiguration):
        compress_image(src, tmp_path / "out.png", 0, 10)
    assert not (tmp_path / "out.png").exists()


def test_load_image_modes(tmp_path):
    path = tmp_path / "pal.png"
    Image.new('P', (3, 2), color=5).save(path)
    buffer, width, height, channels = load_image(path)
    assert (width, height, channels) == (3, 2, 3)
    assert len(buffer) == 18

    path = tmp_path / "rgba.png"
    Image.new('RGBA', (2, 2), color=(1, 2, 3, 4)).save(path)
    buffer, width, height, channels = load_image(path)
    assert channels == 4
    assert buffer[:4] == bytes([1, 2, 3, 4])


def test_load_failures(tmp_path):
    with pytest.raises(ImageLoadFailure):
        load_image(tmp_path / "missing.png")
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"not an image")
    with pytest.raises(ImageLoadFailure):
        load_image(bogus)


def test_save_failures(tmp_path):
    with pytest.raises(ImageWriteFailure):
        save_image(tmp_path / "out.unknownext", bytes(12), 2, 2, 3)
    with pytest.raises(ImageWriteFailure):
        save_image(tmp_path / "no_such_dir" / "out.png", bytes(12), 2, 2, 3)
    with pytest.raises(InvalidConfiguration):
        save_image(tmp_path / "out.png", bytes(20), 2, 2, 5)


def test_parse_count():
    assert parse_count("12") == 12
    assert parse_count("12abc") == 12
    assert parse_count("  -3") == -3
    assert parse_count("abc") == 0
    assert parse_count("") == 0


def test_cli_success(tmp_path, capsys):
    src = _black_white(tmp_path)
    out = tmp_path / "cli.png"
    assert main([str(src), str(out), "2", "10", "--seed", "0"]) == 0
    captured = capsys.readouterr()
    assert f"Compressed image saved to {out}" in captured.out
    assert out.exists()


def test_cli_wrong_argument_count(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([str(tmp_path / "in.png"), str(tmp_path / "out.png"), "2"])
    assert exc_info.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_cli_non_numeric_clusters(tmp_path, capsys):
    src = _black_white(tmp_path)
    assert main([str(src), str(tmp_path / "out.png"), "many", "10"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error:")
    assert "clusters" in err


def test_cli_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "nope.png"), str(tmp_path / "out.png"), "2", "3"]) == 1
    assert "Failed to load image" in capsys.readouterr().err


def test_oversized_image_is_a_load_failure(tmp_path, monkeypatch):
    src = _write_image(tmp_path / "big.png", np.zeros((40, 40, 3)))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    with pytest.raises(ImageLoadFailure):
        load_image(src)


def test_cli_reports_oversized_image(tmp_path, monkeypatch, capsys):
    src = _write_image(tmp_path / "big.png", np.zeros((40, 40, 3)))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
    assert main([str(src), str(tmp_path / "out.png"), "2", "3"]) == 1
    assert "Failed to load image" in capsys.readouterr().err
    assert not (tmp_path / "out.png").exists()
