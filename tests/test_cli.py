import os

import numpy as np
import pytest
from PIL import Image

from tests.helpers import solid, write_hdr
from tocubemap.cli import build_parser, main, options_from_args
from tocubemap.codec import OutputFormat
from tocubemap.sampler import Interpolation

FACE_NAMES = ('front', 'back', 'left', 'right', 'top', 'bottom')


def run_cli(*argv):
    with pytest.raises(SystemExit) as excinfo:
        main(list(argv))
    return excinfo.value.code


def test_defaults():
    args = build_parser().parse_args(['in.png', 'out'])
    assert args.format is OutputFormat.PNG
    assert args.interpolation is Interpolation.LINEAR
    assert args.size == 512
    assert args.rotate is False
    assert args.tone_mapping is False
    assert args.exposure == 1.0
    assert args.wrap is False
    options = options_from_args(args)
    assert options.size == 512 and not options.rotate_for_z_up


def test_short_flags():
    args = build_parser().parse_args(
        ['-f', 'webp', '-i', 'nearest', '-s', '64', '-r', '-t', '-e', '2.5', 'a', 'b'])
    assert args.format is OutputFormat.WEBP
    assert args.interpolation is Interpolation.NEAREST
    assert args.size == 64
    assert args.rotate and args.tone_mapping
    assert args.exposure == 2.5


@pytest.mark.parametrize('argv', [
    ['-s', '0', 'a', 'b'], ['-s', 'big', 'a', 'b'], ['-f', 'gif', 'a', 'b'],
    ['-i', 'cubic', 'a', 'b'], ['-e', '0', 'a', 'b'], ['only-input'], ['-j', '0', 'a', 'b'],
])
def test_bad_arguments_exit_2(argv, capsys):
    assert run_cli(*argv) == 2


def test_writes_six_png_faces(write_image, tmp_path, capsys):
    src = write_image(solid(8, 4, (255, 0, 0, 255)))
    out_dir = tmp_path / 'cube'
    assert run_cli(src, str(out_dir), '-s', '4') == 0
    assert sorted(os.listdir(out_dir)) == sorted(f'{n}.png' for n in FACE_NAMES)
    with Image.open(out_dir / 'front.png') as img:
        assert img.size == (4, 4)
        assert np.all(np.array(img) == [255, 0, 0, 255])
    stdout = capsys.readouterr().out
    assert 'Convert:' in stdout and 'Save:' in stdout
    assert 'Rotate:' not in stdout


def test_jpeg_output_has_no_alpha(write_image, tmp_path, capsys):
    src = write_image(solid(8, 4, (0, 0, 255, 255)))
    out_dir = tmp_path / 'cube'
    assert run_cli('-f', 'jpg', '-s', '8', src, str(out_dir)) == 0
    assert sorted(os.listdir(out_dir)) == sorted(f'{n}.jpg' for n in FACE_NAMES)
    with Image.open(out_dir / 'top.jpg') as img:
        assert img.mode == 'RGB'


def test_rotate_flag_reports_stage(write_image, tmp_path, capsys):
    src = write_image(solid(8, 4, (90, 90, 90, 255)))
    assert run_cli('-r', '-s', '4', src, str(tmp_path / 'cube')) == 0
    assert 'Rotate:' in capsys.readouterr().out
    with Image.open(tmp_path / 'cube' / 'back.png') as img:
        assert np.all(np.array(img) == [90, 90, 90, 255])


def test_tone_mapping_hdr_input(tmp_path, capsys):
    src = write_hdr(tmp_path / 'sky.hdr', np.ones((2, 4, 3), dtype=np.float32))
    out_dir = tmp_path / 'cube'
    assert run_cli('-t', '-e', '3', '-s', '2', src, str(out_dir)) == 0
    with Image.open(out_dir / 'left.png') as img:
        assert np.all(np.array(img) == [191, 191, 191, 255])


def test_wrong_aspect_ratio_exits_without_output(write_image, tmp_path, capsys):
    src = write_image(solid(6, 4, (1, 2, 3, 255)))
    out_dir = tmp_path / 'cube'
    assert run_cli(src, str(out_dir)) == 1
    assert 'exactly 2 times' in capsys.readouterr().err
    assert not out_dir.exists()


def test_missing_input(tmp_path, capsys):
    assert run_cli(str(tmp_path / 'missing.png'), str(tmp_path / 'cube')) == 1
    assert 'ERROR: file not found' in capsys.readouterr().err
    assert not (tmp_path / 'cube').exists()


def test_undecodable_input(tmp_path, capsys):
    src = tmp_path / 'fake.jpg'
    src.write_bytes(b'\x00' * 64)
    assert run_cli(str(src), str(tmp_path / 'cube')) == 1
    assert 'ERROR:' in capsys.readouterr().err


def test_output_dir_failure(write_image, tmp_path, capsys):
    src = write_image(solid(8, 4, (1, 2, 3, 255)))
    blocker = tmp_path / 'blocker'
    blocker.write_text('x')
    assert run_cli('-s', '2', src, str(blocker / 'cube')) == 1
    assert 'cannot create output directory' in capsys.readouterr().err


def test_wrap_and_jobs_flags_parse():
    args = build_parser().parse_args(['-w', '-j', '3', 'a', 'b'])
    assert args.wrap is True
    assert args.jobs == 3
    options = options_from_args(args)
    assert options.wrap is True
    assert options.workers == 3


def back_centre_column(write_image, out_dir, *flags):
    # left half red, right half blue
    src = solid(8, 4, (255, 0, 0, 255))
    src[:, 4:] = (0, 0, 255, 255)
    path = write_image(src)
    assert run_cli('-i', 'nearest', '-s', '2', *flags, path, str(out_dir)) == 0
    with Image.open(out_dir / 'back.png') as img:
        return np.array(img)[:, 1].tolist()


def test_wrap_flag_samples_across_the_seam(write_image, tmp_path, capsys):
    assert back_centre_column(write_image, tmp_path / 'clamped') == [[0, 0, 255, 255]] * 2
    assert back_centre_column(write_image, tmp_path / 'wrapped', '-w') == [[255, 0, 0, 255]] * 2


def test_jobs_flag_gives_same_faces(write_image, tmp_path, capsys):
    rng = np.random.default_rng(4)
    path = write_image(rng.integers(0, 256, size=(16, 32, 4), dtype=np.uint8))
    assert run_cli('-j', '1', '-s', '8', path, str(tmp_path / 'one')) == 0
    assert run_cli('--jobs', '6', '-s', '8', path, str(tmp_path / 'six')) == 0
    for name in FACE_NAMES:
        with Image.open(tmp_path / 'one' / f'{name}.png') as a, \
                Image.open(tmp_path / 'six' / f'{name}.png') as b:
            assert np.array_equal(np.array(a), np.array(b))
