import pytest
from PIL import Image


@pytest.fixture
def write_image(tmp_path):
    def _write(pixels, name='pano.png'):
        path = tmp_path / name
        Image.fromarray(pixels).save(path)
        return str(path)
    return _write
