"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir, monkeypatch):
    """Point user configuration at an empty directory and clear env overrides."""
    from imghash.user_config import get_user_config

    monkeypatch.setenv('IMGHASH_CONFIG_DIR', str(temp_dir / 'config'))
    for var in ('IMGHASH_DB', 'IMGHASH_MAX_DISTANCE', 'IMGHASH_HASHER'):
        monkeypatch.delenv(var, raising=False)

    config = get_user_config()
    config.reload()
    yield config
    config.reload()


def make_split_image(size=(64, 64), vertical=True):
    """Half black, half white grayscale image."""
    width, height = size
    img = Image.new('L', size, color=0)
    if vertical:
        img.paste(255, (width // 2, 0, width, height))
    else:
        img.paste(255, (0, 0, width, height // 2))
    return img


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample images for testing.

    Returns:
        dict with paths to:
        - identical1.png, identical2.png (exact duplicates)
        - red_large.png (same color as identical*, larger)
        - split.png, split_small.jpg (same pattern, different size/codec)
        - split_rotated.png (pattern turned 90 degrees)
        - corrupted.txt (not an image)
    """
    images = {}
    image_dir = temp_dir / "images"
    image_dir.mkdir()

    img1 = Image.new('RGB', (100, 100), color='red')
    path1 = image_dir / "identical1.png"
    img1.save(path1, 'PNG')
    images['identical1'] = str(path1)

    path2 = image_dir / "identical2.png"
    img1.save(path2, 'PNG')
    images['identical2'] = str(path2)

    path3 = image_dir / "red_large.png"
    Image.new('RGB', (200, 200), color='red').save(path3, 'PNG')
    images['red_large'] = str(path3)

    path4 = image_dir / "split.png"
    make_split_image((128, 128)).save(path4, 'PNG')
    images['split'] = str(path4)

    path5 = image_dir / "split_small.jpg"
    make_split_image((40, 40)).convert('RGB').save(path5, 'JPEG', quality=90)
    images['split_small'] = str(path5)

    path6 = image_dir / "split_rotated.png"
    make_split_image((128, 128), vertical=False).save(path6, 'PNG')
    images['split_rotated'] = str(path6)

    path7 = image_dir / "corrupted.txt"
    path7.write_text("not an image")
    images['corrupted'] = str(path7)

    return images


@pytest.fixture
def temp_db_file(temp_dir):
    """Path for a database file that does not exist yet."""
    return str(temp_dir / "test.imghash")


@pytest.fixture
def sample_database():
    """A small in-memory database with known fingerprints."""
    from imghash.database import Database

    db = Database(root="/photos")
    db.upsert("a.png", 100, 0x0000000000000000)
    db.upsert("b.png", 200, 0x0000000000000001)
    db.upsert("c.png", 300, 0x00000000000000FF)
    db.upsert("d.png", 400, 0xFFFFFFFFFFFFFFFF)
    db.upsert("e.png", 500, 0x0000000000000000)
    return db
