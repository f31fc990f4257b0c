from pathlib import Path

import pytest

from songsync.catalog import SongCatalog
from songsync.stores.directory import DirectorySongStore

SONGS_DIR = Path(__file__).parent / "fixtures" / "songs"


@pytest.fixture
def songs_dir() -> Path:
    return SONGS_DIR


@pytest.fixture
def catalog() -> SongCatalog:
    return SongCatalog(DirectorySongStore(SONGS_DIR))
