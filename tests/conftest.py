import pytest

from kaomoji_replacer.kaomoji import DatasetStore, SearchEngine, create_engine

SAMPLE_DATA = [
    {"keyword": "happy", "kaomoji": "(^_^)", "aliases": ["joy"], "tags": ["smile", "glad"]},
    {"keyword": "cry", "kaomoji": "(T_T)", "aliases": ["sob"], "tags": ["tears"]},
    {"keyword": "angry", "kaomoji": "(╬ Ò﹏Ó)", "aliases": ["mad"], "tags": ["rage"], "category": "negative"},
]


@pytest.fixture
def store() -> DatasetStore:
    store = DatasetStore()
    store.load_from(SAMPLE_DATA)
    return store


@pytest.fixture
def search_engine(store) -> SearchEngine:
    return SearchEngine(store)


@pytest.fixture
def engine(store):
    return create_engine(store)


@pytest.fixture
def happy_engine():
    store = DatasetStore()
    store.load_from('[{"keyword": "happy", "kaomoji": "(^_^)"}]')
    return create_engine(store)
