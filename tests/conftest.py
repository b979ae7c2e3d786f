import pytest

from cartstore.repos.storage import MemoryStorage
from tests.helpers import make_product


@pytest.fixture
def products():
    return [
        make_product(1, 10, title="Blue Shirt"),
        make_product(2, 5, title="Red Mug"),
        make_product(3, 9.99, title="Shirt Pocket"),
    ]


@pytest.fixture
def storage():
    return MemoryStorage()
