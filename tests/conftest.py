import pytest

from database import CalculatorStore
from models import get_session


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'calculator.db'}"


@pytest.fixture
def store(db_url):
    session = get_session(db_url)
    yield CalculatorStore(session)
    session.close()
