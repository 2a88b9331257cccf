from pathlib import Path

import pytest

from campus2prolog.repos.loader import FacilityLoader
from campus2prolog.repos.memory import Repositories

FIXTURES = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def campus_yaml():
    return FIXTURES / "campus.yaml"


@pytest.fixture
def facility(campus_yaml):
    return FacilityLoader(campus_yaml).load()


@pytest.fixture
def repos(facility):
    return Repositories.from_facility(facility)
