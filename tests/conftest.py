import pytest

from AdvLinalg import config
from AdvLinalg.config import Config, FeatureSet
from AdvLinalg.dispatch import Kind
from AdvLinalg.vectors import MutVector, Vector


@pytest.fixture
def no_alloc(monkeypatch):
    monkeypatch.setattr(config, "CONFIG", Config(features=FeatureSet.NO_ALLOC))


@pytest.fixture
def moves_only(monkeypatch):
    monkeypatch.setattr(config, "CONFIG", Config(moves_only=True))


def make(kind, values):
    """A vector of the given kind holding ``values``."""
    if kind is Kind.OWNED:
        return Vector(values)
    elif kind is Kind.MUT_OWNED:
        return MutVector(values)
    elif kind is Kind.BORROWED:
        return Vector(values).slice()
    else:
        return MutVector(values).slice_mut()
