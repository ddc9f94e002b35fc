import pytest

from AdvLinalg.config import Config, FeatureSet, load_config


def test_defaults():
    assert load_config({}) == Config(features=FeatureSet.FULL, moves_only=False)


def test_reduced_build():
    cfg = load_config({"ADVLINALG_FEATURES": " No_Alloc ", "ADVLINALG_MOVES_ONLY": "yes"})
    assert cfg.features is FeatureSet.NO_ALLOC
    assert cfg.moves_only
    assert not cfg.features.allocates


@pytest.mark.parametrize("value", ["0", "false", "off", ""])
def test_moves_only_false(value):
    assert not load_config({"ADVLINALG_MOVES_ONLY": value}).moves_only


def test_invalid_values():
    with pytest.raises(ValueError, match="ADVLINALG_FEATURES"):
        load_config({"ADVLINALG_FEATURES": "gpu"})
    with pytest.raises(ValueError, match="ADVLINALG_MOVES_ONLY"):
        load_config({"ADVLINALG_MOVES_ONLY": "maybe"})
