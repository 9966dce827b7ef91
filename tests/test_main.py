"""
Tests for loading the host pipeline from an import path.
"""
import pytest

from fakes import FakePipeline
from hackcomplete.errors import HackCompleteError
from hackcomplete.main import load_pipeline


def test_load_pipeline():
    """Test that a factory path builds the pipeline."""
    pipeline = load_pipeline("fakes:make_pipeline")

    assert isinstance(pipeline, FakePipeline)
    assert pipeline.hooks.hook_count() == 0


@pytest.mark.parametrize("factory_path", ["fakes", "fakes:", ":make_pipeline"])
def test_malformed_path(factory_path):
    """Test that paths without module and factory are rejected."""
    with pytest.raises(HackCompleteError, match="module:factory"):
        load_pipeline(factory_path)


@pytest.mark.parametrize(
    "factory_path", ["no_such_module_xyz:make", "fakes:no_such_factory"]
)
def test_unknown_factory(factory_path):
    """Test that missing modules or attributes are reported."""
    with pytest.raises(HackCompleteError, match="Cannot load"):
        load_pipeline(factory_path)


def test_factory_must_return_pipeline():
    """Test that factories returning something else are rejected."""
    with pytest.raises(HackCompleteError, match="not a TypecheckPipeline"):
        load_pipeline("fakes:make_not_a_pipeline")
