# tests/app/test_config_models.py
import pytest
from pydantic import ValidationError

from waygeo.config.models import AssemblyModel, LogModel, WaygeoModel


def test_defaults():
    m = WaygeoModel()
    assert m.log.level == "INFO" and not m.log.debug and m.log.sample_every == 1
    assert m.assembly.max_vertices == 1_000_000


def test_validate_from_mapping():
    m = WaygeoModel.model_validate({"name": "x", "log": {"level": "ERROR"}})
    assert m.name == "x"
    assert m.log.level == "ERROR"


@pytest.mark.parametrize(
    "model, data",
    [
        (LogModel, {"level": "TRACE"}),
        (LogModel, {"sample_every": 0}),
        (AssemblyModel, {"max_vertices": 0}),
        (WaygeoModel, {"extra": 1}),
    ],
)
def test_invalid(model, data):
    with pytest.raises(ValidationError):
        model.model_validate(data)
