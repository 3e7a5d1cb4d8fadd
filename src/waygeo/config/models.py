from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = Field(default=1, ge=1)  # log every n-th vertex when debug is on


class AssemblyModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    max_vertices: int = Field(default=1_000_000, gt=0)


class WaygeoModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "waygeo"
    run_id: str = "local"
    log: LogModel = Field(default_factory=LogModel)
    assembly: AssemblyModel = Field(default_factory=AssemblyModel)
