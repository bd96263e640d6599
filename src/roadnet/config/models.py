import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from roadnet.domain.mechanics.mechanics_builder import DRIVABLE, NON_DRIVABLE, RoadPolicy


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False


# ----------------- GRAPH SOURCES ---------------------


class GraphByPath(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["path"] = "path"
    file: str
    fmt: Literal["osm_xml", "pickle"] = "osm_xml"
    must_exist: bool = True

    @field_validator("file")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


class GraphByName(BaseModel):
    model_config = ConfigDict(extra="forbid")
    by: Literal["name"] = "name"
    name: str


GraphRef = Annotated[GraphByPath | GraphByName, Field(discriminator="by")]


# ----------------- ROAD POLICY ---------------------


class RoadPolicyModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    drivable: list[str] = Field(default_factory=lambda: sorted(DRIVABLE))
    non_drivable: list[str] = Field(default_factory=lambda: sorted(NON_DRIVABLE))
    access_keys: list[str] = Field(default_factory=lambda: ["access", "motor_vehicle"])
    oneway_forward: list[str] = Field(default_factory=lambda: ["yes", "true", "1"])
    oneway_reverse: list[str] = Field(default_factory=lambda: ["-1"])
    roundabout: list[str] = Field(default_factory=lambda: ["roundabout"])

    @model_validator(mode="after")
    def _disjoint(self):
        both = set(self.drivable) & set(self.non_drivable)
        if both:
            raise ValueError(f"categories both drivable and non-drivable: {sorted(both)}")
        clash = set(self.oneway_forward) & set(self.oneway_reverse)
        if clash:
            raise ValueError(f"oneway values both forward and reverse: {sorted(clash)}")
        return self

    def to_policy(self) -> RoadPolicy:
        return RoadPolicy(
            drivable=frozenset(self.drivable),
            non_drivable=frozenset(self.non_drivable),
            access_keys=tuple(self.access_keys),
            oneway_forward=frozenset(self.oneway_forward),
            oneway_reverse=frozenset(self.oneway_reverse),
            roundabout=frozenset(self.roundabout),
        )


# ----------------- SEARCH ---------------------


class SearchModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    stale_epsilon: float = 1e-9
    indirect_ratio: float = 1.3  # efficiency above this is flagged, not rejected

    @field_validator("stale_epsilon")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @field_validator("indirect_ratio")
    @classmethod
    def _above_one(cls, v: float) -> float:
        if v <= 1.0:
            raise ValueError("indirect_ratio must be > 1.0")
        return v


# ------------------ REPORTS -----------------------------


class ReportStdoutModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    sink: Literal["stdout"] = "stdout"


class ReportMemoryModel(BaseModel):
    """Test sink; keeps reports in a list."""

    model_config = ConfigDict(extra="forbid")
    sink: Literal["memory"] = "memory"


class ReportFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    sink: Literal["file"] = "file"
    path: str

    @field_validator("path")
    @classmethod
    def _expand(cls, v: str) -> str:
        return os.path.expandvars(os.path.expanduser(v))


ReportUnion = Annotated[
    ReportStdoutModel | ReportMemoryModel | ReportFileModel, Field(discriminator="sink")
]


# ------------------------------------------------------------------


class RoutingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "roadnet"
    run_id: str = "local"
    graph: GraphRef
    log: LogModel = LogModel()
    policy: RoadPolicyModel = Field(default_factory=RoadPolicyModel)
    search: SearchModel = Field(default_factory=SearchModel)
    report: ReportUnion = Field(default_factory=ReportStdoutModel)
