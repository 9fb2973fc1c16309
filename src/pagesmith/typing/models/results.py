"""Operation result and progress models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pagesmith.typing.models.io import NamedOutput
from pagesmith.typing.models.raster import PageFailure


class ProgressUpdate(BaseModel):
    """Progress emitted between work units."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    units_completed: int = Field(ge=0)
    units_total: int = Field(ge=0)

    @property
    def fraction(self) -> float:
        """Completed share in ``[0, 1]``."""
        if self.units_total == 0:
            return 1.0
        return self.units_completed / self.units_total


class SplitFailure(BaseModel):
    """A split spec that produced no output."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    output_name: str
    message: str


class SplitResult(BaseModel):
    """Outputs of a split, in spec order, plus failed specs."""

    model_config = ConfigDict(extra="forbid")

    outputs: list[NamedOutput] = Field(default_factory=list)
    failures: list[SplitFailure] = Field(default_factory=list)


class RasterExport(BaseModel):
    """Named page images of a document, plus pages that failed."""

    model_config = ConfigDict(extra="forbid")

    images: list[NamedOutput] = Field(default_factory=list)
    failures: list[PageFailure] = Field(default_factory=list)
