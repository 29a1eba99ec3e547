"""Wire schema for analyzer notifications.

The analyzer serializes optional values as tagged records: ``{"variant": 0,
"value": ...}`` when present and ``{"variant": 1}`` when absent. Names arrive
as lists of segments (``["std", "io"]``).
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    model_validator,
)

VARIANT_SOME = 0
VARIANT_NONE = 1

PUBLISH_MODULES_INFO = "cppModulesAnalyser/publishModulesInfo"
ENUMERATE_WORKSPACE_FOLDER = "cppModulesAnalyser/enumerateWorkspaceFolderContents"


def _check_segments(segments: list[str]) -> list[str]:
    if not segments:
        raise ValueError("name has no segments")
    for segment in segments:
        if not segment or segment != segment.strip():
            raise ValueError(f"malformed name segment {segment!r}")
    return segments


NameSegments = Annotated[list[StrictStr], AfterValidator(_check_segments)]


class WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class _Optional(WireModel):
    """Tagged optional; subclasses declare the ``value`` type."""
    variant: StrictInt

    @model_validator(mode="after")
    def _check_variant(self):
        value = getattr(self, "value", None)
        if self.variant == VARIANT_SOME:
            if value is None:
                raise ValueError("variant 0 requires a value")
        elif self.variant == VARIANT_NONE:
            if value is not None:
                raise ValueError("variant 1 must not carry a value")
        else:
            raise ValueError(f"unknown variant {self.variant}")
        return self

    @property
    def is_some(self) -> bool:
        return self.variant == VARIANT_SOME


class RawPartitionName(_Optional):
    value: NameSegments | None = None


class RawModuleUnit(WireModel):
    module_name: NameSegments
    is_interface: StrictBool
    partition_name: RawPartitionName


class RawModuleUnitField(_Optional):
    value: RawModuleUnit | None = None


class RawImportData(WireModel):
    name: NameSegments
    is_partition: StrictBool


class RawImport(WireModel):
    data: RawImportData


class RawTranslationUnitResult(WireModel):
    module_unit: RawModuleUnitField
    imports: list[RawImport] = Field(default_factory=list)


class RawTranslationUnit(WireModel):
    identifier: StrictStr = Field(min_length=1)
    result: RawTranslationUnitResult


class RawModule(WireModel):
    name: NameSegments


class PublishModulesInfoParams(WireModel):
    """Payload of the ``publishModulesInfo`` notification."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    event: Literal["update", "pending"]
    modules: list[RawModule] | None = None
    translation_units: list[RawTranslationUnit] | None = Field(
        default=None, alias="translationUnits",
    )

    @property
    def has_data(self) -> bool:
        return self.event == "update" and self.modules is not None
