"""Snapshot ingestion: raw analyzer records -> unresolved domain records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from pydantic import TypeAdapter, ValidationError

from modgraph.exceptions import ProtocolError
from modgraph.models import Import, ModuleUnit, ModuleUnitKind, TranslationUnit
from modgraph.protocol import (
    PublishModulesInfoParams,
    RawModule,
    RawTranslationUnit,
)

_RAW_MODULES = TypeAdapter(list[RawModule])
_RAW_TRANSLATION_UNITS = TypeAdapter(list[RawTranslationUnit])


@dataclass(frozen=True)
class IngestedSnapshot:
    """Typed snapshot records with imports named but not yet resolved."""
    module_names: tuple[str, ...]
    translation_units: tuple[TranslationUnit, ...]


def join_name(segments: Iterable[str]) -> str:
    return ".".join(segments)


def classify_kind(is_interface: bool, has_partition: bool) -> ModuleUnitKind:
    if is_interface:
        return ModuleUnitKind.INTERFACE_PARTITION if has_partition else ModuleUnitKind.PRIMARY_INTERFACE
    return ModuleUnitKind.IMPLEMENTATION_PARTITION if has_partition else ModuleUnitKind.IMPLEMENTATION


def parse_notification(payload: Mapping[str, Any] | PublishModulesInfoParams) -> PublishModulesInfoParams:
    """Validate a ``publishModulesInfo`` payload against the wire schema."""
    if isinstance(payload, PublishModulesInfoParams):
        return payload
    try:
        return PublishModulesInfoParams.model_validate(payload)
    except ValidationError as e:
        raise ProtocolError(
            f"Malformed modules notification: {e.error_count()} error(s)",
            details={"errors": _summarize(e)},
        ) from e


def ingest_snapshot(
    modules: Iterable[RawModule | Mapping[str, Any]],
    translation_units: Iterable[RawTranslationUnit | Mapping[str, Any]],
) -> IngestedSnapshot:
    """Convert raw module and translation-unit records into domain records.

    Raw dicts are validated first; any schema violation aborts the whole
    snapshot with ``ProtocolError``.
    """
    raw_modules = _validate(_RAW_MODULES, modules, "modules")
    raw_units = _validate(_RAW_TRANSLATION_UNITS, translation_units, "translationUnits")

    return IngestedSnapshot(
        module_names=tuple(join_name(m.name) for m in raw_modules),
        translation_units=tuple(
            _convert_translation_unit(index, raw) for index, raw in enumerate(raw_units)
        ),
    )


def _convert_translation_unit(index: int, raw: RawTranslationUnit) -> TranslationUnit:
    imports = tuple(
        Import(name=join_name(imp.data.name), is_partition=imp.data.is_partition)
        for imp in raw.result.imports
    )
    if not raw.result.module_unit.is_some:
        return TranslationUnit(index=index, uri=raw.identifier, imports=imports)

    info = raw.result.module_unit.value
    partition = info.partition_name
    return ModuleUnit(
        index=index,
        uri=raw.identifier,
        imports=imports,
        module_name=join_name(info.module_name),
        kind=classify_kind(info.is_interface, partition.is_some),
        partition_name=join_name(partition.value) if partition.is_some else None,
    )


def _validate(adapter: TypeAdapter, records: Iterable, field: str) -> list:
    try:
        return adapter.validate_python(list(records))
    except ValidationError as e:
        raise ProtocolError(
            f"Malformed {field} records: {e.error_count()} error(s)",
            details={"field": field, "errors": _summarize(e)},
        ) from e


def _summarize(error: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]
