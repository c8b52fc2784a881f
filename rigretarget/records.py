"""
HDF5 persistence for captured constraint records.

See `rigretarget.schema` for the on-disk layout.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import h5py
import numpy as np

from rigretarget.schema import (
    ConstraintRecord,
    RecordGroup,
    SchemaValidationError,
    SourceBinding,
    validate_hdf5_with_schema,
    validate_record,
)

logger = logging.getLogger(__name__)

RECORD_PREFIX = "constraint_"

_ATTR_FIELDS = (
    "empty_name",
    "parent_path",
    "constraint_path",
    "component_type",
    "payload",
    "target_name",
    "target_path",
    "armature_root_name",
    "armature_root_path",
    "armature_root_origin",
)


def _record_index(name: str) -> int:
    return int(name[len(RECORD_PREFIX) :])


def _record_group_names(f: h5py.File) -> List[str]:
    """Record groups in index order; the suffix grows past four digits."""
    names = [
        name
        for name, item in f.items()
        if name.startswith(RECORD_PREFIX)
        and name[len(RECORD_PREFIX) :].isdigit()
        and isinstance(item, h5py.Group)
    ]
    return sorted(names, key=_record_index)


def _attr_str(value) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def write_records(
    path: Union[str, Path], records: List[ConstraintRecord]
) -> None:
    """
    Writes records to an HDF5 file, replacing any existing file.

    Args:
        path: Destination file.
        records: Records in capture order. Group index follows list order.
    """
    str_dtype = h5py.string_dtype()
    with h5py.File(path, "w") as f:
        for i, record in enumerate(records):
            group = f.create_group(f"{RECORD_PREFIX}{i:04d}")
            for name in _ATTR_FIELDS:
                group.attrs[name] = getattr(record, name)

            sources = group.create_group("sources")
            sources.create_dataset(
                "names",
                data=np.array([s.name for s in record.sources], dtype=object),
                dtype=str_dtype,
            )
            sources.create_dataset(
                "weights",
                data=np.array([s.weight for s in record.sources], dtype=np.float64),
            )
            sources.create_dataset(
                "paths",
                data=np.array([s.path for s in record.sources], dtype=object),
                dtype=str_dtype,
            )
    logger.info(f"Wrote {len(records)} constraint records to {path}")


def _read_group(group: h5py.Group) -> ConstraintRecord:
    values = {name: _attr_str(group.attrs.get(name, "")) for name in _ATTR_FIELDS}

    sources = []
    if "sources" in group:
        src = group["sources"]
        names = list(src["names"].asstr()[:]) if "names" in src else []
        weights = np.asarray(src["weights"][:], dtype=np.float64) if "weights" in src else []
        paths = list(src["paths"].asstr()[:]) if "paths" in src else []
        if not (len(names) == len(weights) == len(paths)):
            logger.warning(
                f"Source datasets in '{group.name}' differ in length "
                f"({len(names)}, {len(weights)}, {len(paths)}); truncating."
            )
        for name, weight, source_path in zip(names, weights, paths):
            try:
                binding = SourceBinding(name=name, weight=float(weight), path=source_path)
            except ValueError as e:
                raise SchemaValidationError(f"Invalid source in '{group.name}': {e}") from e
            sources.append(binding)

    return ConstraintRecord(sources=tuple(sources), **values)


def read_records(path: Union[str, Path]) -> List[ConstraintRecord]:
    """Reads every `constraint_NNNN` group of a record file, in index order."""
    with h5py.File(path, "r") as f:
        records = [_read_group(f[name]) for name in _record_group_names(f)]
    logger.info(f"Read {len(records)} constraint records from {path}")
    return records


def validate_records_file(path: Union[str, Path], strict: bool = False) -> int:
    """
    Validates every record group in a file against the record schema.

    Layout problems are checked first, then the values of the decoded record
    (empty names or types, unknown root origins, negative weights).

    Args:
        path: The record file.
        strict: Raise `SchemaValidationError` on the first problem instead of
                logging warnings.

    Returns:
        The number of record groups checked.
    """
    with h5py.File(path, "r") as f:
        names = _record_group_names(f)
        for name in names:
            logger.info(f"--- Validating record: {name} ---")
            validate_hdf5_with_schema(f[name], RecordGroup, path=name, strict=strict)
            try:
                record = _read_group(f[name])
            except (SchemaValidationError, TypeError) as e:
                if strict:
                    raise SchemaValidationError(str(e)) from e
                logger.warning(f"Validation: could not decode '{name}': {e}")
                continue
            validate_record(record, path=name, strict=strict)
    return len(names)
