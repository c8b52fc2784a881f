"""
Constraint record schema.

A `ConstraintRecord` captures one retargetable constraint from a source rig: where
its node lives, which component type it is, the component's opaque payload, and
its target and sources as name + path references. Records are created at capture
time and only read during a build.

---
Record File Layout (HDF5):
- One group per record, named `constraint_NNNN`.
- Scalar string fields are stored as attributes on the group.
- The payload is stored verbatim as a string attribute.
- Sources are stored in a `sources` sub-group as three parallel datasets:
    - `names`   (N,) variable-length UTF-8 strings
    - `weights` (N,) float64
    - `paths`   (N,) variable-length UTF-8 strings
  Index *i* of each dataset describes source *i*; order is significant.
---
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, List, Type, get_type_hints

import h5py
import numpy as np

# Where a record's armature root came from at capture time.
#   override: a caller-supplied armature that contains the constraint's bindings
#   binding:  the top-level ancestor of the target or of a bound source
#   self:     the top-level ancestor of the constrained node itself (last resort)
ARMATURE_ROOT_ORIGINS = ("override", "binding", "self", "")


# --- Custom Exception for Schema Validation ---
class SchemaValidationError(ValueError):
    """Custom exception raised for record file schema validation errors."""

    pass


# --- Record Definition ---


@dataclass(frozen=True)
class SourceBinding:
    name: str
    weight: float
    path: str = ""

    def __post_init__(self):
        if self.weight < 0:
            raise ValueError(f"Source weight must be non-negative, got {self.weight}")


@dataclass(frozen=True)
class ConstraintRecord:
    empty_name: str
    parent_path: str
    constraint_path: str
    component_type: str
    payload: str = ""
    target_name: str = ""
    target_path: str = ""
    sources: tuple[SourceBinding, ...] = ()
    armature_root_name: str = ""
    armature_root_path: str = ""
    armature_root_origin: str = ""

    @property
    def verified_root(self) -> bool:
        """False when the armature root was only guessed from the node itself."""
        return self.armature_root_origin != "self"


# --- HDF5 Layout Definition using dataclasses ---


@dataclass
class SourcesGroup:
    names: np.ndarray = field(
        metadata={"shape": (-1,), "dtype": h5py.string_dtype()}
    )
    weights: np.ndarray = field(metadata={"shape": (-1,), "dtype": np.float64})
    paths: np.ndarray = field(
        metadata={"shape": (-1,), "dtype": h5py.string_dtype()}
    )


@dataclass
class RecordGroup:
    sources: SourcesGroup
    empty_name: str = field(metadata={"h5_type": "attr"})
    parent_path: str = field(metadata={"h5_type": "attr"})
    constraint_path: str = field(metadata={"h5_type": "attr"})
    component_type: str = field(metadata={"h5_type": "attr"})
    payload: str = field(metadata={"h5_type": "attr"})
    target_name: str = field(metadata={"h5_type": "attr"})
    target_path: str = field(metadata={"h5_type": "attr"})
    armature_root_name: str = field(metadata={"h5_type": "attr"})
    armature_root_path: str = field(metadata={"h5_type": "attr"})
    armature_root_origin: str = field(metadata={"h5_type": "attr"})


def _report(msg: str, strict: bool) -> None:
    if strict:
        raise SchemaValidationError(msg)
    logging.warning(msg)


def _validate_unexpected_members(
    h5_group: h5py.Group, schema_fields: dict, path: str, strict: bool
) -> None:
    """Check for unexpected members in the HDF5 group."""
    for member_name in h5_group.keys():
        if member_name not in schema_fields:
            _report(
                f"Validation: Unexpected group/dataset '{path}/{member_name}' found.",
                strict,
            )


def _validate_dataset(
    member: h5py.Dataset, f: Any, current_path: str, strict: bool
) -> None:
    """Validate dataset rank and dtype."""
    expected_shape = f.metadata.get("shape")
    if expected_shape is not None and len(member.shape) != len(expected_shape):
        _report(
            f"Validation: Mismatched rank for dataset '{current_path}'. "
            f"Got rank {len(member.shape)}, expected rank {len(expected_shape)}",
            strict,
        )

    if f.metadata.get("dtype") is None:
        return
    expected_dtype = np.dtype(f.metadata["dtype"])
    if h5py.check_string_dtype(expected_dtype) is not None:
        if h5py.check_string_dtype(member.dtype) is None:
            _report(
                f"Validation: Expected string dataset at '{current_path}', "
                f"got {member.dtype}",
                strict,
            )
    elif member.dtype != expected_dtype:
        _report(
            f"Validation: Mismatched dtype for dataset '{current_path}'. "
            f"Got {member.dtype}, expected {expected_dtype}",
            strict,
        )


def validate_hdf5_with_schema(
    h5_group: h5py.Group,
    schema_cls: Type[Any],
    path: str = "",
    strict: bool = False,
) -> None:
    """
    Recursively validates an HDF5 group against a dataclass schema.

    Args:
        h5_group (h5py.Group): The HDF5 group to validate.
        schema_cls (Type[Any]): The dataclass schema to validate against.
        path (str): The current path within the HDF5 file (for logging).
        strict (bool): If True, raises SchemaValidationError on failure.
                       Otherwise, logs a warning.
    """
    schema_fields = {f.name: f for f in fields(schema_cls)}
    type_hints = get_type_hints(schema_cls)

    _validate_unexpected_members(h5_group, schema_fields, path, strict)

    for f in fields(schema_cls):
        current_path = f"{path}/{f.name}"

        if f.metadata.get("h5_type") == "attr":
            if f.name not in h5_group.attrs:
                _report(
                    f"Validation: Missing attribute '{f.name}' in group '{path}'",
                    strict,
                )
            continue

        if f.name not in h5_group:
            _report(
                f"Validation: Missing required group/dataset '{current_path}'", strict
            )
            continue

        member = h5_group[f.name]
        field_type = type_hints.get(f.name)
        if isinstance(field_type, type) and hasattr(field_type, "__dataclass_fields__"):
            if isinstance(member, h5py.Group):
                validate_hdf5_with_schema(member, field_type, current_path, strict)
            else:
                _report(f"Validation: Expected group at '{current_path}'", strict)
        elif isinstance(member, h5py.Dataset):
            _validate_dataset(member, f, current_path, strict)
        else:
            _report(f"Validation: Expected dataset at '{current_path}'", strict)


def validate_record_values(record: ConstraintRecord) -> List[str]:
    """Returns human-readable problems with a record's values, if any."""
    problems = []
    if not record.empty_name:
        problems.append("empty_name is empty")
    if not record.component_type:
        problems.append("component_type is empty")
    if record.armature_root_origin not in ARMATURE_ROOT_ORIGINS:
        problems.append(f"unknown armature_root_origin '{record.armature_root_origin}'")
    return problems


def validate_record(record: ConstraintRecord, path: str = "", strict: bool = False) -> None:
    """Reports value-level problems of a record the way schema problems are reported."""
    for problem in validate_record_values(record):
        _report(f"Validation: {problem} in group '{path}'", strict)
