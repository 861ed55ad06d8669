"""
AAMVA Data Models for Containers, Subfiles and Selection Requests.

This module defines the Pydantic models produced by decoding an AAMVA
barcode payload, and the tagged union of field selection requests.
"""

from __future__ import annotations

from typing import Annotated, Any, Iterable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .component_index import ComponentIndexCodec
from .types import (
    MANDATORY_FIELDS,
    ConflictingSelectorError,
    InvalidSelectorError,
    SelectorKind,
    SubfileType,
)


class AAMVAEntry(BaseModel):
    """Directory entry describing one subfile's nominal location."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Subfile designator (e.g. DL)")
    offset: int = Field(..., description="Nominal subfile offset")
    length: int = Field(..., description="Nominal subfile length")


class AAMVASubfile(BaseModel):
    """A subfile with its payload tokenized into element code/value pairs."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Subfile designator")
    data: dict[str, str] = Field(default_factory=dict, description="Element code to value")


class AAMVAContainer(BaseModel):
    """Fully decoded AAMVA barcode container."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    compliance: str = Field(..., description="Compliance indicator")
    element_separator: str = Field(..., alias="elementSeparator")
    record_separator: str = Field(..., alias="recordSeparator")
    segment_terminator: str = Field(..., alias="segmentTerminator")
    file_type: str = Field(..., alias="fileType")
    issuer_identification_number: str = Field(..., alias="issuerIdentificationNumber")
    aamva_version_number: str = Field(..., alias="aamvaVersionNumber")
    jurisdiction_version_number: str = Field(..., alias="jurisdictionVersionNumber")
    number_of_entries: int = Field(..., alias="numberOfEntries")
    entries: list[AAMVAEntry] = Field(default_factory=list)
    subfiles: list[AAMVASubfile] = Field(default_factory=list)

    def subfile(self, subfile_type: str) -> AAMVASubfile | None:
        """Return the first subfile of the given type."""
        for subfile in self.subfiles:
            if subfile.type == subfile_type:
                return subfile
        return None

    def identity_subfile(
        self, types: Iterable[str] = (SubfileType.DRIVER_LICENSE.value, SubfileType.ID_CARD.value)
    ) -> AAMVASubfile | None:
        """Return the first subfile, in container order, whose type is in ``types``."""
        wanted = set(types)
        for subfile in self.subfiles:
            if subfile.type in wanted:
                return subfile
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase dictionary layout of the container."""
        return self.model_dump(by_alias=True)


class AllFieldsSelector(BaseModel):
    """Keep every element present in the subfile."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SelectorKind.ALL] = SelectorKind.ALL

    def keeps(self, code: str) -> bool:
        return True


class FieldListSelector(BaseModel):
    """Keep an explicit set of element codes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SelectorKind.FIELDS] = SelectorKind.FIELDS
    fields: frozenset[str]

    def keeps(self, code: str) -> bool:
        return code in self.fields


class MandatorySelector(BaseModel):
    """Keep the AAMVA mandatory element set."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[SelectorKind.MANDATORY] = SelectorKind.MANDATORY

    def keeps(self, code: str) -> bool:
        return code in MANDATORY_FIELDS


class ComponentIndexSelector(BaseModel):
    """Keep the mandatory elements whose bits are set in a component index."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: Literal[SelectorKind.COMPONENT_INDEX] = SelectorKind.COMPONENT_INDEX
    component_index: int = Field(..., alias="componentIndex")

    @field_validator("component_index", mode="before")
    @classmethod
    def decode_multibase(cls, v: Any) -> Any:
        if isinstance(v, str):
            return ComponentIndexCodec.decode(v)
        return v

    @field_validator("component_index")
    @classmethod
    def validate_component_index(cls, v: int) -> int:
        """Reject indexes wider than 24 bits or with reserved bits set."""
        if not 0 <= v < 1 << 24:
            msg = f"Component index must fit in 24 bits, got {v}"
            raise InvalidSelectorError(msg)
        ComponentIndexCodec.check_reserved_bits(v)
        return v

    @classmethod
    def from_value(cls, value: int | str) -> ComponentIndexSelector:
        """Build from an integer index or its multibase text form."""
        if isinstance(value, str):
            value = ComponentIndexCodec.decode(value)
        elif isinstance(value, bool) or not isinstance(value, int):
            msg = f"Component index must be an integer or multibase string, got {type(value).__name__}"
            raise InvalidSelectorError(msg)
        return cls(component_index=value)

    @property
    def fields(self) -> tuple[str, ...]:
        return ComponentIndexCodec.fields_for_index(self.component_index)

    def keeps(self, code: str) -> bool:
        return code in self.fields


Selector = Annotated[
    Union[AllFieldsSelector, FieldListSelector, MandatorySelector, ComponentIndexSelector],
    Field(discriminator="kind"),
]

SelectorRequest = Union[
    AllFieldsSelector, FieldListSelector, MandatorySelector, ComponentIndexSelector,
    dict[str, Any], None,
]

_SELECTOR_ADAPTER: TypeAdapter[Selector] = TypeAdapter(Selector)


def _validate_tagged_selector(request: dict[str, Any]) -> Selector:
    try:
        kind = SelectorKind(request["kind"])
    except ValueError as e:
        msg = f"Unsupported selector kind: {request['kind']!r}"
        raise InvalidSelectorError(msg) from e
    try:
        return _SELECTOR_ADAPTER.validate_python({**request, "kind": kind})
    except ValidationError as e:
        msg = f"Invalid {kind.value} selector: {e}"
        raise InvalidSelectorError(msg) from e


def resolve_selector(request: SelectorRequest) -> Selector:
    """
    Resolve a selection request to exactly one selector variant.

    Accepts a selector model, ``None`` (all fields), a mapping tagged with a
    ``kind`` (validated against the selector union), or a mapping with either
    ``fields`` (``"mandatory"`` or a collection of codes) or
    ``componentIndex`` (integer or multibase text).

    Raises:
        ConflictingSelectorError: If both fields and a component index are given
        InvalidSelectorError: If the request has any other unsupported shape
    """
    if request is None:
        return AllFieldsSelector()
    if isinstance(
        request, (AllFieldsSelector, FieldListSelector, MandatorySelector, ComponentIndexSelector)
    ):
        return request
    if not isinstance(request, dict):
        msg = f"Unsupported selector type: {type(request).__name__}"
        raise InvalidSelectorError(msg)

    fields = request.get("fields")
    component_index = request.get("componentIndex", request.get("component_index"))

    if fields is not None and component_index is not None:
        msg = "Selector cannot specify both 'fields' and 'componentIndex'"
        raise ConflictingSelectorError(msg)
    if "kind" in request:
        return _validate_tagged_selector(request)
    if component_index is not None:
        return ComponentIndexSelector.from_value(component_index)
    if fields is None:
        return AllFieldsSelector()
    if isinstance(fields, str):
        if fields == SelectorKind.MANDATORY.value:
            return MandatorySelector()
        msg = f"Unsupported fields selector: {fields!r}"
        raise InvalidSelectorError(msg)
    try:
        return FieldListSelector(fields=frozenset(fields))
    except (TypeError, ValidationError) as e:
        msg = f"Fields selector must be 'mandatory' or a collection of codes: {e}"
        raise InvalidSelectorError(msg) from e
