# src/isr_cache/profile/models.py — v1
"""Normalized kernel profile: architecture, symbols and types.

Produced by the PDB and DWARF parsing pipelines and consumed by VMI tooling.
The cache treats it as an opaque value that codecs serialize.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


# === TYPE REFERENCES ===


BaseKind = Literal[
    "void", "bool", "char", "wchar",
    "i8", "i16", "i32", "i64", "i128",
    "u8", "u16", "u32", "u64", "u128",
    "f8", "f16", "f32", "f64", "f128",
]

_BASE_SIZES: dict[str, int] = {
    "void": 0,
    "bool": 1, "char": 1, "i8": 1, "u8": 1, "f8": 1,
    "wchar": 2, "i16": 2, "u16": 2, "f16": 2,
    "i32": 4, "u32": 4, "f32": 4,
    "i64": 8, "u64": 8, "f64": 8,
    "i128": 16, "u128": 16, "f128": 16,
}

_POINTER_SIZES: dict[str, int] = {"X86": 4, "Arm": 4, "Amd64": 8, "Arm64": 8}


class BaseRef(BaseModel):
    """Primitive type."""

    kind: Literal["base"] = "base"
    subkind: BaseKind


class EnumRef(BaseModel):
    """Reference to a named enum in ``Types.enums``."""

    kind: Literal["enum"] = "enum"
    name: str


class StructRef(BaseModel):
    """Reference to a named struct in ``Types.structs``."""

    kind: Literal["struct"] = "struct"
    name: str


class ArrayRef(BaseModel):
    kind: Literal["array"] = "array"
    subtype: Type
    dims: list[int] = Field(default_factory=list)
    size: int


class PointerRef(BaseModel):
    kind: Literal["pointer"] = "pointer"
    subtype: Type


class BitfieldRef(BaseModel):
    kind: Literal["bitfield"] = "bitfield"
    subtype: Type
    bit_length: int
    bit_position: int


class FunctionRef(BaseModel):
    kind: Literal["function"] = "function"


Type = Annotated[
    Union[BaseRef, EnumRef, StructRef, ArrayRef, PointerRef, BitfieldRef, FunctionRef],
    Field(discriminator="kind"),
]


# === TYPE DEFINITIONS ===


class EnumType(BaseModel):
    """Enum definition: underlying integer type and named variants."""

    subtype: Type
    fields: dict[str, int] = Field(default_factory=dict)


class StructField(BaseModel):
    """Struct member at a byte offset."""

    offset: int
    type: Type


class StructType(BaseModel):
    """Struct, class, union or interface definition."""

    kind: Literal["struct", "class", "union", "interface"] = "struct"
    size: int
    fields: dict[str, StructField] = Field(default_factory=dict)


class Types(BaseModel):
    enums: dict[str, EnumType] = Field(default_factory=dict)
    structs: dict[str, StructType] = Field(default_factory=dict)


for _model in (ArrayRef, PointerRef, BitfieldRef, EnumType, StructField, StructType, Types):
    _model.model_rebuild()


# === PROFILE ===


class Profile(BaseModel):
    """Parsed symbol and type information of one kernel build."""

    architecture: str
    symbols: dict[str, int] = Field(default_factory=dict)
    types: Types = Field(default_factory=Types)

    def find_symbol(self, name: str) -> int | None:
        """Return the RVA/address of a symbol, or None if unknown."""
        return self.symbols.get(name)

    def find_enum(self, name: str) -> EnumType | None:
        return self.types.enums.get(name)

    def find_struct(self, name: str) -> StructType | None:
        return self.types.structs.get(name)

    def pointer_size(self) -> int:
        """Return the pointer width in bytes for the profile's architecture.

        Raises:
            ValueError: If the architecture is not one of X86, Amd64, Arm, Arm64.
        """
        try:
            return _POINTER_SIZES[self.architecture]
        except KeyError:
            raise ValueError(f"Unsupported architecture: {self.architecture!r}") from None

    @staticmethod
    def base_size(base: BaseRef) -> int:
        return _BASE_SIZES[base.subkind]

    def struct_size(self, name: str) -> int | None:
        udt = self.find_struct(name)
        return udt.size if udt is not None else None

    def enum_size(self, name: str) -> int | None:
        enum = self.find_enum(name)
        return self.type_size(enum.subtype) if enum is not None else None

    def type_size(self, type_: Type) -> int | None:
        """Return the size of a type in bytes.

        Arrays and bitfields report the size of their element type. Named
        references that do not resolve return None.
        """
        if isinstance(type_, BaseRef):
            return self.base_size(type_)
        if isinstance(type_, EnumRef):
            return self.enum_size(type_.name)
        if isinstance(type_, StructRef):
            return self.struct_size(type_.name)
        if isinstance(type_, (ArrayRef, BitfieldRef)):
            return self.type_size(type_.subtype)
        return self.pointer_size()
