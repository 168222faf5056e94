from isr_cache.profile.models import (
    ArrayRef,
    BaseRef,
    BitfieldRef,
    EnumRef,
    EnumType,
    FunctionRef,
    PointerRef,
    Profile,
    StructField,
    StructRef,
    StructType,
    Type,
    Types,
)

__all__ = [
    "ArrayRef",
    "BaseRef",
    "BitfieldRef",
    "EnumRef",
    "EnumType",
    "FunctionRef",
    "PointerRef",
    "Profile",
    "StructField",
    "StructRef",
    "StructType",
    "Type",
    "Types",
]
