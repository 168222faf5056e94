# src/isr_cache/cache/models.py — v1
"""Cache domain models: fingerprints, parsed Linux banners, entry states."""

from __future__ import annotations

import struct
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class CodeViewId(BaseModel):
    """CodeView debug descriptor of a Windows PE image (PDB name + GUID/age)."""

    model_config = ConfigDict(frozen=True)

    module_path: str
    guid: str

    @property
    def source(self) -> Literal["pdb"]:
        return "pdb"

    @classmethod
    def from_pdb_info(cls, module_path: str, guid: bytes, age: int) -> CodeViewId:
        """Build a descriptor from the raw RSDS record of a PE debug directory.

        The GUID is rendered the way symbol servers index it: Data1 (u32),
        Data2 and Data3 (u16) little-endian, Data4 byte by byte, followed by
        the low nibble of the age.
        """
        if len(guid) != 16:
            raise ValueError(f"CodeView GUID must be 16 bytes, got {len(guid)}")
        data1, data2, data3 = struct.unpack_from("<IHH", guid)
        data4 = guid[8:].hex()
        return cls(
            module_path=module_path,
            guid=f"{data1:08x}{data2:04x}{data3:04x}{data4}{age & 0xF:01x}",
        )


class LinuxBannerId(BaseModel):
    """Linux kernel version banner, as found in /proc/version or memory."""

    model_config = ConfigDict(frozen=True)

    raw_banner: str

    @property
    def source(self) -> Literal["linux"]:
        return "linux"


Fingerprint = Union[CodeViewId, LinuxBannerId]


class UbuntuVersionSignature(BaseModel):
    """Ubuntu CONFIG_VERSION_SIGNATURE, e.g. ``Ubuntu 6.8.0-40.40~22.04.3-generic 6.8.12``."""

    release: str
    revision: str
    kernel_flavour: str
    mainline_kernel_version: str


class LinuxBanner(BaseModel):
    """Decomposed ``Linux version ...`` banner."""

    uts_release: str
    compile_by: str
    compile_host: str
    compiler: str
    uts_version: str
    version_signature: UbuntuVersionSignature | None = None

    @property
    def build_tag(self) -> str:
        """Leading token of the UTS version (``40~22.04.3-Ubuntu`` in ``#40~22.04.3-Ubuntu SMP ...``)."""
        parts = self.uts_version.split()
        return parts[0] if parts else ""


class EntryState(str, Enum):
    """Lifecycle of a cache entry."""

    UNRESOLVED = "unresolved"
    MISSING = "missing"
    FILLING = "filling"
    READY = "ready"
    FAILED = "failed"
