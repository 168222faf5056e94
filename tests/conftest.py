# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides a sample profile, kernel fingerprints, temp cache directories and
counting fake fetch-and-parse sources. No network, no real PDB/DWARF parsing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from isr_cache.cache.models import CodeViewId, LinuxBannerId
from isr_cache.cache.sources import BaseLinuxSource, BasePdbSource
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
    Types,
)

NTKRNLMP_GUID = "ce7ffb00c20b87500211456b3e905c471"

UBUNTU_BANNER = (
    "Linux version 6.8.0-40-generic (buildd@lcy02-amd64-078) "
    "(x86_64-linux-gnu-gcc-12 (Ubuntu 12.3.0-1ubuntu1~22.04) 12.3.0, "
    "GNU ld (GNU Binutils for Ubuntu) 2.38) "
    "#40~22.04.3-Ubuntu SMP PREEMPT_DYNAMIC Tue Jul 30 17:30:19 UTC 2 "
    "(Ubuntu 6.8.0-40.40~22.04.3-generic 6.8.12)"
)

DEBIAN_BANNER = (
    "Linux version 5.10.0-21-amd64 (debian-kernel@lists.debian.org) "
    "(gcc-10 (Debian 10.2.1-6) 10.2.1 20210110, GNU ld (GNU Binutils for Debian) 2.35.2) "
    "#1 SMP Debian 5.10.162-1 (2023-01-21)"
)


# === FAKE SOURCES ===


class FakePdbSource(BasePdbSource):
    """Counting PDB pipeline returning a canned profile or raising."""

    def __init__(
        self,
        profile: Profile,
        error: BaseException | None = None,
        codeview: CodeViewId | None = None,
    ) -> None:
        self.profile = profile
        self.error = error
        self.codeview = codeview or CodeViewId(module_path="ntkrnlmp.pdb", guid=NTKRNLMP_GUID)
        self.calls: list[CodeViewId] = []
        self.pe_paths: list[Path] = []

    def fetch(self, fingerprint: CodeViewId) -> Profile:
        self.calls.append(fingerprint)
        if self.error is not None:
            raise self.error
        return self.profile

    def read_codeview(self, pe_path: Path) -> CodeViewId:
        self.pe_paths.append(pe_path)
        return self.codeview


class FakeLinuxSource(BaseLinuxSource):
    """Counting Linux pipeline returning a canned profile or raising."""

    def __init__(self, profile: Profile, error: BaseException | None = None) -> None:
        self.profile = profile
        self.error = error
        self.calls: list[LinuxBannerId] = []

    def fetch(self, fingerprint: LinuxBannerId) -> Profile:
        self.calls.append(fingerprint)
        if self.error is not None:
            raise self.error
        return self.profile


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_profile() -> Profile:
    """Small Amd64 profile exercising every type reference kind."""
    list_entry_ptr = PointerRef(subtype=StructRef(name="_LIST_ENTRY"))
    return Profile(
        architecture="Amd64",
        symbols={
            "PsInitialSystemProcess": 0xCFC420,
            "PsActiveProcessHead": 0xC1F960,
            "NtCreateFile": 0x6B8E40,
        },
        types=Types(
            enums={
                "_POOL_TYPE": EnumType(
                    subtype=BaseRef(subkind="i32"),
                    fields={"NonPagedPool": 0, "PagedPool": 1},
                ),
            },
            structs={
                "_LIST_ENTRY": StructType(
                    kind="struct",
                    size=16,
                    fields={
                        "Flink": StructField(offset=0, type=list_entry_ptr),
                        "Blink": StructField(offset=8, type=list_entry_ptr),
                    },
                ),
                "_EPROCESS": StructType(
                    kind="struct",
                    size=0xA40,
                    fields={
                        "UniqueProcessId": StructField(
                            offset=0x440, type=PointerRef(subtype=BaseRef(subkind="void"))
                        ),
                        "ActiveProcessLinks": StructField(
                            offset=0x448, type=StructRef(name="_LIST_ENTRY")
                        ),
                        "Flags": StructField(
                            offset=0x464,
                            type=BitfieldRef(
                                subtype=BaseRef(subkind="u32"), bit_length=1, bit_position=3
                            ),
                        ),
                        "ImageFileName": StructField(
                            offset=0x5A8,
                            type=ArrayRef(subtype=BaseRef(subkind="u8"), dims=[15], size=15),
                        ),
                        "PoolType": StructField(offset=0x10, type=EnumRef(name="_POOL_TYPE")),
                        "Callback": StructField(
                            offset=0x18, type=PointerRef(subtype=FunctionRef())
                        ),
                    },
                ),
                "_KUSER_SHARED_DATA": StructType(kind="union", size=0x720),
            },
        ),
    )


@pytest.fixture
def codeview() -> CodeViewId:
    """CodeView descriptor of the Windows 10.0.18362.356 kernel."""
    return CodeViewId(module_path="ntkrnlmp.pdb", guid=NTKRNLMP_GUID)


@pytest.fixture
def ubuntu_banner() -> str:
    return UBUNTU_BANNER


@pytest.fixture
def debian_banner() -> str:
    return DEBIAN_BANNER


@pytest.fixture
def pdb_source(sample_profile: Profile) -> FakePdbSource:
    return FakePdbSource(sample_profile)


@pytest.fixture
def linux_source(sample_profile: Profile) -> FakeLinuxSource:
    return FakeLinuxSource(sample_profile)


@pytest.fixture
def make_pdb_source(sample_profile: Profile) -> Callable[..., FakePdbSource]:
    """Factory for PDB sources with a custom error or descriptor."""

    def _make(**kwargs) -> FakePdbSource:
        kwargs.setdefault("profile", sample_profile)
        return FakePdbSource(**kwargs)

    return _make


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory (not created, the cache creates it)."""
    return tmp_path / "cache"
