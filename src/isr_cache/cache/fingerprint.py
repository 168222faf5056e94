# src/isr_cache/cache/fingerprint.py — v2
"""Fingerprint to cache-key derivation.

A CodeView descriptor keys on ``<pdb name>-<guid>``. A Linux banner is parsed
and reduced to the tokens that identify the build; volatile parts (build
flags, compile timestamp, build user and host) are dropped so that every
banner of the same build yields the same key.

Keys are pure functions of their input: no I/O, stable across processes.
"""

from __future__ import annotations

import hashlib
import re
from pathlib import PureWindowsPath
from typing import Callable

from isr_cache.cache.errors import MalformedFingerprintError
from isr_cache.cache.models import (
    CodeViewId,
    Fingerprint,
    LinuxBanner,
    LinuxBannerId,
    UbuntuVersionSignature,
)

BannerTokens = Callable[[LinuxBanner], list[str]]

MAX_KEY_LENGTH = 200
_DIGEST_SUFFIX_LENGTH = 16

# Linux version 6.8.0-40-generic (buildd@lcy02-amd64-078) (x86_64-linux-gnu-gcc-12 ...) #40~22.04.3-Ubuntu SMP ...
_LINUX_BANNER_RE = re.compile(
    r"Linux version (?P<uts_release>[0-9]+\.[0-9]+\.[0-9]+\S*) "
    r"\((?P<compile_by>[^@]*)@(?P<compile_host>[^)]*)\) "
    r"\((?P<compiler>.*)\) "
    r"#(?P<uts_version>.*)"
)

# (Ubuntu 6.8.0-40.40~22.04.3-generic 6.8.12)
_UBUNTU_SIGNATURE_RE = re.compile(
    r"\(Ubuntu (?P<release>[^\s-]+)-(?P<revision>[^\s-]+)-(?P<flavour>\S+) "
    r"(?P<mainline>[^\s)]+)\)"
)

_GUID_RE = re.compile(r"^[0-9a-f]+$")

# Everything from the compile date on is volatile: "(2023-04-22)" or
# "Tue Jul 30 17:30:19 UTC 2024".
_BUILD_DATE_RE = re.compile(
    r"\(?\d{4}-\d{2}-\d{2}\b"
    r"|\b(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun) (?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec) "
)

_BUILD_FLAG_RE = re.compile(r"^(?:SMP|PREEMPT(?:_\w+)?|NOPREEMPT|RT)$", re.IGNORECASE)


def derive_key(
    fingerprint: Fingerprint,
    banner_tokens: BannerTokens | None = None,
) -> str:
    """Derive the cache key for a fingerprint.

    Args:
        fingerprint: CodeView descriptor or Linux banner.
        banner_tokens: Token selector for Linux banners. Defaults to
            stable_banner_tokens.

    Returns:
        Filesystem-safe key, at most MAX_KEY_LENGTH characters.

    Raises:
        MalformedFingerprintError: If the fingerprint cannot be normalized.
    """
    if isinstance(fingerprint, CodeViewId):
        return codeview_key(fingerprint)
    if isinstance(fingerprint, LinuxBannerId):
        return linux_banner_key(fingerprint, banner_tokens)
    raise MalformedFingerprintError(
        f"unsupported fingerprint type {type(fingerprint).__name__}", fingerprint
    )


def codeview_key(codeview: CodeViewId) -> str:
    """Key a CodeView descriptor as ``<lower-cased pdb base name>-<guid>``."""
    name = PureWindowsPath(codeview.module_path.strip()).name.lower()
    # Keys never start with a dot, the prefix of temporary files.
    name = re.sub(r"[^0-9a-z._-]+", "_", name).lstrip(".")
    if not name:
        raise MalformedFingerprintError("CodeView module path has no file name", codeview)

    guid = codeview.guid.strip().lower()
    if not guid:
        raise MalformedFingerprintError("CodeView GUID is empty", codeview)
    if not _GUID_RE.match(guid):
        raise MalformedFingerprintError(f"CodeView GUID is not hex: {codeview.guid!r}", codeview)

    return _bounded(f"{name}-{guid}")


def linux_banner_key(
    banner_id: LinuxBannerId,
    banner_tokens: BannerTokens | None = None,
) -> str:
    """Key a Linux banner by its stable tokens, normalized and joined with ``-``."""
    banner = parse_linux_banner(banner_id.raw_banner)
    select = banner_tokens or stable_banner_tokens
    tokens = [_normalize_token(token) for token in select(banner)]
    if not tokens or not all(tokens):
        raise MalformedFingerprintError(
            "Linux banner lacks release or build tokens", banner_id
        )
    return _bounded("-".join(tokens))


def parse_linux_banner(raw_banner: str) -> LinuxBanner:
    """Decompose a ``Linux version ...`` banner.

    Raises:
        MalformedFingerprintError: If the banner does not match the kernel's
            linux_banner format.
    """
    text = raw_banner.replace("\x00", " ").strip()
    match = _LINUX_BANNER_RE.search(text)
    if match is None:
        raise MalformedFingerprintError("not a Linux version banner", raw_banner)

    uts_version = match.group("uts_version").strip()
    return LinuxBanner(
        uts_release=match.group("uts_release"),
        compile_by=match.group("compile_by"),
        compile_host=match.group("compile_host"),
        compiler=match.group("compiler"),
        uts_version=uts_version,
        version_signature=_parse_ubuntu_signature(uts_version),
    )


def stable_banner_tokens(banner: LinuxBanner) -> list[str]:
    """Select the banner tokens that identify a build.

    With an Ubuntu version signature the package coordinates are used:
    ``ubuntu, release, revision, flavour``. Otherwise: ``linux, uts_release,
    build tag, distro version, compiler digest``, where the distro version is
    what follows the build flags in the UTS version (``Debian 5.10.178-3``);
    it is omitted when the banner carries none. Build flags (SMP, PREEMPT_*),
    the compile timestamp, and the build user and host never take part.
    """
    signature = banner.version_signature
    if signature is not None:
        return ["ubuntu", signature.release, signature.revision, signature.kernel_flavour]
    compiler_digest = hashlib.sha256(banner.compiler.encode("utf-8")).hexdigest()[:8]
    tokens = ["linux", banner.uts_release, banner.build_tag]
    distro_version = _distro_version(banner.uts_version)
    if distro_version:
        tokens.append(distro_version)
    tokens.append(compiler_digest)
    return tokens


def _distro_version(uts_version: str) -> str:
    """Return the UTS version words left after the build tag, flags and timestamp."""
    date = _BUILD_DATE_RE.search(uts_version)
    if date is not None:
        uts_version = uts_version[: date.start()]
    words = uts_version.split()[1:]
    return " ".join(word for word in words if not _BUILD_FLAG_RE.match(word))


def _parse_ubuntu_signature(uts_version: str) -> UbuntuVersionSignature | None:
    match = _UBUNTU_SIGNATURE_RE.search(uts_version)
    if match is None:
        return None
    return UbuntuVersionSignature(
        release=match.group("release"),
        revision=match.group("revision"),
        kernel_flavour=match.group("flavour"),
        mainline_kernel_version=match.group("mainline"),
    )


def _normalize_token(token: str) -> str:
    """Lowercase, collapse whitespace and punctuation (except dots) to ``-``."""
    token = token.lower()
    token = re.sub(r"[^0-9a-z.]+", "-", token)
    return token.strip("-.")


def _bounded(key: str) -> str:
    """Shorten over-long keys to a prefix plus a digest of the full key."""
    if len(key) <= MAX_KEY_LENGTH:
        return key
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:_DIGEST_SUFFIX_LENGTH]
    prefix = key[: MAX_KEY_LENGTH - _DIGEST_SUFFIX_LENGTH - 1]
    return f"{prefix}-{digest}"
