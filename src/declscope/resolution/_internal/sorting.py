"""Deterministic member ordering.

Loaders do not guarantee the order in which a class's members are reported,
so local fields and methods are sorted before merging: by a stable 32-bit
hash of the member name, then by name, then by full signature.  The hash is
the classic ``31 * h + code_unit`` string hash over UTF-16 code units, which
keeps the order identical across processes (unlike Python's salted hash()).
"""

from __future__ import annotations

from collections.abc import Iterable

from declscope.model import FieldDecl, MethodDecl

_MASK = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def stable_name_hash(name: str) -> int:
    """Signed 32-bit polynomial hash of name."""
    h = 0
    data = name.encode("utf-16-be")
    for i in range(0, len(data), 2):
        h = (31 * h + int.from_bytes(data[i : i + 2], "big")) & _MASK
    return h - (1 << 32) if h & _SIGN_BIT else h


def _utf16(text: str) -> bytes:
    # Big-endian code units compare in the same order as the hashed units
    return text.encode("utf-16-be")


def _member_key(member: FieldDecl | MethodDecl) -> tuple[int, bytes, bytes]:
    return (stable_name_hash(member.name), _utf16(member.name), _utf16(member.signature))


def sort_fields(fields: Iterable[FieldDecl]) -> list[FieldDecl]:
    return sorted(fields, key=_member_key)


def sort_methods(methods: Iterable[MethodDecl]) -> list[MethodDecl]:
    return sorted(methods, key=_member_key)
