"""Parse the make rule that "$CC -M -MF -" writes.

The rule looks like::

    foo.o: foo.c include/foo.h \\
     dir\\ with\\ spaces/bar.h

The target is thrown away and the prerequisites are returned in the order
the compiler listed them.  Only the escapes the compiler actually produces
are undone: backslash-newline joins lines, backslash-space and
backslash-backslash yield the escaped byte.
"""

from typing import List, Union

_COLON = ord(":")
_SPACE = ord(" ")
_NEWLINE = ord("\n")
_BACKSLASH = ord("\\")


def _decode(dep):
    # File names are bytes.  surrogateescape lets odd ones survive the trip.
    return bytes(dep).decode("utf-8", errors="surrogateescape")


def parse_make_deps(buf: Union[bytes, bytearray, str]) -> List[str]:
    """Return the prerequisites of the make rule in buf.

    Never raises.  Text without a colon has no prerequisites.
    """
    if isinstance(buf, str):
        buf = buf.encode("utf-8", errors="surrogateescape")

    deps = []
    colon = buf.find(b":")
    if colon < 0:
        return deps

    end = len(buf)
    i = colon + 1
    dep = bytearray()
    while i < end:
        ch = buf[i]
        if ch == _SPACE or ch == _NEWLINE:
            if dep:
                deps.append(_decode(dep))
                dep.clear()
            i += 1
            continue
        if ch == _BACKSLASH and i + 1 < end:
            nxt = buf[i + 1]
            if nxt == _NEWLINE:
                i += 2
                continue
            if nxt == _SPACE or nxt == _BACKSLASH:
                dep.append(nxt)
                i += 2
                continue
        dep.append(ch)
        i += 1

    if dep:
        deps.append(_decode(dep))
    return deps
