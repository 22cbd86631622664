"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing and the CSI/SS3 variants terminals use for
navigation keys.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_SEQUENCE_BYTES = 16
_PENDING_BYTES: list[bytes] = []

_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}
_CTRL_FINAL_KEYS = {
    b"H": "CTRL_HOME",
    b"F": "CTRL_END",
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
}
_TILDE_KEYS = {
    "1": "HOME",
    "7": "HOME",
    "4": "END",
    "8": "END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}
_CTRL_TILDE_KEYS = {
    "1": "CTRL_HOME",
    "7": "CTRL_HOME",
    "4": "CTRL_END",
    "8": "CTRL_END",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}
CTRL_MODIFIER = "5"


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _decode_csi(fd: int) -> str:
    """Decode the remainder of ``ESC [`` into a key token."""
    params: list[bytes] = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part.isdigit() or part == b";":
            params.append(part)
            if len(params) > MAX_SEQUENCE_BYTES:
                return "ESC"
            continue
        final = part
        break

    fields = b"".join(params).decode("ascii").split(";") if params else []
    modifier = fields[1] if len(fields) > 1 else ""
    if final == b"~":
        code = fields[0] if fields else ""
        table = _CTRL_TILDE_KEYS if modifier == CTRL_MODIFIER else _TILDE_KEYS
        return table.get(code, "ESC")
    if modifier == CTRL_MODIFIER:
        return _CTRL_FINAL_KEYS.get(final, "ESC")
    return _FINAL_KEYS.get(final, "ESC")


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; ``""`` when nothing arrived in time."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    if ch == b"\x03":
        return "CTRL_C"
    if ch == b"\r":
        return "ENTER"

    if ch != b"\x1b":
        return ch.decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"[":
        return _decode_csi(fd)
    if seq == b"O":
        # SS3 form sent by terminals in application cursor mode.
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _FINAL_KEYS.get(final, "ESC")
    _PENDING_BYTES.append(seq)
    return "ESC"
