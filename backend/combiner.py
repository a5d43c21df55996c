# backend/combiner.py

import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Tuple

from pydantic import BaseModel

from settings import CombinerSettings

# Wrapper lines that replace a marker line (the leading tabs are part of the output)
STYLE_OPEN = '\t\t<style type="text/css">'
STYLE_CLOSE = "\t\t</style>"
SCRIPT_OPEN = "\t\t<script>"
SCRIPT_CLOSE = "\t\t</script>"


class CombineError(Exception):
    """An I/O failure that aborts the whole combine run."""

    def __init__(self, operation: str, path: Path, cause: Exception):
        self.operation = operation
        self.path = Path(path)
        reason = getattr(cause, "strerror", None) or str(cause)
        super().__init__(f"could not {operation} {self.path}: {reason}")


class CombineResult(BaseModel):
    lines_written: int
    output_path: Path
    styles_inlined: int = 0
    scripts_inlined: int = 0


def marker_matches(line: str, marker: str, mode: str = "substring") -> bool:
    if mode == "line":
        return line.strip() == marker
    return marker in line


def split_source_lines(text: str) -> List[str]:
    r"""
    Split the base document into lines the way a line scanner would: "\n" ends a line,
    a "\r" right before it is dropped, and a lone "\r" stays part of the line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _new_file_mode(destination: Path) -> int:
    try:
        return stat.S_IMODE(os.stat(destination).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def read_asset_lines(path: Path, debug: bool = False) -> List[str]:
    r"""
    Read an asset in full and split it on "\n" only.
    A trailing newline yields a trailing empty line, and "\r" or undecodable bytes are
    kept as they are, so the asset is reproduced byte for byte.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            text = f.read()
    except OSError as e:
        raise CombineError("read asset", path, e) from e

    lines = text.split("\n")
    if debug:
        print(f"[DEBUG] Inlined {path} ({len(lines)} lines)")
    return lines


def expand_lines(
    source_lines: Iterable[str], settings: CombinerSettings
) -> Tuple[List[str], int, int]:
    """
    Replace each marker line with its wrapped asset; copy every other line.
    Returns the output lines and how many style and script markers were expanded.
    Assets are read only when a marker is hit.
    """
    lines: List[str] = []
    styles = scripts = 0

    for line in source_lines:
        # stylesheet is checked first
        if marker_matches(line, settings.style_marker, settings.match_mode):
            lines.append(STYLE_OPEN)
            lines.extend(read_asset_lines(settings.style_path, settings.debug))
            lines.append(STYLE_CLOSE)
            styles += 1
        elif marker_matches(line, settings.script_marker, settings.match_mode):
            lines.append(SCRIPT_OPEN)
            lines.extend(read_asset_lines(settings.script_path, settings.debug))
            lines.append(SCRIPT_CLOSE)
            scripts += 1
        else:
            lines.append(line)

    return lines, styles, scripts


def write_lines_atomic(lines: List[str], destination: Path) -> int:
    """
    Write each line plus a newline to a temp file next to `destination`, then rename it
    into place. On failure the temp file is removed and any existing destination is left alone.
    """
    destination = Path(destination)
    directory = destination.parent

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{destination.name}.", suffix=".tmp", dir=directory
        )
    except OSError as e:
        raise CombineError("create temporary file for", destination, e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            for line in lines:
                f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        # mkstemp creates files as 0600; keep the old page's mode, else honour the umask
        os.chmod(tmp_name, _new_file_mode(destination))
        os.replace(tmp_name, destination)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise CombineError("write", destination, e) from e

    return len(lines)


def combine(settings: CombinerSettings) -> CombineResult:
    """Inline the stylesheet and script into the base document and write the single page."""
    if settings.debug:
        print(f"[DEBUG] Reading {settings.index_path}…")

    try:
        with open(
            settings.index_path, "r", encoding="utf-8", errors="surrogateescape", newline=""
        ) as f:
            lines, styles, scripts = expand_lines(split_source_lines(f.read()), settings)
    except OSError as e:
        raise CombineError("read base document", settings.index_path, e) from e

    if settings.debug:
        print(f"[DEBUG] {styles} stylesheet and {scripts} script marker(s) expanded")

    written = write_lines_atomic(lines, settings.output_path)

    if settings.debug:
        print(f"[DEBUG] Renamed temp file onto {settings.output_path}")

    return CombineResult(
        lines_written=written,
        output_path=settings.output_path,
        styles_inlined=styles,
        scripts_inlined=scripts,
    )
