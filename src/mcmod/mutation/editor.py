"""
TextPatcher: idempotent line-level edits to generated build files.

Generated files belong to the user once written, so they are patched in
place instead of regenerated. Every primitive:
- is a no-op when its effect is already present
- touches only the line it targets (or adds exactly one line)
- preserves the trailing newline and each untouched line's own terminator

Lines are split on '\\n' only. Form feeds, lone '\\r' and other Unicode
line separators stay inside the line they appear in.
"""

from pathlib import Path
from typing import Callable, List, Optional

from mcmod.logging_config import logger
from mcmod.utils import atomic_write_text


def detect_line_ending(content: str) -> str:
    """
    Detect the line ending used for new lines (LF vs CRLF).

    The first terminator in the file decides.

    Returns:
        '\\r\\n' for CRLF, '\\n' for LF
    """
    index = content.find("\n")
    if index > 0 and content[index - 1] == "\r":
        return "\r\n"
    return "\n"


def split_lines(content: str) -> List[str]:
    """Split into lines, each keeping its own terminator ('\\n', '\\r\\n' or none at EOF)."""
    parts = content.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def line_body(line: str) -> str:
    """A line without its terminator."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def line_terminator(line: str) -> str:
    return line[len(line_body(line)):]


def join_lines(lines: List[str]) -> str:
    return "".join(lines)


def _insert_line(lines: List[str], index: int, text: str, line_ending: str) -> None:
    """
    Insert text as a new line at index.

    Appending after an unterminated last line terminates that line instead,
    so a missing trailing newline stays missing.
    """
    if index == len(lines) and lines and not lines[-1].endswith("\n"):
        lines[-1] += line_ending
        lines.append(text)
    else:
        lines.insert(index, text + line_ending)


def _replace_line(lines: List[str], index: int, text: str) -> None:
    lines[index] = text + line_terminator(lines[index])


def insert_unique_line(
    content: str,
    line: str,
    after_prefix: str,
    before_prefix: Optional[str] = None,
) -> str:
    """
    Insert a line unless it already appears verbatim anywhere in content.

    Anchor rule: immediately after the last line starting with after_prefix;
    else before the first line starting with before_prefix; else append.
    Prefixes are matched against the line with surrounding whitespace removed.

    Args:
        content: File content
        line: Exact line to insert
        after_prefix: Prefix of lines to insert after (last match wins)
        before_prefix: Prefix of the line to insert before when no after-match exists

    Returns:
        The new content (unchanged if the line was already present)
    """
    if line in content:
        return content

    lines = split_lines(content)

    last_match = None
    for i, existing in enumerate(lines):
        if existing.strip().startswith(after_prefix):
            last_match = i

    if last_match is not None:
        index = last_match + 1
    else:
        index = len(lines)
        if before_prefix is not None:
            for i, existing in enumerate(lines):
                if existing.strip().startswith(before_prefix):
                    index = i
                    break

    _insert_line(lines, index, line, detect_line_ending(content))
    return join_lines(lines)


def upsert_key(content: str, key: str, value: str, comment_marker: str = "# ") -> str:
    """
    Set key=value in key/value formatted content.

    Replaces the first line starting with `key=` or `<comment_marker>key=`
    (a disabled entry gets re-enabled). Appends `key=value` if no line matches.
    """
    prefix = f"{key}="
    commented_prefix = f"{comment_marker}{key}="
    new_line = f"{key}={value}"

    lines = split_lines(content)
    for i, existing in enumerate(lines):
        body = line_body(existing)
        if body.startswith(prefix) or body.startswith(commented_prefix):
            _replace_line(lines, i, new_line)
            break
    else:
        _insert_line(lines, len(lines), new_line, detect_line_ending(content))

    return join_lines(lines)


def parse_list_value(value: str) -> List[str]:
    """Split a comma-separated value into trimmed, non-empty tokens."""
    return [token.strip() for token in value.split(",") if token.strip()]


def add_to_list_property(content: str, key: str, token: str) -> str:
    """
    Add a token to a comma-separated property value, keeping existing order.

    Nothing changes if the token is already present. A missing key is
    appended as `key=token`.
    """
    prefix = f"{key}="

    lines = split_lines(content)
    for i, existing in enumerate(lines):
        body = line_body(existing)
        if body.startswith(prefix):
            tokens = parse_list_value(body[len(prefix):])
            if token in tokens:
                return content
            tokens.append(token)
            _replace_line(lines, i, prefix + ",".join(tokens))
            break
    else:
        _insert_line(lines, len(lines), prefix + token, detect_line_ending(content))

    return join_lines(lines)


class TextPatcher:
    """
    Apply text transforms to files on disk.

    Writes go through a temp file + rename and only happen when the
    transform actually changed the content.
    """

    def patch_file(self, path: Path, transform: Callable[[str], str]) -> bool:
        """
        Read a file, apply transform, write back if changed.

        Args:
            path: File to patch (must exist)
            transform: Function from old content to new content

        Returns:
            True if the file was rewritten
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8", newline="") as f:
            original = f.read()

        modified = transform(original)
        if modified == original:
            logger.debug(f"No change needed in {path}")
            return False

        atomic_write_text(path, modified)
        logger.info(f"Patched {path}")
        return True

    def insert_unique_line(self, path: Path, line: str, after_prefix: str,
                           before_prefix: Optional[str] = None) -> bool:
        return self.patch_file(
            path, lambda content: insert_unique_line(content, line, after_prefix, before_prefix)
        )

    def upsert_key(self, path: Path, key: str, value: str) -> bool:
        return self.patch_file(path, lambda content: upsert_key(content, key, value))

    def add_to_list_property(self, path: Path, key: str, token: str) -> bool:
        return self.patch_file(path, lambda content: add_to_list_property(content, key, token))
