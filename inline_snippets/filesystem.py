"""Filesystem helpers for the inline-snippets CLI."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE, TREE_EXTENSIONS

MAX_FILE_SIZE_ENV_VAR = "INLINE_SNIPPETS_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Resolve the maximum allowed tree file size.

    Args:
        default: Fallback value in bytes when the environment variable is unset.

    Returns:
        int: Maximum allowed file size in bytes.

    Raises:
        ValueError: If the environment value is not a positive integer.

    Examples:
        os.environ["INLINE_SNIPPETS_MAX_FILE_SIZE"] = "204800"
        limit = get_max_file_size(default=102400)
    """
    env_value = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if env_value is None:
        return default

    try:
        max_size = int(env_value)
    except ValueError as error:
        error_message = (
            f"Invalid value for {MAX_FILE_SIZE_ENV_VAR}: {env_value} (expected positive integer)"
        )
        raise ValueError(error_message) from error

    if max_size <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {max_size}."
        raise ValueError(error_message)

    return max_size


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.

    Returns:
        bool: True when a symlink is encountered, otherwise False.

    Examples:
        contains_symlink(Path("/tmp/link/child"))
    """
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve and validate a tree filepath under a base directory.

    Args:
        raw_path: User-supplied path to an mdast JSON file.
        base_dir: Working directory that constrains allowed paths.

    Returns:
        Path: Absolute path to the file.

    Raises:
        ValueError: If the path does not exist, is not a regular file, is
            outside `base_dir`, uses an unsupported extension, or traverses a
            symlink.

    Examples:
        normalize_filepath("build/post.json", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        error_message = f"Symlinks are not supported for security reasons: {path}"
        raise ValueError(error_message)

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        error_message = f"{path} does not exist."
        raise ValueError(error_message) from error
    except OSError as error:
        error_message = f"Error resolving {path}: {error}"
        raise ValueError(error_message) from error

    if not resolved.is_file():
        error_message = f"{resolved} is not a regular file."
        raise ValueError(error_message)

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        error_message = f"{resolved} is outside of the working directory {base_dir}."
        raise ValueError(error_message) from error

    if resolved.suffix.lower() not in TREE_EXTENSIONS:
        error_message = f"{resolved} is not a document tree file.\n"
        error_message += f"Supported extensions are: {', '.join(TREE_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def enforce_file_size(filepath: Path, max_size: int) -> os.stat_result:
    """Guard against tree files that exceed the configured maximum size.

    Returns:
        os.stat_result: Stat of the file, for later change detection.

    Raises:
        IOError: If the file cannot be inspected, is a symlink, or is larger
            than `max_size`.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if stat.S_ISLNK(stat_result.st_mode):
        error_message = f"Symlinks are not supported: {filepath}."
        raise IOError(error_message)

    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)

    return stat_result


def read_text(filepath: Path) -> str:
    try:
        return filepath.read_text(encoding="UTF-8")
    except UnicodeDecodeError as error:
        raise IOError(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def write_atomically(filepath: Path, content: str, expected_stat: os.stat_result) -> None:
    """Replace a file's content through a temporary file in the same directory.

    Args:
        filepath: File to rewrite.
        content: New content.
        expected_stat: Stat captured before reading, used to detect concurrent edits.

    Raises:
        IOError: If the file changed since `expected_stat` was taken or cannot
            be replaced.
    """
    try:
        current_stat = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    fingerprint_before = (expected_stat.st_ino, expected_stat.st_size, expected_stat.st_mtime_ns)
    fingerprint_after = (current_stat.st_ino, current_stat.st_size, current_stat.st_mtime_ns)
    if fingerprint_before != fingerprint_after:
        raise IOError(f"{filepath} changed during processing; refusing to overwrite.")

    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            os.chmod(tmp_file.name, stat.S_IMODE(expected_stat.st_mode))

        os.replace(temp_path, filepath)
    except OSError as error:
        raise IOError(f"Could not write {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
