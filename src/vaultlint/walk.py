"""Collect the ``(path, content)`` pairs of a vault directory."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from vaultlint.config import VaultConfig, should_exclude_file


def walk_vault(vault_root: Path, config: VaultConfig | None = None) -> list[tuple[str, str]]:
    """Return every Markdown file under *vault_root* as ``(relative_path, content)``.

    Paths are POSIX-style and relative to the root, sorted.  Files inside
    hidden directories (``.obsidian``, ``.git``, ...) are skipped, as are files
    matching the config's exclude globs.  A file that is not valid UTF-8 is
    skipped with a warning.
    """
    root = Path(vault_root)
    files: list[tuple[str, str]] = []
    for path in sorted(root.glob("**/*.md")):
        if not path.is_file():
            continue
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts[:-1]):
            continue
        rel_posix = relative.as_posix()
        if should_exclude_file(rel_posix, config):
            logger.debug("Excluded {}", rel_posix)
            continue
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            logger.warning("Skipping {}: not valid UTF-8 ({})", rel_posix, exc.reason)
            continue
        files.append((rel_posix, content))
    return files
