"""
File operation utilities

This module handles atomic file writes and temporary file cleanup.
"""
import logging
from pathlib import Path
from uuid import uuid4

import aiofiles
import aiofiles.os


logger = logging.getLogger(__name__)


async def atomic_write_text(file_path: Path | str, content: str) -> Path:
    """
    Write text to a file so readers never observe a half-written file

    Content is written to a temporary sibling file and then renamed
    over the target. The rename is atomic on POSIX and Windows.

    Args:
        file_path: Destination path
        content: Text to write (UTF-8)

    Returns:
        Path to the written file

    Raises:
        OSError: If the file cannot be written or renamed
    """
    target = Path(file_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_file = target.with_name(f".{target.name}.{uuid4().hex}.tmp")

    try:
        async with aiofiles.open(temp_file, 'w', encoding='utf-8') as f:
            await f.write(content)
        await aiofiles.os.replace(temp_file, target)
    except OSError:
        cleanup_temp_file(temp_file)
        raise

    logger.debug(f"Wrote {len(content) / 1024:.1f} KB to {target}")
    return target


def cleanup_temp_file(file_path: Path) -> bool:
    """
    Safely delete a temporary file

    Args:
        file_path: Path to file to delete

    Returns:
        True if deleted successfully, False otherwise
    """
    if not file_path or not file_path.exists():
        return False

    try:
        file_path.unlink()
        logger.debug(f"Cleaned up temporary file: {file_path}")
        return True
    except (OSError, PermissionError) as e:
        logger.warning(f"Failed to delete temporary file {file_path}: {e}")
        return False
