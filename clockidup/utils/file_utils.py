"""File I/O utility functions for clockidup."""
import logging
import os

import markdown

from ..errors import ClockidupError

logger = logging.getLogger(__name__)


def write_markdown(md_path: str, content: str, title: str, overwrite: bool = False):
    """Write a standup to a Markdown file.

    Args:
        md_path: Output file path
        content: Markdown content
        title: Heading written when the file is new or overwritten
        overwrite: Whether to overwrite the file if it exists

    Raises:
        ClockidupError: the file cannot be written or is not valid Markdown
    """
    file_exists = os.path.exists(md_path)
    if file_exists and not overwrite:
        mode = 'a'
        logger.info("File '%s' exists. Appending output.", md_path)
    elif file_exists and overwrite:
        mode = 'w'
        logger.info("File '%s' exists. Overwriting as requested.", md_path)
    else:
        mode = 'w'
        logger.info("File '%s' does not exist. Creating new file.", md_path)

    try:
        with open(md_path, mode, encoding='utf-8') as f:
            if mode == 'w' or os.stat(md_path).st_size == 0:
                f.write(f"# {title}\n\n")
            f.write(content)
    except OSError as e:
        raise ClockidupError(f"failed to write to '{md_path}': {e}") from e

    # Rendering to HTML raises on input the Markdown library cannot handle.
    try:
        with open(md_path, 'r', encoding='utf-8') as f:
            markdown.markdown(f.read())
    except (OSError, ValueError) as e:
        raise ClockidupError(f"markdown validation failed for '{md_path}': {e}") from e
