"""Input file discovery"""

import logging
import os


logger = logging.getLogger(__name__)

# Bytes sniffed from the start of a file when checking for binary content
TEXT_SNIFF_BYTES = 8192


def is_text_file(filepath: str) -> bool:
    """Heuristic text check: no NUL byte in the first 8 KiB.

    Unreadable files are reported as text so that the read error surfaces
    from the scheduler with the configured failure policy.
    """
    try:
        with open(filepath, 'rb') as f:
            chunk = f.read(TEXT_SNIFF_BYTES)
    except OSError:
        return True
    return b'\x00' not in chunk


def list_files(path: str, recursive: bool = False) -> list[str]:
    """List the input files under path.

    A file path is returned as-is, even if it looks binary. For directories,
    regular text files are returned sorted by path; binary files are skipped.

    Args:
        path: File or directory
        recursive: If True, descend into subdirectories

    Returns:
        Sorted list of file paths

    Raises:
        FileNotFoundError: If path does not exist
        OSError: If a directory cannot be listed
    """
    if os.path.isfile(path):
        return [path]
    if not os.path.isdir(path):
        raise FileNotFoundError(f'Path not found: {path}')

    candidates: list[str] = []
    if recursive:
        for root, _, files in os.walk(path):
            for f in files:
                candidates.append(os.path.join(root, f))
    else:
        for f in os.listdir(path):
            fp = os.path.join(path, f)
            if os.path.isfile(fp):
                candidates.append(fp)

    files_to_process = []
    for filepath in sorted(candidates):
        if is_text_file(filepath):
            files_to_process.append(filepath)
        else:
            logger.info(f'Skipping binary file: {filepath}')
    return files_to_process
