"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Turns the user supplied path list into a clean list of regular files.
Features:
- Optional recursive expansion of directories (symlinked subtrees are never entered)
- Drops symlinks, directories and special files with a warning
- Preserves the original order of the input
"""

import os
import stat
import time
import logging
from pathlib import Path
from typing import Iterator, List, Union

from uniqfiles.core.interfaces import PathFilter

logger = logging.getLogger(__name__)


def walk_files(root: Union[str, Path]) -> Iterator[str]:
    """
    Yield regular files below `root`, depth first, in sorted order.
    Symlinks (to files or directories) are skipped; os.walk does not follow them.
    """
    def _on_error(error: OSError) -> None:
        logger.error(f"Can't read directory '{error.filename}': {error.strerror}, skipped")

    for current, dirs, files in os.walk(str(root), onerror=_on_error):
        dirs.sort()
        for name in sorted(files):
            path = os.path.join(current, name)
            try:
                st = os.lstat(path)
            except OSError as e:
                logger.error(f"Can't stat file '{path}': {e.strerror}, skipped")
                continue
            if stat.S_ISREG(st.st_mode):
                yield path


def expand_paths(paths: List[str], recurse: bool = False) -> List[str]:
    """
    Replace directories in `paths` by the regular files they contain.
    Without `recurse` the list is returned unchanged (directories are reported
    later by the path filter). Symlinks are dropped silently while recursing.
    """
    if not recurse:
        return list(paths)

    expanded = []
    for path in paths:
        if os.path.islink(path):
            logger.debug(f"Not descending into symlink '{path}'")
            continue
        if os.path.isdir(path):
            expanded.extend(walk_files(path))
        else:
            expanded.append(path)
    logger.debug(f"Recursive expansion: {len(paths)} arguments -> {len(expanded)} paths")
    return expanded


class PathFilterImpl(PathFilter):
    """
    Keeps only regular files. Filtering is best-effort per path and never aborts.
    """

    def filter(self, paths: List[str]) -> List[str]:
        start_time = time.time()
        kept = []
        for path in paths:
            try:
                st = os.lstat(path)
            except OSError:
                # Reported by the size stage, which is where the stat happens
                kept.append(path)
                continue

            if stat.S_ISLNK(st.st_mode):
                logger.warning(f"File '{path}' is a symlink, ignored")
            elif stat.S_ISDIR(st.st_mode):
                logger.warning(f"File '{path}' is a directory, ignored")
            elif not stat.S_ISREG(st.st_mode):
                logger.warning(f"File '{path}' is not a regular file, ignored")
            else:
                kept.append(path)

        logger.debug(f"Path filter kept {len(kept)}/{len(paths)} paths in {time.time() - start_time:.3f}s")
        return kept
