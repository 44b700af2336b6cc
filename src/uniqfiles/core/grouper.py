"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Size grouping: the cheap first pass that decides which files need a digest at all.
A file with a unique size cannot have a duplicate, so it is never read.
"""

import os
import logging
from typing import List, Callable, Any

from uniqfiles.core.interfaces import SizeProber
from uniqfiles.core.models import SizeIndex

logger = logging.getLogger(__name__)


class SizeProberImpl(SizeProber):
    """
    Stats every path once and buckets it by byte size.
    The stat function is injectable for testing.
    """

    def __init__(self, stat_func: Callable[[str], Any] = os.stat):
        self.stat_func = stat_func

    def group_by_size(self, paths: List[str]) -> SizeIndex:
        index = SizeIndex()
        for path in paths:
            if path in index.sizes:
                logger.debug(f"File '{path}' given more than once, ignored")
                continue
            try:
                size = self.stat_func(path).st_size
            except OSError as e:
                logger.error(f"Can't stat file '{path}': {e.strerror or e}, skipped")
                continue
            index.add(path, size)

        logger.debug(
            f"Size grouping: {len(index)} files, {len(index.buckets)} distinct sizes, "
            f"{len(index.digest_candidates())} need a digest"
        )
        return index
