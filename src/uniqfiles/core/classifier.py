"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/classifier.py
Merges size and digest information into one verdict per file.
"""

from typing import List

from uniqfiles.core.interfaces import Classifier
from uniqfiles.core.models import SizeIndex, DigestIndex, Classification


class ClassifierImpl(Classifier):
    """
    Pure function of the two indices:
    - file never digested (unique size)  -> count 1, first of its own group
    - file digested                      -> count = size of its digest bucket
    Files that were digest candidates but failed to read are not in either
    result and therefore disappear here.
    """

    def classify(self, size_index: SizeIndex, digest_index: DigestIndex) -> List[Classification]:
        result = []
        for path in sorted(size_index.sizes):
            size = size_index.size_of(path)
            if path in digest_index:
                group = digest_index.group_of(path)
                result.append(Classification(
                    path=path,
                    occurrence_count=len(group),
                    size=size,
                    digest=digest_index.digest_of(path),
                    is_first_of_group=(group[0] == path),
                ))
            elif not size_index.is_shared(path):
                result.append(Classification(path=path, occurrence_count=1, size=size))
        return result
