"""
Unit tests for ClassifierImpl.
Occurrence counts and first-of-group designations are a pure function of the indices.
"""
from uniqfiles.core.classifier import ClassifierImpl
from uniqfiles.core.models import SizeIndex, DigestIndex


def build_indices():
    """
    Input order: /z1, /a2, /m3, /b4, /c5
    /z1, /a2, /c5 share digest "d" (z1 first), /m3 is a lone size-1 file with
    digest "e", /b4 has a unique size.
    """
    size_index = SizeIndex()
    for path, size in [("/z1", 1), ("/a2", 1), ("/m3", 1), ("/b4", 2), ("/c5", 1)]:
        size_index.add(path, size)
    digest_index = DigestIndex()
    for path, digest in [("/z1", "d"), ("/a2", "d"), ("/m3", "e"), ("/c5", "d")]:
        digest_index.add(path, digest)
    return size_index, digest_index


class TestClassifierImpl:

    def test_lexical_order(self):
        """Verdicts come out in lexical path order, whatever the input order."""
        result = ClassifierImpl().classify(*build_indices())
        assert [c.path for c in result] == ["/a2", "/b4", "/c5", "/m3", "/z1"]

    def test_counts_and_first_of_group(self):
        """Count is the digest bucket size; only the earliest input path is first of group."""
        by_path = {c.path: c for c in ClassifierImpl().classify(*build_indices())}

        assert by_path["/z1"].occurrence_count == 3
        assert by_path["/z1"].is_first_of_group
        assert not by_path["/a2"].is_first_of_group
        assert not by_path["/c5"].is_first_of_group

        assert by_path["/m3"].occurrence_count == 1
        assert by_path["/m3"].digest == "e"

        assert by_path["/b4"].occurrence_count == 1
        assert by_path["/b4"].digest is None
        assert by_path["/b4"].digest_or_size == 2

    def test_count_is_never_zero(self):
        """Every surviving file has at least its own occurrence."""
        assert all(c.occurrence_count >= 1 for c in ClassifierImpl().classify(*build_indices()))

    def test_digest_failure_removes_file(self):
        """A candidate missing from the digest index vanishes instead of being called unique."""
        size_index, _ = build_indices()
        digest_index = DigestIndex()
        # /m3 could not be read: it is missing from the digest index
        for path, digest in [("/z1", "d"), ("/a2", "d"), ("/c5", "d")]:
            digest_index.add(path, digest)

        paths = [c.path for c in ClassifierImpl().classify(size_index, digest_index)]
        assert "/m3" not in paths
        assert "/b4" in paths

    def test_idempotent(self):
        """Same indices give equal verdicts."""
        first = ClassifierImpl().classify(*build_indices())
        second = ClassifierImpl().classify(*build_indices())
        assert first == second
