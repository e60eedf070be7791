"""
Tests for FileDiscovery service.
"""

import pytest

from services.discovery.file_discovery import FileDiscovery


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return str(path)


class TestFileDiscovery:
    """Tests for FileDiscovery service."""

    def test_empty_extensions_fail(self):
        """Test that at least one extension is required."""
        with pytest.raises(ValueError, match="extensions cannot be empty"):
            FileDiscovery(extensions=())

    def test_finds_files_recursively(self, tmp_path):
        """Test that nested data files are found."""
        expected = [
            _touch(tmp_path / "a.root"),
            _touch(tmp_path / "crab" / "b.root"),
            _touch(tmp_path / "crab" / "0000" / "c.root"),
        ]

        found = FileDiscovery().discover(str(tmp_path))

        assert sorted(found) == sorted(expected)

    def test_ignores_other_files(self, tmp_path):
        """Test that files without a data extension are skipped."""
        _touch(tmp_path / "notes.txt")
        _touch(tmp_path / "README")
        data = _touch(tmp_path / "x.root")

        assert FileDiscovery().discover(str(tmp_path)) == [data]

    def test_extension_matches_anywhere_in_name(self, tmp_path):
        """Test that names containing the extension count as data files."""
        data = _touch(tmp_path / "ntuple.root.1")
        assert FileDiscovery().discover(str(tmp_path)) == [data]

    def test_does_not_descend_into_dotted_directories(self, tmp_path):
        """Test that directories with a '.' in their name are not walked."""
        _touch(tmp_path / "v1.2" / "hidden.root")
        _touch(tmp_path / ".cache" / "hidden.root")
        visible = _touch(tmp_path / "v1" / "visible.root")

        assert FileDiscovery().discover(str(tmp_path)) == [visible]

    def test_missing_directory_yields_nothing(self, tmp_path):
        """Test that a missing root contributes zero files."""
        assert FileDiscovery().discover(str(tmp_path / "missing")) == []

    def test_empty_directory_yields_nothing(self, tmp_path):
        """Test that an empty root contributes zero files."""
        assert FileDiscovery().discover(str(tmp_path)) == []

    def test_result_is_deterministic_and_sorted(self, tmp_path):
        """Test that repeated discovery returns the same sorted list."""
        for name in ("z.root", "a.root", "m/b.root", "m/a.root"):
            _touch(tmp_path / name)

        discovery = FileDiscovery()
        first = discovery.discover(str(tmp_path))
        second = discovery.discover(str(tmp_path))

        assert first == second
        assert first == sorted(first)
        assert len(first) == 4

    def test_deep_tree_does_not_recurse(self, tmp_path):
        """Test that very deep trees are walked without recursion limits."""
        directory = tmp_path
        for i in range(60):
            directory = directory / f"d{i}"
        deep = _touch(directory / "deep.root")

        assert FileDiscovery().discover(str(tmp_path)) == [deep]

    def test_custom_extensions(self, tmp_path):
        """Test discovery with other extensions."""
        parquet = _touch(tmp_path / "a.parquet")
        _touch(tmp_path / "b.root")

        assert FileDiscovery(extensions=(".parquet",)).discover(str(tmp_path)) == [parquet]

    def test_symlinked_directories_not_followed(self, tmp_path):
        """Test that a link back to an ancestor does not loop."""
        data = _touch(tmp_path / "crab" / "a.root")
        (tmp_path / "crab" / "up").symlink_to(tmp_path, target_is_directory=True)

        assert FileDiscovery().discover(str(tmp_path)) == [data]
