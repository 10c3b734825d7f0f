from __future__ import annotations

import pytest

from source_tree_viewer.models.tree import (
    CollisionError,
    DirectoryNode,
    FileNode,
    StructuralError,
)


@pytest.fixture
def root() -> DirectoryNode:
    root = DirectoryNode()
    root.insert_leaf("Cargo.toml", "fn main(){}")
    src = root.add_directory("src")
    src.insert_leaf("lib.rs", "pub fn x(){}")
    src.add_directory("bin").insert_leaf("cli.rs", "fn cli(){}")
    return root


class TestInsertion:
    def test_directory_label_carries_separator(self, root: DirectoryNode) -> None:
        assert set(root.children) == {"Cargo.toml", "src/"}
        assert root.children["src/"].label == "src/"
        assert root.children["Cargo.toml"].label == "Cargo.toml"

    def test_paths_follow_parents(self, root: DirectoryNode) -> None:
        cli = root.walk(["src", "bin"]).children["cli.rs"]
        assert isinstance(cli, FileNode)
        assert cli.path == ("src", "bin", "cli.rs")
        assert cli.archive_path == "src/bin/cli.rs"

    def test_duplicate_directory_rejected(self, root: DirectoryNode) -> None:
        with pytest.raises(CollisionError):
            root.add_directory("src")

    def test_duplicate_file_rejected(self, root: DirectoryNode) -> None:
        with pytest.raises(CollisionError):
            root.insert_leaf("Cargo.toml", "other")
        assert root.children["Cargo.toml"].content == "fn main(){}"

    def test_file_over_directory_rejected(self, root: DirectoryNode) -> None:
        with pytest.raises(CollisionError) as excinfo:
            root.walk(["src"]).insert_leaf("bin", "text")
        assert excinfo.value.path == "src/bin"

    def test_directory_over_file_rejected(self, root: DirectoryNode) -> None:
        with pytest.raises(CollisionError):
            root.add_directory("Cargo.toml")


class TestLookup:
    def test_child_directory_missing(self, root: DirectoryNode) -> None:
        with pytest.raises(StructuralError):
            root.child_directory("docs")

    def test_child_directory_rejects_file(self, root: DirectoryNode) -> None:
        with pytest.raises(StructuralError):
            root.child_directory("Cargo.toml")

    def test_walk_missing_segment(self, root: DirectoryNode) -> None:
        with pytest.raises(StructuralError):
            root.walk(["src", "tests"])

    def test_find_file(self, root: DirectoryNode) -> None:
        node = root.find("src/lib.rs")
        assert isinstance(node, FileNode)
        assert node.content == "pub fn x(){}"

    def test_find_directory_with_or_without_marker(self, root: DirectoryNode) -> None:
        assert root.find("src/") is root.children["src/"]
        assert root.find("src") is root.children["src/"]

    def test_find_missing(self, root: DirectoryNode) -> None:
        assert root.find("src/main.rs") is None
        assert root.find("Cargo.toml/x") is None

    def test_find_root(self, root: DirectoryNode) -> None:
        assert root.find("") is root

    def test_iter_files_in_insertion_order(self, root: DirectoryNode) -> None:
        paths = [node.archive_path for node in root.iter_files()]
        assert paths == ["Cargo.toml", "src/lib.rs", "src/bin/cli.rs"]

    def test_to_dict(self, root: DirectoryNode) -> None:
        assert root.to_dict() == {
            "Cargo.toml": "fn main(){}",
            "src/": {"lib.rs": "pub fn x(){}", "bin/": {"cli.rs": "fn cli(){}"}},
        }
