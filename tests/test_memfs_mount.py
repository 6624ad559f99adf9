import pytest

try:
    import memfs_mount
except (ImportError, OSError):
    # fusepy loads libfuse when imported
    pytest.skip("libfuse is not available", allow_module_level=True)

from fuse_logic import MemFSOperations
from memfs import MemFS


class TestMain:
    """main() hands the tree to FUSE."""

    @pytest.fixture
    def mounts(self, monkeypatch):
        calls = []

        def fake_fuse(operations, mountpoint, **options):
            calls.append((operations, mountpoint, options))

        monkeypatch.setattr(memfs_mount, "FUSE", fake_fuse)
        return calls

    def test_always_single_threaded(self, mounts):
        memfs_mount.main("/mnt/x", MemFS(), {"nothreads": False, "foreground": True})
        operations, mountpoint, options = mounts[0]
        assert isinstance(operations, MemFSOperations)
        assert mountpoint == "/mnt/x"
        assert options["nothreads"] is True
        assert options["foreground"] is True

    def test_options_not_mutated(self, mounts):
        options = {"foreground": True}
        memfs_mount.main("/mnt/x", MemFS(), options)
        assert options == {"foreground": True}
        assert mounts[0][2]["nothreads"] is True

    def test_usage(self, mounts, capsys):
        assert memfs_mount.run(["memfs-mount"]) == 2
        assert "usage" in capsys.readouterr().err
        assert mounts == []

    def test_run(self, mounts, tmp_path, monkeypatch):
        (tmp_path / "seed").mkdir()
        (tmp_path / "seed" / "file").write_text("")
        (tmp_path / "memfs.toml").write_text('[Seed]\npaths = ["seed"]\n\n[Mount]\nnothreads = false\n')
        monkeypatch.chdir(tmp_path)

        assert memfs_mount.run(["memfs-mount", "/mnt/x"]) == 0
        operations, _, options = mounts[0]
        assert options["nothreads"] is True
        assert [n.name for n in operations.fs.entries("/")] == ["file"]
