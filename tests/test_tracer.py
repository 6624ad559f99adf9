import io
import logging

from memfs import MemFS
from tracer import traceFS


def listing(fs, name=""):
    out = io.StringIO()
    assert fs.ls(name, out=out)
    return out.getvalue().splitlines()


def build(base, layout):
    for rel in layout:
        target = base / rel
        if rel.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("")


def test_trace_layout(tmp_path):
    build(tmp_path, ["src/", "src/main.c", "src/lib/", "src/lib/util.c", "README", "docs/"])
    fs = traceFS(str(tmp_path))

    assert fs.path() == "/"
    assert listing(fs) == ["README", "docs/", "src/"]
    assert listing(fs, "src") == ["lib/", "main.c"]
    assert fs.cd("src")
    assert listing(fs, "lib") == ["util.c"]
    assert listing(fs, "/") == ["README", "docs/", "src/"]
    assert fs.check() == []


def test_trace_into_existing_fs(tmp_path):
    build(tmp_path / "one", ["shared/", "shared/a", "only_one"])
    build(tmp_path / "two", ["shared/", "shared/b", "only_two/"])

    fs = MemFS()
    traceFS(str(tmp_path / "one"), fs)
    same = traceFS(str(tmp_path / "two"), fs)

    assert same is fs
    assert listing(fs) == ["only_one", "only_two/", "shared/"]
    assert listing(fs, "shared") == ["a", "b"]
    assert fs.check() == []


def test_file_blocks_directory(tmp_path, caplog):
    build(tmp_path / "one", ["clash"])
    build(tmp_path / "two", ["clash/", "clash/inside"])

    fs = traceFS(str(tmp_path / "one"))
    with caplog.at_level(logging.WARNING, logger="tracer"):
        traceFS(str(tmp_path / "two"), fs)

    assert listing(fs) == ["clash"]
    assert "clash" in caplog.text
    assert fs.check() == []


def test_empty_directory(tmp_path):
    fs = traceFS(str(tmp_path))
    assert listing(fs) == []
    assert fs.tree.size() == 0


def test_directory_blocks_file(tmp_path, caplog):
    build(tmp_path / "one", ["clash/", "clash/inside"])
    build(tmp_path / "two", ["clash"])

    fs = traceFS(str(tmp_path / "one"))
    with caplog.at_level(logging.WARNING, logger="tracer"):
        traceFS(str(tmp_path / "two"), fs)

    assert listing(fs) == ["clash/"]
    assert listing(fs, "clash") == ["inside"]
    assert "a directory of that name exists" in caplog.text
    assert fs.check() == []
