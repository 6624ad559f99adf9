import pytest
import pytoml as toml

from memfs_config import DEFAULTS, load_config, mount_options


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "memfs.toml"))
    assert config == DEFAULTS
    assert config is not DEFAULTS


def test_defaults_not_shared(tmp_path):
    config = load_config(str(tmp_path / "memfs.toml"))
    config["Seed"]["paths"].append("x")
    assert DEFAULTS["Seed"]["paths"] == []


def test_values_merge_over_defaults(tmp_path):
    path = tmp_path / "memfs.toml"
    path.write_text('[Seed]\npaths = ["a", "b"]\n\n[Mount]\nforeground = false\n')

    config = load_config(str(path))
    assert config["Seed"]["paths"] == ["a", "b"]
    assert config["Mount"]["foreground"] is False
    assert config["Mount"]["allow_other"] is False
    assert config["logging"]["level"] == "WARNING"


def test_unknown_tables_kept(tmp_path):
    path = tmp_path / "memfs.toml"
    path.write_text('[extra]\nkey = 1\n')
    assert load_config(str(path))["extra"] == {"key": 1}


def test_cwd_default(tmp_path, monkeypatch):
    (tmp_path / "memfs.toml").write_text('[logging]\nlevel = "debug"\n')
    monkeypatch.chdir(tmp_path)
    assert load_config()["logging"]["level"] == "debug"


def test_malformed(tmp_path):
    path = tmp_path / "memfs.toml"
    path.write_text("[Seed\npaths = \n")
    with pytest.raises(toml.TomlError):
        load_config(str(path))


def test_mount_options_single_threaded(tmp_path):
    options = mount_options(load_config(str(tmp_path / "memfs.toml")))
    assert options == {"foreground": True, "allow_other": False, "nothreads": True}


def test_mount_options_ignore_nothreads_false(tmp_path, caplog):
    path = tmp_path / "memfs.toml"
    path.write_text('[Mount]\nnothreads = false\nforeground = false\n')

    options = mount_options(load_config(str(path)))
    assert options["nothreads"] is True
    assert options["foreground"] is False
    assert "nothreads" in caplog.text


def test_mount_options_leave_config_alone(tmp_path):
    config = load_config(str(tmp_path / "memfs.toml"))
    mount_options(config)
    assert "nothreads" not in config["Mount"]
