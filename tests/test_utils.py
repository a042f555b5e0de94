# tests/test_utils.py
"""Unit tests for utility functions in the `wee.utils.utils` module.

Covers the nested dictionary merge, configuration loading with a user
`config.toml` layered over the embedded defaults, first-run creation of the
user config, and encoding detection.
"""

from pathlib import Path

from wee.utils import utils


def test_deep_merge() -> None:
    """Verify that `deep_merge` correctly merges nested dictionaries.

    This test ensures:
    - Existing values are preserved if not overridden.
    - Nested dictionaries are merged recursively.
    - Conflicting keys are overridden by values from the second dictionary.
    - The base dictionary is left untouched.
    """
    base = {"a": 1, "b": {"x": 10, "y": 20}}
    override = {"b": {"y": 99, "z": 100}, "c": 3}
    result = utils.deep_merge(base, override)
    assert result == {"a": 1, "b": {"x": 10, "y": 99, "z": 100}, "c": 3}
    assert base == {"a": 1, "b": {"x": 10, "y": 20}}


def test_load_config_merges_user_file(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text(
        '[editor]\ntab_size = 8\n\n[keybindings]\nquit = "ctrl+w"\n', encoding="utf-8"
    )
    config = utils.load_config(tmp_path)
    assert config["editor"]["tab_size"] == 8
    assert config["editor"]["max_undo_snapshots"] == 50
    assert config["keybindings"]["quit"] == "ctrl+w"
    assert config["keybindings"]["save_file"] == "ctrl+s"
    assert "c" in config["syntax"]


def test_load_config_with_broken_toml_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("[editor\ntab_size = ", encoding="utf-8")
    config = utils.load_config(tmp_path)
    assert config["editor"] == utils.DEFAULT_CONFIG["editor"]


def test_load_config_does_not_mutate_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("[editor]\nquit_times = 5\n", encoding="utf-8")
    utils.load_config(tmp_path)
    assert utils.DEFAULT_CONFIG["editor"]["quit_times"] == 2


def test_ensure_user_config_exists_copies_template(tmp_path: Path, monkeypatch) -> None:
    project = tmp_path / "project"
    project.mkdir()
    (project / "config.toml").write_text("[editor]\ntab_size = 2\n", encoding="utf-8")
    monkeypatch.setattr(utils, "get_project_root", lambda: project)

    config_dir = tmp_path / "home" / ".config" / "wee"
    utils.ensure_user_config_exists(config_dir)
    assert (config_dir / "config.toml").read_text(encoding="utf-8") == "[editor]\ntab_size = 2\n"

    # An existing user file is never overwritten.
    (config_dir / "config.toml").write_text("# mine\n", encoding="utf-8")
    utils.ensure_user_config_exists(config_dir)
    assert (config_dir / "config.toml").read_text(encoding="utf-8") == "# mine\n"


def test_bundled_template_is_found() -> None:
    assert (utils.get_project_root() / "config.toml").is_file()


def test_detect_encoding() -> None:
    assert utils.detect_encoding(b"") == "utf-8"
    assert utils.detect_encoding(b"plain ascii text\n") == "utf-8"
    text = "Grüße, naïve café. " * 20
    assert utils.detect_encoding(text.encode("utf-8")).lower() == "utf-8"
