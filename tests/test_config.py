"""Tests for kvdiff.config and kvdiff.config_loader."""

from pathlib import Path

import pytest

from kvdiff._errors import ConfigError
from kvdiff.config import KvDiffConfig
from kvdiff.config_loader import load_config


class TestKvDiffConfig:
    """KvDiffConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self) -> None:
        config = KvDiffConfig()
        assert config.format == "changes"
        assert config.debounce == 300
        assert config.step == 100
        assert config.max_events == 10_000

    def test_frozen(self) -> None:
        config = KvDiffConfig()
        with pytest.raises(AttributeError):
            config.debounce = 50  # type: ignore[misc]

    def test_relative_root_resolved_to_absolute(self) -> None:
        config = KvDiffConfig(root=Path("site"))
        assert config.root.is_absolute()

    def test_absolute_root_unchanged(self, tmp_path: Path) -> None:
        config = KvDiffConfig(root=tmp_path)
        assert config.root == tmp_path

    def test_resolve_relative_and_absolute(self, tmp_path: Path) -> None:
        config = KvDiffConfig(root=tmp_path)
        assert config.resolve("style.yaml") == tmp_path / "style.yaml"
        assert config.resolve(Path("/abs/style.yaml")) == Path("/abs/style.yaml")

    def test_unknown_format_rejected(self) -> None:
        with pytest.raises(ConfigError, match="format"):
            KvDiffConfig(format="xml")  # type: ignore[arg-type]

    @pytest.mark.parametrize("field", ["debounce", "step", "max_events"])
    @pytest.mark.parametrize("value", [0, -1, "10", True])
    def test_non_positive_ints_rejected(self, field: str, value: object) -> None:
        with pytest.raises(ConfigError, match=field):
            KvDiffConfig(**{field: value})  # type: ignore[arg-type]


class TestLoadConfig:
    """load_config() — file discovery, sections and overrides."""

    def test_no_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config == KvDiffConfig(root=tmp_path)

    def test_yaml_top_level_keys(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("format: css\ndebounce: 50\n")
        config = load_config(tmp_path)
        assert config.format == "css"
        assert config.debounce == 50

    def test_yaml_section(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yml").write_text("kvdiff:\n  step: 25\n")
        assert load_config(tmp_path).step == 25

    def test_toml_section(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.toml").write_text('[kvdiff]\nformat = "css"\n')
        assert load_config(tmp_path).format == "css"

    def test_yaml_preferred_over_toml(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("step: 1\n")
        (tmp_path / "kvdiff.toml").write_text("step = 2\n")
        assert load_config(tmp_path).step == 1

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("format: css\n")
        config = load_config(tmp_path, format="changes")
        assert config.format == "changes"

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("debounce: 42\n")
        config = load_config(tmp_path, debounce=None, format=None)
        assert config.debounce == 42
        assert config.format == "changes"

    def test_unrelated_top_level_keys_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("name: demo\nstep: 10\n")
        assert load_config(tmp_path).step == 10

    def test_unknown_section_key_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("kvdiff:\n  colour: red\n")
        with pytest.raises(ConfigError, match="colour"):
            load_config(tmp_path)

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("format: [css\n")
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(tmp_path)

    def test_malformed_toml(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.toml").write_text("format = \n")
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(tmp_path)

    def test_non_table_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("- css\n")
        with pytest.raises(ConfigError, match="table"):
            load_config(tmp_path)

    def test_invalid_value_from_file(self, tmp_path: Path) -> None:
        (tmp_path / "kvdiff.yaml").write_text("format: xml\n")
        with pytest.raises(ConfigError, match="format"):
            load_config(tmp_path)
