"""Tests for kitebuilder.config."""

import pytest

from kitebuilder.config import BuilderConfig, find_buildkite_root, load_config
from kitebuilder.errors import ConfigError


@pytest.fixture
def buildkite_dir(tmp_path, monkeypatch):
    directory = tmp_path / ".buildkite"
    directory.mkdir()
    monkeypatch.chdir(tmp_path)
    return directory


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, buildkite_dir):
        config = load_config()
        assert config == BuilderConfig()
        assert config.agent_executable == "buildkite-agent"
        assert config.pipelines_dir == "pipelines"

    def test_reads_builder_yaml(self, buildkite_dir):
        (buildkite_dir / "builder.yaml").write_text(
            "agent_executable: /usr/local/bin/buildkite-agent\n"
            "log_level: DEBUG\n"
            "log_format: structured\n"
        )
        config = load_config()
        assert config.agent_executable == "/usr/local/bin/buildkite-agent"
        assert config.log_level == "DEBUG"
        assert config.log_format == "structured"

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("pipelines_dir: ci\n")
        assert load_config(path).pipelines_dir == "ci"

    def test_empty_file(self, buildkite_dir):
        (buildkite_dir / "builder.yaml").write_text("")
        assert load_config() == BuilderConfig()

    def test_env_overrides_file(self, buildkite_dir, monkeypatch):
        (buildkite_dir / "builder.yaml").write_text("agent_executable: from-file\nlog_level: DEBUG\n")
        monkeypatch.setenv("KITEBUILDER_AGENT", "from-env")
        monkeypatch.setenv("KITEBUILDER_LOG_LEVEL", "WARNING")

        config = load_config()
        assert config.agent_executable == "from-env"
        assert config.log_level == "WARNING"

    def test_invalid_yaml(self, buildkite_dir):
        (buildkite_dir / "builder.yaml").write_text("agent_executable: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML syntax"):
            load_config()

    def test_non_mapping(self, buildkite_dir):
        (buildkite_dir / "builder.yaml").write_text("- one\n- two\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config()

    def test_unknown_keys(self, buildkite_dir):
        (buildkite_dir / "builder.yaml").write_text("agent: x\nretries: 3\n")
        with pytest.raises(ConfigError, match="Unknown config keys: agent, retries"):
            load_config()

    def test_invalid_log_format(self, buildkite_dir):
        (buildkite_dir / "builder.yaml").write_text("log_format: xml\n")
        with pytest.raises(ConfigError, match="log_format must be one of pretty, structured"):
            load_config()

    def test_invalid_log_level_from_file(self, buildkite_dir):
        (buildkite_dir / "builder.yaml").write_text("log_level: VERBOSE\n")
        with pytest.raises(ConfigError, match="log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL"):
            load_config()

    def test_invalid_log_level_from_env(self, buildkite_dir, monkeypatch):
        monkeypatch.setenv("KITEBUILDER_LOG_LEVEL", "VERBOSE")
        with pytest.raises(ConfigError, match="got 'VERBOSE'"):
            load_config()

    def test_log_level_is_case_insensitive(self, buildkite_dir, monkeypatch):
        monkeypatch.setenv("KITEBUILDER_LOG_LEVEL", "debug")
        assert load_config().log_level == "debug"

    def test_empty_agent_executable(self):
        with pytest.raises(ConfigError, match="agent_executable is required"):
            BuilderConfig(agent_executable="").validate()


class TestFindBuildkiteRoot:
    """Tests for find_buildkite_root."""

    def test_finds_in_start_directory(self, buildkite_dir, tmp_path):
        assert find_buildkite_root(tmp_path) == buildkite_dir.resolve()

    def test_finds_from_nested_directory(self, buildkite_dir):
        nested = buildkite_dir / "pipelines" / "app"
        nested.mkdir(parents=True)
        assert find_buildkite_root(nested) == buildkite_dir.resolve()

    def test_defaults_to_cwd(self, buildkite_dir):
        assert find_buildkite_root() == buildkite_dir.resolve()

    def test_returns_none_when_missing(self, tmp_path):
        assert find_buildkite_root(tmp_path) is None
