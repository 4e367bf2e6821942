"""Tests for config file parsing."""

from syllabus_sync.config import Config, load_config


class TestLoadConfig:
    def test_defaults_when_missing(self, tmp_path, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        config = load_config(tmp_path / "missing.conf")
        assert config == Config()
        assert config.timezone == "America/Chicago"
        assert config.calendar_id == "primary"

    def test_parses_keys(self, tmp_path, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        config_file = tmp_path / "syllabus-sync.conf"
        config_file.write_text(
            "# syllabus-sync\n"
            "\n"
            'TIMEZONE="America/New_York"  # east coast\n'
            "CALENDAR_ID=law@group.calendar.google.com\n"
            "CALENDAR_NAME='Fall 2025'\n"
            "GOOGLE_CLIENT_SECRET_FILE=~/secrets/client_secret.json # oauth\n"
            "OPENAI_MODEL=gpt-4o\n"
            "DEFAULT_CLASS_ID=torts\n"
            "not a setting\n"
            "UNKNOWN_KEY=ignored\n"
        )

        config = load_config(config_file)

        assert config.timezone == "America/New_York"
        assert config.calendar_id == "law@group.calendar.google.com"
        assert config.calendar_name == "Fall 2025"
        assert config.google_client_secret_file == "~/secrets/client_secret.json"
        assert config.openai_model == "gpt-4o"
        assert config.default_class_id == "torts"

    def test_api_key_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert load_config(tmp_path / "missing.conf").openai_api_key == "sk-env"

    def test_file_key_wins_over_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        config_file = tmp_path / "syllabus-sync.conf"
        config_file.write_text('OPENAI_API_KEY="sk-file"\n')
        assert load_config(config_file).openai_api_key == "sk-file"
