"""Tests for configuration parsing."""

import logging

from fourd.config import Config, parse_config


class TestParseConfig:
    def test_defaults(self):
        config = parse_config("")
        assert config == Config()
        assert config.store == "file"
        assert config.defer_days == 7

    def test_reads_keys(self):
        config = parse_config(
            """
            # fourd settings
            STORE=ticktick
            TIMEZONE="America/Toronto"  # local time
            DEFER_DAYS=3
            TICKTICK_CLIENT_ID=abc # inline comment
            TICKTICK_CLIENT_SECRET='s3cr#t'
            DATA_FILE=~/tasks.json
            """
        )
        assert config.store == "ticktick"
        assert config.timezone == "America/Toronto"
        assert config.defer_days == 3
        assert config.ticktick_client_id == "abc"
        assert config.ticktick_client_secret == "s3cr#t"
        assert config.data_path.name == "tasks.json"
        assert "~" not in str(config.data_path)

    def test_ignores_unknown_and_malformed_lines(self):
        config = parse_config("NOT A SETTING\nCOLOR=blue\nstore = File\n")
        assert config.store == "file"

    def test_invalid_defer_days_keeps_default(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = parse_config("DEFER_DAYS=soon")
        assert config.defer_days == 7
        assert "DEFER_DAYS" in caplog.text
