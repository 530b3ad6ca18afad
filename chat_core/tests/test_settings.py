import json
import logging

import pytest

from chat_core.config.settings import Settings
from chat_core.infrastructure.logging.logger import JsonFormatter


def test_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CHAT_CONFIG_FILE", str(tmp_path / "missing.yaml"))
    cfg = Settings(_env_file=None)
    assert cfg.openai_base_url == "https://api.openai.com/v1"
    assert cfg.max_function_hops == 1
    assert cfg.concurrent_submit == "queue"


def test_settings_from_yaml_and_env(monkeypatch, tmp_path):
    path = tmp_path / "chat.yaml"
    path.write_text("max_function_hops: 3\nconcurrent_submit: reject\nhttp_timeout: 12\n", encoding="utf-8")
    monkeypatch.setenv("CHAT_CONFIG_FILE", str(path))
    monkeypatch.setenv("HTTP_TIMEOUT", "5")
    cfg = Settings(_env_file=None)
    assert cfg.max_function_hops == 3
    assert cfg.concurrent_submit == "reject"
    # 环境变量优先于 config.yaml
    assert cfg.http_timeout == 5.0


def test_settings_rejects_short_key():
    with pytest.raises(ValueError):
        Settings(_env_file=None, openai_api_key="short")


def test_json_formatter_extra_and_redaction():
    record = logging.LogRecord("chat_core", logging.INFO, __file__, 1, "x" * 100, None, None)
    record.extra = {"turn_id": "turn-1"}
    payload = json.loads(JsonFormatter(redact_content=True).format(record))
    assert payload["turn_id"] == "turn-1"
    assert payload["level"] == "INFO"
    assert len(payload["msg"]) == 64
