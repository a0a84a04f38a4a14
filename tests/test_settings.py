import logging

import pytest
import yaml

from mcdevkit.config.logging_config import _parse_size, setup_logging
from mcdevkit.config.settings import Config, config as global_config
from mcdevkit.exceptions import ConfigurationError


def test_first_use_writes_defaults(tmp_path):
    settings = Config(home=tmp_path)

    assert settings.config_file == tmp_path / "config" / "config.yaml"
    assert settings.config_file.is_file()
    assert settings.get("servers.default_port") == 25565
    assert settings.get("workspace.temp_root") is None


def test_user_file_overrides_single_keys(tmp_path):
    config_file = tmp_path / "config" / "config.yaml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(yaml.safe_dump({"servers": {"default_memory": 4096}}))

    settings = Config(home=tmp_path)

    assert settings.get("servers.default_memory") == 4096
    assert settings.get("servers.default_port") == 25565


@pytest.mark.parametrize("content", ["servers: [unclosed", "- just\n- a list\n"])
def test_unusable_file_falls_back_to_defaults(tmp_path, content):
    config_file = tmp_path / "config" / "config.yaml"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(content)

    settings = Config(home=tmp_path)

    assert settings.get("servers.default_memory") == 2048


def test_dotted_get_and_set(tmp_path):
    settings = Config(home=tmp_path)

    settings.set("workspace.temp_root", str(tmp_path))
    settings.set("extra.nested.key", 1)

    assert settings.get_temp_root() == tmp_path
    assert settings.get("extra.nested.key") == 1
    assert settings.get("servers.default_port.missing", "fallback") == "fallback"


def test_reset_to_defaults_persists(tmp_path):
    settings = Config(home=tmp_path)
    settings.set("servers.default_port", 25570)
    settings.save_config()

    settings.reset_to_defaults()

    assert Config(home=tmp_path).get("servers.default_port") == 25565


def test_validate_rejects_bad_server_defaults(tmp_path):
    settings = Config(home=tmp_path)
    settings.validate()

    settings.set("servers.default_port", 0)
    with pytest.raises(ConfigurationError):
        settings.validate()


@pytest.mark.parametrize("size, expected", [
    ("10MB", 10 * 1024 ** 2),
    ("512kb", 512 * 1024),
    ("1.5GB", int(1.5 * 1024 ** 3)),
    ("2048", 2048),
    ("lots", 10 * 1024 ** 2),
])
def test_parse_log_size(size, expected):
    assert _parse_size(size) == expected


def test_log_file_receives_debug_below_console_level(tmp_path):
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    previous_log_file = global_config.get("logging.log_file")
    log_file = tmp_path / "logs" / "mcdevkit.log"
    global_config.set("logging.log_file", str(log_file))

    try:
        setup_logging("INFO", enable_file_logging=True, enable_rich_logging=False)
        logging.getLogger("mcdevkit.test").debug("resolved download url")

        console_handler = root_logger.handlers[0]
        assert console_handler.level == logging.INFO
        for handler in root_logger.handlers:
            handler.flush()
        assert "resolved download url" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root_logger.handlers:
            if handler not in handlers:
                handler.close()
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)
        global_config.set("logging.log_file", previous_log_file)
