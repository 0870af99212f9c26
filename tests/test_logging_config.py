"""
测试日志配置模块

验证 setup_logging 根据 LogConfig 安装的处理器、级别、格式和轮转参数。
"""

import re
import logging
import logging.handlers
import pytest

from pmpanel_client.logging_config import setup_logging
from pmpanel_client.models import LogConfig


@pytest.fixture(autouse=True)
def restore_root_logger():
    """每个测试后关闭并移除根日志记录器上的处理器"""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


def file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]


def read_log(logger, log_file) -> str:
    for handler in logger.handlers:
        handler.flush()
    return log_file.read_text(encoding='utf-8')


class TestLoggingConfig:
    """测试日志配置功能"""

    def test_console_only_without_file(self):
        logger = setup_logging(LogConfig(level="INFO"))

        assert len(logger.handlers) == 1
        assert file_handlers(logger) == []

    def test_file_and_directory_created(self, tmp_path):
        log_file = tmp_path / "logs" / "node" / "client.log"

        logger = setup_logging(LogConfig(level="INFO", file=str(log_file)))

        assert log_file.exists()
        assert len(logger.handlers) == 2
        assert len(file_handlers(logger)) == 1

    @pytest.mark.parametrize("level, expected", [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("WARN", logging.WARNING),
        ("WARNING", logging.WARNING),
        ("ERROR", logging.ERROR),
    ])
    def test_level_from_config(self, level, expected):
        logger = setup_logging(LogConfig(level=level))

        assert logger.level == expected
        assert all(h.level == expected for h in logger.handlers)

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        setup_logging(LogConfig(file=str(tmp_path / "first.log")))
        logger = setup_logging(LogConfig(file=str(tmp_path / "second.log")))

        handlers = file_handlers(logger)
        assert len(logger.handlers) == 2
        assert len(handlers) == 1
        assert handlers[0].baseFilename.endswith("second.log")

    def test_level_filtering_and_format(self, tmp_path):
        log_file = tmp_path / "client.log"
        logger = setup_logging(LogConfig(level="WARN", file=str(log_file)))

        logging.getLogger("pmpanel_client.api_client").info("Fetched node info")
        logging.getLogger("pmpanel_client.api_client").warning("Get user list failed")

        content = read_log(logger, log_file)
        assert "Fetched node info" not in content
        assert "[WARNING] pmpanel_client.api_client: Get user list failed" in content
        assert re.search(r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} ', content, re.MULTILINE)

    def test_rotation_parameters(self, tmp_path):
        logger = setup_logging(
            LogConfig(file=str(tmp_path / "client.log")),
            max_bytes=1024,
            backup_count=3
        )

        handler = file_handlers(logger)[0]
        assert handler.maxBytes == 1024
        assert handler.backupCount == 3

    def test_default_rotation_parameters(self, tmp_path):
        logger = setup_logging(LogConfig(file=str(tmp_path / "client.log")))

        handler = file_handlers(logger)[0]
        assert handler.maxBytes == 100 * 1024 * 1024
        assert handler.backupCount == 5

    def test_unwritable_log_path(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")

        with pytest.raises(IOError, match="Failed to open log file"):
            setup_logging(LogConfig(file=str(blocker / "client.log")))

    def test_logging_with_unicode(self, tmp_path):
        log_file = tmp_path / "client.log"
        logger = setup_logging(LogConfig(file=str(log_file)))

        logger.info("节点配置已更新")

        assert "节点配置已更新" in read_log(logger, log_file)

    def test_config_from_config_manager(self, config_dir):
        from pmpanel_client.config_manager import ConfigManager

        config_file = config_dir / "config.yaml"
        config_file.write_text(
            "api:\n"
            "  api_host: https://panel.example.com\n"
            "  api_key: secret-key\n"
            "  node_id: 7\n"
            "  node_type: Shadowsocks\n"
            "log:\n"
            "  level: debug\n"
            f"  file: {config_dir / 'client.log'}\n",
            encoding='utf-8'
        )

        config = ConfigManager(str(config_file)).load_config()
        logger = setup_logging(config.log)

        assert logger.level == logging.DEBUG
        assert file_handlers(logger)[0].baseFilename == str(config_dir / "client.log")
