"""日志模块测试

测试 get_logger 名称推断与 setup_logger / setup_root_logger 的处理器配置
"""

import logging
import logging.handlers
import os

import pytest

from ytree.config import LoggingSettings
from ytree.log import (
    get_logger,
    setup_logger,
    setup_root_logger,
    create_formatter,
    MicrosecondFormatter,
)


class TestGetLogger:
    """get_logger 测试"""

    def test_auto_infer_module_name(self):
        logger = get_logger()
        assert logger.name == __name__

    def test_simple_name_adds_prefix(self):
        assert get_logger("tree").name == "ytree.tree"

    def test_prefix_not_duplicated(self):
        assert get_logger("ytree.orm.tree").name == "ytree.orm.tree"
        assert get_logger("ytree").name == "ytree"

    def test_dotted_name_kept(self):
        assert get_logger("sqlalchemy.engine").name == "sqlalchemy.engine"


class TestFormatter:
    """格式化器测试"""

    def test_microsecond_formatter(self):
        formatter = create_formatter(use_microseconds=True)
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)

        assert isinstance(formatter, MicrosecondFormatter)
        # "YYYY-mm-dd HH:MM:SS.ffffff"
        assert len(formatter.formatTime(record)) == 26

    def test_plain_formatter(self):
        formatter = create_formatter(log_format="%(message)s", use_microseconds=False)
        assert not isinstance(formatter, MicrosecondFormatter)


class TestSetupLogger:
    """setup_logger 测试"""

    @pytest.fixture
    def logger_name(self, request):
        name = f"test_setup.{request.node.name}"
        yield name
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def test_console_only(self, logger_name):
        logger = setup_logger(logger_name, level="DEBUG")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_file_handler(self, logger_name, temp_dir):
        log_file = os.path.join(temp_dir, "logs", "plain.log")
        logger = setup_logger(logger_name, log_file=log_file, console=False)
        logger.info("写入文件")
        logger.handlers[0].flush()

        assert type(logger.handlers[0]) is logging.FileHandler
        with open(log_file, encoding="utf-8") as f:
            assert "写入文件" in f.read()

    def test_rotating_handler(self, logger_name, temp_dir):
        log_file = os.path.join(temp_dir, "logs", "rotating.log")
        logger = setup_logger(
            logger_name,
            log_file=log_file,
            console=False,
            max_bytes=1024,
            backup_count=2,
        )

        handler = logger.handlers[0]
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2

    def test_repeated_setup_replaces_handlers(self, logger_name):
        setup_logger(logger_name)
        logger = setup_logger(logger_name)
        assert len(logger.handlers) == 1


class TestSetupRootLogger:
    """setup_root_logger 测试"""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_from_config(self, temp_dir):
        config = LoggingSettings(
            level="WARNING",
            file_path=os.path.join(temp_dir, "logs", "root.log"),
            file_max_bytes="1MB",
            enable_console=False,
        )
        root = setup_root_logger(config=config, console=False)

        assert root.level == logging.WARNING
        file_handlers = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == 1024 * 1024

    def test_from_config_path(self, temp_file):
        path = temp_file("log_settings.yaml", "logging:\n  level: ERROR\n  enable_console: true\n")
        root = setup_root_logger(config_path=path)

        assert root.level == logging.ERROR
        assert len(root.handlers) == 1
