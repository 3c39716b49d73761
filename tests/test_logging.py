"""Tests for server and client logging setup."""

from friendgraph.client.logger import ClientLogger
from friendgraph.server.logger import configure_logging, get_logger


class TestServerLogging:
    def test_file_sink_tags_component_name(self, tmp_path):
        log_file = tmp_path / "logs" / "server.log"
        configure_logging(level="DEBUG", to_console=False, to_file=True, file_path=str(log_file))
        try:
            get_logger("UserService").info("创建用户: u-1 (alice)")
            get_logger().warning("untagged")
        finally:
            configure_logging()

        text = log_file.read_text(encoding="utf-8")
        assert "UserService" in text
        assert "创建用户: u-1 (alice)" in text
        assert "friendgraph" in text

    def test_level_filters_file_sink(self, tmp_path):
        log_file = tmp_path / "server.log"
        configure_logging(level="WARNING", to_console=False, to_file=True, file_path=str(log_file))
        try:
            get_logger("Database").info("hidden")
            get_logger("Database").error("store down")
        finally:
            configure_logging()

        text = log_file.read_text(encoding="utf-8")
        assert "hidden" not in text
        assert "store down" in text


class TestClientLogging:
    def test_threshold_drops_lower_levels(self, capsys):
        log = ClientLogger("Client", level="warning")

        log.info("quiet")
        log.warning("loud")
        log.error("broken")

        captured = capsys.readouterr()
        assert "quiet" not in captured.out
        assert "WARNING [Client] loud" in captured.out
        assert "ERROR [Client] broken" in captured.err

    def test_env_level_off_silences(self, monkeypatch, capsys):
        monkeypatch.setenv("FRIENDGRAPH_CLIENT_LOG_LEVEL", "off")

        ClientLogger("Client").error("nothing")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
