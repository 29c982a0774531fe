"""Unit tests for logging configuration."""

import json
from pathlib import Path

from loguru import logger

from buyer_api.core.logging import setup_logging


class TestLogging:
    """Tests for Loguru logging setup."""

    def test_setup_logging_does_not_raise(self) -> None:
        setup_logging("DEBUG")
        setup_logging("info")

    def test_file_sink_created(self, tmp_path: Path) -> None:
        log_dir = tmp_path / "logs"
        setup_logging("INFO", str(log_dir))
        logger.info("buyer import finished")
        logger.complete()
        setup_logging("INFO")

        log_file = log_dir / "buyer-api.log"
        assert log_file.exists()
        assert "buyer import finished" in log_file.read_text()

    def test_json_output_serializes_records(self, tmp_path: Path) -> None:
        setup_logging("INFO", str(tmp_path), json_output=True)
        logger.bind(buyer_count=2).info("import committed")
        logger.complete()
        setup_logging("INFO")

        line = (tmp_path / "buyer-api.log").read_text().strip().splitlines()[-1]
        record = json.loads(line)["record"]
        assert record["message"] == "import committed"
        assert record["extra"]["buyer_count"] == 2
        assert record["level"]["name"] == "INFO"
