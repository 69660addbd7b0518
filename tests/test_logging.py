"""
Tests for structured logging.
"""

import io
import json

import pytest

from beranouns import SECONDS_PER_YEAR
from beranouns.monitoring import LogLevel, LogRecord, StructuredLogger, configure_logging, get_logger
from beranouns.testing import assert_reverts, deploy_beranouns


def records(output: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in output.getvalue().splitlines() if line]


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_json_output(self):
        output = io.StringIO()
        logger = StructuredLogger("test", output=output)

        logger.info("registration_minted", "Minted", label="\U0001F43B", token_id=1)

        record = records(output)[0]
        assert record["level"] == "info"
        assert record["event"] == "registration_minted"
        assert record["message"] == "Minted"
        assert record["label"] == "\U0001F43B"
        assert record["token_id"] == 1
        assert record["logger_name"] == "test"

    def test_emoji_not_escaped(self):
        output = io.StringIO()
        StructuredLogger(output=output).info("event", label="\U0001F43B")

        assert "\U0001F43B" in output.getvalue()

    def test_bind_adds_context(self):
        output = io.StringIO()
        logger = StructuredLogger("test", output=output).bind(registry="0xabc")

        logger.info("paused")
        logger.bind(actor="0xdef").info("unpaused")

        first, second = records(output)
        assert first["registry"] == "0xabc"
        assert second["registry"] == "0xabc"
        assert second["actor"] == "0xdef"

    def test_human_format(self):
        output = io.StringIO()
        logger = StructuredLogger("test", output=output, json_format=False)

        logger.warning("pause_changed", "Registry paused", paused=True)

        line = output.getvalue()
        assert "[WARNING]" in line
        assert "[pause_changed]" in line
        assert "Registry paused" in line
        assert "paused=True" in line

    def test_record_to_dict_flattens_data(self):
        record = LogRecord(level="info", event="e", data={"a": 1})

        assert record.to_dict()["a"] == 1
        assert "data" not in record.to_dict()


class TestLogLevel:

    def test_level_ordering(self):
        assert LogLevel.DEBUG.numeric < LogLevel.INFO.numeric < LogLevel.WARNING.numeric
        assert LogLevel.ERROR.numeric < LogLevel.CRITICAL.numeric

    def test_level_filtering(self):
        output = io.StringIO()
        logger = StructuredLogger("test", level=LogLevel.WARNING, output=output)

        logger.debug("dropped")
        logger.info("dropped")
        logger.warning("kept")
        logger.error("kept")

        assert [r["event"] for r in records(output)] == ["kept", "kept"]

    def test_configure_logging_accepts_string_level(self):
        output = io.StringIO()
        logger = configure_logging(level="debug", output=output)

        assert logger.level == LogLevel.DEBUG
        assert get_logger() is logger

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            configure_logging(level="verbose")


class TestRegistryEvents:
    """Events emitted by the registrar."""

    @pytest.fixture
    def output(self):
        return io.StringIO()

    @pytest.fixture
    def deployment(self, output):
        return deploy_beranouns(logger=StructuredLogger(level=LogLevel.DEBUG, output=output))

    def test_deploy_event(self, deployment, output):
        deployed = records(output)[0]

        assert deployed["event"] == "registry_deployed"
        assert deployed["registry"] == deployment.registry.address
        assert deployed["owner"] == deployment.owner.address

    def test_mint_events(self, deployment, output):
        owner = deployment.owner
        deployment.registry.mint("\U0001F43B", "", SECONDS_PER_YEAR, owner, owner)

        events = [r["event"] for r in records(output)]
        assert events[-2:] == ["registration_minted", "transition_accepted"]
        minted = records(output)[-2]
        assert minted["label"] == "\U0001F43B"
        assert minted["token_id"] == 1
        assert minted["price"] == 0

    def test_pause_event(self, deployment, output):
        deployment.registry.pause()

        changed = [r for r in records(output) if r["event"] == "pause_changed"]
        assert len(changed) == 1
        assert changed[0]["paused"] is True
        assert changed[0]["actor"] == deployment.owner.address

    def test_rejection_event(self, deployment, output):
        with assert_reverts("not_owner"):
            deployment.registry.connect(deployment.alice).pause()

        rejected = records(output)[-1]
        assert rejected["event"] == "transition_rejected"
        assert rejected["level"] == "info"
        assert rejected["reason"] == "not_owner"
        assert rejected["actor"] == deployment.alice.address

    def test_accepted_transitions_are_debug(self, output):
        deployment = deploy_beranouns(logger=StructuredLogger(level=LogLevel.INFO, output=output))
        deployment.registry.pause()

        events = [r["event"] for r in records(output)]
        assert "transition_accepted" not in events
        assert "pause_changed" in events

    def test_default_logger_is_global(self, log_output):
        deployment = deploy_beranouns()
        deployment.registry.pause()

        assert '"event": "pause_changed"' in log_output.getvalue()
