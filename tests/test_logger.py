import json
import logging

from intentbot.utils.logger import CustomJsonFormatter, get_turn_logger


def make_record(**attrs) -> logging.LogRecord:
    record = logging.LogRecord("intentbot.test", logging.INFO, __file__, 1, "classified %s", ("turn",), None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestCustomJsonFormatter:

    def test_renders_one_json_object(self):
        entry = json.loads(CustomJsonFormatter("intent-bot", "test").format(make_record()))

        assert entry["message"] == "classified turn"
        assert entry["service"] == "intent-bot"
        assert entry["level"] == "INFO"
        assert "turn_id" not in entry

    def test_merges_turn_id_and_data(self):
        record = make_record(turn_id="abc", data={"scores": {"GetWeather": 0.95}})

        entry = json.loads(CustomJsonFormatter("intent-bot", "test").format(record))

        assert entry["turn_id"] == "abc"
        assert entry["scores"] == {"GetWeather": 0.95}


class TestTurnLogger:

    def test_stamps_turn_id_on_records(self, caplog):
        logger = get_turn_logger("intentbot.test", "turn-1")

        with caplog.at_level(logging.INFO, logger="intentbot.test"):
            logger.info("hello", extra={"data": {"k": 1}})

        assert caplog.records[0].turn_id == "turn-1"
        assert caplog.records[0].data == {"k": 1}

    def test_generates_turn_id(self):
        assert get_turn_logger("intentbot.test").turn_id
