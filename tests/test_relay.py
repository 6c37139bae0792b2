"""
Unit tests for RankRelay orchestration and its metrics.
"""

from unittest.mock import MagicMock

import pytest

from rank_relay.core.relay import RankRelay
from rank_relay.data.sheets import SheetFetcher
from rank_relay.llm.assistant import AssistantClient
from rank_relay.utils.exceptions import AssistantError, DataUnavailableError
from rank_relay.utils.performance import PerformanceTracker


@pytest.fixture
def fetcher(records) -> MagicMock:
    fetcher = MagicMock(spec=SheetFetcher)
    fetcher.fetch_records.return_value = records
    return fetcher


@pytest.fixture
def assistant() -> MagicMock:
    assistant = MagicMock(spec=AssistantClient)
    assistant.ask.return_value = "Acme"
    return assistant


@pytest.fixture
def tracker() -> MagicMock:
    return MagicMock(wraps=PerformanceTracker(enabled=True))


def test_answer_returns_text_and_metrics(fetcher, assistant, tracker, records) -> None:
    result = RankRelay(fetcher, assistant, tracker).answer("Who is first?")

    assert result["answer"] == "Acme"
    metrics = result["metrics"]
    assert metrics["records_found"] == len(records)
    assert metrics["status"] == "success"
    assert metrics["response_length"] == len("Acme")
    assert metrics["fetch_time_ms"] is not None
    assert metrics["assistant_time_ms"] is not None
    tracker.log_metrics.assert_called_once()


def test_each_call_fetches_fresh_data(fetcher, assistant, tracker) -> None:
    relay = RankRelay(fetcher, assistant, tracker)
    relay.answer("first")
    relay.answer("second")
    assert fetcher.fetch_records.call_count == 2
    assert assistant.ask.call_count == 2


def test_empty_sheet_raises_without_asking(fetcher, assistant, tracker) -> None:
    fetcher.fetch_records.return_value = []

    with pytest.raises(DataUnavailableError):
        RankRelay(fetcher, assistant, tracker).answer("Who is first?")

    assistant.ask.assert_not_called()
    logged = tracker.log_metrics.call_args[0][0]
    assert logged.status == "no_data"


def test_assistant_error_propagates(fetcher, assistant, tracker) -> None:
    assistant.ask.side_effect = AssistantError("Assistant run ended with status: expired")

    with pytest.raises(AssistantError):
        RankRelay(fetcher, assistant, tracker).answer("Who is first?")

    assert tracker.log_metrics.call_args[0][0].status == "error"


def test_format_console_output() -> None:
    tracker = PerformanceTracker(enabled=False)
    metrics = tracker.create_metrics(
        query="q",
        start_time=tracker.start_timer(),
        fetch_time=0.25,
        assistant_time=1.5,
        records_found=3,
    )
    output = tracker.format_console_output(metrics)
    assert "Sheet fetch: 0.25s" in output
    assert "Assistant: 1.50s" in output
    assert "Records: 3" in output
