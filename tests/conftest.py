"""
Shared fixtures: a fake OpenAI client and stubbed relay components.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from rank_relay.data.sheets import Record


def make_run(status: str) -> SimpleNamespace:
    return SimpleNamespace(id="run_1", status=status, last_error=None)


def make_openai_client(statuses, reply: str = "Acme is ranked first.") -> MagicMock:
    """
    Build a MagicMock shaped like the OpenAI client's beta.threads API.

    statuses[0] is the status returned by runs.create, the rest are
    returned by successive runs.retrieve calls.
    """
    client = MagicMock()
    threads = client.beta.threads
    threads.create.return_value = SimpleNamespace(id="thread_1")
    threads.runs.create.return_value = make_run(statuses[0])
    threads.runs.retrieve.side_effect = [make_run(s) for s in statuses[1:]]
    threads.messages.list.return_value = SimpleNamespace(data=[
        SimpleNamespace(content=[
            SimpleNamespace(type="text", text=SimpleNamespace(value=reply)),
        ])
    ])
    return client


@pytest.fixture
def records():
    return [Record(rank="1", company="Acme"), Record(rank="2", company="Beta")]


@pytest.fixture
def sleeps():
    """Collects the intervals the assistant client would have slept."""
    return []


@pytest.fixture
def make_client():
    return make_openai_client
