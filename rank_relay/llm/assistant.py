"""
Assistant client for OpenAI Assistants integration.

Provides a client that sends rank data and a question to a hosted
assistant and waits for its answer.

Author: Blessing Ajala - Software Engineer
GitHub: https://github.com/Oyelamin
LinkedIn: https://www.linkedin.com/in/blessphp/
Twitter: @Blessin06147308
"""

import json
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

from openai import OpenAI, OpenAIError

from rank_relay.config import settings
from rank_relay.data.sheets import Record
from rank_relay.utils.exceptions import AssistantError
from rank_relay.utils.logger import logger


class AssistantClient:
    """
    Client for interacting with an OpenAI assistant.

    Each call opens its own thread, posts one message, runs the assistant
    and polls the run until it finishes.
    """

    POLLING_STATUSES = frozenset({"queued", "in_progress"})

    def __init__(
        self,
        api_key: Optional[str] = None,
        assistant_id: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        delete_threads: Optional[bool] = None,
        client: Optional[OpenAI] = None,
        sleep: Callable[[float], None] = time.sleep
    ) -> None:
        """
        Initialize assistant client.

        Args:
            api_key: OpenAI API key (default from config)
            assistant_id: Assistant to run (default from config)
            poll_interval: Seconds between run status checks (default from config)
            max_attempts: Maximum number of status checks (default from config)
            delete_threads: Delete the thread after use (default from config)
            client: Preconfigured OpenAI client, mainly for tests
            sleep: Function used to wait between polls
        """
        self._api_key = api_key or settings.assistant.api_key
        self._assistant_id = assistant_id or settings.assistant.assistant_id
        self._poll_interval = poll_interval or settings.assistant.poll_interval
        self._max_attempts = max_attempts or settings.assistant.max_attempts
        self._delete_threads = (
            delete_threads if delete_threads is not None else settings.assistant.delete_threads
        )
        self._client = client
        self._sleep = sleep

    @property
    def assistant_id(self) -> str:
        """Get the configured assistant id."""
        return self._assistant_id

    @property
    def client(self) -> OpenAI:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise AssistantError(
                    "OpenAI API key is not configured",
                    details="Set OPENAI_API_KEY in the environment"
                )
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    @staticmethod
    def build_message(query: str, records: List[Record]) -> str:
        """Build the message that carries the rank data and the question."""
        data = json.dumps([record.to_dict() for record in records], indent=2)
        return f"Here is the current rank data:\n{data}\n\nQuery: {query}"

    @contextmanager
    def _open_thread(self) -> Iterator[Any]:
        """Create a thread and release it once the caller is done."""
        thread = self.client.beta.threads.create()
        logger.debug(f"Created thread {thread.id}")
        try:
            yield thread
        finally:
            if self._delete_threads:
                self._release_thread(thread.id)

    def _release_thread(self, thread_id: str) -> None:
        """Best-effort thread deletion; the service expires leftovers on its own."""
        try:
            self.client.beta.threads.delete(thread_id)
            logger.debug(f"Deleted thread {thread_id}")
        except OpenAIError as e:
            logger.warning(f"Could not delete thread {thread_id}: {e}")

    def _wait_for_run(self, thread_id: str, run: Any) -> Any:
        """
        Poll a run until it leaves the queued/in_progress states.

        Gives up after max_attempts checks, returning the last seen run.
        """
        attempts = 0
        while run.status in self.POLLING_STATUSES and attempts < self._max_attempts:
            self._sleep(self._poll_interval)
            run = self.client.beta.threads.runs.retrieve(run_id=run.id, thread_id=thread_id)
            attempts += 1
            logger.debug(f"Run {run.id} status after {attempts} checks: {run.status}")
        return run

    def _latest_text(self, thread_id: str) -> str:
        """Return the text of the newest message in the thread."""
        messages = self.client.beta.threads.messages.list(
            thread_id=thread_id,
            order="desc",
            limit=1
        )
        if not messages.data:
            raise AssistantError("Assistant returned no messages", details=f"thread={thread_id}")

        for block in messages.data[0].content:
            if getattr(block, "type", None) == "text":
                return block.text.value

        raise AssistantError("Assistant reply contained no text", details=f"thread={thread_id}")

    def ask(self, query: str, records: List[Record]) -> str:
        """
        Ask the assistant a question about the rank data.

        Args:
            query: User question
            records: Rank records to include in the message

        Returns:
            The assistant's answer text

        Raises:
            AssistantError: If the run fails, times out, or the API call fails
        """
        start_time = time.perf_counter()

        try:
            with self._open_thread() as thread:
                self.client.beta.threads.messages.create(
                    thread_id=thread.id,
                    role="user",
                    content=self.build_message(query, records)
                )
                run = self.client.beta.threads.runs.create(
                    thread_id=thread.id,
                    assistant_id=self._assistant_id
                )
                run = self._wait_for_run(thread.id, run)

                if run.status != "completed":
                    last_error = getattr(run, "last_error", None)
                    raise AssistantError(
                        f"Assistant run ended with status: {run.status}",
                        details=f"run={run.id} last_error={last_error}"
                    )

                answer = self._latest_text(thread.id)

        except OpenAIError as e:
            raise AssistantError("Failed to get response from AI assistant", details=str(e))

        logger.info(f"Assistant response generated in {time.perf_counter() - start_time:.2f}s")
        return answer
