"""
Main relay orchestration class.

Coordinates the sheet fetcher and the assistant client to answer queries.

Author: Blessing Ajala - Software Engineer
GitHub: https://github.com/Oyelamin
LinkedIn: https://www.linkedin.com/in/blessphp/
Twitter: @Blessin06147308
"""

from typing import Any, Dict, Optional

from rank_relay.data.sheets import SheetFetcher
from rank_relay.llm.assistant import AssistantClient
from rank_relay.utils.exceptions import DataUnavailableError, RankRelayError
from rank_relay.utils.logger import logger
from rank_relay.utils.performance import PerformanceTracker


class RankRelay:
    """
    Relay that answers questions about the current rank data.

    Every call fetches a fresh copy of the sheet and opens a new
    assistant thread; nothing is shared between calls.
    """

    def __init__(
        self,
        fetcher: Optional[SheetFetcher] = None,
        assistant: Optional[AssistantClient] = None,
        tracker: Optional[PerformanceTracker] = None
    ) -> None:
        """Initialize the relay with its components."""
        self._fetcher = fetcher or SheetFetcher()
        self._assistant = assistant or AssistantClient()
        self._performance_tracker = tracker or PerformanceTracker()

    def answer(self, query: str) -> Dict[str, Any]:
        """
        Answer a user query using the current rank data.

        Args:
            query: The user's question

        Returns:
            Dictionary with the answer and its metrics

        Raises:
            DataUnavailableError: If the sheet cannot be fetched or has no rows
            AssistantError: If the assistant fails to answer
        """
        start_time = self._performance_tracker.start_timer()
        fetch_time = None
        assistant_time = None
        records = []

        try:
            fetch_start = self._performance_tracker.start_timer()
            records = self._fetcher.fetch_records()
            fetch_time = self._performance_tracker.start_timer() - fetch_start

            if not records:
                raise DataUnavailableError(
                    "Could not fetch rank data from Google Sheets. Please try again later.",
                    details="Sheet returned no data rows"
                )

            assistant_start = self._performance_tracker.start_timer()
            answer = self._assistant.ask(query, records)
            assistant_time = self._performance_tracker.start_timer() - assistant_start

        except RankRelayError as e:
            status = "no_data" if isinstance(e, DataUnavailableError) else "error"
            self._performance_tracker.log_metrics(self._performance_tracker.create_metrics(
                query=query,
                start_time=start_time,
                fetch_time=fetch_time,
                records_found=len(records),
                status=status
            ))
            raise

        logger.info("Generated answer successfully")
        metrics = self._performance_tracker.create_metrics(
            query=query,
            start_time=start_time,
            fetch_time=fetch_time,
            assistant_time=assistant_time,
            records_found=len(records),
            response=answer
        )
        self._performance_tracker.log_metrics(metrics)

        return {"answer": answer, "metrics": metrics.to_dict()}
