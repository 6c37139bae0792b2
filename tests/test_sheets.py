"""
Unit tests for SheetFetcher: URL building, CSV parsing and fetching.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from rank_relay.data.sheets import Record, SheetFetcher
from rank_relay.utils.exceptions import DataUnavailableError


@pytest.fixture
def fetcher() -> SheetFetcher:
    return SheetFetcher(sheet_id="sheet123", sheet_name="Rank", timeout=10)


class TestBuildUrl:
    """Tests for build_url()."""

    def test_builds_gviz_csv_url(self) -> None:
        assert SheetFetcher.build_url("abc", "Rank") == (
            "https://docs.google.com/spreadsheets/d/abc/gviz/tq?tqx=out:csv&sheet=Rank"
        )

    def test_encodes_sheet_name(self) -> None:
        url = SheetFetcher.build_url("abc", "Rank List/2024")
        assert url.endswith("&sheet=Rank%20List%2F2024")


class TestParseRecords:
    """Tests for parse_records()."""

    def test_maps_columns_in_header_order(self, fetcher: SheetFetcher) -> None:
        text = "Rank,Company\n1,Acme\n2,Beta\n"
        assert fetcher.parse_records(text) == [Record("1", "Acme"), Record("2", "Beta")]

    def test_maps_columns_regardless_of_position(self, fetcher: SheetFetcher) -> None:
        text = "Company,Sector,Rank\nAcme,Tech,1\nBeta,Retail,2\nGamma,Energy,3\n"
        assert fetcher.parse_records(text) == [
            Record("1", "Acme"),
            Record("2", "Beta"),
            Record("3", "Gamma"),
        ]

    def test_header_match_is_case_insensitive_substring(self, fetcher: SheetFetcher) -> None:
        text = "Overall RANK,company name\n7,Delta\n"
        assert fetcher.parse_records(text) == [Record("7", "Delta")]

    def test_handles_quoted_fields_with_commas(self, fetcher: SheetFetcher) -> None:
        # Google's CSV export quotes every field
        text = '"Rank","Company"\n"1","Acme, Inc."\n"2","Beta"\n'
        assert fetcher.parse_records(text) == [Record("1", "Acme, Inc."), Record("2", "Beta")]

    def test_skips_blank_lines_and_trims_values(self, fetcher: SheetFetcher) -> None:
        text = "\n\n Rank , Company \r\n\r\n 1 , Acme \r\n   \r\n2,Beta\r\n"
        assert fetcher.parse_records(text) == [Record("1", "Acme"), Record("2", "Beta")]

    def test_missing_column_defaults_to_empty(self, fetcher: SheetFetcher) -> None:
        text = "Rank,Sector\n1,Tech\n2,Retail\n"
        assert fetcher.parse_records(text) == [Record("1", ""), Record("2", "")]

    def test_keeps_duplicate_rows(self, fetcher: SheetFetcher) -> None:
        text = "Rank,Company\n1,Acme\n1,Acme\n"
        assert len(fetcher.parse_records(text)) == 2

    def test_empty_document_returns_empty(self, fetcher: SheetFetcher) -> None:
        assert fetcher.parse_records("") == []
        assert fetcher.parse_records("\n  \n") == []

    def test_header_only_returns_empty(self, fetcher: SheetFetcher) -> None:
        assert fetcher.parse_records('"Rank","Company"\n') == []


class TestFetch:
    """Tests for fetch_csv() and fetch_records()."""

    def test_fetch_records_uses_bounded_timeout(self, fetcher: SheetFetcher) -> None:
        response = MagicMock(text="Rank,Company\n1,Acme\n")
        with patch("rank_relay.data.sheets.requests.get", return_value=response) as mock_get:
            records = fetcher.fetch_records()

        assert records == [Record("1", "Acme")]
        mock_get.assert_called_once_with(
            SheetFetcher.build_url("sheet123", "Rank"),
            timeout=10
        )

    def test_transport_error_raises_data_unavailable(self, fetcher: SheetFetcher) -> None:
        with patch(
            "rank_relay.data.sheets.requests.get",
            side_effect=requests.ConnectionError("connection refused"),
        ):
            with pytest.raises(DataUnavailableError) as exc_info:
                fetcher.fetch_csv()
        assert "connection refused" in exc_info.value.details

    def test_timeout_raises_data_unavailable(self, fetcher: SheetFetcher) -> None:
        with patch("rank_relay.data.sheets.requests.get", side_effect=requests.Timeout()):
            with pytest.raises(DataUnavailableError) as exc_info:
                fetcher.fetch_csv()
        assert "timed out" in exc_info.value.details

    def test_error_status_raises_data_unavailable(self, fetcher: SheetFetcher) -> None:
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        with patch("rank_relay.data.sheets.requests.get", return_value=response):
            with pytest.raises(DataUnavailableError):
                fetcher.fetch_csv()

    def test_missing_sheet_id_skips_request(self, fetcher: SheetFetcher, monkeypatch) -> None:
        monkeypatch.setattr(fetcher, "_sheet_id", None)
        with patch("rank_relay.data.sheets.requests.get") as mock_get:
            with pytest.raises(DataUnavailableError):
                fetcher.fetch_csv()
        mock_get.assert_not_called()
