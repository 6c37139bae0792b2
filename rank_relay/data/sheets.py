"""
Rank data loading from a public spreadsheet CSV export.

Handles fetching the CSV document, parsing it, and mapping rows to records.
"""

import io
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import quote

import pandas as pd
import requests

from rank_relay.config import settings
from rank_relay.utils.exceptions import DataUnavailableError
from rank_relay.utils.logger import logger


@dataclass(frozen=True)
class Record:
    """One rank/company row from the spreadsheet."""

    rank: str
    company: str

    def to_dict(self) -> Dict[str, str]:
        """Serialize with the column names the assistant expects."""
        return {"Rank": self.rank, "Company": self.company}


class SheetFetcher:
    """
    Fetches rank records from a spreadsheet CSV export.

    Provides methods for building the export URL, downloading the CSV
    and turning it into an ordered list of records.
    """

    RANK_KEYWORD = "rank"
    COMPANY_KEYWORD = "company"

    def __init__(
        self,
        sheet_id: Optional[str] = None,
        sheet_name: Optional[str] = None,
        timeout: Optional[float] = None
    ) -> None:
        """
        Initialize SheetFetcher.

        Args:
            sheet_id: Spreadsheet identifier (default from config)
            sheet_name: Sheet tab to export (default from config)
            timeout: Request timeout in seconds (default from config)
        """
        self._sheet_id = sheet_id or settings.sheet.sheet_id
        self._sheet_name = sheet_name or settings.sheet.sheet_name
        self._timeout = timeout or settings.sheet.timeout

    @staticmethod
    def build_url(sheet_id: str, sheet_name: str) -> str:
        """Build the CSV export URL for a sheet tab."""
        return settings.sheet.url_template.format(
            sheet_id=sheet_id,
            sheet_name=quote(sheet_name, safe="")
        )

    def fetch_csv(self) -> str:
        """
        Download the sheet as CSV text.

        Returns:
            Raw CSV document

        Raises:
            DataUnavailableError: If the sheet is not configured or the request fails
        """
        if not self._sheet_id:
            raise DataUnavailableError(
                "Spreadsheet is not configured",
                details="Set SHEET_ID in the environment"
            )

        url = self.build_url(self._sheet_id, self._sheet_name)
        logger.debug(f"Fetching sheet '{self._sheet_name}' from {url}")

        try:
            response = requests.get(url, timeout=self._timeout)
            response.raise_for_status()
        except requests.Timeout:
            raise DataUnavailableError(
                "Failed to fetch rank data from Google Sheets",
                details=f"Request timed out after {self._timeout}s"
            )
        except requests.RequestException as e:
            raise DataUnavailableError(
                "Failed to fetch rank data from Google Sheets",
                details=str(e)
            )

        return response.text

    def parse_records(self, text: str) -> List[Record]:
        """
        Parse CSV text into records.

        The first non-blank line is the header. Columns are located by a
        case-insensitive substring match; a missing column yields empty
        strings for every row.

        Args:
            text: CSV document

        Returns:
            Records in source row order, empty if there are no data rows

        Raises:
            DataUnavailableError: If the document cannot be parsed
        """
        lines = [line for line in text.splitlines() if line.strip()]
        if len(lines) < 2:
            return []

        df = self._read_csv("\n".join(lines))
        df.columns = [str(col).strip() for col in df.columns]
        df = df.fillna("")

        rank_col = self._find_column(df.columns, self.RANK_KEYWORD)
        company_col = self._find_column(df.columns, self.COMPANY_KEYWORD)
        if rank_col is None or company_col is None:
            logger.warning(
                f"Sheet header is missing expected columns "
                f"(rank={rank_col!r}, company={company_col!r}): {list(df.columns)}"
            )

        records = []
        for _, row in df.iterrows():
            records.append(Record(
                rank=str(row[rank_col]).strip() if rank_col is not None else "",
                company=str(row[company_col]).strip() if company_col is not None else ""
            ))

        return records

    def _read_csv(self, text: str) -> pd.DataFrame:
        """Read CSV text with a lenient fallback for malformed rows."""
        try:
            return pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False, index_col=False)
        except pd.errors.ParserError:
            # Skip rows with too many fields rather than failing the whole sheet
            try:
                return pd.read_csv(
                    io.StringIO(text),
                    dtype=str,
                    keep_default_na=False,
                    index_col=False,
                    on_bad_lines="skip",
                    engine="python"
                )
            except Exception as e:
                raise DataUnavailableError("Could not parse rank data", details=str(e))

    @staticmethod
    def _find_column(columns, keyword: str) -> Optional[str]:
        """Return the first column whose name contains the keyword."""
        for col in columns:
            if keyword in col.lower():
                return col
        return None

    def fetch_records(self) -> List[Record]:
        """
        Complete pipeline: download and parse the sheet.

        Returns:
            Parsed records, possibly empty
        """
        records = self.parse_records(self.fetch_csv())
        logger.info(f"Fetched {len(records)} rows from Google Sheets")
        return records
