"""CSV candidate loader."""

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .base import CandidateLoader
from .candidates import Candidate, CandidateStore
from ..config import get_config
from ..exceptions import CandidateFileError, CandidateParseError, RowShapeError

logger = logging.getLogger(__name__)

# Header name -> Candidate field
COLUMN_MAP = {
    'ticker': 'ticker',
    'price': 'price',
    'market_cap': 'market_cap',
    'pe_ratio': 'pe_ratio',
    'sector': 'sector',
    'volatility': 'volatility',
    'volatility_category': 'volatility_category',
    'Summary': 'summary',
}
NUMERIC_COLUMNS = ('price', 'market_cap', 'pe_ratio', 'volatility')


@dataclass(frozen=True)
class RowResult:
    """Outcome of parsing one data row: a candidate or a skipped-row error."""

    line_number: int
    candidate: Optional[Candidate] = None
    error: Optional[RowShapeError] = None

    @property
    def ok(self) -> bool:
        return self.candidate is not None


@dataclass
class LoadReport:
    """Rows accepted and skipped during the last load."""

    accepted: int = 0
    skipped: List[RowShapeError] = field(default_factory=list)


def split_rows(text: str) -> List[Tuple[int, List[str]]]:
    """
    Split CSV text into trimmed rows, honoring double-quote escaping.
    
    Blank lines are dropped. Malformed quoting or an oversized field raises
    CandidateFileError.
    
    Returns:
        List of (line number, values); the line number is where the row ends
    """
    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    rows = []
    try:
        for row in reader:
            values = [value.strip() for value in row]
            if not any(values):
                continue
            rows.append((reader.line_num, values))
    except csv.Error as e:
        raise CandidateFileError(str(e), line_number=reader.line_num) from e
    return rows


def _parse_number(value: Optional[str], column: str, line_number: int) -> float:
    if value is None:
        raise CandidateParseError(column, value, line_number)
    try:
        return float(value.strip())
    except ValueError:
        raise CandidateParseError(column, value, line_number) from None


def parse_row(headers: Sequence[str], row: Sequence[str], line_number: int) -> RowResult:
    """
    Parse one data row against the header.
    
    A column-count mismatch comes back as a skipped RowResult. A bad number
    raises CandidateParseError and a bad record raises
    CandidateValidationError; both end the load.
    """
    if len(row) != len(headers):
        return RowResult(
            line_number=line_number,
            error=RowShapeError(line_number, len(headers), len(row)),
        )
    
    values: Dict[str, str] = dict(zip(headers, row))
    
    fields = {}
    for column, attr in COLUMN_MAP.items():
        if column in NUMERIC_COLUMNS:
            fields[attr] = _parse_number(values.get(column), column, line_number)
        else:
            fields[attr] = values.get(column, "")
    
    return RowResult(line_number=line_number, candidate=Candidate(**fields))


def parse_candidates(text: str, report: Optional[LoadReport] = None) -> CandidateStore:
    """Parse a full CSV document (header row first) into a CandidateStore."""
    rows = split_rows(text)
    if len(rows) <= 1:
        return CandidateStore()
    
    _, headers = rows[0]
    candidates = []
    for line_number, row in rows[1:]:
        result = parse_row(headers, row, line_number)
        if result.ok:
            candidates.append(result.candidate)
            if report is not None:
                report.accepted += 1
        else:
            logger.debug("Skipping row: %s", result.error)
            if report is not None:
                report.skipped.append(result.error)
    
    return CandidateStore(candidates)


class CsvCandidateLoader(CandidateLoader):
    """Loads candidates from a CSV file with the sp500 column layout."""
    
    def __init__(self, path: Optional[str] = None):
        """
        Initialize loader.
        
        Args:
            path: CSV file path; defaults to the configured candidates path
        """
        self.path = Path(path or get_config().candidates_path)
        self.last_report = LoadReport()
    
    def load(self) -> CandidateStore:
        """Read and parse the CSV file."""
        if not self.path.exists():
            raise FileNotFoundError(f"Candidate file not found: {self.path}")
        
        try:
            text = self.path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise CandidateFileError(str(e), path=str(self.path)) from e
        
        report = LoadReport()
        try:
            store = parse_candidates(text, report)
        except CandidateFileError as e:
            raise CandidateFileError(e.reason, str(self.path), e.line_number) from e
        self.last_report = report
        
        if report.skipped:
            logger.warning(
                "Skipped %d malformed rows in %s", len(report.skipped), self.path
            )
        logger.info("Loaded %d candidates from %s", len(store), self.path)
        return store
    
    def health_check(self) -> bool:
        return self.path.exists()
