"""Legacy CSV export used as a read-only existence fallback"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pandas as pd

from annotation.errors import MalformedFallbackData

# Column names under which older exports stored the video filename
FILENAME_ALIASES: Tuple[str, ...] = (
    "filename",
    "file",
    "video",
    "video_name",
    "videoFilename",
)


class LegacyCsvSource:
    """Flat CSV with one row per annotated video; no uniqueness assumed"""

    def __init__(self, path: str):
        self.path = Path(path)

    def available(self) -> bool:
        return self.path.is_file()

    def _read(self) -> pd.DataFrame:
        # index_col=False keeps a trailing delimiter from turning the first
        # column into the index; usecols limited to the header width drops
        # surplus fields on long rows instead of failing the whole file
        options = dict(dtype=str, keep_default_na=False, index_col=False)
        try:
            header = pd.read_csv(self.path, nrows=0, **options)
            width = len(header.columns)
            return pd.read_csv(self.path, usecols=list(range(width)), **options)
        except pd.errors.EmptyDataError:
            return pd.DataFrame()
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise MalformedFallbackData(f"cannot parse legacy CSV {self.path}: {e}") from e

    def find(self, filename: str) -> Optional[Dict[str, Any]]:
        """
        First row whose filename-alias column equals filename exactly

        Args:
            filename: exact, case-sensitive value to match

        Returns:
            the row as a dict, or None when there is no match

        Raises:
            MalformedFallbackData: the file exists but cannot be parsed
        """
        if not self.available():
            return None

        df = self._read()
        columns = [c for c in FILENAME_ALIASES if c in df.columns]
        if not columns or df.empty:
            return None

        matches = (df[columns] == filename).any(axis=1)
        if not matches.any():
            return None
        return df[matches].iloc[0].to_dict()
