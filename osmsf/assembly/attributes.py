"""
Attribute table construction

Maps each feature's tags onto a dense table whose columns are the key
universe of the entity kind.
"""

from typing import Dict, Iterable, Sequence, Tuple
from loguru import logger
import pandas as pd


class AttributeTableBuilder:
    """Builds attribute tables over a fixed key universe"""

    def __init__(self, key_universe: Sequence[str]):
        self.columns = list(key_universe)
        self._positions = {key: i for i, key in enumerate(self.columns)}
        self.dropped = 0

    def build(self, features: Iterable[Tuple[str, Dict[str, str]]]) -> pd.DataFrame:
        """
        Build a table with one row per feature

        Args:
            features: (label, tags) pairs in output order

        Returns:
            DataFrame indexed by label (index name "osm_id") with the key
            universe as columns; cells without a value are None
        """
        labels = []
        rows = []
        width = len(self.columns)
        for label, tags in features:
            row = [None] * width
            for key, value in tags.items():
                pos = self._positions.get(key)
                if pos is None:
                    self.dropped += 1
                    continue
                row[pos] = value
            labels.append(label)
            rows.append(row)

        if self.dropped:
            logger.debug(f"Dropped {self.dropped} tag(s) with keys outside the key universe")

        index = pd.Index(labels, name="osm_id", dtype=object)
        columns = pd.Index(self.columns, dtype=object)
        if not width:
            return pd.DataFrame(index=index, columns=columns, dtype=object)
        return pd.DataFrame(rows, index=index, columns=columns, dtype=object)


def build_table(features: Iterable[Tuple[str, Dict[str, str]]], key_universe: Sequence[str]) -> pd.DataFrame:
    """Build an attribute table for (label, tags) features"""
    return AttributeTableBuilder(key_universe).build(features)
