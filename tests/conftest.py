import pandas as pd
import pytest

from layoffs.schema import BUSINESS_COLUMNS, coerce_dtypes


@pytest.fixture
def make_frame():
    """Build a typed layoffs frame from 9-tuples (None for NULL)."""

    def _make(rows):
        raw = pd.DataFrame(list(rows), columns=BUSINESS_COLUMNS, dtype=object)
        return coerce_dtypes(raw)

    return _make
