import pandas as pd
import pytest

from layoffs.errors import AmbiguousBackfillWarning
from layoffs.stages.backfill import backfill_from_siblings, blank_to_null


def test_blank_to_null(make_frame):
    df = make_frame([
        ("Airbnb", "SF Bay Area", "", 30, None, "3/3/2023", "Post-IPO", "United States", 6400),
        ("Airbnb", "SF Bay Area", "Travel", 1900, "0.25", "5/5/2020", "Private Equity", "United States", 5400),
    ])
    out = blank_to_null(df, "industry")
    assert pd.isna(out["industry"].iloc[0])
    assert out["industry"].iloc[1] == "Travel"


def test_empty_string_filled_from_sibling(make_frame):
    df = make_frame([
        ("Acme Pay", "NYC", "", 10, None, "1/1/2023", "Series B", "United States", None),
        ("Acme Pay", "NYC", "FinTech", 20, None, "6/1/2022", "Series B", "United States", None),
    ])
    out, result = backfill_from_siblings(blank_to_null(df, "industry"), "industry", "company")
    assert out["industry"].tolist() == ["FinTech", "FinTech"]
    assert result.filled == 1
    assert result.still_null == 0
    assert result.ambiguous == {}


def test_without_sentinel_conversion_blank_is_not_filled(make_frame):
    df = make_frame([
        ("Acme Pay", "NYC", "", 10, None, "1/1/2023", "Series B", "United States", None),
        ("Acme Pay", "NYC", "FinTech", 20, None, "6/1/2022", "Series B", "United States", None),
    ])
    out, result = backfill_from_siblings(df, "industry", "company")
    assert out["industry"].iloc[0] == ""
    assert result.filled == 0


def test_lonely_null_stays_null(make_frame):
    df = make_frame([
        ("Bally's Interactive", "Providence", None, None, "0.15", "1/18/2023", "Post-IPO", "United States", 946),
        ("Other", "Providence", "Retail", 5, None, "1/18/2023", "Post-IPO", "United States", None),
    ])
    out, result = backfill_from_siblings(df, "industry", "company")
    assert pd.isna(out["industry"].iloc[0])
    assert result.filled == 0
    assert result.still_null == 1


def test_ambiguous_first_policy_warns_and_fills(make_frame):
    df = make_frame([
        ("Juul", "SF", None, 100, None, "1/1/2023", "Unknown", "United States", None),
        ("Juul", "SF", "Consumer", 50, None, "1/1/2022", "Unknown", "United States", None),
        ("Juul", "SF", "Healthcare", 60, None, "1/1/2021", "Unknown", "United States", None),
    ])
    with pytest.warns(AmbiguousBackfillWarning):
        out, result = backfill_from_siblings(df, "industry", "company", on_ambiguous="first")
    assert out["industry"].iloc[0] == "Consumer"
    assert result.ambiguous == {"Juul": ["Consumer", "Healthcare"]}
    assert result.filled == 1


def test_ambiguous_skip_policy_leaves_null(make_frame):
    df = make_frame([
        ("Juul", "SF", None, 100, None, "1/1/2023", "Unknown", "United States", None),
        ("Juul", "SF", "Consumer", 50, None, "1/1/2022", "Unknown", "United States", None),
        ("Juul", "SF", "Healthcare", 60, None, "1/1/2021", "Unknown", "United States", None),
    ])
    with pytest.warns(AmbiguousBackfillWarning):
        out, result = backfill_from_siblings(df, "industry", "company", on_ambiguous="skip")
    assert pd.isna(out["industry"].iloc[0])
    assert result.filled == 0
    assert result.still_null == 1


def test_unknown_policy_rejected(make_frame):
    df = make_frame([("A", "SF", None, 1, None, "1/1/2023", "Seed", "US", None)])
    with pytest.raises(ValueError):
        backfill_from_siblings(df, on_ambiguous="random")
