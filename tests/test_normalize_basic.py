import pandas as pd
import pytest

from layoffs.errors import ParseError
from layoffs.stages.normalize import (
    collapse_categories,
    format_date,
    normalize,
    parse_dates,
    strip_trailing,
    trim_whitespace,
)


def test_trim_whitespace(make_frame):
    df = make_frame([
        (" E Inc.", "SF", "Retail", 1, None, "1/1/2022", "Seed", "United States", None),
        ("Included Health ", "SF", "Healthcare", 2, None, "1/1/2022", "Seed", "United States", None),
    ])
    out = trim_whitespace(df, ["company"])
    assert out["company"].tolist() == ["E Inc.", "Included Health"]
    # input untouched
    assert df["company"].iloc[0] == " E Inc."


def test_collapse_crypto_variants(make_frame):
    df = make_frame([
        ("A", "SF", "Crypto", 1, None, "1/1/2022", "Seed", "United States", None),
        ("B", "SF", "CryptoCurrency", 1, None, "1/1/2022", "Seed", "United States", None),
        ("C", "SF", "Crypto Currency", 1, None, "1/1/2022", "Seed", "United States", None),
        ("D", "SF", "Fintech", 1, None, "1/1/2022", "Seed", "United States", None),
        ("E", "SF", None, 1, None, "1/1/2022", "Seed", "United States", None),
    ])
    rules = [{"column": "industry", "canonical": "Crypto", "match": "prefix", "patterns": ["Crypto"]}]
    out = collapse_categories(df, rules)
    assert out["industry"].tolist()[:4] == ["Crypto", "Crypto", "Crypto", "Fintech"]
    assert pd.isna(out["industry"].iloc[4])


def test_collapse_exact_match(make_frame):
    df = make_frame([
        ("A", "SF", "Fin-Tech", 1, None, "1/1/2022", "Seed", "US", None),
        ("B", "SF", "Fin-Tech Plus", 1, None, "1/1/2022", "Seed", "US", None),
    ])
    rules = [{"column": "industry", "canonical": "Finance", "match": "exact", "patterns": ["Fin-Tech"]}]
    out = collapse_categories(df, rules)
    assert out["industry"].tolist() == ["Finance", "Fin-Tech Plus"]


def test_collapse_unknown_match_mode(make_frame):
    df = make_frame([("A", "SF", "Crypto", 1, None, "1/1/2022", "Seed", "US", None)])
    with pytest.raises(ValueError):
        collapse_categories(df, [{"column": "industry", "canonical": "Crypto", "match": "regex"}])


def test_strip_trailing_period_only_for_prefix(make_frame):
    df = make_frame([
        ("A", "SF", "Retail", 1, None, "1/1/2022", "Seed", "United States.", None),
        ("B", "SF", "Retail", 1, None, "1/1/2022", "Seed", "United States", None),
        ("C", "SF", "Retail", 1, None, "1/1/2022", "Seed", "Other Country.", None),
    ])
    rules = [{"column": "country", "chars": ".", "prefix": "United States"}]
    out = strip_trailing(df, rules)
    assert out["country"].tolist() == ["United States", "United States", "Other Country."]


def test_parse_dates_types_column(make_frame):
    df = make_frame([
        ("A", "SF", "Retail", 1, None, "3/1/2022", "Seed", "US", None),
        ("B", "SF", "Retail", 1, None, "12/16/2022", "Seed", "US", None),
        ("C", "SF", "Retail", 1, None, None, "Seed", "US", None),
    ])
    out = parse_dates(df, "date")
    assert pd.api.types.is_datetime64_any_dtype(out["date"])
    assert out["date"].iloc[0] == pd.Timestamp(2022, 3, 1)
    assert out["date"].iloc[1] == pd.Timestamp(2022, 12, 16)
    assert pd.isna(out["date"].iloc[2])


def test_parse_dates_round_trip(make_frame):
    raw = ["3/1/2022", "12/16/2022", "1/9/2023", "10/31/2020"]
    df = make_frame([("A", "SF", "Retail", 1, None, d, "Seed", "US", None) for d in raw])
    out = parse_dates(df, "date")
    assert [format_date(v) for v in out["date"]] == raw


def test_parse_dates_rejects_bad_values_without_committing(make_frame):
    df = make_frame([
        ("A", "SF", "Retail", 1, None, "3/1/2022", "Seed", "US", None),
        ("B", "SF", "Retail", 1, None, "2022-03-01", "Seed", "US", None),
        ("C", "SF", "Retail", 1, None, "13/45/2022", "Seed", "US", None),
    ])
    with pytest.raises(ParseError) as exc:
        parse_dates(df, "date")
    assert exc.value.offending == {1: "2022-03-01", 2: "13/45/2022"}
    assert df["date"].tolist() == ["3/1/2022", "2022-03-01", "13/45/2022"]


def test_format_date_null():
    assert format_date(None) is None
    assert format_date(pd.NaT) is None


def test_normalize_defaults(make_frame):
    df = make_frame([
        ("Netflix ", "SF", "Crypto Staking", None, "3%", "3/1/2022", "Post-IPO", "United States.", None),
    ])
    out = normalize(df)
    row = out.iloc[0]
    assert row["company"] == "Netflix"
    assert row["industry"] == "Crypto"
    assert row["country"] == "United States"
    assert row["date"] == pd.Timestamp(2022, 3, 1)


def test_strip_trailing_with_repeated_index(make_frame):
    a = make_frame([("A", "SF", "Retail", 1, None, "1/1/2022", "Seed", "United States.", None)])
    b = make_frame([("B", "SF", "Retail", 1, None, "1/1/2022", "Seed", "Canada.", None)])
    out = strip_trailing(pd.concat([a, b]), [{"column": "country", "chars": ".", "prefix": "United States"}])
    assert out["country"].tolist() == ["United States", "Canada."]


def test_normalize_trims_all_free_text_by_default(make_frame):
    df = make_frame([
        ("Acme ", " SF", "Retail ", 1, None, "1/1/2022", " Seed", "Germany ", None),
    ])
    row = normalize(df).iloc[0]
    assert [row["company"], row["location"], row["industry"], row["stage"], row["country"]] == [
        "Acme", "SF", "Retail", "Seed", "Germany",
    ]
