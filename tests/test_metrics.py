"""Tests for row filtering, derived fields and recoding."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from hare_analysis.config import cfg
from hare_analysis.errors import DerivationError
from hare_analysis.loader import load_hares
from hare_analysis.metrics import (
    add_date_parts,
    derive,
    filter_age,
    filter_rows,
    invert_mapping,
    label_site,
    label_sex,
    prepare_hares,
    recode,
)


@pytest.fixture
def small_df() -> pd.DataFrame:
    return pd.DataFrame({
        "date": ["11/26/98", "9/8/99", "not a date", "7/15/02"],
        "sex": ["m", "f", None, "pf"],
        "grid": ["bonrip", "BONMAT ", "bonbs", "elsewhere"],
        "age": ["j", "a", "J", None],
        "weight": [1000.0, np.nan, 800.0, 1200.0],
    }, index=[10, 11, 12, 13])


# ---------------------------------------------------------------------------
# filter_rows


def test_filter_rows_keeps_only_matching_rows_in_order(small_df: pd.DataFrame) -> None:
    out = filter_rows(small_df, lambda row: row["weight"] > 900)

    assert list(out.index) == [10, 13]
    assert (out["weight"] > 900).all()


def test_filter_rows_does_not_modify_input(small_df: pd.DataFrame) -> None:
    before = small_df.copy()
    out = filter_rows(small_df, lambda row: False)

    assert out.empty
    pd.testing.assert_frame_equal(small_df, before)


def test_filter_rows_on_empty_table() -> None:
    empty = pd.DataFrame({"weight": pd.Series([], dtype=float)})
    assert filter_rows(empty, lambda row: True).empty


def test_filter_rows_drops_rows_with_missing_text(hares_csv: Path) -> None:
    df = load_hares(hares_csv)
    out = filter_rows(df, lambda row: row["sex"] == "m")

    assert list(out.index) == [0, 1, 5, 8, 9]
    assert (out["sex"] == "m").all()


def test_filter_age_is_case_insensitive_and_skips_missing(small_df: pd.DataFrame) -> None:
    out = filter_age(small_df, "j")
    assert list(out.index) == [10, 12]


# ---------------------------------------------------------------------------
# derive


def test_derive_appends_field(small_df: pd.DataFrame) -> None:
    out = derive(small_df, "weight_kg", lambda row: row["weight"] / 1000)

    assert out.loc[10, "weight_kg"] == pytest.approx(1.0)
    assert np.isnan(out.loc[11, "weight_kg"])
    assert "weight_kg" not in small_df.columns


def test_derive_marks_failed_rows_missing(small_df: pd.DataFrame) -> None:
    out = derive(small_df, "sex_upper", lambda row: row["sex"].upper())

    assert out.loc[10, "sex_upper"] == "M"
    assert pd.isna(out.loc[12, "sex_upper"])
    assert len(out) == len(small_df)


def test_derive_strict_raises(small_df: pd.DataFrame) -> None:
    with pytest.raises(DerivationError):
        derive(small_df, "sex_upper", lambda row: row["sex"].upper(), strict=True)


def test_derive_recovers_from_derivation_error(small_df: pd.DataFrame) -> None:
    def checked(row):
        if row["weight"] < 900:
            raise DerivationError("too light")
        return "ok"

    out = derive(small_df, "check", checked)
    assert out.loc[10, "check"] == "ok"
    assert pd.isna(out.loc[12, "check"])


# ---------------------------------------------------------------------------
# recode


def test_recode_maps_codes_with_fallback(small_df: pd.DataFrame) -> None:
    out = recode(small_df, "sex", {"m": "Male", "f": "Female"}, "Undetermined", target="sex_full")

    assert out["sex_full"].tolist() == ["Male", "Female", "Undetermined", "Undetermined"]
    assert small_df["sex"].tolist()[:2] == ["m", "f"]


def test_recode_overwrites_field_when_no_target(small_df: pd.DataFrame) -> None:
    out = recode(small_df, "sex", {"m": "Male"}, "Other")
    assert out["sex"].tolist() == ["Male", "Other", "Other", "Other"]


def test_recode_unknown_column(small_df: pd.DataFrame) -> None:
    with pytest.raises(KeyError):
        recode(small_df, "colour", {}, "none")


def test_recode_round_trip_recovers_recognized_codes(small_df: pd.DataFrame) -> None:
    mapping = {"bonrip": "Bonanza Riparian", "bonmat": "Bonanza Mature", "bonbs": "Bonanza Black Spruce"}
    labelled = recode(small_df, "grid", mapping, "Unknown site", target="site_full")
    reverse = invert_mapping(mapping)

    recovered = labelled["site_full"].map(reverse)
    assert recovered.tolist()[:3] == ["bonrip", "bonmat", "bonbs"]
    # Unrecognized codes collapse to the default and cannot be reversed
    assert labelled.loc[13, "site_full"] == "Unknown site"
    assert pd.isna(recovered.loc[13])


def test_invert_mapping_rejects_shared_labels() -> None:
    with pytest.raises(ValueError):
        invert_mapping({"m": "Male", "male": "Male"})


def test_label_helpers_use_config_labels(small_df: pd.DataFrame) -> None:
    out = label_site(label_sex(small_df))

    assert out["sex_full"].tolist() == ["Male", "Female", cfg.sex_default, cfg.sex_default]
    assert out["site_full"].tolist() == [
        "Bonanza Riparian", "Bonanza Mature", "Bonanza Black Spruce", cfg.site_default,
    ]


# ---------------------------------------------------------------------------
# dates


def test_add_date_parts(small_df: pd.DataFrame) -> None:
    out = add_date_parts(small_df)

    assert out.loc[10, "year"] == 1998
    assert out.loc[10, "month"] == 11
    assert out.loc[11, "year"] == 1999
    assert out.loc[13, "year"] == 2002
    assert out.loc[13, "month"] == 7
    assert pd.isna(out.loc[12, "date_parsed"])
    assert pd.isna(out.loc[12, "year"])
    assert len(out) == len(small_df)
    assert "year" not in small_df.columns


def test_add_date_parts_missing_column(small_df: pd.DataFrame) -> None:
    with pytest.raises(KeyError):
        add_date_parts(small_df, field="captured_on")


# ---------------------------------------------------------------------------
# prepare_hares


def test_prepare_hares_keeps_juveniles_with_labels(hares_csv: Path) -> None:
    df = load_hares(hares_csv)
    juveniles = prepare_hares(df)

    assert len(juveniles) == 9
    assert set(juveniles["age"].str.lower()) == {"j"}
    assert {"date_parsed", "year", "month", "sex_full", "site_full"}.issubset(juveniles.columns)
    assert juveniles.loc[6, "sex_full"] == "Undetermined"
    assert juveniles.loc[8, "sex_full"] == "Male"
    assert pd.isna(juveniles.loc[9, "year"])
