"""Unit tests for BandScale, LinearScale and the domain helpers."""

import math

import pytest

from incomedash.dashboard.scales import BandScale, LinearScale, extent_domain, rate_domain


# -----------------------------------------------------------------------------
# BandScale
# -----------------------------------------------------------------------------


def test_band_scale_step_and_bandwidth():
    scale = BandScale(["a", "b", "c", "d"], (0, 100), padding=0.2)
    assert scale.step == pytest.approx(25.0)
    assert scale.bandwidth == pytest.approx(20.0)


def test_band_scale_positions_split_padding_evenly():
    scale = BandScale(["a", "b", "c", "d"], (0, 100), padding=0.2)
    assert scale("a") == pytest.approx(2.5)
    assert scale("b") == pytest.approx(27.5)
    assert scale("d") == pytest.approx(77.5)
    assert scale.center("a") == pytest.approx(12.5)


def test_band_scale_slots_do_not_overlap():
    scale = BandScale(["a", "b", "c"], (0, 90), padding=0.1)
    starts = [scale(k) for k in scale.domain]
    for s0, s1 in zip(starts, starts[1:]):
        assert s0 + scale.bandwidth <= s1


def test_band_scale_reversed_range_puts_first_key_high():
    scale = BandScale(["a", "b"], (100, 0), padding=0.0)
    assert scale("a") == pytest.approx(50.0)
    assert scale("b") == pytest.approx(0.0)


def test_band_scale_unknown_key_is_none():
    scale = BandScale(["a"], (0, 10))
    assert scale("zzz") is None
    assert scale.center("zzz") is None


def test_band_scale_empty_domain():
    scale = BandScale([], (0, 100), padding=0.2)
    assert scale.step == 0.0
    assert scale.bandwidth == 0.0


def test_band_scale_duplicate_keys_collapse():
    scale = BandScale(["a", "b", "a"], (0, 100))
    assert scale.domain == ["a", "b"]
    assert scale.step == pytest.approx(50.0)


@pytest.mark.parametrize("padding", [-0.1, 1.0, 1.5])
def test_band_scale_bad_padding_raises(padding):
    with pytest.raises(ValueError):
        BandScale(["a"], (0, 1), padding=padding)


# -----------------------------------------------------------------------------
# LinearScale
# -----------------------------------------------------------------------------


def test_linear_scale_maps_proportionally():
    scale = LinearScale((0, 10), (0, 100))
    assert scale(5) == pytest.approx(50.0)
    assert scale(0) == pytest.approx(0.0)
    assert scale(10) == pytest.approx(100.0)


def test_linear_scale_clamps():
    scale = LinearScale((0, 10), (0, 100))
    assert scale(20) == pytest.approx(100.0)
    assert scale(-5) == pytest.approx(0.0)


def test_linear_scale_reversed_range():
    """Range (height, 0) as used for a y axis drawn top-down."""
    scale = LinearScale((0, 1), (200, 0))
    assert scale(0.25) == pytest.approx(150.0)
    assert scale(2.0) == pytest.approx(0.0)


def test_linear_scale_degenerate_domain_maps_to_range_start():
    scale = LinearScale((3, 3), (10, 20))
    assert scale(3) == 10.0
    assert scale(100) == 10.0


def test_linear_scale_nan_maps_to_nan():
    assert math.isnan(LinearScale((0, 1), (0, 1))(float("nan")))


def test_linear_scale_ticks():
    assert LinearScale((0, 1)).ticks(5) == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])
    assert LinearScale((2, 2)).ticks(5) == [2.0]


# -----------------------------------------------------------------------------
# Domains
# -----------------------------------------------------------------------------


def test_rate_domain_max_mode():
    assert rate_domain([0.2, 0.5, 0.1]) == (0.0, 0.5)


def test_rate_domain_falls_back_to_unit():
    assert rate_domain([]) == (0.0, 1.0)
    assert rate_domain([0.0, 0.0]) == (0.0, 1.0)


def test_rate_domain_unit_mode():
    assert rate_domain([0.2], mode="unit") == (0.0, 1.0)


def test_rate_domain_unknown_mode_raises():
    with pytest.raises(ValueError):
        rate_domain([0.2], mode="log")


def test_extent_domain():
    assert extent_domain([3.0, float("nan"), 1.0]) == (1.0, 3.0)
    assert extent_domain([], fallback=(15, 95)) == (15.0, 95.0)
