import pytest

from carousel.services.layout.fit import candidate_sizes, estimate_line_count, fit_font_size


def test_returns_largest_fitting_size() -> None:
    result = fit_font_size(
        lambda size: 1 if size <= 60 else 100,
        base_size=100,
        min_size=40,
        step=10,
        max_height=100,
        line_height_ratio=1.0,
    )
    assert result.size == 60
    assert result.fits
    assert result.height == 60


def test_non_monotonic_line_counts_still_pick_first_fit() -> None:
    counts = {100: 9, 90: 1, 80: 9}
    result = fit_font_size(lambda size: counts.get(size, 1), 100, 40, 10, 100, 1.0)
    assert result.size == 90


def test_overflow_returns_minimum() -> None:
    result = fit_font_size(lambda size: 50, 100, 45, 10, 100, 1.0)
    assert result.size == 45
    assert not result.fits


@pytest.mark.parametrize("step", [0, -4])
def test_non_positive_step_is_rejected(step: int) -> None:
    with pytest.raises(ValueError):
        fit_font_size(lambda size: 1, 100, 40, step, 100, 1.0)


def test_candidate_sizes_end_at_minimum() -> None:
    assert candidate_sizes(100, 45, 10) == [100, 90, 80, 70, 60, 50, 45]
    assert candidate_sizes(64, 40, 4)[-1] == 40
    assert candidate_sizes(40, 60, 4) == [40]


def test_estimate_line_count() -> None:
    assert estimate_line_count("", 64, 1000) == 0
    assert estimate_line_count("a" * 10, 100, 1000) == 1
    assert estimate_line_count("a" * 100, 100, 1000) == 6
    assert estimate_line_count("one two", 64, 0) == 2
