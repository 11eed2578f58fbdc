from carousel.services.layout.tokenizer import RunStyle, StyleRun, merge_runs, strip_markup, tokenize


def _pairs(runs):
    return [(run.text, run.style) for run in runs]


def test_mixed_markup_produces_minimal_runs() -> None:
    runs = tokenize("A **bold** and __underlined__ and **__both__** text.")
    assert _pairs(runs) == [
        ("A ", RunStyle.PLAIN),
        ("bold", RunStyle.BOLD),
        (" and ", RunStyle.PLAIN),
        ("underlined", RunStyle.UNDERLINE),
        (" and ", RunStyle.PLAIN),
        ("both", RunStyle.BOLD_UNDERLINE),
        (" text.", RunStyle.PLAIN),
    ]


def test_underline_around_bold_is_also_bold_underline() -> None:
    assert _pairs(tokenize("__**x**__")) == [("x", RunStyle.BOLD_UNDERLINE)]


def test_partial_nesting_keeps_outer_style() -> None:
    runs = tokenize("**a __b__ c**")
    assert _pairs(runs) == [
        ("a ", RunStyle.BOLD),
        ("b", RunStyle.BOLD_UNDERLINE),
        (" c", RunStyle.BOLD),
    ]


def test_unmatched_delimiter_stays_literal() -> None:
    assert _pairs(tokenize("a ** b")) == [("a ** b", RunStyle.PLAIN)]
    assert _pairs(tokenize("**a** and ** b")) == [
        ("a", RunStyle.BOLD),
        (" and ** b", RunStyle.PLAIN),
    ]


def test_empty_pair_produces_nothing() -> None:
    assert _pairs(tokenize("a****b")) == [("ab", RunStyle.PLAIN)]


def test_empty_text() -> None:
    assert tokenize("") == []


def test_merge_runs_joins_same_style_and_drops_empty() -> None:
    runs = [StyleRun("a"), StyleRun(""), StyleRun("b"), StyleRun("c", RunStyle.BOLD)]
    assert _pairs(merge_runs(runs)) == [("ab", RunStyle.PLAIN), ("c", RunStyle.BOLD)]


def test_run_style_flags() -> None:
    assert RunStyle.of(True, True) is RunStyle.BOLD_UNDERLINE
    assert RunStyle.BOLD.bold and not RunStyle.BOLD.underline
    assert RunStyle.PLAIN.with_delimiter("__") is RunStyle.UNDERLINE


def test_strip_markup() -> None:
    assert strip_markup("**Hello** __world__") == "Hello world"
