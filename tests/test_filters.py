from diffscope_ci.filters import apply_filters, parse_filter_patterns


def test_single_pattern_keeps_path_order():
    paths = ["src/a.js", "docs/readme.md", "src/b.js"]
    assert apply_filters(paths, ["src/*.js"]) == ["src/a.js", "src/b.js"]


def test_overlapping_patterns_group_by_first_match():
    paths = ["src/a.js", "lib/b.js"]
    assert apply_filters(paths, ["*.js", "src/*"]) == ["src/a.js", "lib/b.js"]


def test_results_follow_pattern_order_not_diff_order():
    paths = ["a.md", "b.py", "c.md"]
    assert apply_filters(paths, ["*.py", "*.md"]) == ["b.py", "a.md", "c.md"]


def test_empty_patterns_pass_through():
    paths = ["b.txt", "a.txt", "b.txt"]
    assert apply_filters(paths, []) == ["b.txt", "a.txt", "b.txt"]


def test_no_match_yields_empty_list():
    assert apply_filters(["README.md"], ["*.py"]) == []


def test_parse_filter_patterns_drops_blank_lines():
    raw = "src/**\n\n  *.md  \n\t\n"
    assert parse_filter_patterns(raw) == ["src/**", "*.md"]
    assert parse_filter_patterns(None) == []
    assert parse_filter_patterns("") == []
