from dsv import guess_delimiter


def test_strict_maximum_wins():
    assert guess_delimiter("a:b,c,d") == ","


def test_tie_is_indeterminate():
    assert guess_delimiter("a,b:c") is None


def test_no_delimiter_is_indeterminate():
    assert guess_delimiter("abc") is None


def test_empty_sample_is_indeterminate():
    assert guess_delimiter("") is None


def test_only_first_record_counts():
    assert guess_delimiter("a:b\nc,d,e,f\n") == ":"


def test_unix_comment_lines_are_not_counted():
    assert guess_delimiter("# a,b,c,d\nx:y:z\n") == ":"


def test_escaped_delimiter_does_not_count():
    assert guess_delimiter("a\\,b\\,c:d") == ":"


def test_rfc4180_ignores_quoted_delimiters():
    assert guess_delimiter('"a;b;c",d\n', "rfc4180") == ","


def test_rfc4180_unparsable_candidate_counts_zero():
    assert guess_delimiter('"a""b";c\n', "rfc4180", [",", ";"]) == ";"


def test_caller_candidates():
    assert guess_delimiter("a|b|c,d", known_delimiters=["|", ","]) == "|"
    assert guess_delimiter("a|b|c,d", known_delimiters=[","]) == ","


def test_unusable_candidate_is_skipped():
    assert guess_delimiter("a:b", known_delimiters=[":", "\\", "ab"]) == ":"
