import io

import pytest

from dsv import (
    IllegalEmbeddedLinebreakError,
    PrematureEOFError,
    UnescapedQuoteError,
    iter_parse,
    parse_string,
)
from dsv.reader import Line
from dsv.rfc4180 import (
    Context,
    LineBreak,
    QuotationStatus,
    State,
    add_field,
    add_record,
    get_quotation_status,
    join,
    join_buffer,
    push,
    read,
    read_ln,
    unwind,
    validate,
)


def csv(text, **kwargs):
    return parse_string(text, "rfc4180", **kwargs)


def test_plain_records():
    assert csv("a,b,c\n1,2,3\n") == [["a", "b", "c"], ["1", "2", "3"]]


def test_crlf_records():
    assert csv("a,b\r\nc,d\r\n") == [["a", "b"], ["c", "d"]]


def test_quoted_delimiter():
    assert csv('a,"b,c"') == [["a", "b,c"]]


def test_doubled_quotes():
    assert csv('"a""b"') == [['a"b']]


def test_empty_quoted_field():
    assert csv('"",x') == [["", "x"]]


def test_quoted_field_ending_with_delimiter():
    assert csv('"a,",b') == [["a,", "b"]]


def test_multiline_field():
    assert csv('"a\nb",c') == [["a\nb", "c"]]


def test_multiline_field_keeps_crlf():
    assert csv('x,"a\r\nb"\r\ny,z\r\n') == [["x", "a\r\nb"], ["y", "z"]]


def test_multiline_field_with_delimiters_on_both_lines():
    assert csv('"a,b\nc,d",e\n') == [["a,b\nc,d", "e"]]


def test_bare_crlf_in_unquoted_field():
    with pytest.raises(IllegalEmbeddedLinebreakError) as excinfo:
        csv("a\r\nb,c")
    assert excinfo.value.kind == "illegal-embedded-linebreak"


def test_bare_cr_in_unquoted_field():
    with pytest.raises(IllegalEmbeddedLinebreakError):
        csv("a\rb,c\n")


def test_lf_document_rejects_crlf_record():
    with pytest.raises(IllegalEmbeddedLinebreakError):
        csv("a,b\nc,d\r\n")


def test_unterminated_last_line_in_lf_document():
    assert csv("a,b\nc,d") == [["a", "b"], ["c", "d"]]


def test_unescaped_quote():
    with pytest.raises(UnescapedQuoteError) as excinfo:
        csv('a,b"c\n')
    assert excinfo.value.text == 'b"c'
    assert excinfo.value.state == "validate"


def test_text_after_closing_quote():
    with pytest.raises(UnescapedQuoteError):
        csv('"a"b,c\n')


def test_single_quotes_inside_enclosure():
    with pytest.raises(UnescapedQuoteError):
        csv('"a"b"c"\n')


def test_premature_eof():
    with pytest.raises(PrematureEOFError) as excinfo:
        csv('x,"abc\ndef')
    assert excinfo.value.state == "read-ln"
    assert excinfo.value.text == '"abc\ndef'


def test_lone_quote_opens_a_field():
    with pytest.raises(PrematureEOFError):
        csv('a,"\n')


def test_lone_quote_closes_an_open_field():
    assert csv('"a\n",b\n') == [["a\n", "b"]]


def test_no_record_for_trailing_terminator():
    assert csv("a\n") == [["a"]]


def test_empty_line_is_one_empty_field():
    assert csv("a\n\nb\n") == [["a"], [""], ["b"]]


def test_hash_is_data():
    assert csv("#a,b\n") == [["#a", "b"]]
    assert csv("#a,b\n", comment_prefix="#") == [["#a", "b"]]


def test_semicolon_delimiter():
    assert csv('a;"b;c"\n', delimiter=";") == [["a", "b;c"]]


def test_iter_parse_yields_before_error():
    records = iter_parse(io.StringIO('a,b\n"c\n'), "rfc4180")
    assert next(records) == ["a", "b"]
    with pytest.raises(PrematureEOFError):
        next(records)


def test_quotation_status():
    assert get_quotation_status("abc") is QuotationStatus.UNQUOTED
    assert get_quotation_status('"abc"') is QuotationStatus.QUOTED
    assert get_quotation_status('"a""b"') is QuotationStatus.QUOTED
    assert get_quotation_status('"abc') is QuotationStatus.QUOTE_BEGIN
    assert get_quotation_status('"a""') is QuotationStatus.QUOTE_BEGIN
    assert get_quotation_status('abc"') is QuotationStatus.QUOTE_END
    assert get_quotation_status('"') is QuotationStatus.QUOTE_BEGIN_OR_END


def test_join_buffer():
    assert join_buffer(['"a', 'b"'], ",") == '"a,b"'
    assert join_buffer(['"a', LineBreak("\n"), 'b"'], ",") == '"a\nb"'

def test_read_ln_splits_line():
    state, ctx = read_ln(Context(line=Line("a,b", "\n")), ",")
    assert state is State.READ
    assert ctx.pieces == ("a", "b")
    assert ctx.position == 0
    assert ctx.line_number == 1


def test_read_ln_at_eof():
    state, _ = read_ln(Context(), ",")
    assert state is State.END

    with pytest.raises(PrematureEOFError):
        read_ln(Context(buffer=push(None, '"a')), ",")


def test_read_keeps_open_field_across_lines():
    ctx = Context(line=Line('"a', "\n"), pieces=('"a',))
    state, ctx = read(ctx, ",")
    assert state is State.READ
    assert ctx.position == 1
    assert unwind(ctx.buffer) == ['"a']

    state, ctx = read(ctx, ",")
    assert state is State.READ_LN
    assert unwind(ctx.buffer) == ['"a', LineBreak("\n")]


def test_read_closes_open_field_on_odd_quotes():
    ctx = Context(line=Line('"a,b"x', ""), pieces=('"a', 'b"x'), position=1, buffer=push(None, '"a'))
    state, ctx = read(ctx, ",")
    assert state is State.JOIN
    assert unwind(ctx.buffer) == ['"a', 'b"x']


def test_read_without_pieces_adds_record():
    state, _ = read(Context(line=Line("", "\n"), record=push(None, "a")), ",")
    assert state is State.ADD_RECORD


def test_field_transitions():
    ctx = Context(line=Line('"x""y"', ""), buffer=push(None, '"x""y"'))
    state, ctx = join(ctx, ",")
    assert state is State.VALIDATE
    assert ctx.field == '"x""y"'
    assert ctx.buffer is None

    state, ctx = validate(ctx, ",")
    assert state is State.ADD_FIELD

    state, ctx = add_field(ctx, ",")
    assert state is State.READ
    assert unwind(ctx.record) == ['x"y']

    state, ctx = add_record(ctx, ",")
    assert state is State.READ_LN
    assert ctx.emitted == ['x"y']
    assert ctx.record is None


def test_push_and_unwind():
    stack = None
    for item in "abc":
        stack = push(stack, item)
    assert unwind(stack) == ["a", "b", "c"]
    assert unwind(None) == []


def test_unescaped_quote_after_closing_quote_in_split_field():
    with pytest.raises(UnescapedQuoteError) as excinfo:
        csv('"a,b"x,c\nd,e\n')
    assert excinfo.value.text == '"a,b"x'


def test_crlf_document_without_final_crlf():
    with pytest.raises(IllegalEmbeddedLinebreakError) as excinfo:
        csv("a,b\r\nc,d")
    assert excinfo.value.text == "c,d"


def test_wide_line():
    fields = [str(n) for n in range(20000)]
    assert csv(",".join(fields) + "\n") == [fields]
