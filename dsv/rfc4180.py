"""
RFC 4180 dialect (CSV) record assembler.

The assembler is a finite-state machine. Every state is a plain function
taking the current Context and returning the next State together with a new
Context; nothing is mutated in place, so each transition can be driven and
inspected on its own.

    read-ln -> read -> (read | read-ln | join | add-record)
    join -> validate -> add-field -> read
    add-record -> read-ln
    read-ln -> end

A physical line is split on the delimiter without looking at quotes; the
pieces of a quoted field that contained delimiters or line breaks are put
back together in "join" once the field's quotes balance again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .errors import IllegalEmbeddedLinebreakError, PrematureEOFError, UnescapedQuoteError
from .escaping import count_quotes, is_quoted, unquote
from .reader import Line
from .rules import QUOTE_CHAR

logger = logging.getLogger("dsv.rfc4180")


class State(str, Enum):
    READ_LN = "read-ln"
    READ = "read"
    JOIN = "join"
    VALIDATE = "validate"
    ADD_FIELD = "add-field"
    ADD_RECORD = "add-record"
    END = "end"


class QuotationStatus(str, Enum):
    UNQUOTED = "unquoted"
    QUOTED = "quoted"
    QUOTE_BEGIN = "quote-begin"
    QUOTE_END = "quote-end"
    QUOTE_BEGIN_OR_END = "quote-begin-or-end"


OPENING = (QuotationStatus.QUOTE_BEGIN, QuotationStatus.QUOTE_BEGIN_OR_END)


@dataclass(frozen=True)
class LineBreak:
    """Marks where a quoted field crossed a physical line in the field buffer."""

    text: str


BufferItem = Union[str, LineBreak]

# Persistent stack: None or (top, rest). Pushing shares the rest, so a
# transition never copies what was accumulated before it.
Stack = Optional[Tuple[Any, Any]]


def push(stack: Stack, item: Any) -> Stack:
    return (item, stack)


def unwind(stack: Stack) -> List[Any]:
    """Items of a stack in the order they were pushed."""
    items = []
    while stack is not None:
        item, stack = stack
        items.append(item)
    items.reverse()
    return items


@dataclass(frozen=True)
class Context:
    line: Optional[Line] = None
    line_number: int = 0
    pieces: Tuple[str, ...] = ()
    # Index of the next piece of the current line to read.
    position: int = 0
    buffer: Stack = None
    field: Optional[str] = None
    record: Stack = None
    emitted: Optional[List[str]] = None
    # Record terminator of the document, fixed by the first terminated record.
    line_break: Optional[str] = None


def get_quotation_status(piece: str) -> QuotationStatus:
    quotes = count_quotes(piece)
    if piece == QUOTE_CHAR:
        return QuotationStatus.QUOTE_BEGIN_OR_END
    if quotes % 2 == 0:
        if len(piece) >= 2 and piece.startswith(QUOTE_CHAR) and piece.endswith(QUOTE_CHAR):
            return QuotationStatus.QUOTED
        return QuotationStatus.UNQUOTED
    if piece.startswith(QUOTE_CHAR):
        return QuotationStatus.QUOTE_BEGIN
    if piece.endswith(QUOTE_CHAR):
        return QuotationStatus.QUOTE_END
    # Odd quotes in the middle of a piece; "validate" rejects the field.
    return QuotationStatus.UNQUOTED


def join_buffer(buffer: Iterable[BufferItem], delimiter: str) -> str:
    """
    Concatenate buffered pieces back into one field.

    Adjacent pieces came from the same line and are joined with the
    delimiter they were split on; a LineBreak puts back the line terminator.
    """
    parts: List[str] = []
    after_piece = False
    for item in buffer:
        if isinstance(item, LineBreak):
            parts.append(item.text)
            after_piece = False
            continue
        if after_piece:
            parts.append(delimiter)
        parts.append(item)
        after_piece = True
    return "".join(parts)


# --- transitions ------------------------------------------------------------

def read_ln(ctx: Context, delimiter: str) -> Tuple[State, Context]:
    if ctx.line is None:
        if ctx.buffer is not None or ctx.record is not None:
            raise PrematureEOFError(
                "Premature end of file",
                state=State.READ_LN.value,
                text=join_buffer(unwind(ctx.buffer), delimiter),
            )
        return State.END, ctx
    return State.READ, replace(
        ctx,
        line_number=ctx.line_number + 1,
        pieces=tuple(ctx.line.text.split(delimiter)),
        position=0,
    )


def read(ctx: Context, delimiter: str) -> Tuple[State, Context]:
    if ctx.position >= len(ctx.pieces):
        if ctx.buffer is not None:
            # A quoted field is still open: it goes on with the next line.
            return State.READ_LN, replace(ctx, buffer=push(ctx.buffer, LineBreak(ctx.line.terminator)))
        return State.ADD_RECORD, ctx

    piece = ctx.pieces[ctx.position]
    if ctx.buffer is not None:
        # Any piece with an odd number of quotes balances the open field.
        closes = count_quotes(piece) % 2 == 1
    else:
        # A lone quote with nothing buffered can only open a field.
        closes = get_quotation_status(piece) not in OPENING

    ctx = replace(ctx, position=ctx.position + 1, buffer=push(ctx.buffer, piece))
    if closes:
        return State.JOIN, ctx
    return State.READ, ctx


def join(ctx: Context, delimiter: str) -> Tuple[State, Context]:
    return State.VALIDATE, replace(ctx, buffer=None, field=join_buffer(unwind(ctx.buffer), delimiter))


def check_terminator(ctx: Context) -> None:
    """
    Reject a record whose line break differs from the document's.

    Once a record has ended with CRLF every record must, the last one
    included; in an LF document a CR before the LF belongs to no terminator.
    """
    expected = ctx.line_break
    actual = ctx.line.terminator
    if expected == "\r\n" and actual != "\r\n":
        raise IllegalEmbeddedLinebreakError(
            "CRLF line break inside an unquoted field",
            state=State.VALIDATE.value,
            text=ctx.line.text,
        )
    if expected == "\n" and actual == "\r\n":
        raise IllegalEmbeddedLinebreakError(
            "Carriage return inside an unquoted field",
            state=State.VALIDATE.value,
            text=ctx.line.text + "\r",
        )


def validate(ctx: Context, delimiter: str) -> Tuple[State, Context]:
    field = ctx.field
    if not is_quoted(field):
        if "\r" in field or "\n" in field:
            raise IllegalEmbeddedLinebreakError(
                "Line break inside an unquoted field",
                state=State.VALIDATE.value,
                text=field,
            )
        if QUOTE_CHAR in field:
            raise UnescapedQuoteError(
                "A field contains an unescaped double quote",
                state=State.VALIDATE.value,
                text=field,
            )
    if ctx.position >= len(ctx.pieces):
        check_terminator(ctx)
    return State.ADD_FIELD, ctx


def add_field(ctx: Context, delimiter: str) -> Tuple[State, Context]:
    value = finalize_field(ctx.field, delimiter)
    return State.READ, replace(ctx, field=None, record=push(ctx.record, value))


def add_record(ctx: Context, delimiter: str) -> Tuple[State, Context]:
    line_break = ctx.line_break
    if line_break is None and ctx.line.terminator:
        line_break = ctx.line.terminator
    return State.READ_LN, replace(ctx, record=None, emitted=unwind(ctx.record), line_break=line_break)


def end(ctx: Context, delimiter: str) -> Tuple[State, Context]:
    return State.END, ctx


Transition = Callable[[Context, str], Tuple[State, Context]]

TRANSITIONS: Dict[State, Transition] = {
    State.READ_LN: read_ln,
    State.READ: read,
    State.JOIN: join,
    State.VALIDATE: validate,
    State.ADD_FIELD: add_field,
    State.ADD_RECORD: add_record,
    State.END: end,
}


def finalize_field(raw: str, delimiter: str) -> str:
    return unquote(raw)


def iter_records(
    lines: Iterable[Line],
    delimiter: str,
    comment_prefix: Optional[str] = None,
) -> Iterator[List[str]]:
    """
    Run the state machine over physical lines, yielding records in order.

    comment_prefix is accepted for a uniform dialect interface and ignored:
    RFC 4180 has no comment lines.
    """
    lines = iter(lines)
    state, ctx = State.READ_LN, Context()

    while state is not State.END:
        if state is State.READ_LN:
            ctx = replace(ctx, line=next(lines, None))
        state, ctx = TRANSITIONS[state](ctx, delimiter)
        if ctx.emitted is not None:
            yield ctx.emitted
            ctx = replace(ctx, emitted=None)

    logger.debug("end of input after %d line(s)", ctx.line_number)
