from typing import Optional

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from pydantic import ValidationError

from .builder import build_to_string
from .convert import convert_bytes
from .dialects import Dialect
from .errors import DSVParserError
from .guess import guess_delimiter
from .models import (
    BuildRequest,
    BuildResponse,
    ConvertResponse,
    GuessRequest,
    GuessResponse,
    HealthResponse,
    ParseResponse,
)
from .parser import parse_bytes

app = FastAPI(
    title="dsv",
    description="Unix-style and RFC 4180 delimiter-separated values",
    version="0.1.0",
)

def _unprocessable(exc: DSVParserError) -> HTTPException:
    return HTTPException(status_code=422, detail=exc.to_dict())

def _invalid_options(exc: ValidationError) -> HTTPException:
    errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]
    return HTTPException(status_code=422, detail=errors)

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}

@app.post("/parse", response_model=ParseResponse)
async def parse_upload(
    file: UploadFile = File(...),
    dialect: Dialect = Query(Dialect.UNIX),
    delimiter: Optional[str] = Query(None, min_length=1, max_length=1),
    comment_prefix: Optional[str] = Query(None),
):
    raw = await file.read()
    options = {}
    if comment_prefix is not None:
        options["comment_prefix"] = comment_prefix
    try:
        table = parse_bytes(raw, dialect, delimiter, **options)
    except DSVParserError as exc:
        raise _unprocessable(exc)
    except ValidationError as exc:
        raise _invalid_options(exc)

    return {
        "dialect": dialect,
        "delimiter": delimiter or dialect.conventions.default_delimiter,
        "records": len(table),
        "table": table,
    }

@app.post("/build", response_model=BuildResponse)
def build_table(request: BuildRequest):
    try:
        content = build_to_string(request.table, request.dialect, request.delimiter, request.line_break)
    except ValidationError as exc:
        raise _invalid_options(exc)
    return {"content": content}

@app.post("/guess", response_model=GuessResponse)
def guess(request: GuessRequest):
    delimiter = guess_delimiter(request.text, request.dialect, request.known_delimiters)
    return {"delimiter": delimiter, "indeterminate": delimiter is None}

@app.post("/convert", response_model=ConvertResponse)
async def convert_upload(
    file: UploadFile = File(...),
    source_dialect: Dialect = Query(Dialect.UNIX),
    target_dialect: Dialect = Query(Dialect.RFC4180),
    source_delimiter: Optional[str] = Query(None, min_length=1, max_length=1),
    target_delimiter: Optional[str] = Query(None, min_length=1, max_length=1),
):
    raw = await file.read()
    try:
        return convert_bytes(raw, source_dialect, target_dialect, source_delimiter, target_delimiter)
    except DSVParserError as exc:
        raise _unprocessable(exc)
    except ValidationError as exc:
        raise _invalid_options(exc)
