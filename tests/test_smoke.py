import base64

from fastapi.testclient import TestClient
from dsv.main import app

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_parse_unix_upload():
    raw = b"# users\nroot:x:0:0\nalice:x:1000:1000\n"

    files = {"file": ("passwd", raw, "text/plain")}
    r = client.post("/parse", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["dialect"] == "unix"
    assert data["delimiter"] == ":"
    assert data["records"] == 2
    assert data["table"] == [["root", "x", "0", "0"], ["alice", "x", "1000", "1000"]]

def test_parse_rfc4180_error_is_422():
    files = {"file": ("bad.csv", b'a,"b\n', "text/csv")}
    r = client.post("/parse", params={"dialect": "rfc4180"}, files=files)
    assert r.status_code == 422

    detail = r.json()["detail"]
    assert detail["kind"] == "premature-eof"
    assert detail["state"] == "read-ln"

def test_build_rfc4180():
    payload = {"table": [["a", "b,c"], ['say "hi"']], "dialect": "rfc4180"}
    r = client.post("/build", json=payload)
    assert r.status_code == 200
    assert r.json() == {"content": 'a,"b,c"\r\n"say ""hi"""\r\n'}

def test_build_rejects_long_delimiter():
    payload = {"table": [["a"]], "dialect": "unix", "delimiter": "::"}
    r = client.post("/build", json=payload)
    assert r.status_code == 422

def test_guess():
    r = client.post("/guess", json={"text": "a:b,c,d"})
    assert r.status_code == 200
    assert r.json() == {"delimiter": ",", "indeterminate": False}

    r = client.post("/guess", json={"text": "a,b:c"})
    assert r.json() == {"delimiter": None, "indeterminate": True}

def test_convert_latin1_semicolons_to_rfc4180():
    # Include a Latin-1 character to force non-ASCII handling
    raw = "name;city\nPaul;Montréal\n".encode("latin-1")

    files = {"file": ("test.csv", raw, "text/csv")}
    r = client.post("/convert", params={"source_dialect": "rfc4180"}, files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["report"]["source"] == {"dialect": "rfc4180", "delimiter": ";", "guessed": True}
    assert data["report"]["records"] == 2

    out_text = base64.b64decode(data["converted"]["content_b64"]).decode("utf-8")
    assert out_text == "name,city\r\nPaul,Montréal\r\n"
