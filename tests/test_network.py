import json
import socket
import threading
import urllib.parse
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from sentencekit.network import (
    HttpError,
    JsonParseError,
    html_unescape,
    http_request,
    json_escape,
    parse_json,
    url_escape,
)


def test_parse_document_from_source():
    text = '[{"string":"hello world","boolean":false,"number":1.67e+4,"null":null,"array":[]},"hello world"]'
    value = parse_json(text)
    assert value == [
        {"string": "hello world", "boolean": False, "number": float("1.67e+4"), "null": None, "array": []},
        "hello world",
    ]


def test_parse_matches_standard_library_on_plain_json():
    text = '{"a": [1, 2.5, -3e2], "b": {"c": "d\\"e"}, "f": true}'
    assert parse_json(text) == json.loads(text, parse_int=float)


def test_trailing_comma_and_trailing_text_accepted():
    assert parse_json("[1,]") == parse_json("[1]")
    assert parse_json('{"k":1,} garbage') == parse_json('{"k":1}')


def test_number_uses_longest_valid_prefix():
    assert parse_json("1-2") == parse_json("1")


def test_string_escapes():
    assert parse_json(r'"\u0041\/"') == parse_json('"A/"')
    assert parse_json(r'"a\nb\tc"') == "a\nb\tc"


@pytest.mark.parametrize("text", ["", "nul", "tru", "[1 2]", '{"a" 1}', "{1:2}", "[1,", "?"])
def test_malformed_json_raises(text):
    with pytest.raises(JsonParseError):
        parse_json(text)


def test_max_depth():
    assert parse_json("[[[]]]", max_depth=2) == [[[]]]
    with pytest.raises(JsonParseError):
        parse_json("[[[]]]", max_depth=1)


@pytest.mark.parametrize("text", ['plain', 'quote " and \\ slash', "line\nbreak\ttab\r", "日本語"])
def test_json_escape_round_trip(text):
    assert parse_json('"' + json_escape(text) + '"') == text


def test_json_escape_drops_other_control_characters():
    assert json_escape("a\x01b\x7f") == "ab"


def test_html_unescape():
    assert html_unescape("&lt;b&gt; &amp;lt; &#39;&quot;&#x27;") == "<b> &lt; '\"'"


def test_html_unescape_leaves_unknown_entities():
    assert html_unescape("&nbsp; & x") == "&nbsp; & x"


@pytest.mark.parametrize("text", ["a b", "こんにちは", "/?&=", ""])
def test_url_escape_round_trip(text):
    escaped = url_escape(text)
    assert urllib.parse.unquote(escaped) == text
    assert len(escaped) == 3 * len(text.encode("utf-8"))
    assert escaped == escaped.upper()


def test_url_escape_bytes_matches_str():
    assert url_escape("é".encode("utf-8")) == url_escape("é")


class _EchoHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        payload = json.dumps({
            "method": self.command,
            "path": self.path,
            "body": body,
            "agent": self.headers.get("User-Agent"),
            "extra": self.headers.get("X-Test"),
        }).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = do_POST

    def log_message(self, *args):
        pass


@pytest.fixture
def server_port():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _EchoHandler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd.server_address[1]
    httpd.shutdown()
    httpd.server_close()


def test_http_request_round_trip(server_port):
    response = http_request(
        "127.0.0.1", "POST", "/json/list", body="日本", headers="X-Test: yes\r\n",
        port=server_port, secure=False, agent_name="agent",
    )
    assert response.status == 200
    assert parse_json(response.text) == {
        "method": "POST", "path": "/json/list", "body": "日本", "agent": "agent", "extra": "yes",
    }


def test_http_request_mapping_headers(server_port):
    response = http_request("127.0.0.1", "GET", "/x", headers={"X-Test": "mapped"}, port=server_port, secure=False)
    assert parse_json(response.text)["extra"] == "mapped"


def test_http_request_connection_refused():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    with pytest.raises(HttpError):
        http_request("127.0.0.1", "GET", "/", port=port, secure=False)