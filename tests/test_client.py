"""Tests for request assembly and the IGDB client."""

import httpx
import pytest

from igq.api.client import IGDBApiError, IGDBClient, assemble_request
from igq.api.query import Equality, QueryBuilder


class TestBuild:
    def test_request_shape(self):
        builder = QueryBuilder().add_field("name").add_where("id", Equality.EQUAL, 1)
        request = builder.build("secret", "https://api-v3.igdb.com/games")

        assert request.method == "GET"
        assert str(request.url) == "https://api-v3.igdb.com/games"
        assert request.headers["user-key"] == "secret"
        assert request.headers["content-type"] == "application/text"
        assert request.content == b"fields name; where id = 1; limit 50;"

    def test_body_matches_build_body(self):
        builder = QueryBuilder().all_fields().search("halo")
        request = builder.build("k", "https://example.com/games")
        assert request.content == builder.build_body()

    @pytest.mark.parametrize("url", ["not a url", "/games", "https://example.com:notaport/games"])
    def test_malformed_url_raises(self, url):
        with pytest.raises(httpx.InvalidURL):
            assemble_request("k", url, b"fields *; limit 50;")


def _client(handler, **kwargs) -> IGDBClient:
    return IGDBClient("secret", transport=httpx.MockTransport(handler), **kwargs)


class TestIGDBClient:
    def test_url_joins_endpoint(self):
        client = IGDBClient("k", base_url="https://api-v3.igdb.com/")
        assert client.url("games") == "https://api-v3.igdb.com/games"
        assert client.url("/companies/") == "https://api-v3.igdb.com/companies"

    def test_query_sends_built_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["key"] = request.headers["user-key"]
            seen["body"] = request.content
            return httpx.Response(200, json=[{"id": 1, "name": "Conan"}])

        builder = QueryBuilder().add_field("name").add_where("name", Equality.EQUAL, "Conan")
        result = _client(handler).query("games", builder)

        assert result == [{"id": 1, "name": "Conan"}]
        assert seen == {
            "method": "GET",
            "url": "https://api-v3.igdb.com/games",
            "key": "secret",
            "body": b"fields name; where name = Conan; limit 50;",
        }

    def test_empty_response(self):
        client = _client(lambda request: httpx.Response(200, content=b""))
        assert client.query("games", QueryBuilder().all_fields()) == []

    def test_error_list_response(self):
        def handler(request):
            return httpx.Response(
                400,
                json=[{"title": "Syntax Error", "cause": "Missing `;` at end of query"}],
            )

        with pytest.raises(IGDBApiError) as exc_info:
            _client(handler).query("games", QueryBuilder().all_fields())

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Syntax Error"
        assert exc_info.value.detail == "Missing `;` at end of query"

    def test_error_message_response(self):
        def handler(request):
            return httpx.Response(403, json={"message": "Authentication failed"})

        with pytest.raises(IGDBApiError) as exc_info:
            _client(handler).query("games", QueryBuilder().all_fields())

        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "[403] Authentication failed"

    def test_error_plain_text(self):
        def handler(request):
            return httpx.Response(500, text="upstream timeout")

        with pytest.raises(IGDBApiError) as exc_info:
            _client(handler).query("games", QueryBuilder().all_fields())

        assert exc_info.value.message == "upstream timeout"

    def test_verbose_logs_to_stderr(self, capsys):
        client = _client(lambda request: httpx.Response(200, json=[]), verbose=True)
        client.query("games", QueryBuilder().all_fields())

        err = capsys.readouterr().err
        assert "[HTTP] GET https://api-v3.igdb.com/games" in err
        assert "[HTTP] body=fields *; limit 50;" in err
        assert "[HTTP] 200" in err

    def test_prepare_does_not_send(self):
        def handler(request):
            raise AssertionError("request should not be sent")

        request = _client(handler).prepare("games", QueryBuilder().all_fields())
        assert request.headers["user-key"] == "secret"
