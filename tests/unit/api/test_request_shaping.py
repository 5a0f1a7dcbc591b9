"""Unit tests for query strings, fingerprints and the User-Agent."""

import pytest

from nsapi.api.request import (
    API_VERSION,
    VERSION,
    build_user_agent,
    encode_query,
    encode_shards,
    fingerprint,
    shard_query,
)
from nsapi.exceptions import ConfigurationError


class TestUserAgent:
    def test_format(self):
        assert build_user_agent("Testlandia") == f'nsapi-py {VERSION} (used by "Testlandia")'

    def test_strips_whitespace(self):
        assert build_user_agent("  Testlandia ").endswith('(used by "Testlandia")')

    @pytest.mark.parametrize("value", ["", "   ", None, 42])
    def test_rejects_missing_user_agent(self, value):
        with pytest.raises(ConfigurationError):
            build_user_agent(value)


class TestEncoding:
    def test_encode_query_keeps_order(self):
        assert encode_query([("a", "sendTG"), ("to", "the east pacific")]) == (
            "a=sendTG&to=the%20east%20pacific"
        )

    def test_encode_query_escapes_reserved(self):
        assert encode_query([("key", "a+b&c=d")]) == "key=a%2Bb%26c%3Dd"

    def test_encode_shards(self):
        assert encode_shards(["name", "region"]) == "name+region"
        assert encode_shards([]) == ""


class TestShardQuery:
    def test_nation(self):
        query = shard_query([("nation", "testlandia")], ["name", "region"])
        assert query == f"nation=testlandia&q=name+region&v={API_VERSION}"

    def test_world_has_no_endpoint(self):
        assert shard_query([], ["numnations"]) == "q=numnations&v=7"

    def test_no_shards(self):
        assert shard_query([("region", "the pacific")]) == "region=the%20pacific&q=&v=7"

    def test_extra_params(self):
        query = shard_query(
            [("nation", "testlandia")], ["census"], {"scale": 76, "mode": "score"}
        )
        assert query == "nation=testlandia&q=census&scale=76&mode=score&v=7"

    def test_world_assembly(self):
        assert shard_query([("wa", 1)], ["resolution"]) == "wa=1&q=resolution&v=7"


class TestFingerprint:
    def test_independent_of_order(self):
        """Logically identical requests share a key."""
        a = fingerprint([("nation", "x")], ["region", "name"], {"b": 1, "a": 2})
        b = fingerprint([("nation", "x")], ["name", "region"], {"a": 2, "b": 1})
        assert a == b
        assert a == "nation=x&q=name+region&a=2&b=1&v=7"

    def test_duplicate_shards_kept(self):
        """The key reflects every shard actually sent."""
        assert fingerprint([], ["name", "name"]) != fingerprint([], ["name"])
        assert fingerprint([], ["name", "name"]) == "q=name+name&v=7"

    def test_differs_by_endpoint(self):
        assert fingerprint([("nation", "x")], ["name"]) != fingerprint(
            [("region", "x")], ["name"]
        )

    def test_differs_by_shards(self):
        assert fingerprint([], ["name"]) != fingerprint([], ["name", "region"])

    def test_differs_by_params(self):
        assert fingerprint([], ["census"], {"scale": 1}) != fingerprint(
            [], ["census"], {"scale": 2}
        )

    def test_includes_api_version(self):
        assert fingerprint([], ["name"], api_version=7) != fingerprint(
            [], ["name"], api_version=8
        )

    def test_int_and_str_params_match(self):
        assert fingerprint([("wa", 1)], ["x"]) == fingerprint([("wa", "1")], ["x"])
