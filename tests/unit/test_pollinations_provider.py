"""Unit tests for the Pollinations provider client.

All tests run the real client against ``httpx.MockTransport`` so the exact
outbound request can be inspected without network access.
"""

import base64
import random
from urllib.parse import unquote

import httpx
import pytest

from fakes import (
    PNG_BYTES,
    SOURCE_IMAGE_DATA_URL,
    RecordingEndpoint,
    image_response,
    text_response,
)
from lookalike.core.config import LookalikeConfig
from lookalike.core.errors import AuthError, ProviderError
from lookalike.core.models import LookalikeRequest
from lookalike.core.prompt_builder import build_prompt
from lookalike.core.providers.pollinations import DEFAULT_SEED, PollinationsProvider


def _decoded_path(request: httpx.Request) -> str:
    return unquote(request.url.raw_path.decode("ascii").split("?", 1)[0])


class TestPollinationsRequest:
    """Tests for the outbound GET."""

    def test_single_get_to_image_endpoint(self, run_generate, test_config, en_request):
        _, endpoint = run_generate(PollinationsProvider, test_config, image_response(), en_request)

        assert endpoint.call_count == 1
        sent = endpoint.requests[0]
        assert sent.method == "GET"
        assert sent.url.host == "pollinations.test"
        assert _decoded_path(sent) == "/image/" + build_prompt("en", "fox", "sharp eyes, warm smile")

    def test_prompt_is_one_path_segment(self, run_generate, test_config, en_request):
        _, endpoint = run_generate(PollinationsProvider, test_config, image_response(), en_request)

        raw_path = endpoint.requests[0].url.raw_path.decode("ascii").split("?", 1)[0]
        assert raw_path.count("/") == 2
        assert " " not in raw_path

    def test_query_parameters(self, run_generate, test_config, en_request):
        _, endpoint = run_generate(PollinationsProvider, test_config, image_response(), en_request)

        params = endpoint.requests[0].url.params
        assert params["model"] == "flux"
        assert params["width"] == "1024"
        assert params["height"] == "1024"
        assert params["seed"] == str(DEFAULT_SEED)
        assert params["nologo"] == "true"
        assert params["safe"] == "true"
        assert params["enhance"] == "true"
        assert "key" not in params

    def test_anonymous_call_has_no_auth_header(self, run_generate, test_config, en_request):
        _, endpoint = run_generate(PollinationsProvider, test_config, image_response(), en_request)
        assert "authorization" not in endpoint.requests[0].headers

    def test_api_key_sent_as_query_and_bearer(self, run_generate, test_config, en_request):
        keyed = test_config.model_copy(update={"pollinations_api_key": "pk-123"})
        _, endpoint = run_generate(PollinationsProvider, keyed, image_response(), en_request)

        sent = endpoint.requests[0]
        assert sent.url.params["key"] == "pk-123"
        assert sent.headers["authorization"] == "Bearer pk-123"

    def test_korean_prompt_is_encoded(self, run_generate, test_config):
        request = LookalikeRequest(image_data_url=SOURCE_IMAGE_DATA_URL)
        _, endpoint = run_generate(PollinationsProvider, test_config, image_response(), request)

        assert _decoded_path(endpoint.requests[0]) == "/image/" + build_prompt(
            "ko", request.animal_type, request.traits_text
        )


class TestPollinationsSeed:
    """Tests for first-generation and reroll seeds."""

    def test_repeated_first_generations_share_seed(self, run_generate, test_config, en_request):
        _, first = run_generate(PollinationsProvider, test_config, image_response(), en_request)
        _, second = run_generate(PollinationsProvider, test_config, image_response(), en_request)

        assert first.requests[0].url == second.requests[0].url

    def test_reroll_uses_random_seed(self, run_generate, test_config, en_request, monkeypatch):
        monkeypatch.setattr(random, "randint", lambda a, b: 7)
        rerolled = en_request.model_copy(update={"reroll": True})

        _, endpoint = run_generate(PollinationsProvider, test_config, image_response(), rerolled)

        sent = endpoint.requests[0]
        assert sent.url.params["seed"] == "7"
        assert _decoded_path(sent).endswith("while keeping identity cues.")

    def test_reroll_seed_range(self, run_generate, test_config, en_request, monkeypatch):
        bounds = []

        def _fake_randint(a, b):
            bounds.append((a, b))
            return b

        monkeypatch.setattr(random, "randint", _fake_randint)
        rerolled = en_request.model_copy(update={"reroll": True})
        run_generate(PollinationsProvider, test_config, image_response(), rerolled)

        assert bounds == [(0, 999_999)]


class TestPollinationsResult:
    """Tests for response normalisation."""

    def test_round_trip_bytes(self, run_generate, test_config, en_request):
        payload = bytes(range(256)) * 4
        result, _ = run_generate(
            PollinationsProvider, test_config, image_response(payload, "image/png"), en_request
        )

        prefix = "data:image/png;base64,"
        assert result.image_data_url.startswith(prefix)
        assert base64.b64decode(result.image_data_url[len(prefix):]) == payload

    def test_missing_content_type_defaults_to_jpeg(self, run_generate, test_config, en_request):
        result, _ = run_generate(
            PollinationsProvider, test_config, image_response(PNG_BYTES, None), en_request
        )
        assert result.image_data_url.startswith("data:image/jpeg;base64,")

    def test_analysis_text_is_local(self, run_generate, test_config, en_request):
        result, _ = run_generate(PollinationsProvider, test_config, image_response(), en_request)
        assert result.analysis_text == "Applied traits: sharp eyes, warm smile. Animal style: fox."


class TestPollinationsErrors:
    """Tests for provider failures."""

    def test_unauthorized_raises_auth_error(self, run_generate, test_config, en_request):
        with pytest.raises(AuthError, match="authentication failed") as exc_info:
            run_generate(
                PollinationsProvider, test_config, text_response("invalid key", 401), en_request
            )
        assert "invalid key" in exc_info.value.message

    def test_error_body_is_truncated(self, run_generate, test_config, en_request):
        body = "x" * 1000
        with pytest.raises(ProviderError) as exc_info:
            run_generate(PollinationsProvider, test_config, text_response(body, 500), en_request)

        error = exc_info.value
        assert error.status == 500
        assert error.detail == "x" * 260
        assert "Pollinations API error (500)" in error.message
        assert "x" * 261 not in error.message

    def test_auth_error_is_not_provider_error(self, run_generate, test_config, en_request):
        with pytest.raises(AuthError) as exc_info:
            run_generate(PollinationsProvider, test_config, text_response("no", 401), en_request)
        assert not isinstance(exc_info.value, ProviderError)

    def test_transport_failure(self, run_generate, test_config, en_request):
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderError, match="request failed") as exc_info:
            run_generate(PollinationsProvider, test_config, _refuse, en_request)
        assert exc_info.value.status is None

    def test_no_retry_after_failure(self, run_generate, test_config, en_request):
        endpoint = RecordingEndpoint(text_response("busy", 503))
        with pytest.raises(ProviderError):
            run_generate(PollinationsProvider, test_config, None, en_request, endpoint=endpoint)
        assert endpoint.call_count == 1


class TestPollinationsConfigUse:
    """Tests for configuration-driven URL building."""

    def test_trailing_slash_in_base_url(self):
        provider = PollinationsProvider(
            LookalikeConfig(_env_file=None, pollinations_base_url="https://p.test/"),
            http_client=None,  # not used by build_url
        )
        assert provider.build_url("a b") == "https://p.test/image/a%20b"

    def test_path_encoding_matches_uri_component(self):
        provider = PollinationsProvider(LookalikeConfig(_env_file=None), http_client=None)
        url = provider.build_url("cat, fox/owl? (hi)!")
        assert url.endswith("/image/cat%2C%20fox%2Fowl%3F%20(hi)!")
