"""Tests for the signed request pipeline."""
import logging
import threading
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from twitter_rest.auth import CredentialStore
from twitter_rest.exceptions import (
    ConfigurationError,
    DecodeError,
    MalformedResponseError,
    ProviderError,
    TransportError,
    ValidationError,
)
from twitter_rest.multipart import MultipartBody
from twitter_rest.pipeline import FORM_CONTENT_TYPE, RequestPipeline, SigningStrategy
from twitter_rest.signer import sign_hmac_sha1, signature_base_string
from twitter_rest.values import JsonList, JsonMap, Shape
from tests.conftest import PREFIX, FakeSession, make_response, parse_authorization_header


def _verify_header(call, signed_params, consumer_secret="consumer-secret", token_secret="user-secret"):
    oauth = parse_authorization_header(call["headers"]["Authorization"])
    signature = oauth.pop("oauth_signature")
    params = {k: list(v) for k, v in signed_params.items()}
    params.update({k: [v] for k, v in oauth.items()})
    base_url = call["url"].split("?", 1)[0]
    base = signature_base_string(call["method"], base_url, params)
    assert sign_hmac_sha1(base, consumer_secret, token_secret) == signature
    return oauth


def test_build_url(pipeline):
    assert pipeline.build_url("/statuses/update/") == "https://api.twitter.com/1.1/statuses/update.json"


@pytest.mark.parametrize("method", ["PUT", "DELETE", "PATCH", "", None])
def test_unknown_method_is_rejected_without_io(pipeline, session, method):
    with pytest.raises(ValidationError):
        pipeline.execute(method, "statuses/update")
    assert session.calls == []


def test_lowercase_method_is_accepted(pipeline, session):
    pipeline.execute("get", "account/verify_credentials")
    assert session.calls[0]["method"] == "GET"


def test_missing_user_credentials(session):
    pipeline = RequestPipeline(CredentialStore("ck", "cs"), session=session, prefix=PREFIX)
    with pytest.raises(ValidationError):
        pipeline.execute("GET", "account/verify_credentials")
    assert session.calls == []


def test_app_only_request_when_user_not_required(session):
    pipeline = RequestPipeline(CredentialStore("ck", "cs"), session=session, prefix=PREFIX)
    pipeline.execute("GET", "search/tweets", {"q": "go"}, require_user=False)
    oauth = _verify_header(session.calls[0], {"q": ["go"]}, "cs", "")
    assert "oauth_token" not in oauth


def test_get_appends_query_and_signs_header(pipeline, session):
    pipeline.execute("GET", "statuses/home_timeline", {"count": 5, "trim_user": True})
    call = session.calls[0]
    parts = urlsplit(call["url"])
    assert parts.path == "/1.1/statuses/home_timeline.json"
    assert parse_qs(parts.query) == {"count": ["5"], "trim_user": ["true"]}
    assert call["data"] is None
    assert "Content-Type" not in call["headers"]
    assert call["timeout"] == 5
    oauth = _verify_header(call, {"count": ["5"], "trim_user": ["true"]})
    assert oauth["oauth_token"] == "user-token"
    assert oauth["oauth_consumer_key"] == "consumer-key"


def test_get_without_params_has_no_query(pipeline, session):
    pipeline.execute("GET", "account/verify_credentials")
    assert session.calls[0]["url"] == "https://api.twitter.com/1.1/account/verify_credentials.json"


def test_post_form_encodes_body(pipeline, session):
    pipeline.execute("POST", "statuses/update", post_params={"status": "hello world!"})
    call = session.calls[0]
    assert call["headers"]["Content-Type"] == FORM_CONTENT_TYPE
    assert call["data"] == b"status=hello%20world%21"
    _verify_header(call, {"status": ["hello world!"]})


def test_post_signs_query_and_form(pipeline, session):
    pipeline.execute("POST", "statuses/update", {"include_entities": "true"}, {"status": "hi"})
    call = session.calls[0]
    assert call["url"].endswith("statuses/update.json?include_entities=true")
    _verify_header(call, {"include_entities": ["true"], "status": ["hi"]})


def test_get_ignores_post_params(pipeline, session):
    pipeline.execute("GET", "users/show", {"screen_name": "jack"}, {"ignored": "x"})
    call = session.calls[0]
    assert call["data"] is None
    _verify_header(call, {"screen_name": ["jack"]})


def test_parameter_signing_get(pipeline, session):
    pipeline.execute("GET", "users/show", {"screen_name": "jack"}, signing=SigningStrategy.PARAMS)
    call = session.calls[0]
    assert "Authorization" not in call["headers"]
    query = parse_qs(urlsplit(call["url"]).query)
    assert query["screen_name"] == ["jack"]
    signature = query.pop("oauth_signature")[0]
    base = signature_base_string("GET", call["url"].split("?")[0], query)
    assert sign_hmac_sha1(base, "consumer-secret", "user-secret") == signature


def test_parameter_signing_post(pipeline, session):
    pipeline.execute("POST", "statuses/update", post_params={"status": "hi"}, signing="params")
    call = session.calls[0]
    form = parse_qs(call["data"].decode())
    assert form["status"] == ["hi"]
    assert form["oauth_token"] == ["user-token"]
    assert "oauth_signature" in form
    assert urlsplit(call["url"]).query == ""


def test_parameter_signing_rejects_multipart(pipeline, session):
    body = MultipartBody("multipart/form-data; boundary=b", b"--b--\r\n")
    with pytest.raises(ValidationError):
        pipeline.execute("POST", "statuses/update_with_media", body=body, signing=SigningStrategy.PARAMS)
    assert session.calls == []


def test_multipart_body_sent_verbatim(pipeline, session):
    body = MultipartBody("multipart/form-data; boundary=b", b"--b\r\npayload\r\n--b--\r\n")
    pipeline.execute("POST", "statuses/update_with_media", post_params={"status": "x"}, body=body)
    call = session.calls[0]
    assert call["data"] == body.data
    assert call["headers"]["Content-Type"] == body.content_type
    _verify_header(call, {})


def test_provider_error_keeps_status_and_body(store):
    body = '{"errors":[{"code":32,"message":"Could not authenticate you."}]}'
    session = FakeSession(make_response(401, body))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    with pytest.raises(ProviderError) as excinfo:
        pipeline.execute("GET", "account/verify_credentials", shape=Shape.MAP)
    assert excinfo.value.status_code == 401
    assert excinfo.value.body == body
    assert excinfo.value.url == "https://api.twitter.com/1.1/account/verify_credentials.json"


def test_non_json_error_body_is_provider_error(store):
    session = FakeSession(make_response(503, "<html>over capacity</html>"))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    with pytest.raises(ProviderError) as excinfo:
        pipeline.execute("GET", "statuses/home_timeline", shape=Shape.LIST)
    assert excinfo.value.status_code == 503


def test_success_decodes_map(store):
    session = FakeSession(make_response(200, '{"id_str":"123","text":"hello"}'))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    value = pipeline.execute("GET", "statuses/show/123", shape=Shape.MAP)
    assert isinstance(value, JsonMap)
    assert value["id_str"] == "123"
    assert value["text"] == "hello"


def test_success_decodes_list(store):
    session = FakeSession(make_response(200, "[{\"id\": 1}, {\"id\": 2}]"))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    value = pipeline.execute("GET", "statuses/home_timeline", shape=Shape.LIST)
    assert isinstance(value, JsonList)
    assert [t["id"] for t in value] == [1, 2]


def test_empty_body_is_malformed(store):
    session = FakeSession(make_response(200, b""))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    with pytest.raises(MalformedResponseError):
        pipeline.execute("GET", "account/verify_credentials", shape=Shape.MAP)


def test_wrong_shape_is_decode_error(store):
    session = FakeSession(make_response(200, "[]"))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    with pytest.raises(DecodeError):
        pipeline.execute("GET", "account/verify_credentials", shape=Shape.MAP)


@pytest.mark.parametrize("exc", [
    requests.ConnectionError("name resolution failed"),
    requests.Timeout("read timed out"),
    requests.exceptions.SSLError("bad certificate"),
])
def test_transport_errors(store, exc):
    session = FakeSession(exc)
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    with pytest.raises(TransportError) as excinfo:
        pipeline.execute("GET", "account/verify_credentials")
    assert excinfo.value.__cause__ is exc
    assert len(session.calls) == 1


def test_malformed_prefix_is_configuration_error(store, session):
    pipeline = RequestPipeline(store, session=session, prefix="api.twitter.com/1.1")
    with pytest.raises(ConfigurationError):
        pipeline.execute("GET", "account/verify_credentials")
    assert session.calls == []


def test_debug_logs_request_and_response(store, caplog):
    session = FakeSession(make_response(200, '{"id": 1}'))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX, debug=True)
    with caplog.at_level(logging.INFO, logger="twitter_rest"):
        pipeline.execute("GET", "statuses/show/1", {"trim_user": "true"})
    assert "GET https://api.twitter.com/1.1/statuses/show/1.json?trim_user=true" in caplog.text
    assert '{"id": 1}' in caplog.text


def test_debug_off_logs_nothing(pipeline, caplog):
    with caplog.at_level(logging.DEBUG, logger="twitter_rest"):
        pipeline.execute("GET", "statuses/show/1")
    assert caplog.text == ""


def test_concurrent_requests_sign_independently(store):
    session = FakeSession(default=make_response(200, "{}"))
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    errors = []

    def worker(n):
        try:
            for i in range(10):
                pipeline.execute("POST", "statuses/update", {"n": n}, {"status": f"{n}-{i}"})
        except Exception as exc:  # pragma: no cover - surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(session.calls) == 80
    nonces = set()
    for call in session.calls:
        query = parse_qs(urlsplit(call["url"]).query)
        form = parse_qs(call["data"].decode())
        oauth = _verify_header(call, {**query, **form})
        nonces.add(oauth["oauth_nonce"])
    assert len(nonces) == 80


def test_reauthorization_uses_new_secret(store, session):
    pipeline = RequestPipeline(store, session=session, prefix=PREFIX)
    store.set_user_credentials("new-token", "new-secret")
    pipeline.execute("GET", "account/verify_credentials")
    oauth = _verify_header(session.calls[0], {}, token_secret="new-secret")
    assert oauth["oauth_token"] == "new-token"


def test_unknown_shape_is_rejected_without_io(pipeline, session):
    with pytest.raises(ValidationError):
        pipeline.execute("GET", "account/verify_credentials", shape="maps")
    assert session.calls == []


def test_shape_given_as_string(pipeline, session):
    assert isinstance(pipeline.execute("GET", "account/verify_credentials", shape="map"), JsonMap)


def test_debug_output_survives_quiet_log_level(store, caplog):
    package_logger = logging.getLogger("twitter_rest")
    previous = package_logger.level
    package_logger.setLevel(logging.WARNING)
    try:
        session = FakeSession(make_response(200, '{"id": 7}'))
        pipeline = RequestPipeline(store, session=session, prefix=PREFIX, debug=True)
        pipeline.execute("GET", "statuses/show/7")
        assert package_logger.isEnabledFor(logging.INFO)
    finally:
        package_logger.setLevel(previous)
    assert "GET https://api.twitter.com/1.1/statuses/show/7.json" in caplog.text
    assert '{"id": 7}' in caplog.text
