import pytest

from kraken_api.decoding import ApiResponse, decode_response
from kraken_api.exceptions import ApplicationError, DecodeError


def test_decode_success_envelope():
    response = decode_response(b'{"error": [], "result": {"a": 1}}')
    assert response == ApiResponse(error=[], result={"a": 1})
    assert response.ok
    assert response.raise_for_error() == {"a": 1}


def test_decode_accepts_str():
    assert decode_response('{"error": [], "result": [1, 2]}').result == [1, 2]


def test_missing_fields_default():
    response = decode_response(b"{}")
    assert response.error == []
    assert response.result == {}


def test_null_result_defaults_to_empty_mapping():
    assert decode_response(b'{"error": [], "result": null}').result == {}


def test_application_error_is_returned_not_raised():
    response = decode_response(b'{"error": ["EAPI:Invalid nonce"]}')
    assert not response.ok
    assert response.error == ["EAPI:Invalid nonce"]
    with pytest.raises(ApplicationError, match="EAPI:Invalid nonce") as exc_info:
        response.raise_for_error()
    assert exc_info.value.errors == ["EAPI:Invalid nonce"]


def test_error_and_result_are_both_kept():
    response = decode_response(b'{"error": ["EGeneral:Warning"], "result": {"txid": ["O1"]}}')
    assert response.error == ["EGeneral:Warning"]
    assert response.result == {"txid": ["O1"]}


@pytest.mark.parametrize("raw", [b"not json", b"", b"<html>502 Bad Gateway</html>", b"\xff\xfe"])
def test_malformed_json_raises_decode_error(raw):
    with pytest.raises(DecodeError):
        decode_response(raw)


@pytest.mark.parametrize("raw", [b"[]", b'"text"', b"42", b"null", b"true"])
def test_non_object_top_level_raises_decode_error(raw):
    with pytest.raises(DecodeError, match="JSON object"):
        decode_response(raw)


def test_non_list_error_field_raises_decode_error():
    with pytest.raises(DecodeError, match="'error'"):
        decode_response(b'{"error": "EAPI:Bad request"}')
