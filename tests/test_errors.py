from futbolai.errors import (
    APIError,
    ConfigurationError,
    EmptyResultError,
    ErrorKind,
    InvalidInputError,
    ProviderRejectionError,
    TransientProviderError,
    sanitize_error_message,
)


def test_to_dict_includes_kind_and_details():
    err = ProviderRejectionError("football-data", "Upstream rate limited the request.", details="rate_limited", code="429")
    assert err.to_dict() == {
        "source": "football-data",
        "code": "429",
        "message": "Upstream rate limited the request.",
        "kind": "rejected",
        "details": "rate_limited",
    }


def test_subclasses_carry_their_kind():
    assert InvalidInputError("bad").kind is ErrorKind.INVALID_INPUT
    assert ConfigurationError("groq-ai").kind is ErrorKind.NOT_CONFIGURED
    assert TransientProviderError("wikipedia", "down", code="TIMEOUT").code == "TIMEOUT"
    assert EmptyResultError("static").kind is ErrorKind.EMPTY_RESULT
    assert all(
        isinstance(e, APIError)
        for e in (InvalidInputError("x"), ConfigurationError("s"), EmptyResultError("s"))
    )


def test_base_error_omits_missing_fields():
    assert APIError("odds", "X", "msg").to_dict() == {"source": "odds", "code": "X", "message": "msg"}


def test_sanitize_error_message_scrubs_credentials():
    raw = "GET failed X-Auth-Token: abc123 Authorization: Bearer gsk_secretvalue api_key=zzz"
    cleaned = sanitize_error_message(raw)
    assert "abc123" not in cleaned
    assert "secretvalue" not in cleaned
    assert "zzz" not in cleaned
    assert "X-Auth-Token: ***" in cleaned
