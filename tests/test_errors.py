import pytest

from lumina.errors import (ACCESS_MESSAGE, UNKNOWN_MESSAGE, ErrorKind,
                           GenerationError, classify_error, describe_failure,
                           is_access_error)


class StatusError(Exception):
    def __init__(self, code, status, message):
        super().__init__(message)
        self.code = code
        self.status = status


@pytest.mark.parametrize(
    "message",
    ["403 Forbidden", "HTTP 404", "Model not found", "PERMISSION denied for key", "Requested entity was Not Found"],
)
def test_access_markers_are_case_insensitive(message):
    assert is_access_error(Exception(message))


def test_other_messages_are_not_access_errors():
    assert not is_access_error(Exception("500 INTERNAL"))
    assert not is_access_error(Exception("quota exceeded (429)"))


def test_structured_code_wins_over_message():
    assert is_access_error(StatusError(403, "PERMISSION_DENIED", "denied"))
    assert is_access_error(StatusError(404, "NOT_FOUND", "missing"))
    # message mentions 404 but the structured code says otherwise
    assert not is_access_error(StatusError(429, "RESOURCE_EXHAUSTED", "retry 404 times"))


def test_structured_status_without_code():
    assert is_access_error(StatusError(None, "permission_denied", ""))
    assert not is_access_error(StatusError(None, "UNAVAILABLE", "not found"))


def test_classify_generation_error_keeps_kind():
    assert classify_error(GenerationError(ErrorKind.NO_IMAGE, "x")) is ErrorKind.NO_IMAGE


def test_describe_failure():
    access = describe_failure(RuntimeError("403 Forbidden"))
    assert access.kind is ErrorKind.ACCESS
    assert access.message == ACCESS_MESSAGE
    assert access.to_dict()["select_credential"] is True

    unknown = describe_failure(RuntimeError("boom"))
    assert unknown.kind is ErrorKind.UNKNOWN
    assert unknown.message == "boom"
    assert unknown.to_dict()["select_credential"] is False

    assert describe_failure(RuntimeError()).message == UNKNOWN_MESSAGE

    validation = GenerationError(ErrorKind.VALIDATION, "nope")
    assert describe_failure(validation) is validation


def test_to_dict_shape():
    error = GenerationError(ErrorKind.NO_IMAGE, "no picture")
    assert error.to_dict() == {"kind": "no_image", "message": "no picture", "select_credential": False}
