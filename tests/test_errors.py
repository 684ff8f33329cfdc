"""Tests for error normalization and the library's exception types."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st
from resultguard import UNDEFINED, CanonicalError, TimeoutError, normalize
from resultguard._errors import format_ms


class CustomError(ValueError):
    def __init__(self, code: int, message: str) -> None:
        self.code = code
        super().__init__(message)


class TestNormalizeExceptions:
    """Exception instances pass through untouched."""

    def test_exception_identity_is_preserved(self):
        exc = RuntimeError("boom")
        assert normalize(exc) is exc

    def test_subclass_chain_is_preserved(self):
        exc = CustomError(400, "Bad Request")
        normalized = normalize(exc)
        assert isinstance(normalized, CustomError)
        assert isinstance(normalized, ValueError)
        assert normalized.code == 400

    @given(message=st.text())
    def test_any_exception_passes_through(self, message: str):
        exc = KeyError(message)
        assert normalize(exc) is exc


class TestNormalizeText:
    """Text becomes an exception carrying that text."""

    def test_string_becomes_message(self):
        normalized = normalize("something broke")
        assert isinstance(normalized, CanonicalError)
        assert str(normalized) == "something broke"
        assert normalized.value == "something broke"

    @given(text=st.text())
    def test_any_text_is_the_message(self, text: str):
        assert normalize(text).args == (text,)


class TestNormalizeOtherValues:
    """Non-exception, non-text values get a serialized message."""

    def test_none_is_null(self):
        assert str(normalize(None)) == "Non-error value thrown: null"

    def test_undefined_is_undefined(self):
        assert str(normalize(UNDEFINED)) == "Non-error value thrown: undefined"

    def test_null_and_undefined_are_distinct(self):
        assert str(normalize(None)) != str(normalize(UNDEFINED))

    def test_mapping_is_json_encoded(self):
        normalized = normalize({"custom": "error"})
        assert str(normalized) == 'Non-error value thrown: {"custom":"error"}'

    def test_number_is_json_encoded(self):
        assert str(normalize(42)) == "Non-error value thrown: 42"

    def test_bool_is_json_encoded(self):
        assert str(normalize(True)) == "Non-error value thrown: true"

    def test_recursive_structure_falls_back_to_str(self):
        loop: list[object] = []
        loop.append(loop)
        normalized = normalize(loop)
        assert str(normalized) == f"Non-error value thrown: {loop}"

    def test_unencodable_object_falls_back_to_str(self):
        class Opaque:
            def __str__(self) -> str:
                return "opaque-thing"

        assert str(normalize(Opaque())) == "Non-error value thrown: opaque-thing"

    def test_original_value_is_kept(self):
        payload = {"code": 7}
        assert normalize(payload).value is payload

    @given(value=st.one_of(st.integers(), st.floats(allow_nan=False), st.lists(st.integers())))
    def test_never_raises(self, value: object):
        assert isinstance(normalize(value), CanonicalError)


class TestTimeoutError:
    """Deadline failures carry their context and duration."""

    def test_message_format(self):
        exc = TimeoutError("Operation timed out", 10)
        assert str(exc) == "Operation timed out after 10ms"
        assert exc.context == "Operation timed out"
        assert exc.timeout_ms == 10

    def test_whole_float_renders_as_int(self):
        assert str(TimeoutError("Iterator timed out", 250.0)) == "Iterator timed out after 250ms"

    @pytest.mark.parametrize(
        ("ms", "rendered"),
        [(5, "5"), (5.0, "5"), (2.5, "2.5"), (1000, "1000")],
    )
    def test_format_ms(self, ms: float, rendered: str):
        assert format_ms(ms) == rendered
