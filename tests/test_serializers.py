"""Tests for the structured-value serializers."""
import pytest

from navigator_pbe.exceptions import (
    ConfigurationError,
    DecodeError,
    SerializationError,
)
from navigator_pbe.serializers import (
    JSONSerializer,
    PickleSerializer,
    Serializer,
    get_serializer,
)


class Credentials:
    """Plain class restored by the jsonpickle serializer."""

    def __init__(self, user: str, password: str):
        self.user = user
        self.password = password


class TestJSONSerializer:

    @pytest.fixture
    def serializer(self):
        return JSONSerializer()

    @pytest.mark.parametrize("value", [
        "text", 1, 1.5, True, None, [1, "two"], {"nested": {"a": [1, 2]}},
    ])
    def test_roundtrip(self, serializer, value):
        assert serializer.loads(serializer.dumps(value)) == value

    def test_bytes_are_wrapped(self, serializer):
        data = serializer.dumps(b"\x00\xff")
        assert b"__pbe_bytes_b64__" in data
        assert serializer.loads(data) == b"\x00\xff"

    def test_dict_lookalike_not_unwrapped(self, serializer):
        """Only a single-key wrapper is treated as bytes."""
        value = {"__pbe_bytes_b64__": "AA==", "other": 1}
        assert serializer.loads(serializer.dumps(value)) == value

    def test_unserializable(self, serializer):
        with pytest.raises(SerializationError):
            serializer.dumps(object())

    def test_invalid_json(self, serializer):
        with pytest.raises(DecodeError):
            serializer.loads(b"{not json")

    def test_invalid_wrapper(self, serializer):
        with pytest.raises(DecodeError):
            serializer.loads(b'{"__pbe_bytes_b64__": "***"}')


class TestPickleSerializer:

    def test_object_roundtrip(self):
        serializer = PickleSerializer()
        restored = serializer.loads(serializer.dumps(Credentials("guest", "guest")))
        assert isinstance(restored, Credentials)
        assert restored.user == "guest"

    @pytest.mark.filterwarnings("error")
    def test_int_keys_without_deprecation_warning(self):
        """Non-string dict keys survive and encoding does not warn."""
        serializer = PickleSerializer()
        value = {1: "one", 2: "two"}
        assert serializer.loads(serializer.dumps(value)) == value

    def test_invalid_payload(self):
        with pytest.raises(DecodeError):
            PickleSerializer().loads(b"\xff\xfe")


class TestRegistry:

    def test_get_serializer(self):
        assert isinstance(get_serializer(), JSONSerializer)
        assert isinstance(get_serializer("pickle"), PickleSerializer)

    def test_protocol(self):
        assert isinstance(JSONSerializer(), Serializer)
        assert isinstance(PickleSerializer(), Serializer)

    def test_unknown(self):
        with pytest.raises(ConfigurationError):
            get_serializer("yaml")
