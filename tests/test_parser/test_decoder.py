"""Tests for specread.parser.decoder."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

from specread.exceptions import (
    DecodeError,
    DocumentTooDeepError,
    MissingFieldError,
    StructuralMismatchError,
    TypeMismatchError,
)
from specread.exit_codes import EXIT_DECODE_ERROR
from specread.models import MAX_DEPTH_LIMIT, DecoderConfig
from specread.openapi import OpenAPI
from specread.parser.decoder import (
    check_depth,
    decode_document,
    decode_mapping,
    encode_document,
)


def _with_operation(raw: dict[str, Any], operation: dict[str, Any], path: str = "/pets") -> dict[str, Any]:
    raw["paths"][path] = {"get": operation}
    return raw


# ---------------------------------------------------------------------------
# Successful decodes
# ---------------------------------------------------------------------------


class TestDecodeDocument:
    """decode_document on valid input."""

    def test_decodes_bytes(self, petstore_bytes: bytes) -> None:
        document = decode_document(petstore_bytes)
        assert isinstance(document, OpenAPI)
        assert document.info.title == "Petstore API"

    def test_decodes_text(self, petstore_bytes: bytes) -> None:
        assert decode_document(petstore_bytes.decode("utf-8")) == decode_document(petstore_bytes)

    def test_empty_paths(self, minimal_raw: dict[str, Any]) -> None:
        document = decode_document(json.dumps(minimal_raw))
        assert document.paths == {}
        assert document.path_names() == []

    def test_decoding_is_deterministic(self, petstore_bytes: bytes) -> None:
        assert decode_document(petstore_bytes) == decode_document(petstore_bytes)

    def test_parallel_decodes_are_independent(self, petstore_bytes: bytes) -> None:
        expected = decode_document(petstore_bytes)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(decode_document, [petstore_bytes] * 8))
        assert all(result == expected for result in results)

    def test_decode_mapping(self, petstore_raw: dict[str, Any]) -> None:
        assert decode_mapping(petstore_raw).path_names()[0] == "/pets"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestDecodeFailures:
    """Every failure becomes one DecodeError pointing into the input."""

    def test_invalid_json(self) -> None:
        with pytest.raises(StructuralMismatchError, match="Invalid JSON"):
            decode_document(b"{not json")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(StructuralMismatchError, match="Invalid UTF-8") as exc_info:
            decode_document(b'{"openapi": "\xff"}')
        assert exc_info.value.exit_code == EXIT_DECODE_ERROR

    @pytest.mark.parametrize("payload", [b"[]", b"\"openapi\"", b"42", b"null"])
    def test_root_must_be_object(self, payload: bytes) -> None:
        with pytest.raises(StructuralMismatchError, match="must be an object"):
            decode_document(payload)

    def test_decode_mapping_rejects_non_mapping(self) -> None:
        with pytest.raises(StructuralMismatchError):
            decode_mapping(["openapi"])

    def test_missing_paths(self, minimal_raw: dict[str, Any]) -> None:
        del minimal_raw["paths"]
        with pytest.raises(MissingFieldError) as exc_info:
            decode_document(json.dumps(minimal_raw))
        assert exc_info.value.pointer == "/paths"
        assert exc_info.value.exit_code == EXIT_DECODE_ERROR

    def test_missing_nested_field(self, minimal_raw: dict[str, Any]) -> None:
        del minimal_raw["info"]["title"]
        with pytest.raises(MissingFieldError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/info/title"
        assert "/info/title" in str(exc_info.value)

    def test_type_mismatch(self, minimal_raw: dict[str, Any]) -> None:
        minimal_raw["openapi"] = 3
        with pytest.raises(TypeMismatchError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/openapi"
        assert exc_info.value.expected

    def test_enum_mismatch_is_type_mismatch(self, minimal_raw: dict[str, Any]) -> None:
        minimal_raw["components"]["securitySchemes"] = {
            "key": {"type": "token", "name": "X-Key", "in": "header"}
        }
        with pytest.raises(TypeMismatchError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/components/securitySchemes/key/type"

    def test_neither_inline_nor_ref(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(minimal_raw, {"parameters": [{"name": "limit"}], "responses": {}})
        with pytest.raises(StructuralMismatchError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/paths/~1pets/get/parameters/0/in"

    def test_pointer_reaches_below_nested_references(self, minimal_raw: dict[str, Any]) -> None:
        minimal_raw["components"]["schemas"] = {
            "Pet": {"properties": {"id": {"type": "integer", "minimum": "1"}}}
        }
        with pytest.raises(StructuralMismatchError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/components/schemas/Pet/properties/id/minimum"

    def test_malformed_status_code_response_fails(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(
            minimal_raw,
            {"responses": {"200": {"content": {}}, "default": {"description": "Error"}}},
        )
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/paths/~1pets/get/responses/200/description"

    def test_pointer_escapes_special_characters(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(minimal_raw, {"responses": {"200": 5}}, path="/a~b/c")
        with pytest.raises(StructuralMismatchError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/paths/~1a~0b~1c/get/responses/200"

    def test_all_problems_are_collected(self, minimal_raw: dict[str, Any]) -> None:
        minimal_raw["info"] = {}
        with pytest.raises(MissingFieldError) as exc_info:
            decode_mapping(minimal_raw)
        error = exc_info.value
        assert [problem["pointer"] for problem in error.errors] == ["/info/title", "/info/version"]
        assert "(and 1 more)" in str(error)

    def test_original_validation_error_is_chained(self, minimal_raw: dict[str, Any]) -> None:
        from pydantic import ValidationError

        del minimal_raw["components"]
        with pytest.raises(MissingFieldError) as exc_info:
            decode_mapping(minimal_raw)
        assert isinstance(exc_info.value.__cause__, ValidationError)


# ---------------------------------------------------------------------------
# Default response handling
# ---------------------------------------------------------------------------


class TestDefaultResponse:
    """The lenient default slot and its strict opt-in."""

    MALFORMED = {"responses": {"200": {"description": "OK"}, "default": {"content": {}}}}

    def test_lenient_by_default(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(minimal_raw, self.MALFORMED)
        responses = decode_mapping(minimal_raw).paths["/pets"].get.responses
        assert responses.default is None
        assert list(responses.codes) == ["200"]

    def test_strict_config(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(minimal_raw, self.MALFORMED)
        with pytest.raises(MissingFieldError) as exc_info:
            decode_mapping(minimal_raw, DecoderConfig(strict_default_response=True))
        assert exc_info.value.pointer == "/paths/~1pets/get/responses/default/description"

    def test_strict_config_rejects_null_default(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(minimal_raw, {"responses": {"default": None}})
        assert decode_mapping(minimal_raw).paths["/pets"].get.responses.default is None
        with pytest.raises(TypeMismatchError) as exc_info:
            decode_mapping(minimal_raw, DecoderConfig(strict_default_response=True))
        assert exc_info.value.pointer == "/paths/~1pets/get/responses/default"

    def test_colliding_status_codes_fail(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(minimal_raw, {"responses": {200: {"description": "A"}, "200": {"description": "B"}}})
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping(minimal_raw)
        assert exc_info.value.pointer == "/paths/~1pets/get/responses"
        assert "200 appears more than once" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Depth limit
# ---------------------------------------------------------------------------


class TestDepthLimit:
    """Nesting is bounded before the model decode starts."""

    def test_check_depth_within_limit(self) -> None:
        check_depth({"a": {"b": [1, 2]}}, 3)

    def test_check_depth_counts_root_as_one(self) -> None:
        check_depth({}, 1)
        with pytest.raises(DocumentTooDeepError) as exc_info:
            check_depth({"a": {}}, 1)
        assert exc_info.value.pointer == "/a"

    def test_scalars_do_not_count(self) -> None:
        check_depth({"a": "deep" * 100}, 1)

    def test_lists_count(self) -> None:
        with pytest.raises(DocumentTooDeepError) as exc_info:
            check_depth({"a": [[1]]}, 2)
        assert exc_info.value.pointer == "/a/0"

    def test_check_depth_handles_very_deep_input(self) -> None:
        raw: Any = {}
        for _ in range(100_000):
            raw = {"not": raw}
        with pytest.raises(DocumentTooDeepError):
            check_depth(raw, 256)

    def test_decode_respects_config(self, minimal_raw: dict[str, Any]) -> None:
        schema: dict[str, Any] = {"type": "string"}
        for _ in range(20):
            schema = {"not": schema}
        minimal_raw["components"]["schemas"] = {"Deep": schema}
        assert decode_mapping(minimal_raw).components.schemas["Deep"].actual.not_ is not None
        with pytest.raises(DocumentTooDeepError):
            decode_mapping(minimal_raw, DecoderConfig(max_depth=10))

    def test_adversarial_json_is_rejected(self) -> None:
        payload = '{"openapi": "3.0.0", "components": {"schemas": {"X": ' + '{"not": ' * 5000 + "{}" + "}" * 5000 + "}}}"
        with pytest.raises(DocumentTooDeepError):
            decode_document(payload)

    @pytest.mark.parametrize("max_depth", [DecoderConfig().max_depth, MAX_DEPTH_LIMIT])
    def test_round_trip_at_exactly_max_depth(self, items_chain, max_depth: int) -> None:
        config = DecoderConfig(max_depth=max_depth)
        raw = items_chain(max_depth)
        document = decode_mapping(raw, config)
        encoded = encode_document(document)
        assert json.loads(encoded) == raw
        assert decode_document(encoded, config) == document

    def test_one_level_past_max_depth_is_rejected(self, items_chain) -> None:
        config = DecoderConfig()
        with pytest.raises(DocumentTooDeepError):
            decode_mapping(items_chain(config.max_depth + 1), config)

    def test_not_chain_at_limit_decodes(self, minimal_raw: dict[str, Any]) -> None:
        schema: dict[str, Any] = {}
        for _ in range(MAX_DEPTH_LIMIT - 4):
            schema = {"not": schema}
        minimal_raw["components"]["schemas"] = {"Deep": schema}
        document = decode_mapping(minimal_raw, DecoderConfig(max_depth=MAX_DEPTH_LIMIT))
        assert json.loads(encode_document(document)) == minimal_raw

    def test_max_depth_is_capped(self) -> None:
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            DecoderConfig(max_depth=MAX_DEPTH_LIMIT + 1)

    def test_too_deep_is_structural(self) -> None:
        assert issubclass(DocumentTooDeepError, StructuralMismatchError)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


class TestEncodeDocument:
    """encode_document writes wire names and decodes back to an equal value."""

    def test_round_trip(self, petstore_document: OpenAPI) -> None:
        assert decode_document(encode_document(petstore_document)) == petstore_document

    def test_round_trip_minimal(self, minimal_raw: dict[str, Any]) -> None:
        document = decode_mapping(minimal_raw)
        assert decode_document(encode_document(document)) == document

    def test_uses_wire_names(self, petstore_document: OpenAPI) -> None:
        encoded = json.loads(encode_document(petstore_document))
        operation = encoded["paths"]["/pets"]["get"]
        assert operation["parameters"][0]["in"] == "query"
        assert operation["parameters"][1] == {"$ref": "#/components/parameters/StatusFilter"}
        assert set(operation["responses"]) == {"200", "default"}
        schema = operation["responses"]["200"]["content"]["application/json"]["schema"]
        assert schema == {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
        assert "securitySchemes" in encoded["components"]
        assert encoded["components"]["schemas"]["NotAPet"] == {"not": {"$ref": "#/components/schemas/Pet"}}

    def test_absent_fields_are_omitted(self, minimal_raw: dict[str, Any]) -> None:
        encoded = json.loads(encode_document(decode_mapping(minimal_raw)))
        assert encoded == minimal_raw

    def test_dropped_default_does_not_reappear(self, minimal_raw: dict[str, Any]) -> None:
        _with_operation(minimal_raw, {"responses": {"default": {"content": {}}}})
        encoded = json.loads(encode_document(decode_mapping(minimal_raw)))
        assert encoded["paths"]["/pets"]["get"]["responses"] == {}

    def test_indent(self, minimal_raw: dict[str, Any]) -> None:
        encoded = encode_document(decode_mapping(minimal_raw), indent=2)
        assert encoded.startswith(b"{\n  ")
