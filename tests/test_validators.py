"""
Tests for shared validators and exception payloads.
"""

import pydantic
import pytest

from catalog_api.models import new_object_id
from catalog_shared.utils.exceptions import DocumentValidationError
from catalog_shared.utils.schemas import ProductCreate
from catalog_shared.utils.validators import (
    escape_like_pattern,
    file_extension,
    is_plain_filename,
    is_valid_object_id,
)


class TestIsValidObjectId:

    def test_generated_ids_are_valid(self):
        assert is_valid_object_id(new_object_id())

    @pytest.mark.parametrize("value", ["65A1F0C2E4B0A1B2C3D4E5F6", "0" * 24])
    def test_hex_of_length_24(self, value):
        assert is_valid_object_id(value)

    @pytest.mark.parametrize(
        "value",
        [None, "", "abc", "g" * 24, "0" * 23, "0" * 25, " " + "0" * 23, "0" * 24 + "\n"],
    )
    def test_rejects_malformed(self, value):
        assert not is_valid_object_id(value)


class TestEscapeLikePattern:

    def test_escapes_wildcards(self):
        assert escape_like_pattern("50%_off") == "50\\%\\_off"

    def test_escapes_backslash_first(self):
        assert escape_like_pattern("a\\%") == "a\\\\\\%"

    def test_empty(self):
        assert escape_like_pattern("") == ""


class TestFileExtension:

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("photo.png", "png"),
            ("archive.tar.gz", "gz"),
            ("photo", "photo"),
            ("trailing.", ""),
            ("x.p?n*g", "png"),
            (None, ""),
        ],
    )
    def test_extension(self, filename, expected):
        assert file_extension(filename) == expected


class TestIsPlainFilename:

    @pytest.mark.parametrize("name", ["a.png", "0123abcd.jpg"])
    def test_plain(self, name):
        assert is_plain_filename(name)

    @pytest.mark.parametrize("name", [None, "", ".", "..", "a/b.png", "..\\b.png"])
    def test_not_plain(self, name):
        assert not is_plain_filename(name)


class TestDocumentValidationError:

    def test_from_pydantic_builds_dotted_paths(self):
        with pytest.raises(pydantic.ValidationError) as exc_info:
            ProductCreate.model_validate({"colors": [{"color": ""}]})

        error = DocumentValidationError.from_pydantic(exc_info.value)

        assert error.status_code == 400
        assert set(error.fields) == {"name", "colors.0.color"}
        assert error.detail["error"] == 1
        assert error.detail["fields"] == error.fields
        assert "name" in error.detail["message"]

    def test_prefix(self):
        with pytest.raises(pydantic.ValidationError) as exc_info:
            ProductCreate.model_validate({})

        error = DocumentValidationError.from_pydantic(exc_info.value, prefix="product")

        assert list(error.fields) == ["product.name"]
