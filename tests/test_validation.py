import pydantic
import pytest

from upload_gateway.models import UploadRequest
from upload_gateway.validation import (
    FileValidator,
    ImageConstraints,
    ImageValidator,
    constraints_for,
)

from conftest import make_jpeg


def _upload(name, data, content_type=None):
    return UploadRequest.from_bytes(name, data, content_type)


def test_missing_file_is_rejected():
    result = FileValidator().validate(None, {})
    assert not result.valid
    assert result.first_error == "Please upload a file."


def test_file_within_limits_is_valid():
    result = FileValidator().validate(_upload("notes.txt", b"x" * 10), {"maxSize": 100})
    assert result.valid
    assert result.first_error is None


def test_too_big_message():
    result = FileValidator().validate(_upload("big.bin", b"x" * 200), {"maxSize": 100})
    assert result.errors == ['The file "big.bin" is too big. Its size cannot exceed 100 bytes.']


def test_too_small_message():
    result = FileValidator().validate(_upload("tiny.bin", b"x"), {"minSize": 5})
    assert result.errors == ['The file "tiny.bin" is too small. Its size cannot be smaller than 5 bytes.']


def test_extensions_accept_comma_separated_string():
    options = {"extensions": "pdf, .DOCX"}
    assert FileValidator().validate(_upload("a.docx", b"x"), options).valid

    result = FileValidator().validate(_upload("a.exe", b"x"), options)
    assert result.errors == ["Only files with these extensions are allowed: pdf, docx."]


def test_mime_type_wildcards():
    options = {"mimeTypes": ["image/*"]}
    assert FileValidator().validate(_upload("a.png", b"x", "image/png"), options).valid

    result = FileValidator().validate(_upload("a.pdf", b"x", "application/pdf"), options)
    assert result.errors == ["Only files with these MIME types are allowed: image/*."]


def test_all_errors_are_collected_in_order():
    result = FileValidator().validate(
        _upload("big.exe", b"x" * 200), {"maxSize": 100, "extensions": ["pdf"]},
    )
    assert len(result.errors) == 2
    assert result.first_error.startswith('The file "big.exe" is too big.')


def test_image_validator_accepts_jpeg():
    result = ImageValidator().validate(_upload("photo.jpg", make_jpeg()), {"maxWidth": 64})
    assert result.valid


def test_image_validator_rejects_non_image():
    result = ImageValidator().validate(_upload("notes.jpg", b"not really a jpeg"), {})
    assert result.errors == ['The file "notes.jpg" is not an image.']


def test_image_dimension_bounds():
    data = make_jpeg(size=(120, 40))
    result = ImageValidator().validate(
        _upload("wide.jpg", data), {"maxWidth": 100, "minHeight": 50},
    )
    assert result.errors == [
        'The image "wide.jpg" is too large. The width cannot be larger than 100 pixels.',
        'The image "wide.jpg" is too small. The height cannot be smaller than 50 pixels.',
    ]


def test_constraints_for_picks_model_and_rejects_unknown_keys():
    assert isinstance(constraints_for(True, {"maxWidth": 10}), ImageConstraints)

    with pytest.raises(pydantic.ValidationError):
        constraints_for(False, {"maxWidth": 10})
    with pytest.raises(pydantic.ValidationError):
        constraints_for(True, {"maxSzie": 10})


@pytest.mark.parametrize("filename", ["..", "C:\\dir\\..", "uploads/.."])
def test_dot_only_names_are_rejected(filename):
    result = FileValidator().validate(_upload(filename, b"x"), {})
    assert result.errors == ['The file name ".." is not valid.']
