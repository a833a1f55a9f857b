import pytest

from src.deepcli.attachments import read_attachment, sniff_image_type
from src.deepcli.errors import ValidationError

@pytest.mark.parametrize("head,mime", [
    (b"\x89PNG\r\n\x1a\n\x00\x00", "image/png"),
    (b"\xff\xd8\xff\xe0\x00\x10JFIF", "image/jpeg"),
    (b"GIF89a\x01\x00", "image/gif"),
    (b"RIFF\x24\x00\x00\x00WEBPVP8 ", "image/webp"),
    (b"hello world", None),
])
def test_sniff_image_type(head, mime):
    assert sniff_image_type(head) == mime

def test_image_by_signature_ignores_extension(tmp_path):
    p = tmp_path / "screenshot.dat"
    p.write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x01" * 8)
    att = read_attachment(p)
    assert att.kind == "image"
    assert att.mime_type == "image/png"

def test_image_by_extension(tmp_path):
    p = tmp_path / "photo.jpg"
    p.write_bytes(b"not really a jpeg")
    att = read_attachment(p)
    assert att.kind == "image"
    assert att.data_url.startswith("data:image/jpeg;base64,")

def test_text_file(tmp_path):
    p = tmp_path / "main.py"
    p.write_text("print('hi')\n", encoding="utf-8")
    att = read_attachment(str(p))
    assert att.kind == "text"
    assert att.text == "print('hi')\n"
    assert att.name == "main.py"

def test_binary_non_image_rejected(tmp_path):
    p = tmp_path / "blob.bin"
    p.write_bytes(b"\x00\xff\xfe\x80\x81")
    with pytest.raises(ValidationError):
        read_attachment(p)

def test_directory_rejected(tmp_path):
    with pytest.raises(ValidationError):
        read_attachment(tmp_path)

def test_missing_file_rejected(tmp_path):
    with pytest.raises(ValidationError):
        read_attachment(tmp_path / "missing.txt")
