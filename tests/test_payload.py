import pytest

from payload import load_payload_from_dir, load_payload_from_paths

pytestmark = pytest.mark.integration

@pytest.fixture
def payload_dir(tmp_path, accepted_997):
    (tmp_path / "b_ack.edi").write_text(accepted_997, encoding="utf-8")
    (tmp_path / "a_notes.txt").write_text("hello", encoding="utf-8")
    (tmp_path / "archive").mkdir()
    (tmp_path / "archive" / "old.edi").write_text("ignored", encoding="utf-8")
    return tmp_path

def test_load_payload_from_dir(payload_dir, accepted_997):
    payload = load_payload_from_dir(payload_dir)

    assert [f.file_name for f in payload] == ["a_notes.txt", "b_ack.edi"]
    assert payload[1].body == accepted_997
    assert all(f.type == "file" for f in payload)

def test_line_endings_are_preserved(tmp_path, build_997, accepted_body):
    body = build_997(accepted_body, line_break="\r\n")
    (tmp_path / "crlf.edi").write_bytes(body.encode("utf-8"))
    assert load_payload_from_dir(tmp_path)[0].body == body

def test_load_payload_from_dir_rejects_files(payload_dir):
    with pytest.raises(NotADirectoryError):
        load_payload_from_dir(payload_dir / "b_ack.edi")

def test_load_payload_from_paths_mixes_files_and_dirs(payload_dir):
    payload = load_payload_from_paths([payload_dir / "b_ack.edi", payload_dir / "archive"])
    assert [f.file_name for f in payload] == ["b_ack.edi", "old.edi"]

def test_load_payload_from_paths_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_payload_from_paths([tmp_path / "nope.edi"])

def test_binary_file_is_loaded_with_replacement_characters(tmp_path, accepted_997):
    (tmp_path / "ack.edi").write_text(accepted_997, encoding="utf-8")
    (tmp_path / "report.xlsx").write_bytes(b"PK\x03\x04\xff\xfe\x00\x14binary")

    payload = load_payload_from_dir(tmp_path)

    assert [f.file_name for f in payload] == ["ack.edi", "report.xlsx"]
    assert payload[0].body == accepted_997
    assert "\ufffd" in payload[1].body
