import pytest

from lsmkit.summary import SUMMARY_FILE_NAME, Summary


def test_summary_new(tmp_path):
    path = tmp_path / "summary_new"
    summary = Summary(path)
    assert summary.smallest_key == b""
    assert summary.biggest_key == b""
    assert summary.path == path / f"{SUMMARY_FILE_NAME}.db"


def test_summary_file_name_is_summary_db(tmp_path):
    summary = Summary(tmp_path)
    assert summary.path.name == "summary.db"


def test_summary_serialize_length(tmp_path):
    summary = Summary(tmp_path / "summary_write")
    summary.biggest_key = bytes([1, 2, 3])
    summary.smallest_key = bytes([0, 2, 3])
    expected_len = 4 + 4 + len(summary.biggest_key) + len(summary.smallest_key)
    assert len(summary.serialize()) == expected_len


def test_summary_serialize_layout(tmp_path):
    summary = Summary(tmp_path)
    summary.smallest_key = b"ab"
    summary.biggest_key = b"xyz"
    assert summary.serialize() == b"\x02\x00\x00\x00\x03\x00\x00\x00abxyz"


def test_summary_serialize_empty(tmp_path):
    summary = Summary(tmp_path)
    assert summary.serialize() == b"\x00" * 8


def test_summary_write_and_recover(tmp_path):
    directory = tmp_path / "sstable_1"
    summary = Summary(directory)
    summary.smallest_key = b"apple"
    summary.biggest_key = b"zebra"
    summary.write_to_file()
    assert summary.path.read_bytes() == summary.serialize()

    recovered = Summary(directory)
    recovered.recover()
    assert recovered.smallest_key == b"apple"
    assert recovered.biggest_key == b"zebra"


def test_summary_recover_then_write_again(tmp_path):
    original = Summary(tmp_path)
    original.smallest_key = b"k1"
    original.biggest_key = b"k9"
    original.write_to_file()

    recovered = Summary(tmp_path)
    recovered.recover()
    assert recovered.biggest_key != b""
    assert recovered.smallest_key != b""
    recovered.write_to_file()
    assert recovered.path.read_bytes() == original.serialize()


def test_summary_write_replaces_previous_content(tmp_path):
    summary = Summary(tmp_path)
    summary.smallest_key = b"aaaaaaaa"
    summary.biggest_key = b"zzzzzzzz"
    summary.write_to_file()
    summary.smallest_key = b"b"
    summary.biggest_key = b"c"
    summary.write_to_file()

    recovered = Summary(tmp_path)
    recovered.recover()
    assert (recovered.smallest_key, recovered.biggest_key) == (b"b", b"c")


def test_summary_recover_missing_file(tmp_path):
    summary = Summary(tmp_path / "absent")
    with pytest.raises(FileNotFoundError):
        summary.recover()


@pytest.mark.parametrize(
    "content",
    [b"\x01\x00", b"\x05\x00\x00\x00\x05\x00\x00\x00abc"],
)
def test_summary_recover_truncated_file(tmp_path, content):
    summary = Summary(tmp_path)
    summary.path.write_bytes(content)
    with pytest.raises(ValueError):
        summary.recover()