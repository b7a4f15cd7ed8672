"""
Unit tests for the database file format.
"""

import os
import pytest
from pathlib import Path

from imghash.database import (
    Database,
    load,
    save,
    loads,
    dumps,
    InvalidDatabaseError,
    DatabaseParseError,
    DatabaseError,
)
from imghash.database.codec import parse_entry, format_entry
from imghash.models import Entry


def write_text(path, text):
    Path(path).write_bytes(text.encode('utf-8'))


class TestFormat:
    """Test the exact on-disk layout."""

    def test_save_layout(self, temp_db_file):
        db = Database(root="/photos")
        db.upsert("a.png", 0x5F5E100, 0xFFFFFFFFFFFFFFFF)
        db.upsert("sub dir/b c.jpg", 0, 0x1)
        db.save(temp_db_file)

        assert Path(temp_db_file).read_bytes() == (
            b"/photos\n"
            b"ffffffffffffffff 000000005f5e100 a.png\n"
            b"0000000000000001 000000000000000 sub dir/b c.jpg\n"
        )

    def test_entry_prefix_is_33_characters(self):
        line = format_entry(Entry(path="x", fingerprint=0xABC, modified_at=0xDEF))
        assert line[:33] == "0000000000000abc 000000000000def "
        assert line[33:] == "x"

    def test_save_empty_database(self, temp_db_file):
        Database(root="/photos").save(temp_db_file)
        assert Path(temp_db_file).read_bytes() == b"/photos\n"

    def test_save_keeps_collection_order(self):
        db = Database(root="r")
        for name in ["z.png", "a.png", "m.png"]:
            db.upsert(name, 1, 2)
        lines = dumps(db).splitlines()
        assert [line[33:] for line in lines[1:]] == ["z.png", "a.png", "m.png"]


class TestRoundTrip:
    """Test save followed by load."""

    def test_round_trip(self, sample_database, temp_db_file):
        sample_database.save(temp_db_file)
        loaded = Database.from_file(temp_db_file)

        assert loaded.root == sample_database.root
        assert loaded.entries == sample_database.entries

    def test_full_width_timestamp(self, temp_db_file):
        # 15 hex digits: the most significant digit must survive
        db = Database(root="/photos")
        db.upsert("wide.png", 0xFFFFFFFFFFFFFFF, 0x0123456789ABCDEF)
        db.upsert("high.png", 0xA00000000000001, 0)
        db.save(temp_db_file)

        loaded = Database.from_file(temp_db_file)
        assert [e.modified_at for e in loaded] == [0xFFFFFFFFFFFFFFF, 0xA00000000000001]

    def test_negative_timestamp(self, temp_db_file):
        db = Database(root="/photos")
        db.upsert("old.png", -26, 7)
        db.upsert("oldest.png", -(16 ** 14 - 1), 8)
        db.save(temp_db_file)

        loaded = Database.from_file(temp_db_file)
        assert [e.modified_at for e in loaded] == [-26, -(16 ** 14 - 1)]

    def test_unicode_and_whitespace_paths(self, temp_db_file):
        db = Database(root="/home/user/Bilder")
        db.upsert("Ürlaub/straße 1.png", 1700000000, 42)
        db.upsert("trailing space.png ", 1700000001, 43)
        db.save(temp_db_file)

        loaded = Database.from_file(temp_db_file)
        assert [e.path for e in loaded] == ["Ürlaub/straße 1.png", "trailing space.png "]

    def test_undecodable_path_bytes_load(self, temp_db_file):
        Path(temp_db_file).write_bytes(
            b"/photos\n0000000000000001 000000000000002 caf\xe9.png\n"
        )
        db = Database.from_file(temp_db_file)
        assert db.entries[0].path == "caf\udce9.png"

    def test_undecodable_path_bytes_round_trip(self, temp_db_file):
        original = b"/photos\n0000000000000001 000000000000002 caf\xe9.png\n"
        Path(temp_db_file).write_bytes(original)

        Database.from_file(temp_db_file).save(temp_db_file)
        assert Path(temp_db_file).read_bytes() == original

    def test_fsdecoded_path_saved_as_raw_bytes(self, temp_db_file):
        db = Database(root="/photos")
        db.upsert(os.fsdecode(b"caf\xe9.png"), 2, 1)
        db.save(temp_db_file)

        assert Path(temp_db_file).read_bytes().endswith(b" caf\xe9.png\n")
        assert Database.from_file(temp_db_file).entries == db.entries

    def test_loads_dumps(self, sample_database):
        loaded = Database()
        loads(dumps(sample_database), loaded)
        assert loaded.root == sample_database.root
        assert loaded.entries == sample_database.entries


class TestLoad:
    """Test load edge cases."""

    def test_empty_file(self, temp_db_file):
        write_text(temp_db_file, "")
        db = Database.from_file(temp_db_file)
        assert db.root == ""
        assert len(db) == 0

    def test_blank_root_line(self, temp_db_file):
        write_text(temp_db_file, "   \n0000000000000001 000000000000000 a.png\n")
        db = Database()
        with pytest.raises(InvalidDatabaseError):
            db.load(temp_db_file)
        assert len(db) == 0

    def test_root_only(self, temp_db_file):
        write_text(temp_db_file, "/photos\n")
        db = Database.from_file(temp_db_file)
        assert db.root == "/photos"
        assert len(db) == 0

    def test_short_lines_skipped(self, temp_db_file):
        write_text(temp_db_file, (
            "/photos\n"
            "0000000000000001 000000000000000 a.png\n"
            "\n"
            "0000000000000002 000000000000000 \n"
            "garbage\n"
            "0000000000000003 000000000000000 b.png\n"
        ))
        db = Database.from_file(temp_db_file)
        assert [(e.path, e.fingerprint) for e in db] == [("a.png", 1), ("b.png", 3)]

    def test_parse_error_keeps_earlier_entries(self, temp_db_file):
        write_text(temp_db_file, (
            "/photos\n"
            "0000000000000001 000000000000000 a.png\n"
            "zzzzzzzzzzzzzzzz 000000000000000 bad.png\n"
            "0000000000000003 000000000000000 c.png\n"
        ))
        db = Database()
        with pytest.raises(DatabaseParseError) as excinfo:
            db.load(temp_db_file)

        assert excinfo.value.line_number == 3
        assert "bad.png" in excinfo.value.line
        assert [e.path for e in db] == ["a.png"]

    def test_bad_timestamp_field(self, temp_db_file):
        write_text(temp_db_file, "/photos\n0000000000000001 00000000000x000 a.png\n")
        with pytest.raises(DatabaseParseError):
            Database.from_file(temp_db_file)

    def test_parse_error_is_value_error(self):
        assert issubclass(DatabaseParseError, ValueError)
        assert issubclass(DatabaseParseError, DatabaseError)
        assert issubclass(InvalidDatabaseError, DatabaseError)

    def test_crlf_line_endings(self, temp_db_file):
        write_text(temp_db_file, "/photos\r\n0000000000000001 000000000000002 a.png\r\n")
        db = Database.from_file(temp_db_file)
        assert db.root == "/photos"
        assert db.entries == [Entry(path="a.png", fingerprint=1, modified_at=2)]

    def test_last_line_without_newline(self, temp_db_file):
        write_text(temp_db_file, "/photos\n0000000000000001 000000000000002 a.png")
        db = Database.from_file(temp_db_file)
        assert [e.path for e in db] == ["a.png"]

    def test_load_appends(self, sample_database, temp_db_file):
        sample_database.save(temp_db_file)
        db = Database(root="/old")
        db.upsert("existing.png", 1, 1)

        assert db.load(temp_db_file) == len(sample_database)
        assert db.root == "/photos"
        assert db.entries[0].path == "existing.png"
        assert len(db) == len(sample_database) + 1

    def test_missing_file(self, temp_dir):
        db = Database(root="/keep")
        with pytest.raises(FileNotFoundError):
            db.load(temp_dir / "missing.imghash")
        assert db.root == "/keep"
        assert len(db) == 0

    def test_module_level_load(self, sample_database, temp_db_file):
        save(sample_database, temp_db_file)
        db = Database()
        assert load(db, temp_db_file) == 5


class TestSaveValidation:
    """Test values that cannot be written."""

    def test_blank_root_rejected_before_writing(self, temp_db_file):
        write_text(temp_db_file, "previous contents\n")
        with pytest.raises(InvalidDatabaseError):
            Database(root="").save(temp_db_file)
        assert Path(temp_db_file).read_text() == "previous contents\n"

    def test_unencodable_path_leaves_file_untouched(self, temp_db_file):
        write_text(temp_db_file, "previous contents\n")
        db = Database(root="/photos")
        db.upsert("ok.png", 1, 1)
        db.upsert("lone\ud800surrogate.png", 1, 1)

        with pytest.raises(ValueError):
            db.save(temp_db_file)
        assert Path(temp_db_file).read_text() == "previous contents\n"

    def test_timestamp_too_wide(self, temp_db_file):
        db = Database(root="/photos")
        db.upsert("a.png", 16 ** 15, 0)
        with pytest.raises(ValueError):
            db.save(temp_db_file)
        assert not Path(temp_db_file).exists()

    @pytest.mark.parametrize("entry", [
        Entry(path="a.png", fingerprint=-1),
        Entry(path="a.png", fingerprint=1 << 64),
        Entry(path="a.png", modified_at=-(16 ** 14)),
        Entry(path=""),
        Entry(path="two\nlines.png"),
    ])
    def test_unrepresentable_entries(self, entry):
        with pytest.raises(ValueError):
            format_entry(entry)

    def test_parse_entry(self):
        entry = parse_entry("00000000000000ff 00000006553f100 x/y.png")
        assert entry == Entry(path="x/y.png", fingerprint=0xFF, modified_at=0x6553F100)
