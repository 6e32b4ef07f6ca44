"""
Unit tests for CSV parser.
"""

from pathlib import Path

import pytest

from contact_intake.contacts.csv_parser import CSVParser, normalize_header, read_source
from contact_intake.shared.exceptions import InputSourceError


class TestNormalizeHeader:
    """Tests for header normalization."""

    def test_lowercase_conversion(self):
        """Test that headers are converted to lowercase."""
        assert normalize_header("First_Name") == "first_name"
        assert normalize_header("EMAIL") == "email"

    def test_space_and_hyphen_to_underscore(self):
        assert normalize_header("phone number") == "phone_number"
        assert normalize_header("second-name") == "second_name"

    def test_alias_mapping(self):
        """Test that aliases are mapped to standard names."""
        assert normalize_header("surname") == "second_name"
        assert normalize_header("Last Name") == "second_name"
        assert normalize_header("phone") == "phone_number"
        assert normalize_header("e-mail") == "email"
        assert normalize_header("postcode") == "eircode"

    def test_strip_whitespace(self):
        assert normalize_header("  eircode  ") == "eircode"


class TestReadSource:
    """Tests for reading the import file."""

    def test_reads_bytes(self, tmp_path: Path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"first_name\nJohn\n")

        assert read_source(path) == b"first_name\nJohn\n"

    def test_missing_file_is_404(self, tmp_path: Path):
        with pytest.raises(InputSourceError) as exc_info:
            read_source(tmp_path / "absent.csv")

        assert exc_info.value.status_code == 404

    def test_directory_is_500(self, tmp_path: Path):
        with pytest.raises(InputSourceError) as exc_info:
            read_source(tmp_path)

        assert exc_info.value.status_code == 500


class TestCSVParser:
    """Tests for CSVParser.parse."""

    def test_rows_numbered_from_two(self):
        content = (
            b"first_name,second_name,email,phone_number,eircode\n"
            b"John,Doe1,j@d.com,0851234567,1AB2CD\n"
            b"Mary,Byrne,m@b.ie,0869876543,2XY3ZW\n"
        )

        rows = list(CSVParser().parse(content))

        assert [n for n, _ in rows] == [2, 3]
        assert rows[0][1] == {
            "first_name": "John",
            "second_name": "Doe1",
            "email": "j@d.com",
            "phone_number": "0851234567",
            "eircode": "1AB2CD",
        }

    def test_values_not_trimmed(self):
        content = b"first_name,second_name,email,phone_number,eircode\n John ,Doe,j@d.com,0851234567,1AB2CD\n"

        (_, row), = CSVParser().parse(content)

        assert row["first_name"] == " John "

    def test_missing_column_yields_none(self):
        content = b"first_name,second_name,email,phone_number\nJohn,Doe,j@d.com,0851234567\n"

        (_, row), = CSVParser().parse(content)

        assert row["eircode"] is None

    def test_short_row_yields_none(self):
        content = b"first_name,second_name,email,phone_number,eircode\nJohn,Doe\n"

        (_, row), = CSVParser().parse(content)

        assert row["email"] is None
        assert row["eircode"] is None

    def test_aliased_headers_and_bom(self):
        content = "\ufeffFirst Name,Surname,E-mail,Phone,Postcode\nJohn,Doe,j@d.com,0851234567,1AB2CD\n".encode()

        (_, row), = CSVParser().parse(content)

        assert row["first_name"] == "John"
        assert row["second_name"] == "Doe"
        assert row["eircode"] == "1AB2CD"

    def test_custom_delimiter(self):
        content = b"first_name;second_name;email;phone_number;eircode\nJohn;Doe;j@d.com;0851234567;1AB2CD\n"

        (_, row), = CSVParser(delimiter=";").parse(content)

        assert row["phone_number"] == "0851234567"

    def test_empty_content(self):
        assert list(CSVParser().parse(b"")) == []

    def test_header_only(self):
        assert list(CSVParser().parse(b"first_name,second_name,email,phone_number,eircode\n")) == []

    def test_encoding_error(self):
        with pytest.raises(InputSourceError) as exc_info:
            list(CSVParser(encoding="utf-8").parse(b"first_name\n\xff\xfe\n"))

        assert exc_info.value.status_code == 500
