import csv_codec


def test_escape_field_plain_values_are_verbatim() -> None:
    assert csv_codec.escape_field("Juan") == "Juan"
    assert csv_codec.escape_field(20) == "20"
    assert csv_codec.escape_field(None) == ""
    assert csv_codec.escape_field("") == ""


def test_escape_field_quotes_special_characters() -> None:
    assert csv_codec.escape_field("Smith, John") == '"Smith, John"'
    assert csv_codec.escape_field('He said "hi"') == '"He said ""hi"""'
    assert csv_codec.escape_field("line1\nline2") == '"line1\nline2"'
    assert csv_codec.escape_field("a\rb") == '"a\rb"'


def test_encode_joins_rows_with_newline() -> None:
    text = csv_codec.encode(["A", "B"], [["1", "x,y"], ["2", None]])
    assert text == 'A,B\n1,"x,y"\n2,'


def test_parse_line_handles_quotes_and_delimiters() -> None:
    assert csv_codec.parse_line('a,"b,c",d') == ["a", "b,c", "d"]
    assert csv_codec.parse_line('"He said ""hi"""') == ['He said "hi"']
    assert csv_codec.parse_line("a,,") == ["a", "", ""]


def test_parse_line_unterminated_quote_runs_to_end_of_line() -> None:
    assert csv_codec.parse_line('a,"b,c') == ["a", "b,c"]


def test_parse_line_trims_fields_after_unquoting() -> None:
    # Quoted leading/trailing spaces are trimmed as well.
    assert csv_codec.parse_line('  a , " b " ') == ["a", "b"]


def test_decode_empty_text() -> None:
    assert csv_codec.decode("") == []
    assert csv_codec.decode("\n\n  \n") == []
    assert csv_codec.decode("A,B\n") == []


def test_decode_skips_blank_lines_and_handles_crlf() -> None:
    text = "Name,Year\r\n\r\nAna,1st Year\r\n   \r\nBen,2nd Year\r\n"
    assert csv_codec.decode(text) == [
        {"Name": "Ana", "Year": "1st Year"},
        {"Name": "Ben", "Year": "2nd Year"},
    ]


def test_decode_pads_short_rows_and_drops_empty_rows() -> None:
    text = "A,B,C\n1\n,,\n1,2,3,4\n"
    assert csv_codec.decode(text) == [
        {"A": "1", "B": "", "C": ""},
        {"A": "1", "B": "2", "C": "3"},
    ]


def test_decode_duplicate_headers_keep_rightmost_value() -> None:
    assert csv_codec.decode("X,X\nfirst,second") == [{"X": "second"}]


def test_encode_then_decode_preserves_special_content() -> None:
    headers = ["Name", "Note", "Other"]
    rows = [
        ["Smith, John", 'He said "hi"', "line1\nline2"],
        ["Plain", "a\r\nb", '""'],
        ["Ana", "", "x"],
    ]

    decoded = csv_codec.decode(csv_codec.encode(headers, rows))

    assert decoded == [dict(zip(headers, row)) for row in rows]


def test_decode_unterminated_quote_stops_at_end_of_its_line() -> None:
    text = (
        "Control Number,Name,Student Number\n"
        'CN-01-05-001,"Ana Reyes,2024-001\n'
        "CN-01-05-002,Ben Cruz,2024-002\n"
        "CN-01-05-003,Carl Go,2024-003\n"
    )

    rows = csv_codec.decode(text)

    assert len(rows) == 3
    assert rows[0] == {"Control Number": "CN-01-05-001", "Name": "Ana Reyes,2024-001", "Student Number": ""}
    assert rows[1] == {"Control Number": "CN-01-05-002", "Name": "Ben Cruz", "Student Number": "2024-002"}
    assert rows[2]["Name"] == "Carl Go"


def test_split_records_keeps_closed_quoted_newlines_before_a_runaway_quote() -> None:
    text = 'A,B\n"x\ny",1\n"open,2\nz,3'
    assert csv_codec.split_records(text) == ["A,B", '"x\ny",1', '"open,2', "z,3"]
