from __future__ import annotations

import math
from datetime import date

from vendorcore.contracts.vendor import Vendor
from vendorcore.csv_codec import (
    HEADERS,
    decode_csv,
    encode_vendors,
    escape_csv,
    parse_csv_text,
)
from vendorcore.merge import vendor_from_row
from vendorcore.scoring import with_derived_fields


def test_escape_quotes_only_when_needed():
    assert escape_csv('a,b"c\nd') == '"a,b""c\nd"'
    assert escape_csv("plain") == "plain"
    assert escape_csv(None) == ""
    assert escape_csv(True) == "true"
    assert escape_csv(100.0) == "100"
    assert escape_csv(7.5) == "7.5"
    assert escape_csv(date(2026, 1, 2)) == "2026-01-02"


def test_quoted_field_decodes_to_original():
    text = 'notes\r\n"a,b""c\nd"'

    assert decode_csv(text) == [{"notes": 'a,b"c\nd'}]


def test_encode_header_row_and_crlf():
    vendor = with_derived_fields(
        Vendor(
            id="v-1",
            name="Acme, Inc.",
            category="Hardware",
            phone="555-0100",
            email="a@x.io",
            price=100,
            rating=4,
            gst=True,
            contract_start=date(2026, 1, 1),
            notes='say "hi"',
        )
    )

    text = encode_vendors([vendor])
    lines = text.split("\r\n")

    assert lines[0] == ",".join(HEADERS)
    assert lines[1] == (
        'v-1,"Acme, Inc.",Hardware,555-0100,a@x.io,100,4,active,true,false,false,'
        '7.5,low,2026-01-01,,"say ""hi"""'
    )
    assert not text.endswith("\r\n")


def test_encode_empty_list_is_header_only():
    assert encode_vendors([]) == ",".join(HEADERS)


def test_trailing_blank_lines_do_not_add_rows():
    single = "name,email\r\nA,a@x.io\r\n"
    many = "name,email\r\nA,a@x.io\r\n\r\n\n\n"

    assert len(decode_csv(many)) == len(decode_csv(single)) == 1


def test_scanner_handles_lf_and_crlf_and_blank_lines():
    assert parse_csv_text("a,b\nc,d\r\n\r\ne,f") == [["a", "b"], ["c", "d"], ["e", "f"]]


def test_scanner_keeps_empty_trailing_cell():
    assert parse_csv_text("a,\nb,c") == [["a", ""], ["b", "c"]]


def test_unterminated_quote_swallows_rest_of_input():
    rows = parse_csv_text('name,notes\nA,"open\nB,still open')

    assert rows == [["name", "notes"], ["A", "open\nB,still open"]]


def test_quote_in_middle_of_field_toggles_quoting():
    assert parse_csv_text('ab"c,d"e,f') == [["abc,de", "f"]]


def test_decode_trims_headers_and_values_and_pads_short_rows():
    rows = decode_csv(" name , email ,notes\n  Acme  ,a@x.io\n")

    assert rows == [{"name": "Acme", "email": "a@x.io", "notes": ""}]


def test_decode_coerces_numeric_and_boolean_columns():
    text = "price,rating,performanceScore,gst,license,agreement\n12.5,4,,TRUE,1,yes\n,x,3,false,0,\n"

    first, second = decode_csv(text)

    assert first == {
        "price": 12.5,
        "rating": 4,
        "performanceScore": "",
        "gst": True,
        "license": True,
        "agreement": False,
    }
    assert second["price"] == ""
    assert math.isnan(second["rating"])
    assert second["performanceScore"] == 3
    assert second["gst"] is False


def test_blank_header_gets_positional_key_and_extra_cells_are_dropped():
    assert decode_csv("name,,notes\nA,B,C,D") == [{"name": "A", "col1": "B", "notes": "C"}]


def test_header_only_or_empty_text():
    assert decode_csv("") == []
    assert decode_csv("name,email\r\n") == []


def test_round_trip_preserves_natural_keys_and_values():
    vendors = [
        with_derived_fields(
            Vendor(
                id="v-1",
                name='Quote "Q" Ltd',
                category="Paper, Bulk",
                phone="+44 20 7946 0000",
                email="Q@Example.com",
                price=12.75,
                rating=3,
                status="inactive",
                license=True,
                contract_end=date(2027, 5, 1),
                notes="line one\nline two",
            )
        ),
        with_derived_fields(Vendor(id="v-2", name="Plain", phone="5550001111", price=0, rating=5, agreement=True)),
    ]

    decoded = [vendor_from_row(row) for row in decode_csv(encode_vendors(vendors))]

    assert [(v.email_key, v.phone_key) for v in decoded] == [(v.email_key, v.phone_key) for v in vendors]
    for before, after in zip(vendors, decoded):
        expected = before.to_dict()
        actual = after.to_dict()
        expected.pop("id")
        actual.pop("id")
        assert actual == expected
