from __future__ import annotations

from datetime import date

import pytest

from edgarlink.adapters.decoders.compression import deflate
from edgarlink.adapters.decoders.index_decoder import decode_index, detect_index_type
from edgarlink.domain.enums.edgar import IndexType
from edgarlink.domain.exceptions.edgar import EdgarDecodeError
from tests.fixtures.edgar_payloads import (
    MASTER_PREAMBLE,
    company_index,
    company_line,
    master_index,
    master_index_with_malformed,
    master_line,
)


def test_master_index_decodes_every_well_formed_line() -> None:
    data = master_index(
        [
            master_line(320193, "Apple Inc.", "10-K", "20240102", 1),
            master_line(789019, "MICROSOFT CORP", "8-K", "2024-01-02", 2),
        ]
    )

    decoded = decode_index(data)

    assert decoded.warnings == ()
    first, second = decoded.value
    assert first.cik == "0000320193"
    assert first.company_name == "Apple Inc."
    assert first.form_type == "10-K"
    assert first.date_filed == date(2024, 1, 2)
    assert first.path == "edgar/data/320193/0000320193-24-000001.txt"
    assert second.date_filed == date(2024, 1, 2)


def test_malformed_lines_become_warnings_not_errors() -> None:
    decoded = decode_index(master_index_with_malformed(), IndexType.MASTER)

    assert len(decoded.value) == 98
    reasons = sorted(w.reason for w in decoded.warnings)
    assert reasons == ["bad_date", "too_few_fields"]
    assert all(w.source == "index" for w in decoded.warnings)
    assert "no delimiters" in next(w.excerpt for w in decoded.warnings if w.reason == "too_few_fields")


def test_warning_positions_are_file_line_numbers() -> None:
    data = master_index(["not|enough|fields"])

    (warning,) = decode_index(data).warnings

    # Ten preamble lines precede the first data line.
    assert warning.position == 11
    assert warning.reason == "too_few_fields"


@pytest.mark.parametrize(
    ("line", "reason"),
    [
        ("1|A|10-K|20240102|path|extra", "too_many_fields"),
        ("ABC|Name|10-K|20240102|edgar/data/1/x.txt", "bad_cik"),
        ("123|Name||20240102|edgar/data/1/x.txt", "missing_field"),
        ("123|Name|10-K|20240102|", "missing_field"),
        ("12345678901|Name|10-K|20240102|edgar/data/1/x.txt", "bad_cik"),
    ],
)
def test_line_level_skip_reasons(line: str, reason: str) -> None:
    decoded = decode_index(master_index([line]), IndexType.MASTER)

    assert decoded.value == ()
    assert [w.reason for w in decoded.warnings] == [reason]


def test_gzip_wrapped_index_is_inflated() -> None:
    data = deflate(master_index([master_line(320193, "Apple Inc.", "10-Q", "20240102", 7)]))

    decoded = decode_index(data, IndexType.MASTER)

    assert [e.form_type for e in decoded.value] == ["10-Q"]


def test_corrupt_gzip_fails_the_whole_payload() -> None:
    data = deflate(master_index([master_line(320193, "Apple Inc.", "10-Q", "20240102", 7)]))

    with pytest.raises(EdgarDecodeError):
        decode_index(data[:20], IndexType.MASTER)


def test_company_index_fixed_width_columns() -> None:
    data = company_index(
        [
            company_line(
                "APPLE INC", "10-K", 320193, "20240102", "edgar/data/320193/0000320193-24-000001.txt"
            ),
            company_line(
                "MORGAN STANLEY & CO. LLC",
                "424B2",
                895421,
                "20240102",
                "edgar/data/895421/0000950103-24-000100.txt",
            ),
        ]
    )

    decoded = decode_index(data)

    assert decoded.warnings == ()
    apple, morgan = decoded.value
    assert apple.company_name == "APPLE INC"
    assert apple.cik == "0000320193"
    assert morgan.company_name == "MORGAN STANLEY & CO. LLC"
    assert morgan.form_type == "424B2"
    assert morgan.path.endswith("0000950103-24-000100.txt")


def test_index_without_separator_is_all_data() -> None:
    data = b"320193|Apple Inc.|10-K|20240102|edgar/data/320193/0000320193-24-000001.txt\n"

    decoded = decode_index(data, IndexType.MASTER)

    assert len(decoded.value) == 1


def test_latin1_company_names_survive() -> None:
    line = master_line(1234, "SOCIÉTÉ GÉNÉRALE", "6-K", "20240102", 3)
    data = (MASTER_PREAMBLE + line + "\n").encode("latin-1")

    (entry,) = decode_index(data, IndexType.MASTER).value

    assert entry.company_name == "SOCIÉTÉ GÉNÉRALE"


@pytest.mark.parametrize(
    ("first_line", "expected"),
    [
        ("Description: Master Index of EDGAR Dissemination Feed", IndexType.MASTER),
        ("Description: Daily Index of EDGAR Dissemination Feed by Company Name", IndexType.COMPANY),
        ("Description: Crawler Index of EDGAR Dissemination Feed", IndexType.CRAWLER),
        ("Description: something else", IndexType.CRAWLER),
    ],
)
def test_detect_index_type(first_line: str, expected: IndexType) -> None:
    assert detect_index_type(first_line + "\n") is expected
