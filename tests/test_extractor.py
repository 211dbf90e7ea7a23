from pdf_field_mapper.extractor import extract_candidates


def _pairs(lines):
    return [(pair.label_raw, pair.value_raw) for pair in extract_candidates(lines)]


def test_inline_separator_pairs():
    candidates = extract_candidates(["Invoice Number: INV-2024-001", "Total Amount: 523.10"])

    assert [(c.label_raw, c.label_normalized, c.value_raw) for c in candidates] == [
        ("Invoice Number", "invoice number", "INV-2024-001"),
        ("Total Amount", "total amount", "523.10"),
    ]


def test_inline_separator_variants():
    assert _pairs(["Qty = 4"]) == [("Qty", "4")]
    assert _pairs(["Ref \u2013 ABC"]) == [("Ref", "ABC")]
    assert _pairs(["Due Date\uFF1A 2024-05-01"]) == [("Due Date", "2024-05-01")]


def test_leader_dots_are_skipped():
    assert _pairs(["Account No: ..... 12345"]) == [("Account No", "12345")]
    assert _pairs(["Name.....: John"]) == [("Name.....", "John")]


def test_wide_gap_pairs():
    assert _pairs(["Name          John Smith"]) == [("Name", "John Smith")]
    assert _pairs(["Policy No\t\tPN77"]) == [("Policy No", "PN77")]


def test_wide_gap_value_needs_two_characters():
    assert _pairs(["Name    X"]) == []
    assert _pairs(["Name    XY"]) == [("Name", "XY")]


def test_label_only_line_takes_next_line():
    assert _pairs(["Signature:", "John Smith"]) == [("Signature", "John Smith")]
    assert _pairs(["Remarks", "Paid in full"]) == [("Remarks", "Paid in full")]


def test_label_only_line_consumes_the_value_line():
    assert _pairs(["Signature:", "Date: 2024-01-01"]) == [("Signature", "Date: 2024-01-01")]


def test_blank_lines_are_dropped_before_matching():
    assert _pairs(["Signature:", "", "   ", "John Smith"]) == [("Signature", "John Smith")]
    assert _pairs([None, "Name: John"]) == [("Name", "John")]


def test_trailing_label_without_value_is_ignored():
    assert _pairs(["Signature:"]) == []
    assert _pairs([]) == []


def test_labels_outside_length_bounds_are_rejected():
    assert _pairs(["A" * 61 + ": x"]) == []
    assert _pairs(["A: 1"]) == []


def test_duplicates_keep_first_occurrence():
    candidates = extract_candidates(["Total: 5", "TOTAL: 5", "Total: 6"])

    assert [(c.label_raw, c.value_raw) for c in candidates] == [("Total", "5"), ("Total", "6")]


def test_extraction_is_deterministic_and_never_empty():
    lines = [
        "INVOICE",
        "Invoice Number: INV-1",
        "Bill To",
        "Acme Corp",
        "Total   .... 9",
        "Notes -",
        "(none)",
        "***",
        "::",
        "",
    ]
    first = extract_candidates(lines)

    assert first == extract_candidates(lines)
    assert first
    for pair in first:
        assert pair.value_raw
        assert pair.label_normalized
