import re

from recipe_assistant.core.receipt import MAX_ITEMS, extract_items_from_text, parse_line


def test_total_and_tax_lines_are_discarded():
    assert parse_line("TOTAL   $45.67") is None
    assert parse_line("SUBTOTAL $40.00") is None
    assert parse_line("TAX 8.25%  $3.30") is None


def test_short_lines_are_discarded():
    assert parse_line("ab") is None
    assert parse_line("  ") is None


def test_price_and_quantity_are_stripped():
    item = parse_line("GRND BEEF 2.5 LB   $9.99")
    assert item is not None
    assert "beef" in item.name
    assert item.name == "grnd beef"
    assert re.fullmatch(r"2\.5 lbs?", item.quantity)


def test_count_without_unit():
    item = parse_line("3 AVOCADOS $4.50")
    assert item.name == "avocados"
    assert item.quantity == "3"


def test_non_food_lines_are_dropped():
    assert parse_line("PAPER TOWELS $5.99") is None
    assert parse_line("THANK YOU FOR SHOPPING") is None


def test_item_codes_do_not_become_quantities():
    item = parse_line("4011 BANANAS $1.29")
    assert item.name == "bananas"
    assert item.quantity == ""


def test_extraction_caps_at_twenty_items():
    text = "\n".join(f"CHEESE {'X' * (i + 1)} 1 CT $2.00" for i in range(50))
    out = extract_items_from_text(text)
    assert len(out) == MAX_ITEMS


def test_extraction_merges_repeated_lines():
    text = "WHOLE MILK 1 CT $3.49\nWHOLE MILK 1 CT $3.49\nTOTAL $6.98\n"
    out = extract_items_from_text(text)
    assert [(i.name, i.quantity) for i in out] == [("whole milk", "1 ct, 1 ct")]


def test_empty_text_yields_nothing():
    assert extract_items_from_text("") == []
