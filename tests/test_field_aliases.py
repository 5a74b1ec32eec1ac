from receipt_norm import field_aliases as aliases


def test_totals_table_covers_every_totals_field():
    assert set(aliases.TOTALS_FIELDS) == {
        'subtotal', 'discount', 'tax', 'shipping', 'total', 'paid', 'due', 'change',
    }


def test_alias_tables_have_no_repeats():
    for table in (aliases.ORDER_NO, aliases.ITEM_TOTAL, aliases.ROW_ID, *aliases.TOTALS_FIELDS.values()):
        assert len(table) == len(set(table))


def test_change_note_pattern():
    match = aliases.CHANGE_NOTE_PATTERN.search("Paid 1000, change given - ৳ 1,150.50")
    assert match.group('amount') == '1,150.50'
    assert aliases.CHANGE_NOTE_PATTERN.search("exchange rate applied") is None


def test_change_note_pattern_needs_the_whole_word():
    assert aliases.CHANGE_NOTE_PATTERN.search("Exchange 2 items, paid 1000") is None
    assert aliases.CHANGE_NOTE_PATTERN.search("Exchanged 2 items") is None
