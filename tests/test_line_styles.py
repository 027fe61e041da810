from lifetimeviz.line_styles import LineStyle, OwnerLine, RefDataLine, RefValueLine


def _names_by_value(enum_cls):
    return [enum_cls(member.value).name for member in enum_cls]


def test_owner_line_order():
    assert _names_by_value(OwnerLine) == ["SOLID", "HOLLOW", "DOTTED", "EMPTY"]


def test_ref_data_line_mirrors_owner_line_but_is_distinct():
    assert _names_by_value(RefDataLine) == _names_by_value(OwnerLine)
    owner_solid = OwnerLine(OwnerLine.SOLID.value)
    data_solid = RefDataLine(RefDataLine.SOLID.value)
    assert owner_solid is not data_solid
    assert owner_solid != data_solid


def test_ref_value_line_members():
    assert _names_by_value(RefValueLine) == ["REASSIGNABLE", "NOT_REASSIGNABLE"]


def test_lookup_round_trip():
    for enum_cls in (LineStyle, OwnerLine, RefValueLine, RefDataLine):
        for member in enum_cls:
            assert enum_cls(member.value) is member
            assert enum_cls[member.name] is member


def test_line_style_members():
    assert _names_by_value(LineStyle) == ["OWNER_LINE", "REF_VALUE_LINE", "REF_DATA_LINE"]
    assert LineStyle(LineStyle.OWNER_LINE.value) is LineStyle["OWNER_LINE"]