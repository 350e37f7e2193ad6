from utils.formatting import format_area_sqft, format_number, format_pct, format_price


def test_format_number():
    assert format_number(1234567) == "1,234,567"
    assert format_number(1234.5, decimals=1) == "1,234.5"
    assert format_number(None) == "-"


def test_format_price_scales():
    assert format_price(1_250_000) == "AED 1.25M"
    assert format_price(850_000) == "AED 850K"
    assert format_price(950) == "AED 950"
    assert format_price(None) == "-"


def test_format_area_sqft():
    assert format_area_sqft(999.98) == "1,000 sqft"
    assert format_area_sqft(None) == "-"


def test_format_pct_is_signed():
    assert format_pct(20.0) == "+20.0%"
    assert format_pct(-8.33) == "-8.3%"
    assert format_pct(None) == "-"
