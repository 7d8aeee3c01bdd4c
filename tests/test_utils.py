from decimal import Decimal

from terranav.utils import escape_text, format_price, sanitize_html


def test_format_price():
    assert format_price('free', Decimal('12.00')) == 'Free'
    assert format_price('free', None) == 'Free'
    assert format_price('fixed', Decimal('12')) == '$12.00'
    assert format_price('negotiable', Decimal('7.5')) == '$7.50 (Negotiable)'
    assert format_price('fixed', None) == 'Contact for price'


def test_sanitize_html_keeps_safe_markup():
    cleaned = sanitize_html(
        '<p>Hi <a href="https://example.com" onclick="x()">there</a></p>'
        '<img src="x" onerror="y()">'
        '<a href="javascript:alert(1)">bad</a>'
    )
    assert '<p>' in cleaned
    assert 'href="https://example.com"' in cleaned
    assert 'onclick' not in cleaned
    assert '<img' not in cleaned
    assert 'javascript:' not in cleaned


def test_sanitize_and_escape_pass_none_through():
    assert sanitize_html(None) is None
    assert escape_text(None) is None
    assert escape_text('a & b') == 'a &amp; b'
