"""Tests for title, price and shipping normalization."""

from decimal import Decimal

import pytest

from hotdeal.scrapers.utils.normalizer import (
    clean_price_string,
    clean_title,
    collapse_whitespace,
    extract_price,
    is_free_shipping,
    normalize_image_url,
    parse_listed_price,
)


class TestCleanTitle:
    """Tests for clean_title."""

    def test_strips_counter_after_parenthesis(self):
        assert clean_title("[SellerX] Great Deal) 12") == "[SellerX] Great Deal)"

    def test_keeps_parenthesis_content(self):
        assert clean_title("삼성 SSD 1TB (89,000/무료)3") == "삼성 SSD 1TB (89,000/무료)"

    def test_trims_whitespace(self):
        assert clean_title("  로지텍 마우스  ") == "로지텍 마우스"

    def test_three_digit_suffix_is_kept(self):
        assert clean_title("Deal (A) 123") == "Deal (A) 123"

    def test_empty(self):
        assert clean_title("") == ""

    @pytest.mark.parametrize(
        "title",
        [
            "[SellerX] Great Deal) 12",
            "Deal) 1 ) 2  ",
            "  (괄호) 만 있음  ",
            "no artifact here",
            "a)12\n",
            ")",
            "",
        ],
    )
    def test_idempotent(self, title):
        once = clean_title(title)
        assert clean_title(once) == once


class TestExtractPrice:
    """Tests for extract_price."""

    def test_comma_grouped_won(self):
        assert extract_price("한정수량 35,750원 무료배송") == 35750

    def test_won_with_space(self):
        assert extract_price("[G마켓] 생수 2L 12병 9,000 원") == 9000

    def test_man_won(self):
        assert extract_price("초특가 24만원") == 240000

    def test_parenthesized(self):
        assert extract_price("상품명 (35,750/)") == 35750

    def test_parenthesized_closing(self):
        assert extract_price("상품명 (1,234,500)") == 1234500

    def test_no_price(self):
        assert extract_price("가격 정보 없는 제목") == 0
        assert extract_price("") == 0

    def test_won_pattern_takes_priority(self):
        assert extract_price("12,900원 (정가 15,000/)") == 12900

    def test_bare_digits_before_won(self):
        assert extract_price("라면 5봉 4500원") == 4500

    def test_does_not_start_inside_a_number(self):
        # "35,75원" is malformed; no match should start mid-number
        assert extract_price("상품 35,75원") == 0

    def test_truncated_grouping_repair_is_approximate(self):
        # Known approximation: a 3-digit amount ending in 00 gains a zero,
        # so a genuine 500원 price is read as 5,000원.
        assert extract_price("(500/)") == 5000
        assert extract_price("스티커 500원") == 5000
        assert extract_price("스티커 550원") == 550


class TestIsFreeShipping:
    """Tests for is_free_shipping."""

    def test_free_shipping_keyword(self):
        assert is_free_shipping("한정수량 35,750원 무료배송") is True

    def test_wow_member(self):
        assert is_free_shipping("쿠팡 와우회원 특가") is True

    def test_mubae_abbreviation(self):
        assert is_free_shipping("생수 12병 (9,900/무배)") is True

    def test_no_keyword(self):
        assert is_free_shipping("배송비 3,000원 별도") is False
        assert is_free_shipping("") is False


class TestListedPrice:
    """Tests for structured price cells."""

    def test_clean_price_string(self):
        assert clean_price_string("1,234원") == Decimal("1234")
        assert clean_price_string("$12.99") == Decimal("12.99")
        assert clean_price_string("가격미정") is None

    def test_krw_cell(self):
        assert parse_listed_price("₩ 29,900 (KRW)") == (29900, "KRW")

    def test_usd_cell_in_cents(self):
        assert parse_listed_price("$12.99 (USD)") == (1299, "USD")

    def test_unparseable_cell(self):
        assert parse_listed_price("가격 문의") == (0, "KRW")
        assert parse_listed_price("") == (0, "KRW")


class TestNormalizeImageUrl:
    """Tests for normalize_image_url."""

    def test_protocol_relative(self):
        assert normalize_image_url("//cdn.ppomppu.co.kr/a.jpg") == "https://cdn.ppomppu.co.kr/a.jpg"

    def test_bare_host(self):
        assert normalize_image_url("cdn.ppomppu.co.kr/a.jpg") == "https://cdn.ppomppu.co.kr/a.jpg"

    def test_absolute_unchanged(self):
        assert normalize_image_url("http://example.com/a.png") == "http://example.com/a.png"

    def test_empty(self):
        assert normalize_image_url("  ") == ""
        assert normalize_image_url(None) == ""


def test_collapse_whitespace():
    assert collapse_whitespace("  삼성 \n 갤럭시\t버즈  ") == "삼성 갤럭시 버즈"
    assert collapse_whitespace("") == ""
