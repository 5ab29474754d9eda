"""Tests for news sentiment and urgency classification."""

import sys

import pytest

sys.path.append("src")
from quantleap.core.models import Sentiment
from quantleap.core.sentiment import analyze_sentiment, classify_news, time_ago


class TestAnalyzeSentiment:
    """Keyword scoring and urgency detection."""

    def test_no_keywords_is_neutral_fifty(self):
        result = analyze_sentiment("Company holds annual meeting", "")

        assert result.sentiment == Sentiment.NEUTRAL
        assert result.score == 50
        assert result.matched_keywords == ()
        assert result.is_urgent is False

    def test_delay_and_weak_only_is_negative_and_not_urgent(self):
        result = analyze_sentiment("Shipment delay", "Demand remains weak")

        assert result.sentiment == Sentiment.NEGATIVE
        assert result.score == 0
        assert result.is_urgent is False
        assert set(result.matched_keywords) == {"delay", "weak"}

    def test_fda_approval_is_urgent(self):
        result = analyze_sentiment("Company receives FDA approval", "")

        assert result.is_urgent is True
        assert result.sentiment == Sentiment.POSITIVE

    def test_urgency_ignores_polarity(self):
        result = analyze_sentiment("SEC opens investigation into fraud", "")

        assert result.is_urgent is True
        assert result.sentiment == Sentiment.NEGATIVE

    def test_matching_is_case_insensitive(self):
        result = analyze_sentiment("RECORD REVENUE SURGE", "")

        assert "record" in result.matched_keywords
        assert "surge" in result.matched_keywords
        assert result.is_urgent is True

    def test_positive_keywords_listed_before_negative(self):
        result = analyze_sentiment("Lawsuit settled, growth resumes", "")

        assert result.matched_keywords == ("growth", "lawsuit")

    def test_score_rounds_half_up(self):
        # 1 positive of 2 matches -> 50, neutral band
        result = analyze_sentiment("growth and decline", "")
        assert result.score == 50
        assert result.sentiment == Sentiment.NEUTRAL

        # 2 of 3 -> 66.67 -> 67
        result = analyze_sentiment("growth and profit despite decline", "")
        assert result.score == 67
        assert result.sentiment == Sentiment.POSITIVE

    def test_thresholds_are_inclusive(self):
        # 3 of 5 positive -> exactly 60
        result = analyze_sentiment(
            "growth profit record amid decline and lawsuit", ""
        )
        assert result.score == 60
        assert result.sentiment == Sentiment.POSITIVE

        # 2 of 5 positive -> exactly 40
        result = analyze_sentiment("growth profit amid decline lawsuit debt", "")
        assert result.score == 40
        assert result.sentiment == Sentiment.NEGATIVE

    def test_substring_matching(self):
        # "sell" matches inside "seller"
        result = analyze_sentiment("Top seller", "")
        assert "sell" in result.matched_keywords

    def test_summary_is_included(self):
        result = analyze_sentiment("Quarterly update", "Company announces merger")
        assert result.is_urgent is True


class TestClassifyNews:
    """Raw article to NewsItem conversion."""

    def test_classify_full_article(self):
        article = {
            "id": 42,
            "headline": "Analyst upgrade on strong demand",
            "summary": "",
            "source": "Reuters",
            "url": "https://example.com/a",
            "datetime": 1_700_000_000,
        }

        item = classify_news("AISP", article, 0)

        assert item.id == 42
        assert item.ticker == "AISP"
        assert item.source == "Reuters"
        assert item.datetime == 1_700_000_000
        assert item.sentiment == Sentiment.POSITIVE
        assert item.is_urgent is True

    def test_missing_fields_get_defaults(self):
        item = classify_news("AISP", {}, 3)

        assert item.id == 3
        assert item.headline == ""
        assert item.source == "Unknown"
        assert item.url == ""
        assert item.datetime == 0

    def test_to_dict_uses_plain_values(self):
        item = classify_news("AISP", {"headline": "FDA approval"}, 0)
        data = item.to_dict()

        assert data["sentiment"] == "positive"
        assert data["matched_keywords"] == ["approval"]


class TestTimeAgo:
    @pytest.mark.parametrize(
        "diff,expected",
        [
            (0, "just now"),
            (59, "just now"),
            (60, "1m ago"),
            (3599, "59m ago"),
            (3600, "1h ago"),
            (86399, "23h ago"),
            (86400, "1d ago"),
            (604799, "6d ago"),
            (604800, "1w ago"),
        ],
    )
    def test_time_ago_buckets(self, diff, expected):
        now = 1_700_000_000
        assert time_ago(now - diff, now=now) == expected
