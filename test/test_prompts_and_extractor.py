from datetime import date

import pytest

from dayplan.errors import ParseError
from extraction.prompts import build_user_prompt, format_prompts, utc_offset
from extraction.task_extractor import TaskExtractor
from llm.llm_client import LLMClient

TODAY = date(2025, 6, 1)


def test_utc_offset_for_kolkata():
    assert utc_offset(TODAY, "Asia/Kolkata") == "+05:30"


def test_utc_offset_negative_and_dst():
    assert utc_offset(date(2025, 1, 15), "America/New_York") == "-05:00"
    assert utc_offset(date(2025, 7, 15), "America/New_York") == "-04:00"


def test_unknown_timezone():
    with pytest.raises(ValueError):
        utc_offset(TODAY, "Mars/Olympus")


def test_system_prompt_mentions_date_offset_and_zone():
    prompts = format_prompts("10 AM to 11 AM: write report", TODAY, "Asia/Kolkata")
    assert "2025-06-01T10:00:00+05:30" in prompts.system
    assert '"timezone": "Asia/Kolkata"' in prompts.system
    assert "JSON array" in prompts.system


def test_user_prompt_appends_today_hint():
    assert build_user_prompt("write report", TODAY) == (
        "write report. Please assume all tasks are for today (2025-06-01)."
    )
    assert build_user_prompt("  write report.  ", TODAY).startswith("write report. Please")


def test_blank_prompt_is_rejected():
    with pytest.raises(ValueError):
        build_user_prompt("   ", TODAY)


def test_extractor_passes_built_prompts(fake_provider_factory):
    provider = fake_provider_factory(
        '[{"title":"Write report","startTime":"2025-06-01T10:00:00+05:30",'
        '"endTime":"2025-06-01T11:00:00+05:30"}]'
    )
    extractor = TaskExtractor(llm_client=LLMClient(provider=provider))

    tasks = extractor.extract("10 AM to 11 AM: write report.", TODAY, "Asia/Kolkata")

    assert [t["title"] for t in tasks] == ["Write report"]
    system, user = provider.calls[0]
    assert "2025-06-01" in system
    assert user.endswith("(2025-06-01).")


def test_extractor_propagates_parse_error(fake_provider_factory):
    extractor = TaskExtractor(llm_client=LLMClient(provider=fake_provider_factory("sorry, no")))
    with pytest.raises(ParseError):
        extractor.extract("anything", TODAY, "Asia/Kolkata")
