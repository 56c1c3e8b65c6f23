"""
Prompt building, booking links and language lookup
"""

from datetime import date

from copilot.conversation.prompts import build_system_prompt, get_booking_urls
from copilot.core.localization import group_by_region, language_name, search_languages


def test_default_prompt_is_english_balanced_flight():
    prompt = build_system_prompt()

    assert "Respond in English" in prompt
    assert "Current preference setting: 50%" in prompt
    assert "Flight Details" in prompt
    assert "Search on MakeMyTrip" in prompt
    assert "TRAVEL MODE RESTRICTION" not in prompt


def test_prompt_with_train_mode():
    prompt = build_system_prompt("ta", 20, "train")

    assert "Respond in Tamil" in prompt
    assert "Current preference setting: 20%" in prompt
    assert "TRAIN as their preferred travel mode" in prompt
    assert "Search on IRCTC" in prompt
    assert "Train Details" in prompt


def test_prompt_with_zero_tradeoff_is_not_defaulted():
    assert "Current preference setting: 0%" in build_system_prompt("en", 0)


def test_prompt_unknown_language_passes_through():
    assert "Respond in Klingon" in build_system_prompt("Klingon")


def test_booking_urls_by_mode():
    today = date(2026, 10, 19)

    bus = get_booking_urls("bus", "New Delhi", "Jaipur", today)
    assert bus["transport"] == "https://www.redbus.in/bus-tickets/new%20delhi-to-jaipur"
    assert bus["hotel"] == "https://www.booking.com/searchresults.html?ss=Jaipur"
    assert bus["restaurant"] == "https://www.zomato.com/jaipur/restaurants"

    train = get_booking_urls("train", "Delhi", "Agra", today)
    assert train["transport"] == "https://www.irctc.co.in/nget/train-search"

    plane = get_booking_urls(None, "Mumbai", "Goa", today)
    assert plane["transport"].startswith(
        "https://www.makemytrip.com/flight/search?itinerary=Mumbai-Goa-2026-10-19"
    )


def test_booking_urls_default_cities():
    urls = get_booking_urls("plane", None, None, date(2026, 1, 1))
    assert "Delhi-Mumbai-2026-01-01" in urls["transport"]


def test_language_name():
    assert language_name("hi") == "Hindi"
    assert language_name("HI") == "Hindi"
    assert language_name(None) == "English"
    assert language_name("xx") == "xx"


def test_search_and_group_languages():
    south = search_languages("south")
    assert {lang["code"] for lang in south} == {"ta", "te", "kn", "ml"}

    grouped = group_by_region(search_languages())
    assert "Global" in grouped
    assert any(lang["code"] == "en" for lang in grouped["Global"])

    assert search_languages("हिन्दी")[0]["code"] == "hi"
