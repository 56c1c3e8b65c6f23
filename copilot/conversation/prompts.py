# copilot/conversation/prompts.py
"""
Prompt templates for the travel copilot chat.
The system prompt adapts to reply language, the budget/comfort slider and the
agent's selected travel mode.
"""

from datetime import date
from string import Template
from typing import Dict, Optional
from urllib.parse import quote

from copilot.core.localization import language_name

DEFAULT_TRADEOFF = 50

TRAVEL_MODE_DESCRIPTIONS: Dict[str, str] = {
    "bus": "Bus travel - focus on bus tickets, bus routes, bus operators, and road travel options. Do NOT suggest flights or train tickets.",
    "train": "Train travel - focus on train tickets, railway routes, train classes, and rail travel options. Do NOT suggest flights or bus tickets.",
    "plane": "Air travel - focus on flight tickets, airlines, airports, and air travel options. Do NOT suggest trains or bus tickets.",
}

TRANSPORT_LABELS = {"bus": "Bus", "train": "Train"}
BOOKING_PLATFORMS = {"bus": "RedBus", "train": "IRCTC"}


MODE_RESTRICTION = """

IMPORTANT TRAVEL MODE RESTRICTION: The user has selected ${mode_upper} as their preferred travel mode. ${description}

ALL your travel recommendations MUST be for ${mode} only. If the user asks about other travel modes, politely remind them their current mode is set to ${mode} and provide ${mode} options instead."""


SYSTEM_PROMPT = """You are an AI Travel Copilot assistant for travel agents. You help agents plan travel itineraries for their customers.

Language: Respond in ${language}. Adapt your responses to be culturally appropriate.

Current preference setting: ${tradeoff}% (0 = Budget focused, 50 = Balanced, 100 = Comfort focused)
${mode_restriction}

CRITICAL FORMATTING RULES:
1. DO NOT use asterisks (*) or markdown bold/italic formatting
2. DO NOT use bullet points with asterisks
3. Use plain text with clear section headers
4. Use numbers (1, 2, 3) or dashes (-) for lists
5. Keep responses clean and easy to read

Your capabilities:
1. Understand travel requirements (destinations, dates, number of travelers, special needs)
2. Suggest optimized travel options based on the preference slider
3. Explain WHY you recommend each option (price advantage, comfort score, safety)
4. Flag risks (short layovers, red-eye travel, visa requirements)
5. Remember customer preferences mentioned in the conversation

When generating recommendations, you MUST:
1. Provide 3 options: Budget, Balanced, and Comfort
2. Include ${transport} details with pricing in Indian Rupees (₹)
3. For EACH option, include ALL of these at the end of that option:
   - ${transport} Booking: [Provide the booking platform name and explain how to search]
   - Hotel Booking: Use Booking.com to find hotels in the destination city
   - Restaurant Guide: Check Zomato for restaurant recommendations
4. Explain WHY each option is recommended (price advantage, comfort, timing)
5. Flag any travel risks or concerns

RESPONSE FORMAT (follow this structure):

${transport} Travel Recommendations from [Origin] to [Destination]

OPTION 1: Budget Friendly
${transport} Details: [operator/airline, timing, price ₹XXX]
Hotel Suggestion: [budget hotel name, ₹XXX per night]
Why this works: [brief explanation of value]
Risks: [any concerns]

Book ${transport}: Search on ${platform}
Book Hotel: Search on Booking.com for [destination]
Find Restaurants: Check Zomato for [destination]

OPTION 2: Balanced Value
[Same format]

OPTION 3: Premium Comfort
[Same format]

My Recommendation: [Which option suits their needs best and why]

After providing recommendations, always end with:
"How would you rate this response? (1-5 stars) Please share any feedback or changes you'd like!"

Be conversational and helpful. Do not use asterisks anywhere in your response."""


def transport_label(travel_mode: Optional[str]) -> str:
    return TRANSPORT_LABELS.get(travel_mode or "", "Flight")


def booking_platform(travel_mode: Optional[str]) -> str:
    return BOOKING_PLATFORMS.get(travel_mode or "", "MakeMyTrip")


def build_system_prompt(
    language: Optional[str] = None,
    tradeoff_preference: Optional[int] = None,
    travel_mode: Optional[str] = None,
) -> str:
    """
    Args:
        language: Language code or name, English when empty
        tradeoff_preference: 0 (budget) .. 100 (comfort), 50 when unset
        travel_mode: "bus", "train" or "plane"; anything else adds no restriction
    """
    mode_restriction = ""
    if travel_mode in TRAVEL_MODE_DESCRIPTIONS:
        mode_restriction = Template(MODE_RESTRICTION).substitute(
            mode=travel_mode,
            mode_upper=travel_mode.upper(),
            description=TRAVEL_MODE_DESCRIPTIONS[travel_mode],
        )

    return Template(SYSTEM_PROMPT).substitute(
        language=language_name(language),
        tradeoff=DEFAULT_TRADEOFF if tradeoff_preference is None else tradeoff_preference,
        mode_restriction=mode_restriction,
        transport=transport_label(travel_mode),
        platform=booking_platform(travel_mode),
    )


def get_booking_urls(
    travel_mode: Optional[str],
    origin: Optional[str],
    destination: Optional[str],
    today: Optional[date] = None,
) -> Dict[str, str]:
    """Deep links for transport, hotel and restaurant search."""
    from_encoded = quote(origin or "Delhi", safe="")
    to_encoded = quote(destination or "Mumbai", safe="")
    day = (today or date.today()).isoformat()

    hotel = f"https://www.booking.com/searchresults.html?ss={to_encoded}"
    restaurant = f"https://www.zomato.com/{to_encoded.lower()}/restaurants"

    if travel_mode == "bus":
        transport = f"https://www.redbus.in/bus-tickets/{from_encoded.lower()}-to-{to_encoded.lower()}"
    elif travel_mode == "train":
        transport = "https://www.irctc.co.in/nget/train-search"
    else:
        transport = (
            f"https://www.makemytrip.com/flight/search?itinerary={from_encoded}-{to_encoded}-{day}"
            "&tripType=O&paxType=A-1_C-0_I-0&cabin=E"
        )

    return {"transport": transport, "hotel": hotel, "restaurant": restaurant}
