"""
Template Engine
===============
Ready-to-send customer messages (email and WhatsApp) filled from an itinerary.

Placeholders use ``{name}``. Values missing from the itinerary are rendered as
bracketed hints ("[Airline]", "[City]") so the agent can spot and edit them.
"""

from typing import Dict, List, Optional

from schemas.itineraries import Itinerary
from services.exceptions import TemplateNotFoundError

DEFAULT_TEMPLATES: Dict[str, Dict[str, str]] = {
    "email": {
        "itinerary": """Dear {customerName},

I hope this email finds you well! I'm pleased to share the travel itinerary I've carefully curated based on your preferences.

📅 TRIP DETAILS
━━━━━━━━━━━━━━━━━━━━━━━━━━

✈️ FLIGHT INFORMATION
Airline: {airline} {flightNo}
Route: {departureCity} → {arrivalCity}
Departure: {departureTime} on {departureDate}
Arrival: {arrivalTime}
Duration: {duration}
Price: ₹{flightPrice} per person

🏨 HOTEL ACCOMMODATION
Hotel: {hotelName}
Rating: {hotelRating}⭐
Room Type: {roomType}
Price: ₹{hotelPrice} per night
Amenities: {amenities}

💰 TOTAL COST: ₹{totalCost}

━━━━━━━━━━━━━━━━━━━━━━━━━━

Please review the details and let me know if you'd like to proceed with this booking or if you have any questions.

Best regards,
{agentName}
Travel Agent""",
        "follow_up": """Dear {customerName},

I wanted to follow up on the travel itinerary I shared with you earlier. Please let me know if:

✅ You'd like to proceed with the booking
✅ You need any modifications to the itinerary
✅ You have any questions about the trip

I'm here to help make your travel experience seamless!

Best regards,
{agentName}""",
        "confirmation": """Dear {customerName},

Great news! 🎉 Your booking has been confirmed!

Here are your booking details:

📍 Trip: {departureCity} → {arrivalCity}
📅 Date: {departureDate}
💰 Total Paid: ₹{totalCost}

NEXT STEPS:
1. ✅ E-tickets will be sent to your email shortly
2. ✅ Hotel confirmation number will follow
3. ✅ Please keep your ID documents ready

Safe travels!

Best regards,
{agentName}""",
    },
    "whatsapp": {
        "itinerary": """🌟 *Travel Itinerary for {customerName}* 🌟

✈️ *FLIGHT*
{airline} {flightNo}
📍 {departureCity} → {arrivalCity}
🕐 {departureTime} - {arrivalTime}
💰 ₹{flightPrice}/person

🏨 *HOTEL*
{hotelName} ({hotelRating}⭐)
{roomType}
💰 ₹{hotelPrice}/night

━━━━━━━━━━━━━
*TOTAL: ₹{totalCost}*
━━━━━━━━━━━━━

Reply with ✅ to book or ❓ for questions!

- {agentName}""",
        "follow_up": """Hi {customerName} 👋

Just checking in about the travel itinerary I sent!

Let me know if you:
✅ Want to book
✏️ Need changes
❓ Have questions

Happy to help! 😊

- {agentName}""",
        "confirmation": """🎉 *BOOKING CONFIRMED!* 🎉

Hi {customerName}!

Your trip is booked! ✅

📍 {departureCity} → {arrivalCity}
📅 {departureDate}
💰 ₹{totalCost}

E-tickets coming soon! 📧

Safe travels! ✈️

- {agentName}""",
    },
}


def _amount(value: float) -> str:
    # 4500 -> "4,500", 4500.5 -> "4,500.5"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


class TemplateEngine:
    """
    Generate all customer-facing message text without LLM.
    """

    @staticmethod
    def available() -> Dict[str, List[str]]:
        return {channel: list(kinds) for channel, kinds in DEFAULT_TEMPLATES.items()}

    @staticmethod
    def get_template(channel: str, kind: str) -> str:
        try:
            return DEFAULT_TEMPLATES[channel][kind]
        except KeyError:
            raise TemplateNotFoundError(f"No {kind!r} template for channel {channel!r}")

    @staticmethod
    def variables(
        itinerary: Optional[Itinerary],
        customer_name: str = "[Customer Name]",
        customer_email: str = "",
        agent_name: str = "Your Travel Agent",
    ) -> Dict[str, str]:
        flight = itinerary.flight if itinerary else None
        hotel = itinerary.hotel if itinerary else None

        return {
            "customerName": customer_name,
            "customerEmail": customer_email,
            "agentName": agent_name,
            "airline": flight.airline if flight else "[Airline]",
            "flightNo": flight.flight_no if flight else "[Flight No]",
            "departureCity": flight.departure.city if flight else "[City]",
            "arrivalCity": flight.arrival.city if flight else "[City]",
            "departureTime": flight.departure.time if flight else "[Time]",
            "departureDate": flight.departure.date if flight else "[Date]",
            "arrivalTime": flight.arrival.time if flight else "[Time]",
            "duration": flight.duration if flight else "[Duration]",
            "flightPrice": _amount(flight.price) if flight else "[Price]",
            "hotelName": hotel.name if hotel else "[Hotel]",
            "hotelRating": f"{hotel.rating:g}" if hotel else "[Rating]",
            "roomType": hotel.room_type if hotel else "[Room Type]",
            "hotelPrice": _amount(hotel.price_per_night) if hotel else "[Price]",
            "amenities": ", ".join(hotel.amenities) if hotel else "[Amenities]",
            "totalCost": _amount(itinerary.total_cost) if itinerary else "[Total]",
        }

    @classmethod
    def render(
        cls,
        channel: str,
        kind: str,
        itinerary: Optional[Itinerary] = None,
        customer_name: str = "[Customer Name]",
        customer_email: str = "",
        agent_name: str = "Your Travel Agent",
    ) -> str:
        """
        Fill a template. Unknown placeholders are left untouched.

        Raises:
            TemplateNotFoundError: unknown channel or kind
        """
        result = cls.get_template(channel, kind)
        for name, value in cls.variables(itinerary, customer_name, customer_email, agent_name).items():
            result = result.replace("{" + name + "}", value)
        return result


template_engine = TemplateEngine()
