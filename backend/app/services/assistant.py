from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from app.errors import QueryRejectedError, QueryValidationError
from app.schemas import AssistantReply, WeatherSnapshot
from app.services.recommender import (
    DRIZZLE_CODES,
    FOG_CODES,
    FREEZING_CODES,
    RAIN_CODES,
    SNOW_CODES,
    THUNDERSTORM_CODES,
    band_for,
)
from app.services.weather_service import WeatherService


logger = logging.getLogger(__name__)

# Placeholder reported to the client; not computed from the query.
ASSISTANT_CONFIDENCE = 0.85

DEVANAGARI_PATTERN = re.compile(r"[\u0900-\u097F]")
LATIN_WORD_PATTERN = re.compile(r"[a-z]+")
ROMANIZED_HINDI_WORDS = frozenset(
    {
        "kya", "hai", "hain", "mausam", "aaj", "kal", "kaisa", "kaisi", "kaise", "batao",
        "bataiye", "hoga", "hogi", "barish", "garmi", "thand", "sardi", "mein", "nahi",
        "kitna", "kitni", "chahiye",
    }
)

# Trigger words are matched as substrings of the lower-cased query.
KEYWORD_TOPICS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "temperature": frozenset(
            {"temperature", "temp", "hot", "cold", "warm", "cool", "degree", "heat",
             "तापमान", "गर्मी", "ठंड", "सर्दी", "garmi", "thand", "sardi", "tapmaan"}
        ),
        "rain": frozenset(
            {"rain", "raining", "wet", "precipitation", "shower", "drizzle", "storm",
             "बारिश", "वर्षा", "बरसात", "barish", "baarish", "barsaat"}
        ),
        "wind": frozenset({"wind", "windy", "breeze", "gust", "हवा", "आंधी", "hawa", "aandhi"}),
        "humidity": frozenset({"humidity", "humid", "moisture", "dry", "नमी", "उमस", "umas"}),
        "forecast": frozenset(
            {"tomorrow", "week", "forecast", "future", "next", "upcoming", "later",
             "कल", "पूर्वानुमान", "अगले", "kal", "agle"}
        ),
        "clothing": frozenset(
            {"wear", "clothes", "dress", "outfit", "jacket", "umbrella", "कपड़े", "पहनें", "kapde", "pehne"}
        ),
        "activities": frozenset(
            {"outdoor", "picnic", "travel", "sport", "exercise", "walk", "jog", "बाहर", "घूमने", "ghumne", "bahar"}
        ),
        "health": frozenset(
            {"health", "sick", "allergy", "asthma", "flu", "breathe", "headache", "sunburn", "skin",
             "स्वास्थ्य", "सेहत", "बीमार", "sehat", "bimar"}
        ),
        "agriculture": frozenset(
            {"crop", "farm", "harvest", "irrigation", "sowing", "soil", "agricultur",
             "खेती", "फसल", "किसान", "kheti", "fasal", "kisan"}
        ),
        "aviation": frozenset(
            {"flight", "fly", "airport", "pilot", "plane", "aviation", "turbulence", "उड़ान", "हवाई", "udaan", "hawai"}
        ),
        "comparison": frozenset({"compare", "vs", "difference", "better", "warmer", "colder", "तुलना", "tulna"}),
    }
)

# Reply fragments are emitted in this order regardless of the query's word order.
COMPOSE_ORDER = (
    "temperature",
    "rain",
    "wind",
    "humidity",
    "clothing",
    "activities",
    "health",
    "agriculture",
    "aviation",
)

COMMON_CITIES = (
    "mumbai", "delhi", "bangalore", "chennai", "kolkata", "hyderabad",
    "pune", "ahmedabad", "surat", "jaipur", "lucknow", "kanpur",
    "london", "paris", "tokyo", "new york", "los angeles", "chicago",
    "toronto", "sydney", "melbourne", "singapore", "dubai", "cairo",
    "moscow", "berlin", "madrid", "rome", "amsterdam", "zurich",
)
CITY_AFTER_IN_PATTERN = re.compile(
    r"\bin\s+([a-z][a-z ]*?)(?=\s+(?:today|tomorrow|tonight|now|this|next|later|right)\b|\s*[,.?!]|\s*$)"
)

TEMPERATURE_BANDS = ((0, "freezing"), (10, "cold"), (20, "cool"), (30, "pleasant"), (35, "warm"), (float("inf"), "hot"))
CLOTHING_BANDS = ((0, "freezing"), (10, "cold"), (20, "cool"), (30, "pleasant"), (float("inf"), "hot"))
WIND_BANDS = ((2, "calm"), (6, "light"), (12, "moderate"), (float("inf"), "strong"))
HUMIDITY_BANDS = ((30, "dry"), (60, "comfortable"), (80, "muggy"), (float("inf"), "very_humid"))

WET_CODES = RAIN_CODES | DRIZZLE_CODES | FREEZING_CODES | THUNDERSTORM_CODES

ANALYSIS_TEXT: Mapping[tuple[str, str], Mapping[str, str]] = MappingProxyType(
    {
        ("temperature", "en"): {
            "freezing": "Freezing cold! Layer up with thermal wear.",
            "cold": "Cold weather. A heavy jacket is recommended.",
            "cool": "Cool temperature. A light jacket or sweater is needed.",
            "pleasant": "Pleasant temperature, perfect for most activities.",
            "warm": "Warm weather. Light clothing recommended.",
            "hot": "Very hot! Stay hydrated and avoid direct sun.",
        },
        ("temperature", "hi"): {
            "freezing": "कड़ाके की ठंड है! थर्मल कपड़े पहनें।",
            "cold": "ठंडा मौसम है। भारी जैकेट पहनें।",
            "cool": "हल्की ठंडक है। हल्की जैकेट या स्वेटर पहनें।",
            "pleasant": "सुहावना तापमान है, ज़्यादातर गतिविधियों के लिए बढ़िया।",
            "warm": "गर्म मौसम है। हल्के कपड़े पहनें।",
            "hot": "बहुत गर्मी है! पानी पीते रहें और सीधी धूप से बचें।",
        },
        ("wind", "en"): {
            "calm": "Calm conditions with light air.",
            "light": "Light breeze, pleasant for outdoor activities.",
            "moderate": "Moderate wind, it may affect outdoor plans.",
            "strong": "Strong winds! Be cautious outdoors.",
        },
        ("wind", "hi"): {
            "calm": "हवा लगभग शांत है।",
            "light": "हल्की हवा चल रही है, बाहर के लिए अच्छा है।",
            "moderate": "मध्यम हवा है, बाहरी योजनाओं पर असर पड़ सकता है।",
            "strong": "तेज़ हवा है! बाहर सावधान रहें।",
        },
        ("humidity", "en"): {
            "dry": "Low humidity, skin may feel dry.",
            "comfortable": "Comfortable humidity levels.",
            "muggy": "High humidity, it may feel muggy.",
            "very_humid": "Very humid and uncomfortable.",
        },
        ("humidity", "hi"): {
            "dry": "नमी कम है, त्वचा रूखी लग सकती है।",
            "comfortable": "नमी आरामदायक स्तर पर है।",
            "muggy": "नमी ज़्यादा है, उमस महसूस हो सकती है।",
            "very_humid": "बहुत ज़्यादा उमस है, मौसम असहज है।",
        },
        ("rain", "en"): {
            "raining": "Yes, it's raining right now.",
            "dry": "No rain at the moment.",
            "raining_tip": " Don't forget your umbrella!",
            "dry_tip": "",
        },
        ("rain", "hi"): {
            "raining": "हाँ, अभी बारिश हो रही है।",
            "dry": "अभी बारिश नहीं हो रही है।",
            "raining_tip": " छाता साथ रखें!",
            "dry_tip": "",
        },
        ("clothing", "en"): {
            "freezing": "Heavy winter coat, thermal layers, gloves, hat and warm boots.",
            "cold": "Warm jacket, long pants, closed shoes and a scarf.",
            "cool": "Light jacket or sweater, long pants and comfortable shoes.",
            "pleasant": "T-shirt or light shirt with jeans or light pants.",
            "hot": "Light, breathable clothing, shorts and sandals.",
            "rain": " Add a waterproof jacket and umbrella.",
            "snow": " Add waterproof boots and extra warm layers.",
            "wind": " Add a windbreaker.",
        },
        ("clothing", "hi"): {
            "freezing": "भारी ऊनी कोट, थर्मल, दस्ताने, टोपी और गर्म जूते।",
            "cold": "गर्म जैकेट, लंबी पैंट, बंद जूते और मफलर।",
            "cool": "हल्की जैकेट या स्वेटर, लंबी पैंट और आरामदायक जूते।",
            "pleasant": "टी-शर्ट या हल्की शर्ट के साथ जींस या हल्की पैंट।",
            "hot": "हल्के, हवादार कपड़े, शॉर्ट्स और सैंडल।",
            "rain": " साथ में रेनकोट और छाता रखें।",
            "snow": " वाटरप्रूफ जूते और अतिरिक्त गर्म कपड़े जोड़ें।",
            "wind": " हवा रोकने वाली जैकेट भी पहनें।",
        },
        ("activities", "en"): {
            "rainy": "Indoor activities: museums, shopping, movies or the gym.",
            "snowy": "Winter activities: skiing, snowboarding or hot chocolate indoors.",
            "ideal": "Perfect for walking, jogging, outdoor sports and picnics.",
            "hot": "Swimming, indoor activities, or outdoor plans early morning and late evening.",
            "cold": "Indoor activities, cozy cafes, or short walks in warm clothes.",
            "moderate": "Light outdoor activities, walking and sightseeing.",
        },
        ("activities", "hi"): {
            "rainy": "घर के अंदर की गतिविधियाँ: संग्रहालय, खरीदारी, फ़िल्म या जिम।",
            "snowy": "बर्फ़ की गतिविधियाँ: स्कीइंग या घर के अंदर गरम चॉकलेट।",
            "ideal": "टहलने, जॉगिंग, आउटडोर खेल और पिकनिक के लिए बढ़िया।",
            "hot": "तैराकी, घर के अंदर की गतिविधियाँ, या सुबह-शाम बाहर निकलें।",
            "cold": "घर के अंदर की गतिविधियाँ, कैफ़े, या गर्म कपड़ों में छोटी सैर।",
            "moderate": "हल्की आउटडोर गतिविधियाँ, सैर और घूमना-फिरना।",
        },
        ("health", "en"): {
            "heat": "Heat stress risk: drink water regularly and rest in the shade.",
            "cold": "Cold exposure risk: keep extremities covered and limit time outside.",
            "humid": "High humidity can strain breathing, take it easy if you have asthma.",
            "uv": "Very high UV: use sunscreen and protect your eyes.",
            "dry": "Dry air: drink water and moisturize to protect skin and airways.",
            "low_pressure": "Low pressure may trigger headaches or joint pain for sensitive people.",
            "good": "No major weather-related health concerns right now.",
        },
        ("health", "hi"): {
            "heat": "लू का खतरा: बार-बार पानी पिएँ और छाँव में आराम करें।",
            "cold": "ठंड का खतरा: हाथ-पैर ढक कर रखें और बाहर कम समय बिताएँ।",
            "humid": "ज़्यादा नमी से साँस लेने में दिक्कत हो सकती है, अस्थमा हो तो सावधान रहें।",
            "uv": "UV बहुत ज़्यादा है: सनस्क्रीन लगाएँ और आँखों को बचाएँ।",
            "dry": "हवा सूखी है: पानी पिएँ और त्वचा को नम रखें।",
            "low_pressure": "कम दबाव से संवेदनशील लोगों को सिरदर्द या जोड़ों में दर्द हो सकता है।",
            "good": "अभी मौसम से जुड़ी कोई बड़ी स्वास्थ्य चिंता नहीं है।",
        },
        ("agriculture", "en"): {
            "rain": "Rain is falling: postpone irrigation and pesticide spraying.",
            "frost": "Frost risk: cover sensitive crops and protect seedlings.",
            "heat": "High heat: irrigate early morning or evening to reduce evaporation.",
            "disease": "Very humid air raises fungal disease risk, inspect crops closely.",
            "wind": "Windy conditions: avoid spraying, drift will be high.",
            "good": "Good conditions for field work, sowing and harvesting.",
        },
        ("agriculture", "hi"): {
            "rain": "बारिश हो रही है: सिंचाई और कीटनाशक छिड़काव टाल दें।",
            "frost": "पाले का खतरा: संवेदनशील फसलों और पौध को ढकें।",
            "heat": "तेज़ गर्मी: वाष्पीकरण कम करने के लिए सुबह या शाम सिंचाई करें।",
            "disease": "ज़्यादा नमी से फफूंद रोग का खतरा है, फसलों की जाँच करें।",
            "wind": "तेज़ हवा: छिड़काव न करें, दवा उड़ सकती है।",
            "good": "खेती के काम, बुवाई और कटाई के लिए अच्छा मौसम है।",
        },
        ("aviation", "en"): {
            "storm": "Thunderstorms nearby: expect delays and turbulence.",
            "low_visibility": "Low visibility may cause flight delays.",
            "strong_wind": "Strong surface winds: expect a bumpy takeoff and landing.",
            "good": "Good flying conditions.",
        },
        ("aviation", "hi"): {
            "storm": "आसपास आंधी-तूफान: देरी और झटकों की संभावना है।",
            "low_visibility": "कम दृश्यता से उड़ानों में देरी हो सकती है।",
            "strong_wind": "तेज़ हवा: टेकऑफ़ और लैंडिंग में झटके लग सकते हैं।",
            "good": "उड़ान के लिए मौसम अच्छा है।",
        },
    }
)

TOPIC_TEMPLATES: Mapping[tuple[str, str], str] = MappingProxyType(
    {
        ("temperature", "en"): "Temperature: {temperature}°C (feels like {feels_like}°C). {temperature_analysis}",
        ("temperature", "hi"): "तापमान: {temperature}°C (महसूस {feels_like}°C)। {temperature_analysis}",
        ("rain", "en"): "Rain status: {rain_status} Current conditions: {description}.{rain_tip}",
        ("rain", "hi"): "बारिश: {rain_status} मौजूदा स्थिति: {description}।{rain_tip}",
        ("wind", "en"): "Wind speed: {wind_speed} m/s. {wind_analysis}",
        ("wind", "hi"): "हवा की गति: {wind_speed} मी/से। {wind_analysis}",
        ("humidity", "en"): "Humidity: {humidity}%. {humidity_analysis}",
        ("humidity", "hi"): "नमी: {humidity}%। {humidity_analysis}",
        ("clothing", "en"): "What to wear: {clothing_advice}{clothing_extras}",
        ("clothing", "hi"): "क्या पहनें: {clothing_advice}{clothing_extras}",
        ("activities", "en"): "Activity suggestions: {activity_advice}",
        ("activities", "hi"): "गतिविधि सुझाव: {activity_advice}",
        ("health", "en"): "Health tip: {health_advice}",
        ("health", "hi"): "स्वास्थ्य सलाह: {health_advice}",
        ("agriculture", "en"): "Farming outlook: {agriculture_advice}",
        ("agriculture", "hi"): "खेती सलाह: {agriculture_advice}",
        ("aviation", "en"): "Flying conditions: {aviation_advice} Wind {wind_speed} m/s, visibility {visibility} km.",
        ("aviation", "hi"): "उड़ान स्थिति: {aviation_advice} हवा {wind_speed} मी/से, दृश्यता {visibility} कि.मी.।",
        ("summary", "en"): (
            "Current weather: {description}\nTemperature: {temperature}°C\nHumidity: {humidity}%\n"
            "Wind: {wind_speed} m/s\n{recommendation}"
        ),
        ("summary", "hi"): (
            "मौजूदा मौसम: {description}\nतापमान: {temperature}°C\nनमी: {humidity}%\n"
            "हवा: {wind_speed} मी/से\n{temperature_analysis}"
        ),
        ("header", "en"): "Weather assistant for {location_label}",
        ("header", "hi"): "{location_label} के लिए मौसम सहायक",
        ("insights", "en"): (
            "Location: {latitude}, {longitude} | Updated: {last_updated}\n"
            "Ask me about rain, wind, clothing or activities for more details."
        ),
        ("insights", "hi"): (
            "स्थान: {latitude}, {longitude} | अपडेट: {last_updated}\n"
            "बारिश, हवा, कपड़ों या गतिविधियों के बारे में और पूछें।"
        ),
    }
)

REJECTION_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "en": "I'm a weather assistant! Please ask me about weather, temperature, rain, or weather-related activities.",
        "hi": "मैं एक मौसम सहायक हूँ! कृपया मौसम, तापमान, बारिश या मौसम से जुड़ी गतिविधियों के बारे में पूछें।",
    }
)

HINDI_WEATHER_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "Clear sky": "आसमान साफ",
        "Clear night": "साफ रात",
        "Mainly clear": "ज्यादातर साफ",
        "Mainly clear night": "ज्यादातर साफ रात",
        "Partly cloudy": "आंशिक बादल",
        "Partly cloudy night": "रात में आंशिक बादल",
        "Overcast": "घने बादल",
        "Fog": "कोहरा",
        "Depositing rime fog": "जमने वाला कोहरा",
        "Light drizzle": "हल्की बूंदाबांदी",
        "Moderate drizzle": "मध्यम बूंदाबांदी",
        "Dense drizzle": "तेज बूंदाबांदी",
        "Light freezing drizzle": "हल्की जमने वाली बूंदाबांदी",
        "Dense freezing drizzle": "तेज जमने वाली बूंदाबांदी",
        "Slight rain": "हल्की बारिश",
        "Moderate rain": "मध्यम बारिश",
        "Heavy rain": "तेज बारिश",
        "Light freezing rain": "हल्की जमने वाली बारिश",
        "Heavy freezing rain": "भारी जमने वाली बारिश",
        "Slight snow fall": "हल्की बर्फबारी",
        "Moderate snow fall": "मध्यम बर्फबारी",
        "Heavy snow fall": "भारी बर्फबारी",
        "Snow grains": "बर्फ के दाने",
        "Slight rain showers": "हल्की बारिश की फुहारें",
        "Moderate rain showers": "मध्यम बारिश की फुहारें",
        "Violent rain showers": "तेज बारिश की फुहारें",
        "Slight snow showers": "हल्की बर्फ की फुहारें",
        "Heavy snow showers": "भारी बर्फ की फुहारें",
        "Thunderstorm": "आंधी-तूफान",
        "Thunderstorm with slight hail": "हल्की ओलावृष्टि के साथ तूफान",
        "Thunderstorm with heavy hail": "भारी ओलावृष्टि के साथ तूफान",
        "Unknown": "स्थिति अज्ञात",
    }
)


def detect_language(query: str) -> str:
    if DEVANAGARI_PATTERN.search(query):
        return "hi"
    words = set(LATIN_WORD_PATTERN.findall(query.lower()))
    if words & ROMANIZED_HINDI_WORDS:
        return "hi"
    return "en"


def classify_topics(query: str) -> list[str]:
    """Every topic with at least one trigger word in the query, in table order."""
    lowered = query.lower()
    return [
        topic
        for topic, keywords in KEYWORD_TOPICS.items()
        if any(keyword in lowered for keyword in keywords)
    ]


def extract_city_from_query(query: str) -> str | None:
    lowered = query.lower()
    for city in COMMON_CITIES:
        if city in lowered:
            return city

    match = CITY_AFTER_IN_PATTERN.search(lowered)
    if match:
        return match.group(1).strip() or None
    return None


def _activity_key(snapshot: WeatherSnapshot) -> str:
    code = snapshot.weather_code
    temperature = snapshot.temperature
    if code in RAIN_CODES or code in DRIZZLE_CODES or code in FREEZING_CODES:
        return "rainy"
    if code in SNOW_CODES:
        return "snowy"
    if 20 <= temperature <= 30:
        return "ideal"
    if temperature > 30:
        return "hot"
    if temperature < 10:
        return "cold"
    return "moderate"


def _health_key(snapshot: WeatherSnapshot) -> str:
    if snapshot.temperature >= 35:
        return "heat"
    if snapshot.temperature < 0:
        return "cold"
    if snapshot.humidity > 85:
        return "humid"
    if snapshot.uv_index is not None and snapshot.uv_index > 8:
        return "uv"
    if snapshot.humidity < 25:
        return "dry"
    if snapshot.pressure is not None and snapshot.pressure < 995:
        return "low_pressure"
    return "good"


def _agriculture_key(snapshot: WeatherSnapshot) -> str:
    if snapshot.weather_code in WET_CODES:
        return "rain"
    if snapshot.weather_code in SNOW_CODES or snapshot.temperature < 2:
        return "frost"
    if snapshot.temperature > 35:
        return "heat"
    if snapshot.humidity > 85:
        return "disease"
    if snapshot.wind_speed > 10:
        return "wind"
    return "good"


def _aviation_key(snapshot: WeatherSnapshot) -> str:
    if snapshot.weather_code in THUNDERSTORM_CODES:
        return "storm"
    if snapshot.weather_code in FOG_CODES or (snapshot.visibility is not None and snapshot.visibility < 5):
        return "low_visibility"
    if snapshot.wind_speed > 15:
        return "strong_wind"
    return "good"


def build_template_context(snapshot: WeatherSnapshot, language: str) -> dict[str, object]:
    def text(dimension: str, key: str) -> str:
        return ANALYSIS_TEXT[(dimension, language)][key]

    description = snapshot.description
    if language == "hi":
        description = HINDI_WEATHER_LABELS.get(description, description)

    is_raining = snapshot.weather_code in WET_CODES
    rain_key = "raining" if is_raining else "dry"

    clothing_extras = []
    if snapshot.weather_code in WET_CODES:
        clothing_extras.append(text("clothing", "rain"))
    elif snapshot.weather_code in SNOW_CODES:
        clothing_extras.append(text("clothing", "snow"))
    if snapshot.wind_speed > 8:
        clothing_extras.append(text("clothing", "wind"))

    feels_like = snapshot.apparent_temperature if snapshot.apparent_temperature is not None else snapshot.temperature
    location_label = f"{snapshot.city}, {snapshot.country}" if snapshot.country else snapshot.city

    return {
        "location_label": location_label,
        "temperature": snapshot.temperature,
        "feels_like": feels_like,
        "description": description,
        "humidity": snapshot.humidity,
        "wind_speed": snapshot.wind_speed,
        "visibility": snapshot.visibility if snapshot.visibility is not None else "N/A",
        "latitude": snapshot.coordinates.latitude,
        "longitude": snapshot.coordinates.longitude,
        "last_updated": snapshot.last_updated,
        "recommendation": snapshot.recommendation,
        "temperature_analysis": text("temperature", band_for(snapshot.temperature, TEMPERATURE_BANDS)),
        "wind_analysis": text("wind", band_for(snapshot.wind_speed, WIND_BANDS)),
        "humidity_analysis": text("humidity", band_for(snapshot.humidity, HUMIDITY_BANDS)),
        "rain_status": text("rain", rain_key),
        "rain_tip": text("rain", f"{rain_key}_tip"),
        "clothing_advice": text("clothing", band_for(snapshot.temperature, CLOTHING_BANDS)),
        "clothing_extras": "".join(clothing_extras),
        "activity_advice": text("activities", _activity_key(snapshot)),
        "health_advice": text("health", _health_key(snapshot)),
        "agriculture_advice": text("agriculture", _agriculture_key(snapshot)),
        "aviation_advice": text("aviation", _aviation_key(snapshot)),
    }


def compose_reply(snapshot: WeatherSnapshot, topics: list[str], language: str) -> str:
    context = build_template_context(snapshot, language)

    fragments = [
        TOPIC_TEMPLATES[(topic, language)].format(**context) for topic in COMPOSE_ORDER if topic in topics
    ]
    if not fragments:
        fragments = [TOPIC_TEMPLATES[("summary", language)].format(**context)]

    sections = [TOPIC_TEMPLATES[("header", language)].format(**context)]
    sections.extend(fragments)
    sections.append(TOPIC_TEMPLATES[("insights", language)].format(**context))
    return "\n\n".join(sections)


@dataclass
class WeatherAssistant:
    service: WeatherService

    async def answer(self, query: str | None, city: str | None = None) -> AssistantReply:
        text = (query or "").strip()
        if not text:
            raise QueryValidationError("Please ask me a weather-related question!")

        language = detect_language(text)
        topics = classify_topics(text)
        explicit_city = (city or "").strip() or None

        if not topics and explicit_city is None:
            logger.info("Rejected off-topic assistant query (language=%s)", language)
            raise QueryRejectedError(REJECTION_MESSAGES[language])

        target_city = explicit_city or extract_city_from_query(text)
        snapshot = await self.service.current_weather(target_city)

        return AssistantReply(
            response=compose_reply(snapshot, topics, language),
            confidence=ASSISTANT_CONFIDENCE,
            language=language,
            categories=topics,
            city=snapshot.city,
        )
