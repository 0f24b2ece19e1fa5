from __future__ import annotations

RAIN_CODES = frozenset({61, 63, 65, 80, 81, 82})
DRIZZLE_CODES = frozenset({51, 53, 55})
SNOW_CODES = frozenset({71, 73, 75, 77, 85, 86})
THUNDERSTORM_CODES = frozenset({95, 96, 99})
FOG_CODES = frozenset({45, 48})
FREEZING_CODES = frozenset({56, 57, 66, 67})

# (exclusive upper bound in C, advisory)
TEMPERATURE_ADVISORIES: tuple[tuple[float, str], ...] = (
    (-10, "Extremely cold! Frostbite risk, cover all exposed skin and wear insulated boots"),
    (0, "Freezing weather! Heavy winter gear essential, watch for ice"),
    (5, "Very cold. Layer up with thermal wear, a warm coat and gloves"),
    (10, "Cold weather. Warm jacket, scarf and closed shoes recommended"),
    (15, "Cool weather. Light jacket or sweater suggested"),
    (20, "Mild temperature. Light layers work well"),
    (25, "Pleasant weather. Perfect for most outdoor activities"),
    (30, "Warm weather. Light, breathable clothing recommended"),
    (35, "Hot weather! Stay hydrated, wear light colors and seek shade"),
    (float("inf"), "Extremely hot! Heat stroke risk, stay indoors during peak hours"),
)

SHORT_TEMPERATURE_ADVICE: tuple[tuple[float, str], ...] = (
    (0, "Very cold! Wear heavy winter clothes and stay warm."),
    (10, "Cold weather. Wear warm clothes and a jacket."),
    (20, "Cool weather. Light jacket recommended."),
    (30, "Pleasant weather. Perfect for outdoor activities!"),
    (float("inf"), "Hot weather. Stay hydrated and wear light clothes."),
)

FEELS_LIKE_THRESHOLD = 2.0
MAX_DETAILED_ADVISORIES = 3


def band_for(value: float, bands: tuple[tuple[float, str], ...]) -> str:
    for upper_bound, text in bands:
        if value < upper_bound:
            return text
    return bands[-1][1]


def _condition_advisory(weather_code: int | None) -> str | None:
    if weather_code in RAIN_CODES:
        return "Rain expected, carry an umbrella and wear waterproof clothing"
    if weather_code in DRIZZLE_CODES:
        return "Light rain or drizzle, a light rain jacket is recommended"
    if weather_code in SNOW_CODES:
        return "Snow conditions, wear non-slip shoes and warm clothes"
    if weather_code in THUNDERSTORM_CODES:
        return "Thunderstorm warning, stay indoors and avoid metal objects"
    if weather_code in FOG_CODES:
        return "Foggy conditions, drive carefully with fog lights and allow extra time"
    return None


def _humidity_advisory(humidity: float | None) -> str | None:
    if humidity is None:
        return None
    if humidity > 85:
        return "Very high humidity, wear breathable fabrics, stay hydrated and avoid overexertion"
    if humidity > 70:
        return "High humidity, cotton clothing preferred, stay cool"
    if humidity < 25:
        return "Very low humidity, use moisturizer and drink plenty of water"
    if humidity < 40:
        return "Low humidity, keep skin moisturized and stay hydrated"
    return None


def _wind_advisory(wind_speed: float | None) -> str | None:
    if wind_speed is None:
        return None
    if wind_speed > 20:
        return "Very strong winds, avoid outdoor activities and secure loose items"
    if wind_speed > 15:
        return "Strong winds, be careful with umbrellas and watch for flying debris"
    if wind_speed > 8:
        return "Moderate wind, wear layers that won't blow around"
    return None


def _uv_advisory(uv_index: float | None) -> str | None:
    if uv_index is None:
        return None
    if uv_index > 8:
        return "Very high UV, use SPF 30+, wear a hat and sunglasses and limit sun exposure"
    if uv_index > 5:
        return "High UV levels, apply sunscreen and wear protective clothing"
    if uv_index > 2:
        return "Moderate UV, sunscreen recommended for extended outdoor time"
    return None


def _visibility_advisory(visibility_km: float | None) -> str | None:
    if visibility_km is None:
        return None
    if visibility_km < 2:
        return "Very poor visibility, avoid driving if possible and use fog lights"
    if visibility_km < 5:
        return "Reduced visibility, drive slowly with headlights on and keep extra distance"
    return None


def _pressure_advisory(pressure: float | None) -> str | None:
    if pressure is None:
        return None
    if pressure < 995:
        return "Low pressure system, sensitive people may experience fatigue or headaches"
    if pressure > 1025:
        return "High pressure, generally stable weather and good for outdoor activities"
    return None


def build_advisories(
    *,
    temperature: float,
    apparent_temperature: float | None = None,
    humidity: float | None = None,
    wind_speed: float | None = None,
    weather_code: int | None = None,
    pressure: float | None = None,
    visibility: float | None = None,
    uv_index: float | None = None,
) -> list[str]:
    """Return every advisory that applies, in fixed generation order.

    Order: temperature, feels-like, condition, humidity, wind, UV, visibility
    (km), pressure (hPa). Each dimension contributes at most one entry.
    """
    advisories = [band_for(temperature, TEMPERATURE_ADVISORIES)]

    if apparent_temperature is not None and abs(temperature - apparent_temperature) > FEELS_LIKE_THRESHOLD:
        diff = round(abs(temperature - apparent_temperature))
        if apparent_temperature > temperature:
            advisories.append(f"Feels {diff}°C warmer due to humidity, dress lighter than the temperature suggests")
        else:
            advisories.append(f"Wind chill makes it feel {diff}°C colder, dress warmer")

    for advisory in (
        _condition_advisory(weather_code),
        _humidity_advisory(humidity),
        _wind_advisory(wind_speed),
        _uv_advisory(uv_index),
        _visibility_advisory(visibility),
        _pressure_advisory(pressure),
    ):
        if advisory is not None:
            advisories.append(advisory)

    return advisories


def recommend_long(**fields: float | int | None) -> str:
    # Positional truncation: the first advisories generated are the ones kept.
    advisories = build_advisories(**fields)[:MAX_DETAILED_ADVISORIES]
    return ". ".join(advisories) + "."


def recommend(temperature: float, description: str) -> str:
    recommendation = band_for(temperature, SHORT_TEMPERATURE_ADVICE)

    lowered = description.lower()
    if "rain" in lowered:
        recommendation += " Don't forget an umbrella!"
    elif "snow" in lowered:
        recommendation += " Be careful of icy roads."
    elif "clear" in lowered:
        recommendation += " Great day to be outside!"
    return recommendation

