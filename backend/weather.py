import math

from errors import InvalidInputError

# ---------------- Weather-based activity advice ----------------

BAD_WEATHER_WORDS = ("rain", "storm", "snow")

STAY_INDOORS_COLOR = "#F57C00"
HEAT_COLOR = "#FF5722"
COLD_COLOR = "#2196F3"
OUTDOOR_COLOR = "#4CAF50"
MODERATE_COLOR = "#FF9800"


def _number(value):
    """Coerce a reading field to float. Missing or non-numeric values become None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _above(value, threshold):
    return value is not None and value > threshold


def _below(value, threshold):
    return value is not None and value < threshold


def _between(value, low, high):
    return value is not None and low <= value <= high


def get_weather_recommendations(weather_data):
    """
    Decide how suitable the weather is for outdoor activities.

    weather_data is a dict with temp (Fahrenheit), conditions, windspeed and
    uvindex. The first matching rule wins, so the order below matters: the
    perfect/good/moderate bands overlap and are separated only by ordering.
    A field that is missing or not a number never matches a rule.
    """
    temp = _number(weather_data.get("temp"))
    windspeed = _number(weather_data.get("windspeed"))
    uvindex = _number(weather_data.get("uvindex"))
    conditions = str(weather_data.get("conditions") or "").lower()

    is_bad_weather = any(word in conditions for word in BAD_WEATHER_WORDS)
    is_high_uv = _above(uvindex, 8)

    if is_bad_weather:
        return {
            "recommendation": "stay-indoors",
            "message": "Stay indoors",
            "reason": "Poor weather conditions",
            "color": STAY_INDOORS_COLOR
        }

    if _above(windspeed, 25):
        return {
            "recommendation": "stay-indoors",
            "message": "Stay indoors",
            "reason": "Very windy",
            "color": STAY_INDOORS_COLOR
        }

    if _above(temp, 95):
        return {
            "recommendation": "limited-outdoor",
            "message": "Limited outdoor time",
            "reason": "Extreme heat - stay hydrated",
            "color": HEAT_COLOR
        }

    if _below(temp, 25):
        return {
            "recommendation": "limited-outdoor",
            "message": "Limited outdoor time",
            "reason": "Extreme cold - dress warmly",
            "color": COLD_COLOR
        }

    if _between(temp, 70, 85) and not is_high_uv:
        return {
            "recommendation": "perfect-outdoor",
            "message": "Perfect for outdoor activities",
            "reason": "Ideal conditions",
            "color": OUTDOOR_COLOR
        }

    if _between(temp, 60, 90):
        return {
            "recommendation": "good-outdoor",
            "message": "Great for outdoor activities",
            "reason": "Good weather - use sun protection" if is_high_uv else "Good conditions",
            "color": OUTDOOR_COLOR
        }

    return {
        "recommendation": "moderate-outdoor",
        "message": "Moderate outdoor conditions",
        "reason": "Fair weather",
        "color": MODERATE_COLOR
    }


# ---------------- Temperature helpers ----------------

SUPPORTED_UNITS = ("C", "F")


def _round_half_up(value):
    # 0.5 -> 1, -0.5 -> 0, -1.5 -> -1
    return int(math.floor(value + 0.5))


def convert_temperature(temp_f, unit):
    """Convert a Fahrenheit reading to the requested unit, rounded to a whole degree."""
    if unit not in SUPPORTED_UNITS:
        raise InvalidInputError(f"Unsupported temperature unit: {unit}")
    value = _number(temp_f)
    if value is None or not math.isfinite(value):
        raise InvalidInputError("Temperature must be a finite number")

    if unit == "C":
        return _round_half_up((value - 32) * 5 / 9)
    return _round_half_up(value)


def get_temperature_display(temp, unit):
    return f"{convert_temperature(temp, unit)}°{unit}"
