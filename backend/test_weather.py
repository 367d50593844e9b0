import pytest

from errors import InvalidInputError
from weather import convert_temperature, get_temperature_display, get_weather_recommendations


def reading(**overrides):
    data = {"conditions": "clear", "temp": 75, "windspeed": 5, "uvindex": 3}
    data.update(overrides)
    return data


def test_rain_means_stay_indoors():
    advice = get_weather_recommendations(reading(conditions="Rain showers", temp=70, uvindex=2))
    assert advice["recommendation"] == "stay-indoors"
    assert advice["reason"] == "Poor weather conditions"
    assert advice["color"] == "#F57C00"


@pytest.mark.parametrize("conditions", ["Thunderstorm", "light SNOW", "Freezing rain"])
def test_bad_weather_matches_case_insensitively(conditions):
    assert get_weather_recommendations(reading(conditions=conditions))["reason"] == "Poor weather conditions"


def test_bad_weather_wins_over_wind_and_heat():
    advice = get_weather_recommendations(reading(conditions="storm", windspeed=40, temp=100))
    assert advice["reason"] == "Poor weather conditions"


def test_wind_threshold_is_strict():
    assert get_weather_recommendations(reading(windspeed=25))["recommendation"] == "perfect-outdoor"
    advice = get_weather_recommendations(reading(windspeed=25.1))
    assert advice["recommendation"] == "stay-indoors"
    assert advice["reason"] == "Very windy"


def test_heat_and_cold():
    hot = get_weather_recommendations(reading(temp=96))
    assert hot["recommendation"] == "limited-outdoor"
    assert hot["reason"] == "Extreme heat - stay hydrated"
    assert hot["color"] == "#FF5722"

    cold = get_weather_recommendations(reading(temp=24))
    assert cold["recommendation"] == "limited-outdoor"
    assert cold["reason"] == "Extreme cold - dress warmly"
    assert cold["color"] == "#2196F3"


def test_ideal_conditions():
    advice = get_weather_recommendations(reading(temp=75, uvindex=3))
    assert advice["recommendation"] == "perfect-outdoor"
    assert advice["reason"] == "Ideal conditions"
    assert advice["message"] == "Perfect for outdoor activities"


def test_high_uv_drops_to_good_outdoor():
    advice = get_weather_recommendations(reading(temp=75, uvindex=9))
    assert advice["recommendation"] == "good-outdoor"
    assert advice["reason"] == "Good weather - use sun protection"


@pytest.mark.parametrize("temp, expected", [
    (70, "perfect-outdoor"),
    (85, "perfect-outdoor"),
    (69.9, "good-outdoor"),
    (85.1, "good-outdoor"),
    (60, "good-outdoor"),
    (90, "good-outdoor"),
    (59.9, "moderate-outdoor"),
    (90.1, "moderate-outdoor"),
    (95, "moderate-outdoor"),
    (25, "moderate-outdoor"),
])
def test_temperature_band_boundaries(temp, expected):
    assert get_weather_recommendations(reading(temp=temp, uvindex=8))["recommendation"] == expected


def test_good_conditions_reason_without_high_uv():
    advice = get_weather_recommendations(reading(temp=65, uvindex=8))
    assert advice["reason"] == "Good conditions"


def test_fair_weather_fallback():
    advice = get_weather_recommendations(reading(temp=50))
    assert advice == {
        "recommendation": "moderate-outdoor",
        "message": "Moderate outdoor conditions",
        "reason": "Fair weather",
        "color": "#FF9800"
    }


def test_missing_fields_do_not_error():
    assert get_weather_recommendations({"temp": 75})["recommendation"] == "perfect-outdoor"
    assert get_weather_recommendations({})["recommendation"] == "moderate-outdoor"
    assert get_weather_recommendations({"conditions": None, "temp": "n/a"})["reason"] == "Fair weather"


def test_convert_temperature():
    assert convert_temperature(98.6, "C") == 37
    assert convert_temperature(98.6, "F") == 99
    assert convert_temperature(32, "C") == 0
    assert convert_temperature(-40, "C") == -40


@pytest.mark.parametrize("temp_f, expected", [
    (0.5, 1),
    (-0.5, 0),
    (-1.5, -1),
    (72.49, 72),
])
def test_fahrenheit_rounds_half_up(temp_f, expected):
    assert convert_temperature(temp_f, "F") == expected


def test_celsius_rounding_ties():
    # 33.8F is exactly 1.0C, 34.7F is 1.5C
    assert convert_temperature(33.8, "C") == 1
    assert convert_temperature(34.7, "C") == 2


def test_unknown_unit_is_rejected():
    with pytest.raises(InvalidInputError):
        convert_temperature(70, "K")
    with pytest.raises(InvalidInputError):
        convert_temperature(70, "c")


def test_non_numeric_temperature_is_rejected():
    with pytest.raises(InvalidInputError):
        convert_temperature("warm", "C")


def test_temperature_display():
    assert get_temperature_display(98.6, "C") == "37°C"
    assert get_temperature_display(98.6, "F") == "99°F"


@pytest.mark.parametrize("temp", [float("inf"), float("-inf"), 1e400])
def test_infinite_temperature_is_rejected(temp):
    with pytest.raises(InvalidInputError):
        convert_temperature(temp, "C")
    with pytest.raises(InvalidInputError):
        convert_temperature(temp, "F")
