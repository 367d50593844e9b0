import os
import atexit
import logging
from functools import wraps
from flask import Flask, request, jsonify, current_app
from flask_cors import CORS
from dotenv import load_dotenv

load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"))

from errors import InvalidInputError, MissingCredentialError, QuotaExceededError
from quota import QuotaTracker, QuotaSweeper
from services import explore_destination, validate_explore_request
from weather import get_weather_recommendations, convert_temperature, get_temperature_display

logger = logging.getLogger(__name__)


def get_quota_tracker():
    return current_app.extensions["quota_tracker"]


def json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def caller_id():
    return request.remote_addr or "unknown"


def validate_request(validator):
    """Run validator on the JSON body and answer 400 on InvalidInputError, before anything else happens."""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            try:
                validator(json_body())
            except InvalidInputError as e:
                return jsonify({"error": str(e)}), 400
            return f(*args, **kwargs)
        return decorated
    return decorator


# Simple per-caller daily limit
def check_rate_limit(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        caller = caller_id()
        if not get_quota_tracker().admit(caller):
            logger.warning("Daily limit reached for %s", caller)
            raise QuotaExceededError("Daily limit reached - try again tomorrow")
        return f(*args, **kwargs)
    return decorated


def create_app(quota_tracker=None, start_sweeper=False):
    """
    Build the Flask app. quota_tracker defaults to a fresh in-memory
    QuotaTracker; pass one in to share or inspect counters. With
    start_sweeper the daily cleanup timer runs for the life of the process.
    """
    app = Flask(__name__)
    CORS(app)
    tracker = quota_tracker or QuotaTracker()
    app.extensions["quota_tracker"] = tracker

    if start_sweeper:
        sweeper = QuotaSweeper(tracker)
        sweeper.start()
        atexit.register(sweeper.stop)
        app.extensions["quota_sweeper"] = sweeper

    @app.errorhandler(QuotaExceededError)
    def handle_quota_exceeded(e):
        return jsonify({"error": str(e)}), 429

    @app.route("/api/explore-destination", methods=["POST"])
    @validate_request(validate_explore_request)
    @check_rate_limit
    def api_explore_destination():
        """
        Activity recommendations for a destination.
        Expects JSON body with:
        - destination: string (required)
        - timeOfYear: string (optional)
        - clientPreferences: {budget, interests, groupSize} (optional)
        """
        data = json_body()

        try:
            result = explore_destination(
                data.get("destination"),
                data.get("timeOfYear"),
                data.get("clientPreferences")
            )
        except InvalidInputError as e:
            return jsonify({"error": str(e)}), 400
        except MissingCredentialError as e:
            logger.error("Recommendation service misconfigured: %s", e)
            return jsonify({"error": "Service configuration error"}), 500
        except Exception as e:
            logger.error("Failed to get recommendations: %s", e, exc_info=True)
            return jsonify({
                "error": "Failed to get recommendations",
                "message": str(e)
            }), 500

        return jsonify({
            "success": True,
            "data": {
                "recommendations": {
                    "generalTips": result["generalTips"]
                },
                "rawResponse": result["rawResponse"]
            }
        })

    @app.route("/api/weather-recommendations", methods=["POST"])
    def api_weather_recommendations():
        """
        Outdoor-activity advice for a weather reading.
        Expects JSON body with:
        - weatherData: {temp, conditions, windspeed, uvindex}
        """
        data = json_body()
        weather_data = data.get("weatherData")
        if not isinstance(weather_data, dict):
            return jsonify({"error": "Weather data is required"}), 400

        try:
            advice = get_weather_recommendations(weather_data)
        except Exception as e:
            logger.error("Weather recommendations error: %s", e, exc_info=True)
            return jsonify({
                "error": "Failed to get weather recommendations",
                "message": str(e)
            }), 500

        return jsonify({"success": True, "data": advice})

    @app.route("/api/convert-temperature", methods=["POST"])
    def api_convert_temperature():
        """
        Convert a Fahrenheit temperature.
        Expects JSON body with:
        - temp: number (Fahrenheit)
        - unit: "C" or "F"
        """
        data = json_body()
        temp = data.get("temp")
        unit = data.get("unit")
        if temp is None or not unit:
            return jsonify({"error": "Temperature and unit are required"}), 400

        try:
            converted = convert_temperature(temp, unit)
            display = get_temperature_display(temp, unit)
        except InvalidInputError as e:
            return jsonify({"error": str(e)}), 400

        return jsonify({
            "success": True,
            "data": {
                "original": temp,
                "converted": converted,
                "display": display,
                "unit": unit
            }
        })

    @app.route("/api/quota", methods=["GET"])
    def api_quota():
        """Today's usage for the calling address. Does not count against the limit."""
        tracker = get_quota_tracker()
        caller = caller_id()
        return jsonify({
            "limit": tracker.daily_limit,
            "used": tracker.used(caller),
            "remaining": tracker.remaining(caller)
        })

    @app.route("/api/quota-stats", methods=["GET"])
    def api_quota_stats():
        return jsonify(get_quota_tracker().get_stats())

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "service": "activity-recommendations"})

    return app


START_SWEEPER = os.getenv("QUOTA_SWEEPER", "true").lower() == "true"

app = create_app(start_sweeper=START_SWEEPER)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    port = int(os.getenv("PORT", 3002))
    logger.info("Activity service running on http://localhost:%d", port)
    app.run(host="0.0.0.0", port=port, threaded=True)
