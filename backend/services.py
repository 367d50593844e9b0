import os
import re
import logging

import openai
from dotenv import load_dotenv
from openai import OpenAI

from errors import BackendRequestError, InvalidInputError, MissingCredentialError

load_dotenv()

logger = logging.getLogger(__name__)

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
MAX_TOKENS = 2000
TEMPERATURE = 0.7
SYSTEM_PROMPT = "You are a professional travel advisor with extensive knowledge of destinations worldwide."

MAX_TIPS = 10
MIN_TIPS = 5
MIN_TIP_LENGTH = 10

BUDGET_TEXT = {
    "low": "budget-friendly",
    "medium": "moderately priced",
    "high": "premium"
}

FALLBACK_TIPS = (
    "Visit the main tourist information center",
    "Ask your hotel concierge for local recommendations",
    "Check local event calendars for festivals",
    "Try local restaurants recommended by residents",
    "Explore nearby neighborhoods on foot"
)

# ---------------- Prompt construction ----------------

def validate_preferences(client_preferences):
    """Return the preferences as a dict, rejecting shapes the prompt cannot use."""
    if client_preferences is None:
        return {}
    if not isinstance(client_preferences, dict):
        raise InvalidInputError("clientPreferences must be an object")
    interests = client_preferences.get("interests")
    if interests is not None and not isinstance(interests, (list, tuple)):
        raise InvalidInputError("interests must be a list")
    return client_preferences


def validate_explore_request(data):
    if not data.get("destination"):
        raise InvalidInputError("Destination is required")
    validate_preferences(data.get("clientPreferences"))


def build_prompt(destination, time_of_year=None, client_preferences=None):
    """
    Compose the user prompt for the travel advisor model.
    Clauses are appended in a fixed order: destination, timing, budget,
    interests, group size, then the closing instructions.
    """
    prefs = validate_preferences(client_preferences)

    prompt = f"You are a travel expert. Give me detailed activity recommendations for {destination}."

    if time_of_year:
        prompt += f" The visit is planned for {time_of_year}."

    budget = prefs.get("budget")
    if budget:
        budget_text = BUDGET_TEXT.get(budget)
        if budget_text:
            prompt += f" Focus on {budget_text} activities."
        else:
            logger.warning("Ignoring unknown budget value: %r", budget)

    interests = prefs.get("interests")
    if interests:
        prompt += f" The traveler is interested in: {', '.join(str(i) for i in interests)}."

    if prefs.get("groupSize"):
        prompt += f" This is for a group of {prefs['groupSize']} people."

    prompt += """

Please provide:
1. Top 10 specific activities with brief descriptions
2. Local tips and insights
3. Practical information (costs, timing, how to book)
4. Hidden gems locals recommend

Format your response clearly with sections and bullet points."""

    return prompt

# ---------------- OpenAI call ----------------

def get_openai_client():
    """Build a client from OPENAI_API_KEY, failing early when it is not set."""
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise MissingCredentialError("OpenAI API key not configured")
    return OpenAI(api_key=api_key)


def get_recommendations(prompt):
    """Send the prompt to OpenAI and return the raw completion text."""
    client = get_openai_client()

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt}
    ]

    try:
        response = client.chat.completions.create(
            model=OPENAI_MODEL,
            messages=messages,
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE
        )
    except openai.APIStatusError as e:
        logger.error("OpenAI returned %s: %s", e.status_code, e.message)
        raise BackendRequestError(e.message or "OpenAI API error") from e
    except openai.APIError as e:
        logger.error("OpenAI request failed: %s", e, exc_info=True)
        raise BackendRequestError(str(e) or "OpenAI API error") from e

    if not response.choices:
        raise BackendRequestError("OpenAI API error: no completion returned")
    return response.choices[0].message.content or ""

# ---------------- Response parsing ----------------

BULLET_RE = re.compile(r"^[-•*]\s+")
NUMBERED_RE = re.compile(r"^[0-9]+\.\s+")


def parse_response(raw_response):
    """
    Pull bullet and numbered list items out of free-form model output.
    Items of 10 characters or fewer are treated as noise. At most ten tips
    are returned, in the order they appear.
    """
    tips = []

    for line in raw_response.split("\n"):
        line = line.strip()
        if not (BULLET_RE.match(line) or NUMBERED_RE.match(line)):
            continue
        tip = NUMBERED_RE.sub("", BULLET_RE.sub("", line, count=1), count=1)
        if len(tip) > MIN_TIP_LENGTH:
            tips.append(tip)

    return tips[:MAX_TIPS]


def with_fallback_tips(tips):
    """Return tips plus the generic fallback set when fewer than five were found."""
    if len(tips) >= MIN_TIPS:
        return list(tips)
    return list(tips) + list(FALLBACK_TIPS)

# ---------------- Recommendation pipeline ----------------

def explore_destination(destination, time_of_year=None, client_preferences=None):
    """
    Build the prompt, ask the model, and turn its answer into tips.

    Returns {"generalTips": [...], "rawResponse": "..."}. Errors from the
    backend call propagate unchanged; no partial result is returned.
    """
    if not destination:
        raise InvalidInputError("Destination is required")

    logger.info("Getting recommendations for %s", destination)

    prompt = build_prompt(destination, time_of_year, client_preferences)
    raw_response = get_recommendations(prompt)

    tips = parse_response(raw_response)
    general_tips = with_fallback_tips(tips)
    if len(general_tips) != len(tips):
        logger.info("Only %d tips parsed for %s, adding fallback tips", len(tips), destination)

    return {
        "generalTips": general_tips,
        "rawResponse": raw_response
    }
