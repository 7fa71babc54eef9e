"""Prompt templates and request payloads for ingredient analysis."""

_ANALYST_ROLE = "You are an expert nutrition and skin health analyst."

_MEAL_TEMPLATE = """{role}

The user will describe what they ate. It could be a single dish (e.g., "pizza") \
or multiple dishes (e.g., "biryani with raita and a coke").

Your task is to:
1. Identify and separate each dish or drink mentioned.
2. If the dish can exist in multiple variations (for example, biryani can be \
chicken, mutton, beef, or prawn), provide ingredient breakdowns for each common \
variation.
3. Break down each variation into all its detailed ingredients, including base \
components, meats, oils, dairy, spices, herbs, and condiments.
3a. For meat-containing dishes, always break down the specific meat type/cut as \
individual ingredients (e.g., "chicken breast", "ground beef", "lamb shoulder") \
rather than generic terms like "chicken" or "beef".
4. Give at least 10 ingredients for each dish.
5. For each ingredient, assess its potential acne risk level (low, medium, or \
high) and include a short explanation of how it affects acne or skin health.

Return ONLY valid JSON in this exact format (no markdown, no code fences, no \
extra text):
{{
    "meals": [
        {{
            "dish": "dish name (variation)",
            "ingredients": [
                {{
                    "name": "ingredient name",
                    "acneRisk": "low",
                    "explanation": "brief explanation"
                }}
            ]
        }}
    ]
}}

Be as specific and comprehensive as possible with ingredients (list oils, \
spices, sauces, and garnishes).

Now analyze the following meal description:
"{description}"
"""

_INGREDIENT_TEMPLATE = """{role}

Analyze the following single ingredient for its potential acne risk level and \
skin health impact.

Your task is to:
1. Assess the ingredient's potential acne risk level (low, medium, or high).
2. Provide a brief explanation of how it affects acne or skin health.

Return ONLY valid JSON in this exact format (no markdown, no code fences, no \
extra text):
{{
    "name": "ingredient name",
    "acneRisk": "low",
    "explanation": "brief explanation"
}}

Now analyze this ingredient:
"{name}"
"""


def build_meal_prompt(description: str) -> str:
    """Build the multi-dish analysis prompt for a meal description."""
    cleaned = description.strip()
    if not cleaned:
        raise ValueError("Meal description must not be empty")
    return _MEAL_TEMPLATE.format(role=_ANALYST_ROLE, description=cleaned)


def build_ingredient_prompt(name: str) -> str:
    """Build the single-ingredient analysis prompt."""
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Ingredient name must not be empty")
    return _INGREDIENT_TEMPLATE.format(role=_ANALYST_ROLE, name=cleaned)


def build_chat_request(
    prompt: str, *, model: str, max_tokens: int, temperature: float
) -> dict[str, object]:
    """Wrap a prompt into a chat-completion request body."""
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
