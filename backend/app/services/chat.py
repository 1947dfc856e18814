import random

RANDOM_RESPONSES = [
    "Hello! How can I assist you today?",
    "I'm here to help you with your queries.",
    "What would you like to know?",
    "Feel free to ask me anything!",
]

# Seeded once from system entropy at import
_rng = random.Random()


def pick_response(context: str = "") -> str:
    """Return a canned reply. ``context`` is accepted but not consulted yet."""
    return _rng.choice(RANDOM_RESPONSES)
