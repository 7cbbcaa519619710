import uuid


def generate_id():
    """Generate a unique opaque entity ID."""
    return uuid.uuid4().hex


def clamp(value, low, high):
    """Clamp a number into the inclusive range [low, high]."""
    return max(low, min(high, value))
