def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
