"""Default favorite cities shown as cards under the main lookup."""

DEFAULT_FAVORITE_CITIES: list[str] = [
    "New York",
    "Tokyo",
    "Paris",
    "Sydney",
]
