"""A tile-map puzzle game: map validation, game rules, XPM images and a pygame front end."""

__version__ = "1.0.0"