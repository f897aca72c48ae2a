"""Diet assistant: food catalog, food diary with undo, and calorie targets."""

__version__ = "0.1.0"
