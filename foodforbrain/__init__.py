"""FoodForBrain: share links, extract the article, summarize it in the background."""

__version__ = "0.3.0"
