"""Density heuristics that decide whether a menu needs chunked extraction.

Each scorer is a weighted tally of keyword and pattern hits for one domain
(wine, food, beverage). A document whose score passes the domain cutoff is
"extensive" and is processed chunk by chunk, as is any document longer than
the configured length threshold. Weights live in DensityWeights so they can
be tuned and tested in isolation.
"""

import logging
import re
from dataclasses import dataclass

from config import Settings, get_settings

logger = logging.getLogger(__name__)

WINE_SECTIONS = (
    "wine list",
    "wines",
    "red wines",
    "white wines",
    "sparkling wines",
    "rosé wines",
    "rose wines",
    "rosé",
    "rose",
    "champagne",
    "prosecco",
    "by the glass",
    "by the bottle",
    "provence",
    "côtes de provence",
    "cotes de provence",
)

WINE_REGIONS = (
    "bordeaux",
    "burgundy",
    "champagne",
    "tuscany",
    "rioja",
    "barolo",
    "chianti",
    "loire",
    "rhône",
    "napa",
    "sonoma",
    "mendoza",
    "barossa",
    "marlborough",
    "douro",
    "mosel",
    "alsace",
    "piedmont",
    "veneto",
    "châteauneuf",
    "sancerre",
    "chablis",
    "muscadet",
    "vouvray",
    "provence",
    "côtes de provence",
    "cotes de provence",
    "languedoc",
    "roussillon",
    "bandol",
    "cassis",
    "tavel",
    "chiaretto",
    "rosato",
)

FOOD_SECTIONS = (
    "appetizers",
    "starters",
    "mains",
    "main courses",
    "entrees",
    "entrées",
    "desserts",
    "sides",
    "salads",
    "soups",
    "pasta",
    "pizzas",
    "burgers",
    "sandwiches",
    "grills",
    "roasts",
    "seafood",
    "steaks",
    "chicken",
    "vegetarian",
    "vegan",
    "small plates",
    "sharing plates",
    "tasting menu",
    "chef's special",
)

COOKING_METHODS = (
    "grilled",
    "fried",
    "baked",
    "roasted",
    "sautéed",
    "braised",
    "steamed",
    "poached",
    "smoked",
    "barbecued",
    "pan-seared",
    "slow-cooked",
    "char-grilled",
)

DIETARY_MARKERS = (
    "(v)",
    "(vg)",
    "(gf)",
    "(df)",
    "vegetarian",
    "vegan",
    "gluten-free",
    "dairy-free",
    "contains nuts",
    "allergens",
)

COMMON_INGREDIENTS = (
    "tomato",
    "cheese",
    "chicken",
    "beef",
    "pork",
    "salmon",
    "mushroom",
    "onion",
    "garlic",
    "herbs",
    "sauce",
    "cream",
    "butter",
    "olive oil",
    "parmesan",
    "mozzarella",
    "basil",
    "spinach",
    "avocado",
    "lettuce",
)

BEVERAGE_SECTIONS = (
    "cocktails",
    "drinks",
    "beverages",
    "spirits",
    "beers",
    "ales",
    "lagers",
    "whiskey",
    "whisky",
    "gin",
    "vodka",
    "rum",
    "tequila",
    "brandy",
    "cognac",
    "liqueurs",
    "mocktails",
    "non-alcoholic",
    "soft drinks",
    "juices",
    "coffee",
    "tea",
    "hot drinks",
    "cold drinks",
    "bar menu",
    "drink menu",
)

NAMED_DRINKS = (
    "martini",
    "manhattan",
    "old fashioned",
    "negroni",
    "mojito",
    "margarita",
    "daiquiri",
    "cosmopolitan",
    "bloody mary",
    "mai tai",
    "piña colada",
    "long island",
    "espresso martini",
    "whiskey sour",
    "ipa",
    "pale ale",
    "stout",
    "pilsner",
    "wheat beer",
    "porter",
    "amber ale",
)

SERVING_STYLES = (
    "on the rocks",
    "neat",
    "straight up",
    "shaken",
    "stirred",
    "on tap",
    "draft",
    "bottled",
    "single",
    "double",
    "shot",
    "pint",
    "half pint",
    "glass",
    "bottle",
    "by the glass",
)

ALCOHOL_MARKERS = ("abv", "% vol", "alcohol by volume", "proof", "% alc")

MIXERS = (
    "tonic",
    "soda",
    "cola",
    "ginger beer",
    "ginger ale",
    "bitter",
    "bitters",
    "vermouth",
    "syrup",
    "juice",
    "lime",
    "lemon",
    "orange",
    "cherry",
    "olive",
    "mint",
    "basil",
    "cucumber",
    "cranberry",
    "pineapple",
    "grenadine",
)

VINTAGE_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")
PRICE_PATTERN = re.compile(r"[£$€]\s*\d+")
# "Item Name - £12" at the start of a line
ITEM_LINE_PATTERN = re.compile(r"^[A-Z][A-Za-z\s,&'-]+\s*[-–—]\s*[£$€]", re.MULTILINE)


@dataclass(frozen=True)
class DensityWeights:
    """Named weights and cutoffs for the density scorers."""

    section_hit: float = 2.0

    # Wine
    wine_region: float = 1.0
    vintage_divisor: float = 2.0
    vintage_cap: float = 20.0
    wine_price_min_count: int = 25
    wine_price_bonus: float = 5.0
    wine_cutoff: float = 15.0

    # Food
    cooking_method: float = 0.5
    dietary_marker: float = 1.0
    ingredient: float = 0.3
    food_price_min_count: int = 20
    food_price_bonus: float = 3.0
    food_item_line_min_count: int = 15
    food_item_line_bonus: float = 5.0
    food_cutoff: float = 8.0

    # Beverage
    named_drink: float = 1.0
    serving_style: float = 0.5
    alcohol_marker: float = 1.0
    mixer: float = 0.3
    beverage_price_min_count: int = 10
    beverage_price_bonus: float = 3.0
    beverage_item_line_min_count: int = 8
    beverage_item_line_bonus: float = 4.0
    beverage_cutoff: float = 6.0


DEFAULT_WEIGHTS = DensityWeights()


@dataclass(frozen=True)
class DensityReport:
    """Per-domain scores for one text and the resulting chunking decision."""

    length: int
    wine_score: float
    food_score: float
    beverage_score: float
    extensive_wine: bool
    extensive_food: bool
    extensive_beverage: bool
    over_length_threshold: bool

    @property
    def needs_chunking(self) -> bool:
        return (
            self.over_length_threshold
            or self.extensive_wine
            or self.extensive_food
            or self.extensive_beverage
        )


def _section_hits(lower_text: str, sections: tuple[str, ...]) -> int:
    """Count how many section keywords appear at least once."""
    return sum(1 for section in sections if section in lower_text)


def _word_hits(lower_text: str, term: str) -> int:
    return len(re.findall(rf"\b{re.escape(term)}\b", lower_text))


def _spaced_hits(lower_text: str, term: str) -> int:
    """Count substring hits, allowing any whitespace run between words."""
    pattern = r"\s+".join(re.escape(word) for word in term.split())
    return len(re.findall(pattern, lower_text))


def score_wine(text: str, weights: DensityWeights = DEFAULT_WEIGHTS) -> float:
    """Score how strongly text reads as a wine list."""
    lower_text = text.lower()
    score = _section_hits(lower_text, WINE_SECTIONS) * weights.section_hit

    vintages = len(VINTAGE_PATTERN.findall(text))
    score += min(vintages / weights.vintage_divisor, weights.vintage_cap)

    score += sum(_word_hits(lower_text, term) for term in WINE_REGIONS) * weights.wine_region

    if len(PRICE_PATTERN.findall(text)) > weights.wine_price_min_count:
        score += weights.wine_price_bonus

    return score


def score_food(text: str, weights: DensityWeights = DEFAULT_WEIGHTS) -> float:
    """Score how strongly text reads as a food menu."""
    lower_text = text.lower()
    score = _section_hits(lower_text, FOOD_SECTIONS) * weights.section_hit

    score += sum(_word_hits(lower_text, m) for m in COOKING_METHODS) * weights.cooking_method
    score += sum(lower_text.count(m) for m in DIETARY_MARKERS) * weights.dietary_marker
    score += sum(_word_hits(lower_text, i) for i in COMMON_INGREDIENTS) * weights.ingredient

    if len(PRICE_PATTERN.findall(text)) > weights.food_price_min_count:
        score += weights.food_price_bonus

    if len(ITEM_LINE_PATTERN.findall(text)) > weights.food_item_line_min_count:
        score += weights.food_item_line_bonus

    return score


def score_beverage(text: str, weights: DensityWeights = DEFAULT_WEIGHTS) -> float:
    """Score how strongly text reads as a drinks menu."""
    lower_text = text.lower()
    score = _section_hits(lower_text, BEVERAGE_SECTIONS) * weights.section_hit

    score += sum(_word_hits(lower_text, d) for d in NAMED_DRINKS) * weights.named_drink
    score += sum(_spaced_hits(lower_text, s) for s in SERVING_STYLES) * weights.serving_style
    score += sum(_word_hits(lower_text, m) for m in ALCOHOL_MARKERS) * weights.alcohol_marker
    score += sum(_word_hits(lower_text, m) for m in MIXERS) * weights.mixer

    if len(PRICE_PATTERN.findall(text)) > weights.beverage_price_min_count:
        score += weights.beverage_price_bonus

    if len(ITEM_LINE_PATTERN.findall(text)) > weights.beverage_item_line_min_count:
        score += weights.beverage_item_line_bonus

    return score


def is_extensive_wine_list(text: str, weights: DensityWeights = DEFAULT_WEIGHTS) -> bool:
    return score_wine(text, weights) > weights.wine_cutoff


def is_extensive_food_menu(text: str, weights: DensityWeights = DEFAULT_WEIGHTS) -> bool:
    return score_food(text, weights) > weights.food_cutoff


def is_extensive_beverage_menu(
    text: str, weights: DensityWeights = DEFAULT_WEIGHTS
) -> bool:
    return score_beverage(text, weights) > weights.beverage_cutoff


def assess_density(
    text: str,
    settings: Settings | None = None,
    weights: DensityWeights = DEFAULT_WEIGHTS,
) -> DensityReport:
    """Score text for every domain and decide whether to chunk it."""
    settings = settings or get_settings()

    wine = score_wine(text, weights)
    food = score_food(text, weights)
    beverage = score_beverage(text, weights)

    report = DensityReport(
        length=len(text),
        wine_score=wine,
        food_score=food,
        beverage_score=beverage,
        extensive_wine=wine > weights.wine_cutoff,
        extensive_food=food > weights.food_cutoff,
        extensive_beverage=beverage > weights.beverage_cutoff,
        over_length_threshold=len(text) > settings.chunking_length_threshold,
    )

    logger.info(
        "Density: %d chars | wine=%.1f food=%.1f beverage=%.1f | chunking=%s",
        report.length,
        wine,
        food,
        beverage,
        report.needs_chunking,
    )
    return report


def needs_chunking(text: str, settings: Settings | None = None) -> bool:
    """Return True when text is long or dense enough for chunked extraction."""
    return assess_density(text, settings).needs_chunking
