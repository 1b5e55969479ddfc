"""Mongolian to English food names used to query the external database."""

import re

MN_TO_EN_FOOD_MAP: dict[str, str] = {
    "өндөг": "egg",
    "цагаан будаа": "white rice cooked",
    "будаа": "rice",
    "тахианы цээж": "chicken breast roasted",
    "тахиа": "chicken",
    "үхрийн мах": "beef",
    "мах": "meat",
    "сүү": "milk",
    "талх": "bread",
    "банана": "banana",
    "алим": "apple",
    "тараг": "yogurt",
    "бяслаг": "cheese",
    "төмс": "potato",
    "лууван": "carrot",
    "улаан лооль": "tomato",
    "өргөст хэмх": "cucumber",
    "бууз": "buuz steamed dumpling",
    "хуушуур": "fried dumpling",
    "банш": "bansh dumpling",
    "цуйван": "tsuivan noodles",
    "шөл": "soup",
    "гурвалтай шөл": "noodle soup",
    "овьёос": "oatmeal",
    "самар": "nuts",
    "тос": "oil",
    "шар тос": "butter",
    "өрөм": "cream",
    "айраг": "airag fermented milk",
    "ааруул": "aaruul dried curd",
    "мантуу": "mantuu steamed bun",
    "боорцог": "boortsog fried dough",
    "гамбир": "pancake",
    "нийслэл салат": "capital salad",
    "ундаа": "soft drink",
    "ус": "water",
    "цай": "tea",
    "сүүтэй цай": "milk tea",
    "кофе": "coffee",
}

_WHITESPACE = re.compile(r"\s+")


def translate_query(query: str) -> str | None:
    """Return the English search term for a query, if one is mapped."""
    normalized = _WHITESPACE.sub(" ", query.strip().lower())
    return MN_TO_EN_FOOD_MAP.get(normalized)
