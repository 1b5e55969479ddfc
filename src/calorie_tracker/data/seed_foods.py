"""Reference foods inserted into every new catalog.

Ids are derived from the stable ``key`` so re-seeding recognises rows that
already exist.
"""

from uuid import UUID, uuid5

from calorie_tracker.domain.catalog import PortionSpec, SeedFood
from calorie_tracker.domain.nutrition import MacroProfile

SEED_NAMESPACE = UUID("6c0f8f5e-2f43-4a57-9d55-0b7b1f3c8a10")

_PIECE = "1 ширхэг"
_CUP = "1 аяга"
_PLATE = "1 таваг"
_SPOON = "1 халбага"
_100G = "100г"


def _seed(  # noqa: PLR0913
    key: str,
    name: str,
    name_en: str,
    macros: tuple[float, float, float, float],
    aliases: tuple[str, ...],
    portions: tuple[PortionSpec, ...],
) -> SeedFood:
    calories, protein_g, carbs_g, fat_g = macros
    return SeedFood(
        key=key,
        id=uuid5(SEED_NAMESPACE, key),
        name=name,
        name_secondary=name_en,
        per_100g=MacroProfile(
            calories=calories, protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g
        ),
        aliases=aliases,
        portions=portions,
    )


def _unit(label: str, grams: float) -> tuple[PortionSpec, ...]:
    return (PortionSpec(label, grams, True), PortionSpec(_100G, 100, False))


SEED_FOODS: tuple[SeedFood, ...] = (
    _seed("buuz", "Бууз", "Buuz steamed dumpling", (246, 13.2, 21.5, 11.8),
          ("buuz", "бууз", "steamed dumpling"), _unit(_PIECE, 50)),
    _seed("khuushuur", "Хуушуур", "Khuushuur fried dumpling", (297, 12.1, 23.4, 17.2),
          ("khuushuur", "хуушуур", "fried dumpling"), _unit(_PIECE, 80)),
    _seed("bansh", "Банш", "Bansh dumpling", (232, 11.5, 24.0, 9.8),
          ("bansh", "банш"), _unit(_PIECE, 15)),
    _seed("tsuivan", "Цуйван", "Tsuivan fried noodles", (198, 9.6, 22.1, 7.9),
          ("tsuivan", "цуйван", "fried noodles"), _unit(_PLATE, 300)),
    _seed("guriltai_shul", "Гурилтай шөл", "Noodle soup", (78, 4.9, 8.2, 2.8),
          ("guriltai shul", "шөл", "noodle soup"), _unit(_CUP, 350)),
    _seed("boortsog", "Боорцог", "Boortsog fried dough", (436, 7.8, 52.3, 21.6),
          ("boortsog", "боорцог"), _unit(_PIECE, 20)),
    _seed("aaruul", "Ааруул", "Aaruul dried curd", (355, 35.0, 34.0, 8.0),
          ("aaruul", "ааруул", "dried curd"), _unit(_PIECE, 10)),
    _seed("mantuu", "Мантуу", "Mantuu steamed bun", (229, 7.0, 47.0, 1.2),
          ("mantuu", "мантуу", "steamed bun"), _unit(_PIECE, 60)),
    _seed("suutei_tsai", "Сүүтэй цай", "Milk tea", (32, 1.6, 2.4, 1.8),
          ("suutei tsai", "сүүтэй цай", "milk tea"), _unit(_CUP, 250)),
    _seed("airag", "Айраг", "Airag fermented mare's milk", (44, 2.1, 5.0, 1.9),
          ("airag", "айраг", "kumis"), _unit(_CUP, 250)),
    _seed("egg", "Өндөг", "Egg, whole, boiled", (155, 12.6, 1.1, 10.6),
          ("ondog", "өндөг", "egg"), _unit(_PIECE, 50)),
    _seed("white_rice", "Цагаан будаа", "Rice, white, cooked", (130, 2.7, 28.2, 0.3),
          ("будаа", "rice", "white rice"), _unit(_CUP, 158)),
    _seed("chicken_breast", "Тахианы цээж", "Chicken breast, roasted",
          (165, 31.0, 0.0, 3.6), ("тахиа", "chicken breast", "chicken"),
          (PortionSpec(_100G, 100, True), PortionSpec(_PLATE, 200, False))),
    _seed("beef", "Үхрийн мах", "Beef, lean, cooked", (250, 26.0, 0.0, 15.0),
          ("мах", "beef", "uhriin mah"),
          (PortionSpec(_100G, 100, True), PortionSpec(_PLATE, 200, False))),
    _seed("mutton", "Хонины мах", "Mutton, cooked", (294, 25.6, 0.0, 20.9),
          ("мах", "mutton", "honinii mah"),
          (PortionSpec(_100G, 100, True), PortionSpec(_PLATE, 200, False))),
    _seed("milk", "Сүү", "Milk, whole", (61, 3.2, 4.8, 3.3),
          ("suu", "milk"), _unit(_CUP, 250)),
    _seed("yogurt", "Тараг", "Yogurt, plain", (61, 3.5, 4.7, 3.3),
          ("tarag", "yogurt"), _unit(_CUP, 200)),
    _seed("bread", "Талх", "Bread, white", (265, 9.0, 49.0, 3.2),
          ("talh", "bread"), _unit(_PIECE, 50)),
    _seed("potato", "Төмс", "Potato, boiled", (87, 1.9, 20.1, 0.1),
          ("tums", "potato"), _unit(_PLATE, 200)),
    _seed("carrot", "Лууван", "Carrot, raw", (41, 0.9, 9.6, 0.2),
          ("luuvan", "carrot"), _unit(_PIECE, 60)),
    _seed("apple", "Алим", "Apple, raw", (52, 0.3, 13.8, 0.2),
          ("alim", "apple"), _unit(_PIECE, 120)),
    _seed("banana", "Банана", "Banana, raw", (89, 1.1, 22.8, 0.3),
          ("banana", "гадил"), _unit(_PIECE, 120)),
    _seed("cheese", "Бяслаг", "Cheese, cheddar", (403, 24.9, 1.3, 33.1),
          ("byaslag", "cheese"), _unit(_PIECE, 30)),
    _seed("oatmeal", "Овъёос", "Oatmeal, cooked", (71, 2.5, 12.0, 1.5),
          ("овьёос", "oatmeal"), _unit(_CUP, 234)),
    _seed("butter", "Шар тос", "Butter", (717, 0.9, 0.1, 81.1),
          ("shar tos", "butter"), _unit(_SPOON, 15)),
    _seed("capital_salad", "Нийслэл салат", "Capital salad", (186, 5.2, 9.8, 14.1),
          ("niislel salat", "салат", "salad"), _unit(_PLATE, 200)),
)
