import random

# Двухзначные коды сущностей
TYPE_POSTFIX = {
    "profiles": 1,
    "likes": 4,
    "matches": 5,
    "maybe_entries": 6,
    "last_swipe_actions": 7,
    "safety_reports": 8,
    "messages": 9,
}


def generate_random_id(entity: str) -> int:
    """Возвращает 11-значный id: 9 случайных цифр + 2-значный постфикс."""
    if entity not in TYPE_POSTFIX:
        raise ValueError(f"Unknown entity for ID generation: {entity}")
    rand9 = random.randint(100_000_000, 999_999_999)
    postfix = TYPE_POSTFIX[entity]
    return rand9 * 100 + postfix
