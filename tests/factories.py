import itertools

from jose import jwt

from core.config import settings
from models.profile import Profile

_emails = itertools.count(1)


def build_profile(**overrides) -> Profile:
    n = next(_emails)
    data = {
        "email": f"user{n}@example.com",
        "name": f"User {n}",
        "latitude": 40.0,
        "longitude": -74.0,
        "age": 28,
        "gender": "female",
        "interests": [],
        "preference": "casual",
        "smoking": False,
    }
    data.update(overrides)
    return Profile(**data)


def auth_headers(profile_id: int) -> dict:
    token = jwt.encode({"user_id": profile_id}, settings.JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}
