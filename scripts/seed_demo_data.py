"""Seed a demo city with venues, anonymous users and 60 days of check-ins.

Targets a believable Oslo night out:
- 10 venues across bars, clubs and lounges
- 400 anonymous users, about a quarter of them regulars
- Weekend nights busiest, Thursday picking up, early week quiet
- Check-ins cluster between 20:00 and 03:00
- A handful of live check-ins in the last three hours so the map is warm

Run:  python -m scripts.seed_demo_data
"""

import random
import uuid
from datetime import datetime, timedelta

from vibecheck.database import Base, SessionLocal, engine
from vibecheck.models import CheckIn, NotificationSession, Venue, VibeUser
from vibecheck.services.aggregation import (
    AGE_BANDS, GENDERS, INTENTS, ONS_INTENTS, RELATIONSHIP_STATUSES, VIBE_SCORES,
)

random.seed(42)

# ── Configuration ─────────────────────────────────────────────────────────────

DAYS = 60
USER_COUNT = 400
LIVE_CHECKINS = 40

VENUES = [
    # (name, category, latitude, longitude, popularity)
    ("Blå", "club", 59.9203, 10.7527, 1.3),
    ("Himkok", "bar", 59.9146, 10.7502, 1.5),
    ("Kulturhuset", "bar", 59.9149, 10.7493, 1.2),
    ("Jaeger", "club", 59.9131, 10.7441, 1.1),
    ("Fuglen", "lounge", 59.9149, 10.7355, 0.8),
    ("Torggata Botaniske", "bar", 59.9164, 10.7514, 0.9),
    ("Villa Paradiso", "lounge", 59.9229, 10.7597, 0.6),
    ("Revolver", "club", 59.9163, 10.7498, 0.7),
    ("Crowbar", "bar", 59.9159, 10.7510, 0.8),
    ("Lorry", "lounge", 59.9218, 10.7343, 0.5),
]

# 0=Mon .. 6=Sun
DOW_FACTOR = {0: 0.3, 1: 0.35, 2: 0.5, 3: 0.9, 4: 1.6, 5: 1.8, 6: 0.6}

# 20:00 .. 03:00
HOUR_WEIGHTS = [(20, 4), (21, 7), (22, 11), (23, 14), (0, 13), (1, 10), (2, 6), (3, 2)]

VIBE_WEIGHTS = [3, 4, 3, 1]
INTENT_WEIGHTS = [4, 2, 1, 4, 1]


def nid():
    return str(uuid.uuid4())


def maybe(values: list[str], answer_rate: float):
    """Optional survey answers: some users skip the question."""
    if random.random() > answer_rate:
        return None
    return random.choice(values)


def pick_hour() -> int:
    hours, weights = zip(*HOUR_WEIGHTS)
    return random.choices(hours, weights=weights)[0]


def make_check_in(venue: Venue, user: VibeUser, at: datetime, popularity: float) -> CheckIn:
    # Popular venues skew hotter
    vibe_weights = list(VIBE_WEIGHTS)
    vibe_weights[0] = int(vibe_weights[0] * popularity + 0.5)
    return CheckIn(
        id=nid(),
        venue_id=venue.id,
        user_id=user.id,
        vibe_score=random.choices(VIBE_SCORES, weights=vibe_weights)[0],
        intent=random.choices(INTENTS, weights=INTENT_WEIGHTS)[0],
        relationship_status=maybe(RELATIONSHIP_STATUSES, 0.8),
        ons_intent=maybe(ONS_INTENTS, 0.6),
        gender=maybe(GENDERS, 0.85),
        age_band=maybe(AGE_BANDS, 0.85),
        created_at=at,
    )


# ── Main ──────────────────────────────────────────────────────────────────────

def main():
    print("Dropping and recreating all tables...")
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    print("Tables ready.")

    db = SessionLocal()
    now = datetime.utcnow().replace(microsecond=0)

    print(f"Creating {len(VENUES)} venues...")
    venues = []
    for name, category, lat, lng, popularity in VENUES:
        venue = Venue(
            id=nid(), name=name, category=category, city="Oslo",
            latitude=lat, longitude=lng, created_at=now - timedelta(days=DAYS + 30),
        )
        db.add(venue)
        venues.append((venue, popularity))

    print(f"Creating {USER_COUNT} anonymous users...")
    users = []
    for _ in range(USER_COUNT):
        joined = now - timedelta(days=random.randint(1, DAYS))
        user = VibeUser(id=nid(), created_at=joined, last_seen_at=joined)
        db.add(user)
        users.append(user)
    regulars = users[: USER_COUNT // 4]
    db.flush()

    print(f"Generating {DAYS} days of check-ins...")
    total = 0
    for day_offset in range(DAYS, 0, -1):
        night = (now - timedelta(days=day_offset)).replace(hour=0, minute=0, second=0)
        factor = DOW_FACTOR[night.weekday()]
        for venue, popularity in venues:
            count = max(0, int(random.gauss(12 * factor * popularity, 3)))
            for _ in range(count):
                hour = pick_hour()
                # Early-morning hours belong to the previous evening
                at = night + timedelta(days=1 if hour < 12 else 0, hours=hour, minutes=random.randint(0, 59))
                if at >= now:
                    continue
                user = random.choice(regulars) if random.random() < 0.4 else random.choice(users)
                db.add(make_check_in(venue, user, at, popularity))
                user.last_seen_at = max(user.last_seen_at, at)
                total += 1
        db.commit()
    print(f"  Generated {total} check-ins")

    print(f"Adding {LIVE_CHECKINS} live check-ins...")
    for _ in range(LIVE_CHECKINS):
        venue, popularity = random.choice(venues)
        user = random.choice(users)
        at = now - timedelta(minutes=random.randint(1, 180))
        db.add(make_check_in(venue, user, at, popularity))
        user.last_seen_at = max(user.last_seen_at, at)

    print("Starting a notification session...")
    db.add(NotificationSession(
        id=nid(), user_id=regulars[0].id,
        filters={"heatmapMode": "activity", "activeIntents": ["party"], "timeWindowMinutes": 120},
        started_at=now, ends_at=now + timedelta(hours=4), is_active=True,
    ))

    db.commit()
    db.close()

    print()
    print("=" * 60)
    print("  Demo data generated successfully!")
    print("=" * 60)
    print(f"  Venues:      {len(VENUES)}")
    print(f"  Users:       {USER_COUNT}")
    print(f"  Days:        {DAYS}")
    print(f"  Check-ins:   {total + LIVE_CHECKINS}")
    print("=" * 60)


if __name__ == "__main__":
    main()
