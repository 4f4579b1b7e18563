"""Static roster used to pre-fill a random fight."""

from __future__ import annotations

import random

FIGHTERS = [
    "Abraham Lincoln",
    "Bruce Lee",
    "Chuck Norris",
    "Cleopatra",
    "Darth Vader",
    "Dolly Parton",
    "Genghis Khan",
    "Godzilla",
    "Harry Potter",
    "Joan of Arc",
    "King Kong",
    "Mike Tyson",
    "Muhammad Ali",
    "Napoleon Bonaparte",
    "Oprah Winfrey",
    "Queen Elizabeth II",
    "Rocky Balboa",
    "Shrek",
    "Sun Tzu",
    "Taylor Swift",
    "The Incredible Hulk",
    "Winnie the Pooh",
    "Wonder Woman",
    "Yoda",
]


def pick_random_fighters(rng: random.Random | None = None) -> tuple[str, str]:
    """Pick two different fighters from the roster."""
    rng = rng or random.Random()
    fighter1, fighter2 = rng.sample(FIGHTERS, 2)
    return fighter1, fighter2
