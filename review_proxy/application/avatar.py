"""
Avatar Descriptor - Generated Reviewer Illustrations
====================================================

Every review gets a DiceBear "avataaars" picture. The face follows the
rating, the hairstyle follows the reviewer's inferred gender and the rest
(skin, background, hairstyle variant) is picked at random.

Pass a seeded random.Random to get repeatable avatars.
"""

import random
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

DICEBEAR_URL = "https://api.dicebear.com/9.x/avataaars/svg"

SKIN_COLORS = ["f8d25c", "ffe62e", "f9c9b6", "ac6651"]

BACKGROUND_COLORS = ["b6e3f4", "c0aede", "d1d4f9", "ffd5dc", "ffdfbf"]

FEMALE_TOPS = [
    "bob", "bun", "curly", "curvy", "longButNotTooLong",
    "miaWallace", "straight01", "straight02", "straightAndStrand",
]

MALE_TOPS = [
    "shortCurly", "shortFlat", "shortRound", "shortWaved", "sides", "theCaesar",
    "theCaesarAndSidePart", "dreads01", "dreads02", "frizzle", "shaggy", "shaggyMullet",
]

# rating -> (mouth, eyes, eyebrows)
EMOTIONS = {
    5: ("smile", "happy", "raisedExcited"),
    4: ("smile", "default", "default"),
    3: ("serious", "default", "default"),
    2: ("sad", "squint", "sadConcerned"),
    1: ("grimace", "squint", "angry"),
}


@dataclass(frozen=True)
class AvatarDescriptor:
    seed: str
    mouth: str
    eyes: str
    eyebrows: str
    skin_color: str
    background_color: str
    top: str
    facial_hair_probability: int

    @property
    def url(self) -> str:
        params = [
            ("seed", self.seed),
            ("mouth", self.mouth),
            ("eyes", self.eyes),
            ("eyebrows", self.eyebrows),
            ("accessoriesProbability", 0),
            ("skinColor", self.skin_color),
            ("backgroundColor", self.background_color),
            ("top", self.top),
            ("facialHairProbability", self.facial_hair_probability),
        ]
        return f"{DICEBEAR_URL}?{urlencode(params)}"


def emotion_for(rating) -> tuple:
    """Expression triple for a rating; anything unrecognised looks like 5 stars."""
    return EMOTIONS.get(rating, EMOTIONS[5])


class AvatarFactory:
    """
    Builds avatar descriptors.

    `gender_service` is anything with a `detect(first_name) -> str` method.
    """

    def __init__(self, gender_service, rng: Optional[random.Random] = None):
        self._gender_service = gender_service
        self._rng = rng or random.Random()

    def build(self, seed, author: str, rating: int) -> AvatarDescriptor:
        first_name = author.split(" ")[0] if author else ""
        gender = self._gender_service.detect(first_name)

        skin_color = self._rng.choice(SKIN_COLORS)
        background_color = self._rng.choice(BACKGROUND_COLORS)

        if gender == "female":
            top = self._rng.choice(FEMALE_TOPS)
            facial_hair_probability = 0
        else:
            top = self._rng.choice(MALE_TOPS)
            facial_hair_probability = 50

        mouth, eyes, eyebrows = emotion_for(rating)

        return AvatarDescriptor(
            seed=str(seed),
            mouth=mouth,
            eyes=eyes,
            eyebrows=eyebrows,
            skin_color=skin_color,
            background_color=background_color,
            top=top,
            facial_hair_probability=facial_hair_probability,
        )
