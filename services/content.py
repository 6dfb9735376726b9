# services/content.py
from __future__ import annotations

import random
from typing import List, Sequence

from app.state import Mode

BEGINNER_WORDS = (
    "the be to of and in that have it for not on with he as you do at this but "
    "his by from they we say her she or an will my one all would there so up out "
    "if about who get which go me when make can like time no just him know take "
    "person into year your good some could them see other than then now look only "
    "come its over think also back after use two how our work first well way even "
    "new want because any these give day most us"
).split()

INTERMEDIATE_WORDS = (
    "people should public system through school against government become between "
    "another student program problem however without business company during "
    "present under general interest follow around possible house again state point "
    "child world still must last mean keep leave right write place where never while "
    "family group always large number often enough second until social called small "
    "every found might night least better water white almost young though things "
    "others within looked course rather"
).split()

ADVANCED_WORDS = (
    "experience everything knowledge understand information development opportunity "
    "performance probability relationship environment consciousness experimental "
    "architecture intelligence perspective celebration significant professional "
    "improvement possibility infrastructure administrative characteristic "
    "communication comprehensive consideration construction contribution "
    "demonstration distribution effectiveness entertainment international "
    "introduction investigation neighborhood organization participation "
    "philosophical psychological recommendation representative satisfaction "
    "transformation understanding university alternative application assumption "
    "background collection comparison conclusion connection definition difference "
    "difficulty foundation generation hypothesis importance individual management "
    "population preference production reasonable resolution temperature tradition"
).split()

SENTENCES = (
    "the only way to do great work is to love what you do",
    "believe you can and you are halfway there",
    "it always seems impossible until it is done",
    "if you can dream it you can do it",
    "it does not matter how slowly you go as long as you do not stop",
    "the best way to predict your future is to create it",
    "do what you can with what you have where you are",
    "change your thoughts and you change your world",
    "life is what happens when you are busy making other plans",
    "in order to write about life first you must live it",
)

NUMBERS = tuple("0123456789")
PUNCTUATION = (".", ",", "!", "?", ";", ":")
DIFFICULTIES = ("beginner", "intermediate", "advanced")


def word_budget(mode: Mode, limit: int, multiplier: int = 4, minimum: int = 100) -> int:
    """Words to pre-generate for one attempt.

    Time mode over-provisions so the text never runs out before the timer.
    """
    if Mode(mode) is Mode.WORDS:
        return int(limit)
    return max(minimum, int(limit) * multiplier)


class WordGenerator:
    """Random word source with difficulty tiers and optional modifiers."""

    def __init__(
        self,
        difficulty: str = "beginner",
        punctuation: bool = False,
        numbers: bool = False,
        caps: bool = False,
        time_multiplier: int = 4,
        time_min_words: int = 100,
        seed: int | None = None,
    ):
        if difficulty not in DIFFICULTIES:
            difficulty = "beginner"
        self.difficulty = difficulty
        self.punctuation = punctuation
        self.numbers = numbers
        self.caps = caps
        self.time_multiplier = time_multiplier
        self.time_min_words = time_min_words
        self.rng = random.Random(seed)

    def _pool(self) -> List[str]:
        pool = list(BEGINNER_WORDS)
        if self.difficulty in ("intermediate", "advanced"):
            pool += INTERMEDIATE_WORDS
        if self.difficulty == "advanced":
            pool += ADVANCED_WORDS
        return [w for w in pool if len(w) > 1]

    def _decorate(self, word: str, first: bool) -> str:
        if self.caps and (first or self.rng.random() > 0.8):
            word = word[:1].upper() + word[1:]
        if self.punctuation and not first and self.rng.random() > 0.85:
            word += self.rng.choice(PUNCTUATION)
        return word

    def words(self, count: int) -> List[str]:
        pool = self._pool()
        out: List[str] = []
        use_sentences = self.difficulty != "beginner" and not self.numbers
        while len(out) < count:
            first = not out
            if use_sentences and self.rng.random() > 0.4:
                for word in self.rng.choice(SENTENCES).split():
                    if len(out) >= count:
                        break
                    out.append(self._decorate(word, not out))
                continue
            if self.numbers and not first and self.rng.random() > 0.88:
                out.append(self.rng.choice(NUMBERS))
                continue
            out.append(self._decorate(self.rng.choice(pool), first))
        return out

    def generate(self, mode: Mode, limit: int) -> List[str]:
        return self.words(word_budget(mode, limit, self.time_multiplier, self.time_min_words))


class StaticContent:
    """Custom text: the same words for every attempt, whatever the limit."""

    def __init__(self, words: Sequence[str]):
        self._words = list(words)

    @classmethod
    def from_text(cls, text: str) -> "StaticContent":
        return cls(text.split())

    def generate(self, mode: Mode, limit: int) -> List[str]:
        return list(self._words)
