from backend.engine.gamegenerator.generator import (
    ShuffleEngine,
    ShuffleResult,
    ShuffleTuning,
    combine_seed,
    shuffle,
    shuffle_score,
)
from backend.engine.gamegenerator.rng import SeededRandom

__all__ = [
    "SeededRandom",
    "ShuffleEngine",
    "ShuffleResult",
    "ShuffleTuning",
    "combine_seed",
    "shuffle",
    "shuffle_score",
]
