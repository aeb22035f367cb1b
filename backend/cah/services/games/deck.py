import random
from typing import List, Optional


class CardSupply:
    """Draw and discard piles for one color of cards in one lobby.

    The top of the draw pile is the end of the list. When the draw pile runs
    dry the discard pile is shuffled back in; cards held in hands or on the
    table are never in the discard pile, so a reshuffle cannot duplicate them.
    """

    def __init__(self, cards=None, rng: Optional[random.Random] = None):
        self.draw_pile: List = list(cards or [])
        self.discard_pile: List = []
        self._rng = rng or random.Random()

    def __len__(self):
        return len(self.draw_pile)

    @property
    def remaining(self) -> int:
        return len(self.draw_pile) + len(self.discard_pile)

    def shuffle(self) -> None:
        # random.shuffle is an in-place Fisher-Yates
        self._rng.shuffle(self.draw_pile)

    def reshuffle(self) -> None:
        """Move the discard pile under the draw pile and shuffle the result."""
        self.draw_pile.extend(self.discard_pile)
        self.discard_pile = []
        self.shuffle()

    def draw(self, count: int) -> List:
        drawn = []
        for _ in range(max(0, count)):
            if not self.draw_pile:
                if not self.discard_pile:
                    break
                self.reshuffle()
            drawn.append(self.draw_pile.pop())
        return drawn

    def draw_one(self):
        drawn = self.draw(1)
        return drawn[0] if drawn else None

    def discard(self, cards) -> None:
        self.discard_pile.extend(cards)
