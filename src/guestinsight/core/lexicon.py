"""Domain vocabularies for the keyword fallback and aspect extraction."""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Tuple


@dataclass(frozen=True)
class Lexicon:
    """Immutable keyword and aspect vocabulary.

    ``aspects`` is ordered: extraction results follow this order.
    """

    name: str
    positive: FrozenSet[str]
    negative: FrozenSet[str]
    aspects: Tuple[str, ...]

    @classmethod
    def build(cls, name: str, positive: Iterable[str], negative: Iterable[str], aspects: Iterable[str]) -> "Lexicon":
        """Build a lexicon, lower-casing words and dropping duplicate aspects."""
        ordered = tuple(dict.fromkeys(a.lower() for a in aspects))
        return cls(
            name=name,
            positive=frozenset(w.lower() for w in positive),
            negative=frozenset(w.lower() for w in negative),
            aspects=ordered,
        )

    def is_positive(self, token: str) -> bool:
        return token in self.positive

    def is_negative(self, token: str) -> bool:
        return token in self.negative


HOTEL_ASPECTS = [
    "service", "staff", "room", "food", "restaurant", "breakfast",
    "amenities", "cleanliness", "location", "value", "price",
    "pool", "spa", "bed", "bathroom", "view", "ambiance", "activities",
]

HOTEL_POSITIVE = [
    "amazing", "excellent", "great", "good", "fantastic", "wonderful",
    "beautiful", "exceptional", "perfect", "incredible", "lovely",
    "enjoyed", "clean", "comfortable", "friendly", "helpful", "professional",
    "recommend", "impressive", "delicious", "spacious", "stunning",
]

# Single tokens only: text is matched word by word.
HOTEL_NEGATIVE = [
    "poor", "bad", "terrible", "awful", "horrible", "disappointing",
    "dirty", "uncomfortable", "unfriendly", "unhelpful", "unprofessional",
    "expensive", "overpriced", "small", "noisy", "broken", "slow",
    "rude", "mediocre", "average", "never",
]

HOTEL_LEXICON = Lexicon.build("hotel", HOTEL_POSITIVE, HOTEL_NEGATIVE, HOTEL_ASPECTS)


# Suggested actions for aspects that score below the recommendation threshold
HOTEL_ACTIONS = {
    "service": "Run refresher service training and review response times at peak hours.",
    "staff": "Recognise standout staff and coach teams on personalised guest interactions.",
    "room": "Audit room condition and prioritise maintenance on the lowest rated room categories.",
    "food": "Review restaurant menus and consider bringing in a consulting chef to refresh offerings.",
    "restaurant": "Review restaurant service flow, table turnaround and menu variety.",
    "breakfast": "Broaden the breakfast selection and check freshness and replenishment during service.",
    "amenities": "Survey guests on missing amenities and refresh worn facilities.",
    "cleanliness": "Tighten housekeeping checklists and add supervisor spot checks.",
    "location": "Offer clearer arrival directions and shuttle options to nearby attractions.",
    "value": "Revisit package inclusions so the price reflects the experience delivered.",
    "price": "Benchmark rates against direct competitors and add value-adding inclusions.",
    "pool": "Consider improvements to pool service, maintenance, or available amenities.",
    "spa": "Review spa treatment menu, booking availability and therapist scheduling.",
    "bed": "Evaluate mattress and pillow quality and offer a pillow menu.",
    "bathroom": "Inspect bathrooms for water pressure, ventilation and fixture wear.",
    "view": "Set expectations on room views at booking and offer view upgrades.",
    "ambiance": "Refine lighting, music and scent in public areas to match the brand.",
    "activities": "Develop new exclusive activities and experiences unique to the property.",
}

GENERIC_ACTION = "Investigate recent guest feedback about the {aspect} and define concrete improvement steps."


def action_for_aspect(aspect: str, actions: dict = None) -> str:
    """Look up the suggested action for an aspect, with a generic fallback."""
    table = HOTEL_ACTIONS if actions is None else actions
    return table.get(aspect.lower(), GENERIC_ACTION.format(aspect=aspect))
