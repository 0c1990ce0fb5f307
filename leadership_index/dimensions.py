"""
Dimension catalog for the Leadership Team Index.

This module is the only definition of the questionnaire. The form page, the
``/api/dimensions`` payload, the scoring and every report are built from it.
"""

from dataclasses import dataclass

CATALOG_VERSION = "2025.1"

ITEMS_PER_DIMENSION = 3
PROMPTS_PER_DIMENSION = 2

# =========================
# Likert Scale
# =========================

SCALE = (1, 2, 3, 4, 5)
SCALE_LABELS = {"min": "Rarely", "max": "Distinctive strength"}


@dataclass(frozen=True)
class Dimension:
    key: str
    title: str
    items: tuple[str, ...]
    prompts: tuple[str, ...]

    def rating_keys(self) -> list[str]:
        return [rating_key(self.key, index) for index in range(len(self.items))]

    def prompt_keys(self) -> list[str]:
        return [rating_key(self.key, index) for index in range(len(self.prompts))]

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "title": self.title,
            "items": list(self.items),
            "prompts": list(self.prompts),
        }


def rating_key(dimension_key: str, index: int) -> str:
    """Form field name for an item or prompt, e.g. ``strategy-0``."""
    return f"{dimension_key}-{index}"


# =========================
# Dimensions
# =========================

DIMENSIONS: tuple[Dimension, ...] = (
    Dimension(
        key="strategy",
        title="Strategic Clarity & Prioritization",
        items=(
            "Our leadership team aligns quickly on strategy and communicates it consistently.",
            "We focus on the right few priorities and avoid spreading the organization thin.",
            "We make trade-offs effectively and stay aligned on what matters most.",
        ),
        prompts=(
            "What is our greatest strength in how we set and align on strategy?",
            "Where is our biggest opportunity to improve clarity or prioritization?",
        ),
    ),
    Dimension(
        key="decision",
        title="Decision Velocity & Accountability",
        items=(
            "Our leadership team makes timely, well-informed decisions.",
            "We follow through on decisions with discipline and consistency.",
            "We avoid unnecessary bottlenecks and empower others to move work forward.",
        ),
        prompts=(
            "What decision habit helps us move quickly?",
            "What decision habit slows us down?",
        ),
    ),
    Dimension(
        key="collab",
        title="Collaboration & Cross-Functional Behavior",
        items=(
            "We operate as one leadership team, not functional silos.",
            "We bring each other into discussions early, not as an afterthought.",
            "We address cross-functional issues collaboratively and constructively.",
        ),
        prompts=(
            "Where do we collaborate especially well?",
            "Where do cross-functional tensions show up most?",
        ),
    ),
    Dimension(
        key="comm",
        title="Communication & Transparency",
        items=(
            "We communicate with clarity, consistency, and alignment.",
            "We share information transparently and appropriately.",
            "Our messaging reinforces the same direction across the organization.",
        ),
        prompts=(
            "What communication behavior strengthens trust?",
            "What communication gap creates confusion?",
        ),
    ),
    Dimension(
        key="trust",
        title="Trust & Reliability",
        items=(
            "Our leadership team trusts each other’s intentions and follow-through.",
            "We handle commitments and deadlines reliably.",
            "We raise concerns directly, not through back channels.",
        ),
        prompts=(
            "Where is trust strongest on our team?",
            "Where does trust need to be rebuilt or reinforced?",
        ),
    ),
    Dimension(
        key="eq",
        title="Emotional Intelligence & Social Awareness",
        items=(
            "We read the temperature of the organization accurately.",
            "We adapt our tone and approach based on audience or impact.",
            "We manage conflict, pressure, and emotion with maturity.",
        ),
        prompts=(
            "What EQ behaviors strengthen our leadership?",
            "Where do we struggle to read or manage human dynamics?",
        ),
    ),
    Dimension(
        key="conflict",
        title="Conflict Agility & Constructive Challenge",
        items=(
            "We debate issues vigorously without personalizing conflict.",
            "We encourage differing viewpoints and critical thinking.",
            "We resolve conflict quickly so business doesn’t stall.",
        ),
        prompts=(
            "Where do we excel in healthy debate?",
            "Where do we avoid or mishandle conflict?",
        ),
    ),
    Dimension(
        key="talent",
        title="Talent Leadership & Coaching Mindset",
        items=(
            "We prioritize talent development and leadership pipeline.",
            "We give the organization meaningful feedback and support.",
            "We identify performance issues early and address them consistently.",
        ),
        prompts=(
            "What is our strongest leadership habit across the organization?",
            "Where are we under-developing people or teams?",
        ),
    ),
    Dimension(
        key="execution",
        title="Execution Discipline & Follow-Through",
        items=(
            "We execute with discipline and close the loop on commitments.",
            "We drive clarity on ownership, deadlines, and next steps.",
            "We maintain focus and momentum even during ambiguity.",
        ),
        prompts=(
            "Where does this team execute exceptionally well?",
            "Where does execution break down?",
        ),
    ),
    Dimension(
        key="enterprise",
        title="Enterprise Mindset (vs. silo thinking)",
        items=(
            "We consistently prioritize what is best for the enterprise.",
            "We navigate resource constraints as one team.",
            "We make decisions with a company-first mindset, not functional agendas.",
        ),
        prompts=(
            "Where do we demonstrate strong enterprise thinking?",
            "What silo behavior creates the biggest risk to performance?",
        ),
    ),
)

# Closing questions asked once, after the last dimension
CLOSING_PROMPTS = {
    "protect": "What is the one thing this leadership team must protect as it grows?",
    "accelerate": "What is the one thing this leadership team must accelerate in the next 12 months?",
}

DIMENSIONS_BY_KEY = {dimension.key: dimension for dimension in DIMENSIONS}


def dimension_title(key: str) -> str:
    dimension = DIMENSIONS_BY_KEY.get(key)
    return dimension.title if dimension else key


def prompt_labels() -> dict[str, str]:
    """Map every known qualitative field to its question text, in form order."""
    labels = {}
    for dimension in DIMENSIONS:
        for prompt_id, text in zip(dimension.prompt_keys(), dimension.prompts):
            labels[prompt_id] = text
    labels.update(CLOSING_PROMPTS)
    return labels


def item_labels() -> dict[str, tuple[Dimension, int, str]]:
    """Map every rating field to its dimension, 1-based item number and text."""
    labels = {}
    for dimension in DIMENSIONS:
        for index, (field, text) in enumerate(zip(dimension.rating_keys(), dimension.items)):
            labels[field] = (dimension, index + 1, text)
    return labels


def catalog_payload() -> dict:
    return {
        "version": CATALOG_VERSION,
        "scale": list(SCALE),
        "scale_labels": dict(SCALE_LABELS),
        "dimensions": [dimension.to_dict() for dimension in DIMENSIONS],
        "closing_prompts": dict(CLOSING_PROMPTS),
    }
