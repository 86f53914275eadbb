"""
models/onboarding.py
────────────────────
Profile-onboarding wizard as an explicit state machine.

  BASIC_INFO ─▶ CUISINES ─▶ DINING_STYLE ─▶ DIETARY ─▶ COMPLETE

Whether a step may be left is `can_proceed(step, form)`, a pure function of
the accumulated form. The wizard itself only tracks the current step and
refuses to advance when the guard fails.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any

from models.entities import MAX_AGE, MIN_AGE
from models.errors import InvalidTransition

CUISINE_OPTIONS = (
    "Italian", "Asian", "Mexican", "Mediterranean", "American", "French",
    "Indian", "Thai", "Japanese", "Chinese", "Korean", "Vietnamese",
    "Greek", "Spanish", "Lebanese", "Turkish", "Moroccan", "Ethiopian",
)

DINING_STYLE_OPTIONS = (
    "Fine Dining", "Casual Dining", "Street Food", "Food Trucks",
    "Brunch Spots", "Coffee Shops", "Wine Bars", "Rooftop Dining",
    "Outdoor Seating", "Cozy Atmosphere", "Trendy Spots", "Local Gems",
)

DIETARY_OPTIONS = (
    "Vegetarian", "Vegan", "Gluten-Free", "Keto", "Paleo", "Halal",
    "Kosher", "Dairy-Free", "Nut-Free", "Low-Carb", "Organic", "Raw Food",
)


class Step(enum.IntEnum):
    BASIC_INFO = 1
    CUISINES = 2
    DINING_STYLE = 3
    DIETARY = 4
    COMPLETE = 5

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    Step.BASIC_INFO: "Basic Information",
    Step.CUISINES: "Favorite Cuisines",
    Step.DINING_STYLE: "Dining Style",
    Step.DIETARY: "Dietary Preferences",
    Step.COMPLETE: "All Set",
}


@dataclass(frozen=True)
class ProfileForm:
    full_name: str = ""
    age: str = ""
    bio: str = ""
    location: str = ""
    avatar_url: str = ""
    favorite_cuisines: tuple[str, ...] = ()
    dining_style: tuple[str, ...] = ()
    dietary_restrictions: tuple[str, ...] = ()

    def to_fields(self) -> dict[str, Any]:
        """Fields for ProfileStore.upsert_profile."""
        return {
            "full_name": self.full_name.strip(),
            "age": int(self.age),
            "bio": self.bio.strip(),
            "location": self.location.strip(),
            "avatar_url": self.avatar_url.strip(),
            "favorite_cuisines": list(self.favorite_cuisines),
            "dining_style": list(self.dining_style),
            "dietary_restrictions": list(self.dietary_restrictions),
        }


def toggle(selection: tuple[str, ...], item: str) -> tuple[str, ...]:
    """Add `item` if absent, drop it if present."""
    if item in selection:
        return tuple(i for i in selection if i != item)
    return selection + (item,)


def _valid_age(raw: str) -> bool:
    try:
        return MIN_AGE <= int(raw) <= MAX_AGE
    except (TypeError, ValueError):
        return False


def can_proceed(step: Step, form: ProfileForm) -> bool:
    if step is Step.BASIC_INFO:
        return bool(form.full_name.strip() and _valid_age(form.age) and form.location.strip())
    if step is Step.CUISINES:
        return len(form.favorite_cuisines) > 0
    if step is Step.DINING_STYLE:
        return len(form.dining_style) > 0
    if step is Step.DIETARY:
        return True
    return False


@dataclass
class OnboardingWizard:
    step: Step = Step.BASIC_INFO
    form: ProfileForm = field(default_factory=ProfileForm)

    @property
    def complete(self) -> bool:
        return self.step is Step.COMPLETE

    @property
    def can_proceed(self) -> bool:
        return can_proceed(self.step, self.form)

    def update(self, **changes: Any) -> ProfileForm:
        self.form = replace(self.form, **changes)
        return self.form

    def toggle(self, tag_field: str, item: str) -> ProfileForm:
        return self.update(**{tag_field: toggle(getattr(self.form, tag_field), item)})

    def next(self) -> Step:
        if not self.can_proceed:
            raise InvalidTransition(self.step.name, "next")
        self.step = Step(self.step + 1)
        return self.step

    def back(self) -> Step:
        if self.step in (Step.BASIC_INFO, Step.COMPLETE):
            raise InvalidTransition(self.step.name, "back")
        self.step = Step(self.step - 1)
        return self.step

    def submit(self) -> dict[str, Any]:
        """Finish the last step and return the profile fields to save."""
        if self.step is not Step.DIETARY:
            raise InvalidTransition(self.step.name, "submit")
        for step in (Step.BASIC_INFO, Step.CUISINES, Step.DINING_STYLE):
            if not can_proceed(step, self.form):
                raise InvalidTransition(step.name, "submit")
        self.step = Step.COMPLETE
        return self.form.to_fields()

    def reopen(self) -> Step:
        """Return a submitted wizard to its last step, e.g. when saving failed."""
        if self.step is not Step.COMPLETE:
            raise InvalidTransition(self.step.name, "reopen")
        self.step = Step.DIETARY
        return self.step
