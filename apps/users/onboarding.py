"""
Onboarding wizard: a fixed sequence of question steps whose answers are
written to the profile once, on the final step.

Progress between requests lives in the session only (``SESSION_KEY``);
nothing reaches the profile until ``OnboardingWizard.submit``.
"""
import logging
from dataclasses import asdict, dataclass, fields
from typing import Dict, List, Optional, Tuple

from django.db import DatabaseError

from .models import Profile

logger = logging.getLogger(__name__)

SESSION_KEY = "onboarding_wizard"

SINGLE = "single"
MULTI = "multi"
TEXT = "text"


class OnboardingError(Exception):
    pass


class IncompleteStepError(OnboardingError):
    def __init__(self, step: int, missing: List[str]):
        self.step = step
        self.missing = missing
        super().__init__(f"Step {step} is missing answers: {', '.join(missing)}")


class OnboardingSubmitError(OnboardingError):
    pass


@dataclass(frozen=True)
class Question:
    id: str
    prompt: str
    options: Tuple[str, ...] = ()
    kind: str = SINGLE
    required: bool = True

    def is_answered(self, value) -> bool:
        if self.kind == MULTI:
            return bool(value)
        return bool(value and str(value).strip())


@dataclass(frozen=True)
class Step:
    title: str
    questions: Tuple[Question, ...]

    def missing(self, answers: Dict) -> List[str]:
        return [
            q.id for q in self.questions
            if q.required and not q.is_answered(answers.get(q.id))
        ]


EXPLORER_STEPS = (
    Step(
        title="Exploring & Activities",
        questions=(
            Question("exploring", "What do you always look for in a new city?",
                     ("Tourist maps", "Hidden gems", "Both")),
            Question("weekend", "Ideal weekend activity?",
                     ("Hiking", "Beach relaxing", "Food tours", "Cultural sites")),
            Question("preference", "Do you prefer history or modern art?",
                     ("History", "Modern art", "Both equally")),
            # same names as the itinerary builder's interests
            Question("interests", "Which kinds of places should we suggest first?",
                     ("Nature", "Culture", "Adventure", "Food"), kind=MULTI, required=False),
        ),
    ),
    Step(
        title="Food & Drink",
        questions=(
            Question("food", "What food excites you most when traveling?",
                     ("Street food", "Fine dining", "Local specialties", "Cafes & desserts")),
            Question("restaurant", "Cozy or trendy restaurants?",
                     ("Cozy", "Trendy", "No preference")),
            Question("unusual_food", "Do you try unusual local foods?",
                     ("Always", "Sometimes", "Rarely", "Never")),
        ),
    ),
    Step(
        title="Logistics & Vibe",
        questions=(
            Question("transport", "Preferred way to get around?",
                     ("Walk", "Public transport", "Taxi/Grab", "Rent a vehicle")),
            Question("location", "Stay in city center or quiet area?",
                     ("City center", "Quiet area", "Depends on the trip")),
            Question("planning", "Plan ahead or go with the flow?",
                     ("Detailed planning", "Flexible itinerary", "Complete spontaneity")),
            Question("notes", "Anything else we should know?", kind=TEXT, required=False),
        ),
    ),
)


@dataclass(frozen=True)
class ExplorerPreferences:
    """Stored form of the explorer onboarding answers, tagged with ``SCHEMA``."""

    SCHEMA = "explorer-v1"

    exploring: str
    weekend: str
    preference: str
    food: str
    restaurant: str
    unusual_food: str
    transport: str
    location: str
    planning: str
    interests: Tuple[str, ...] = ()
    notes: str = ""

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def _from_mapping(cls, data: Dict) -> "ExplorerPreferences":
        values = {name: data.get(name, "") for name in cls.field_names()}
        values["interests"] = tuple(data.get("interests") or ())
        return cls(**values)

    @classmethod
    def from_answers(cls, answers: Dict) -> "ExplorerPreferences":
        return cls._from_mapping(answers)

    @classmethod
    def from_json(cls, data: Optional[Dict]) -> Optional["ExplorerPreferences"]:
        if not data:
            return None
        if data.get("schema") != cls.SCHEMA:
            raise ValueError(f"Unknown preference schema: {data.get('schema')!r}")
        return cls._from_mapping(data)

    def to_json(self) -> Dict:
        data = asdict(self)
        data["interests"] = list(self.interests)
        return {"schema": self.SCHEMA, **data}

    def summary(self, steps=EXPLORER_STEPS) -> List[Tuple[str, str]]:
        """(prompt, answer) pairs in question order, unanswered optional questions left out."""
        rows = []
        for step in steps:
            for q in step.questions:
                value = getattr(self, q.id)
                if isinstance(value, tuple):
                    value = ", ".join(value)
                if value:
                    rows.append((q.prompt, value))
        return rows


def stored_preferences(profile) -> Optional[ExplorerPreferences]:
    """Preferences saved on ``profile``; None when missing or in an unknown format."""
    if profile is None:
        return None
    try:
        return ExplorerPreferences.from_json(profile.onboarding_answers)
    except ValueError:
        logger.warning("Ignoring unreadable onboarding answers for user %s", profile.pk)
        return None


class OnboardingWizard:
    """Linear step machine over ``steps`` (1-based ``step``)."""

    def __init__(self, steps=EXPLORER_STEPS, step: int = 1, answers: Optional[Dict] = None,
                 preferences_class=ExplorerPreferences):
        self.steps = steps
        self.step = min(max(1, step), len(steps))
        self.answers = dict(answers or {})
        self.preferences_class = preferences_class

    # --- session ---
    @classmethod
    def from_session(cls, session, **kwargs):
        state = session.get(SESSION_KEY) or {}
        return cls(step=state.get("step", 1), answers=state.get("answers"), **kwargs)

    def save_to(self, session):
        session[SESSION_KEY] = {"step": self.step, "answers": self.answers}

    @staticmethod
    def clear(session):
        session.pop(SESSION_KEY, None)

    # --- state ---
    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def current(self) -> Step:
        return self.steps[self.step - 1]

    @property
    def is_first_step(self) -> bool:
        return self.step == 1

    @property
    def is_last_step(self) -> bool:
        return self.step == self.total_steps

    def _question(self, question_id: str) -> Question:
        for step in self.steps:
            for q in step.questions:
                if q.id == question_id:
                    return q
        raise KeyError(question_id)

    # --- answers ---
    def answer(self, question_id: str, value: str):
        q = self._question(question_id)
        if q.kind == MULTI:
            self.toggle(question_id, value)
            return
        if q.kind == TEXT:
            value = (value or "").strip()
        elif value not in q.options:
            raise ValueError(f"{value!r} is not an option of {question_id}")
        self.answers[question_id] = value

    def toggle(self, question_id: str, value: str):
        q = self._question(question_id)
        if q.kind != MULTI:
            raise ValueError(f"{question_id} is not a multi-select question")
        if value not in q.options:
            raise ValueError(f"{value!r} is not an option of {question_id}")
        current = list(self.answers.get(question_id) or [])
        if value in current:
            current.remove(value)
        else:
            current.append(value)
        self.answers[question_id] = current

    def load_step(self, data):
        """Take the current step's answers from submitted form data (a QueryDict).

        Checkbox groups arrive as the full set of ticked values, so a multi-select
        answer is rebuilt by toggling each submitted option onto an empty list.
        Options that are not offered are ignored.
        """
        for q in self.current.questions:
            if q.kind == MULTI:
                self.answers[q.id] = []
                for value in dict.fromkeys(data.getlist(q.id)):
                    if value in q.options:
                        self.toggle(q.id, value)
            elif q.kind == TEXT:
                if q.id in data:
                    self.answer(q.id, data.get(q.id))
            elif data.get(q.id) in q.options:
                self.answer(q.id, data.get(q.id))

    def is_step_complete(self) -> bool:
        return not self.current.missing(self.answers)

    # --- transitions ---
    def advance(self) -> bool:
        """Move forward one step.

        Returns True when the final step is complete, meaning the answers are
        ready to be submitted. Raises IncompleteStepError (step unchanged)
        when a required question of the current step has no answer.
        """
        missing = self.current.missing(self.answers)
        if missing:
            raise IncompleteStepError(self.step, missing)
        if self.is_last_step:
            return True
        self.step += 1
        return False

    def previous(self) -> bool:
        if self.is_first_step:
            return False
        self.step -= 1
        return True

    def submit(self, profile: Profile):
        for step in self.steps:
            missing = step.missing(self.answers)
            if missing:
                raise IncompleteStepError(self.steps.index(step) + 1, missing)

        preferences = self.preferences_class.from_answers(self.answers)
        try:
            Profile.objects.filter(pk=profile.pk).update(
                onboarding_answers=preferences.to_json(),
                onboarding_completed=True,
            )
        except DatabaseError as e:
            logger.exception("Saving onboarding answers failed for user %s", profile.pk)
            raise OnboardingSubmitError("Failed to save preferences. Please try again.") from e

        profile.onboarding_answers = preferences.to_json()
        profile.onboarding_completed = True
        logger.info("Onboarding completed for user %s", profile.pk)
        return preferences
