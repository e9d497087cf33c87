from __future__ import annotations

import copy
import json

import pytest

from mindforge.core.config import settings
from mindforge.llm import prompts

SYSTEM_TO_STEP = {
    prompts.COMPLEXITY_SYSTEM: "analyze_complexity",
    prompts.STEPS_SYSTEM: "generate_steps",
    prompts.RISKS_SYSTEM: "identify_risks",
    prompts.NEXT_ACTION_SYSTEM: "determine_next_action",
}

ANALYSIS = {
    "summary": "Learning basic guitar chords and strumming is a short, skill-based goal.",
    "category": "Learning",
    "complexity": "moderate",
}

STEPS = {
    "actionSteps": [
        {
            "stepNumber": 1,
            "title": "Get a guitar and tuner",
            "description": "Borrow or buy an acoustic guitar and install a tuner app.",
            "estimatedTime": "2 hours",
            "dependencies": [],
        },
        {
            "stepNumber": 2,
            "title": "Learn open chords",
            "description": "Practice G, C, D and E minor until changes are clean.",
            "estimatedTime": "1 week",
            "dependencies": ["Get a guitar and tuner"],
        },
        {
            "stepNumber": 3,
            "title": "Practice strumming patterns",
            "description": "Work through down-up patterns with a metronome.",
            "estimatedTime": "1 week",
            "dependencies": ["Learn open chords"],
        },
        {
            "stepNumber": 4,
            "title": "Play a full song",
            "description": "Pick a four-chord song and play it start to finish.",
            "estimatedTime": "3 days",
            "dependencies": ["Learn open chords", "Practice strumming patterns"],
        },
    ],
    "totalEstimatedTime": "3 weeks",
}

RISKS = {
    "risks": [
        {
            "id": "risk_1",
            "title": "Sore fingertips",
            "severity": "low",
            "mitigation": "Keep sessions to 20 minutes until calluses form.",
        },
        {
            "id": "risk_2",
            "title": "Skipping practice",
            "severity": "medium",
            "mitigation": "Schedule a fixed daily slot.",
        },
    ]
}

NEXT_ACTION = {
    "action": "Tune the guitar and learn the G chord shape.",
    "reasoning": "Every later step needs an in-tune guitar and one chord to start from.",
    "timeframe": "Today",
}

FRAGMENTS = {
    "analyze_complexity": ANALYSIS,
    "generate_steps": STEPS,
    "identify_risks": RISKS,
    "determine_next_action": NEXT_ACTION,
}


class ScriptedGateway:
    """
    Answers by tool. A script entry is a list of replies (dict, str or
    exception) consumed in order; the last reply repeats.
    """

    def __init__(self, script: dict | None = None):
        self.script = {k: list(v) for k, v in (script or {}).items()}
        self.calls: list[str] = []
        self.prompts: dict[str, list[str]] = {}

    async def chat(self, system: str, user: str) -> str:
        step = SYSTEM_TO_STEP[system]
        self.calls.append(step)
        self.prompts.setdefault(step, []).append(user)

        queue = self.script.get(step)
        if queue:
            reply = queue.pop(0) if len(queue) > 1 else queue[0]
        else:
            reply = FRAGMENTS[step]
        if isinstance(reply, Exception):
            raise reply
        return reply if isinstance(reply, str) else json.dumps(reply)


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fragments() -> dict:
    return copy.deepcopy(FRAGMENTS)


@pytest.fixture
def gateway_cls():
    return ScriptedGateway


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "LLM_PROVIDER", "openrouter")
    monkeypatch.setattr(settings, "OPENROUTER_API_KEY", "")
    monkeypatch.setattr(settings, "GATEWAY_BASE_DELAY_S", 0.0)
    monkeypatch.setattr(settings, "STEP_BASE_DELAY_S", 0.0)
