# server/planner.py

from typing import List, Optional

from .config import Settings, load_settings
from .errors import InvalidInput, PlanError
from .llm import PromptProvider, build_provider
from .parsing import BestEffortSplitParser, PlanParser, StrictJsonParser
from .prompts import FRAMEWORK_SYSTEM, LEGACY_SYSTEM, build_user_prompt
from .schemas import AgeGroup, PlanIn, PlanOut, ReflectionStep

REQUIRED_FIELDS = ("scenario", "description", "virtue")


class ReflectionPlanService:
    """
    One request in, one provider call, one nine-step plan out.

    The provider and parser are injected, so the same service runs every
    variant (JSON-mode OpenAI/Groq/Claude, or the legacy free-text split).
    """

    def __init__(
        self,
        provider: PromptProvider,
        parser: PlanParser,
        system_prompt: str = FRAMEWORK_SYSTEM,
        variant: str = "custom",
    ):
        self.provider = provider
        self.parser = parser
        self.system_prompt = system_prompt
        self.variant = variant

    @staticmethod
    def validate(request: PlanIn) -> AgeGroup:
        missing: List[str] = []
        for name in REQUIRED_FIELDS:
            value = getattr(request, name)
            if not isinstance(value, str) or not value.strip():
                missing.append(name)
        if missing:
            raise InvalidInput(missing)
        return AgeGroup.normalize(request.age_group)

    def generate(self, request: PlanIn) -> PlanOut:
        age_group = self.validate(request)

        user_prompt = build_user_prompt(
            scenario=request.scenario,
            description=request.description,
            virtue=request.virtue,
            age_group=age_group,
        )

        raw = self.provider.complete(self.system_prompt, user_prompt)
        try:
            steps = self.parser.parse(raw)
        except PlanError:
            print(
                f"[astrolabe] {self.variant} raw provider text (first 200 chars):",
                (raw or "")[:200],
            )
            raise

        return PlanOut(steps=[ReflectionStep.model_validate(s) for s in steps])


def build_service(settings: Optional[Settings] = None) -> ReflectionPlanService:
    """Wire the configured variant: provider client, parser, prompt."""
    settings = settings or load_settings()
    variant = settings.variant

    parser: PlanParser
    if variant.parser == "split":
        parser = BestEffortSplitParser()
    else:
        parser = StrictJsonParser()

    system_prompt = LEGACY_SYSTEM if variant.prompt == "legacy" else FRAMEWORK_SYSTEM

    return ReflectionPlanService(
        provider=build_provider(settings),
        parser=parser,
        system_prompt=system_prompt,
        variant=variant.name,
    )
