"\"\"\"Rule-based validator strategies for each skill category.\"\"\""

from .base import FILLER_FEEDBACK, SkillValidator, ValidationResult
from .boolean_search import BooleanSearchConfig, BooleanSearchValidator
from .general import GeneralConfig, GeneralValidator, StrategyValidator
from .job_description import JobDescriptionConfig, JobDescriptionValidator
from .outreach import OutreachConfig, OutreachValidator
from .platform_sourcing import PlatformSourcingConfig, PlatformSourcingValidator
from .registry import ValidatorRegistry


def default_validators() -> list[SkillValidator]:
    return [
        GeneralValidator(),
        StrategyValidator(),
        BooleanSearchValidator(),
        OutreachValidator(),
        PlatformSourcingValidator(),
        JobDescriptionValidator(),
    ]


__all__ = [
    "FILLER_FEEDBACK",
    "SkillValidator",
    "ValidationResult",
    "ValidatorRegistry",
    "default_validators",
    "BooleanSearchConfig",
    "BooleanSearchValidator",
    "GeneralConfig",
    "GeneralValidator",
    "StrategyValidator",
    "JobDescriptionConfig",
    "JobDescriptionValidator",
    "OutreachConfig",
    "OutreachValidator",
    "PlatformSourcingConfig",
    "PlatformSourcingValidator",
]
