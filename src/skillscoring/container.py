"\"\"\"Dependency injection container for the scoring engine.\"\"\""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import (
    AdjustmentConfig,
    AdjustmentPipeline,
    ConfidenceConfig,
    CorpusConfig,
    CorpusCurator,
    CuratorConfig,
    EnsembleArbitrator,
    GamingConfig,
    GamingDetector,
    IntegrityConfig,
    IntegrityEvaluator,
    ReferenceCorpusScorer,
    ReviewConfig,
    ReviewRouter,
    SimilarityEngine,
    ValidatorRegistry,
)
from .core.validators import (
    BooleanSearchConfig,
    BooleanSearchValidator,
    GeneralConfig,
    GeneralValidator,
    JobDescriptionConfig,
    JobDescriptionValidator,
    OutreachConfig,
    OutreachValidator,
    PlatformSourcingConfig,
    PlatformSourcingValidator,
    StrategyValidator,
)
from .embeddings import HashedTermEmbeddingClient
from .events import BackgroundPublisher
from .feedback import FeedbackComposer
from .llm import CrossCheckConfig, GenerativeScorer, ModelTier
from .pipeline import SubmissionPipeline
from .stores import (
    InMemoryAttemptStore,
    InMemoryGameRegistry,
    InMemoryReferenceCorpus,
    InMemoryReviewQueue,
    NullAnalyticsSink,
)


class ScoringContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    game_registry = providers.Singleton(InMemoryGameRegistry)
    attempt_store = providers.Singleton(InMemoryAttemptStore)
    reference_store = providers.Singleton(InMemoryReferenceCorpus)
    review_queue = providers.Singleton(InMemoryReviewQueue)
    analytics = providers.Singleton(NullAnalyticsSink)

    general_validator = providers.Singleton(GeneralValidator)
    strategy_validator = providers.Singleton(StrategyValidator, general=general_validator)
    boolean_validator = providers.Singleton(BooleanSearchValidator)
    outreach_validator = providers.Singleton(OutreachValidator)
    platform_validator = providers.Singleton(PlatformSourcingValidator)
    job_description_validator = providers.Singleton(JobDescriptionValidator)

    validators = providers.List(
        general_validator,
        strategy_validator,
        boolean_validator,
        outreach_validator,
        platform_validator,
        job_description_validator,
    )

    validator_registry = providers.Singleton(ValidatorRegistry, validators=validators)

    embedding_client = providers.Singleton(HashedTermEmbeddingClient)
    similarity_engine = providers.Singleton(SimilarityEngine, client=embedding_client)

    model_client = providers.Object(None)
    generative_scorer = providers.Singleton(GenerativeScorer, client=model_client)

    corpus_scorer = providers.Singleton(ReferenceCorpusScorer, store=reference_store)
    arbitrator = providers.Singleton(EnsembleArbitrator, weights=config.ensemble_weights)
    gaming_detector = providers.Singleton(GamingDetector)
    integrity_evaluator = providers.Singleton(IntegrityEvaluator, gaming=gaming_detector)
    adjustments = providers.Singleton(AdjustmentPipeline)
    review_router = providers.Singleton(ReviewRouter)
    curator = providers.Singleton(CorpusCurator, store=reference_store)
    feedback_composer = providers.Singleton(FeedbackComposer)
    publisher = providers.Singleton(BackgroundPublisher)

    pipeline = providers.Factory(
        SubmissionPipeline,
        games=game_registry,
        attempts=attempt_store,
        review_queue=review_queue,
        validators=validator_registry,
        generative=generative_scorer,
        similarity=similarity_engine,
        corpus=corpus_scorer,
        arbitrator=arbitrator,
        integrity=integrity_evaluator,
        adjustments=adjustments,
        router=review_router,
        curator=curator,
        composer=feedback_composer,
        analytics=analytics,
        publisher=publisher,
    )


def create_container(*, settings: dict | None = None) -> ScoringContainer:
    """Instantiate container with optional overrides."""

    container = ScoringContainer()

    if not settings:
        return container

    core_settings = settings.get("core", {}) if isinstance(settings, dict) else {}
    if core_settings:
        container.config.override(core_settings)
        if "confidence" in core_settings:
            container.arbitrator.override(
                providers.Singleton(
                    EnsembleArbitrator,
                    weights=container.config.ensemble_weights,
                    config=ConfidenceConfig(**core_settings["confidence"]),
                )
            )

    validator_settings = settings.get("validators", {})

    if "general" in validator_settings:
        general_config = GeneralConfig(**validator_settings["general"])
        container.general_validator.override(providers.Singleton(GeneralValidator, config=general_config))

    if "boolean" in validator_settings:
        boolean_config = BooleanSearchConfig(**validator_settings["boolean"])
        container.boolean_validator.override(providers.Singleton(BooleanSearchValidator, config=boolean_config))

    if "outreach" in validator_settings:
        outreach_config = OutreachConfig(**validator_settings["outreach"])
        container.outreach_validator.override(providers.Singleton(OutreachValidator, config=outreach_config))

    if "platform" in validator_settings:
        platform_config = PlatformSourcingConfig(**validator_settings["platform"])
        container.platform_validator.override(
            providers.Singleton(PlatformSourcingValidator, config=platform_config)
        )

    if "job_description" in validator_settings:
        jd_config = JobDescriptionConfig(**validator_settings["job_description"])
        container.job_description_validator.override(
            providers.Singleton(JobDescriptionValidator, config=jd_config)
        )

    if "default_category" in validator_settings:
        container.validator_registry.override(
            providers.Singleton(
                ValidatorRegistry,
                validators=container.validators,
                default_category=validator_settings["default_category"],
            )
        )

    if "scoring" in settings:
        container.adjustments.override(
            providers.Singleton(AdjustmentPipeline, config=AdjustmentConfig(**settings["scoring"]))
        )

    if "corpus" in settings:
        container.corpus_scorer.override(
            providers.Singleton(
                ReferenceCorpusScorer,
                store=container.reference_store,
                config=CorpusConfig(**settings["corpus"]),
            )
        )

    if "gaming" in settings:
        container.gaming_detector.override(
            providers.Singleton(GamingDetector, config=GamingConfig(**settings["gaming"]))
        )

    if "integrity" in settings:
        container.integrity_evaluator.override(
            providers.Singleton(
                IntegrityEvaluator,
                config=IntegrityConfig(**settings["integrity"]),
                gaming=container.gaming_detector,
            )
        )

    if "review" in settings:
        container.review_router.override(
            providers.Singleton(ReviewRouter, config=ReviewConfig(**settings["review"]))
        )

    if "curator" in settings:
        container.curator.override(
            providers.Singleton(
                CorpusCurator,
                store=container.reference_store,
                config=CuratorConfig(**settings["curator"]),
            )
        )

    llm_settings = settings.get("llm", {})

    if "embedding_dimensions" in llm_settings:
        container.embedding_client.override(
            providers.Singleton(HashedTermEmbeddingClient, dimensions=llm_settings["embedding_dimensions"])
        )

    if "embedding_timeout" in llm_settings:
        container.similarity_engine.override(
            providers.Singleton(
                SimilarityEngine,
                client=container.embedding_client,
                timeout=llm_settings["embedding_timeout"],
            )
        )

    if "tiers" in llm_settings or "cross_check" in llm_settings:
        tiers = [ModelTier(**tier) for tier in llm_settings.get("tiers", [])] or None
        cross_check = dict(llm_settings.get("cross_check", {}))
        if "tier" in cross_check:
            cross_check["tier"] = ModelTier(**cross_check["tier"])
        container.generative_scorer.override(
            providers.Singleton(
                GenerativeScorer,
                client=container.model_client,
                tiers=tiers,
                cross_check=CrossCheckConfig(**cross_check),
            )
        )

    return container
