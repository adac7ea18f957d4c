"""
Main pipeline runner for the relationship risk assessment.

This is the single entrypoint for the offline training pipeline.

Usage:
    python -m relationship_risk.run --config configs/config.yaml

The pipeline performs the following steps:
1. Build the question set
2. Synthesize labeled survey responses
3. Compute descriptive statistics
4. Train the risk model on a training split
5. Evaluate on the held-out split
6. Compute global feature importance
7. Save all artifacts
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Dict, Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def _banner(title: str) -> None:
    logger.info("=" * 60)
    logger.info(title)
    logger.info("=" * 60)


def run_pipeline(
    config_path: str,
    seed: Optional[int] = None,
    output_dir: Optional[str] = None,
    question_set_name: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run the complete training pipeline.

    Args:
        config_path: Path to the configuration YAML file
        seed: If provided, overrides global.random_seed
        output_dir: If provided, write artifacts here instead of the config default
        question_set_name: If provided, overrides questionnaire.question_set

    Returns:
        Dictionary with pipeline results and paths to artifacts
    """
    from . import __version__
    from .artifacts import ArtifactManager
    from .configs import load_config, validate_config
    from .errors import ConfigError
    from .evaluation import compute_dataset_statistics, create_evaluation_report
    from .modeling import RiskModelTrainer, extract_feature_importance
    from .questionnaire import get_question_set
    from .synthesis import DatasetSynthesizer, SynthesisConfig

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    _banner("RELATIONSHIP RISK PIPELINE")

    config = load_config(config_path)
    if seed is not None:
        config["global"]["random_seed"] = seed
    if output_dir is not None:
        config["global"]["output_dir"] = output_dir
    if question_set_name is not None:
        config["questionnaire"]["question_set"] = question_set_name

    issues = validate_config(config)
    if issues:
        for issue in issues:
            logger.error(f"Config issue: {issue}")
        raise ConfigError(f"Invalid configuration: {'; '.join(issues)}")

    setup_logging(config["global"].get("log_level", "INFO"))

    random_seed = config["global"]["random_seed"]
    artifact_manager = ArtifactManager(config["global"]["output_dir"])
    logger.info(f"Random seed: {random_seed}")

    # =========================================================================
    # 2. Build question set and synthesize data
    # =========================================================================
    _banner("STEP 1: Synthesizing Survey Data")

    question_set = get_question_set(config["questionnaire"]["question_set"])
    logger.info(f"Question set '{question_set.name}': {len(question_set)} questions")

    synthesis_config = SynthesisConfig.from_config(config)
    dataset = DatasetSynthesizer.from_question_set(question_set, synthesis_config).generate()

    # =========================================================================
    # 3. Descriptive statistics
    # =========================================================================
    _banner("STEP 2: Computing Dataset Statistics")

    statistics = compute_dataset_statistics(dataset.features, dataset.labels, question_set=question_set)
    logger.info("\n" + statistics.summary())
    artifact_manager.save_statistics(statistics)

    # =========================================================================
    # 4. Train
    # =========================================================================
    _banner("STEP 3: Training Risk Model")

    test_ratio = config["modeling"].get("test_ratio", 0.2)
    train_set, test_set = dataset.split(test_ratio=test_ratio, random_seed=random_seed)
    logger.info(f"Split: {train_set.n_samples} train / {test_set.n_samples} test")

    trainer = RiskModelTrainer(config, random_seed=random_seed)
    trainer.fit(train_set.features, train_set.labels, question_set.feature_names())

    # =========================================================================
    # 5. Evaluate
    # =========================================================================
    _banner("STEP 4: Evaluating Model")

    report = create_evaluation_report(
        trainer.model_type,
        test_set.labels,
        trainer.predict(test_set.features)
    )
    report.additional_metrics["train"] = trainer.evaluate(train_set.features, train_set.labels)
    artifact_manager.save_evaluation_report(report, "risk_model")
    logger.info("\n" + report.summary())

    # =========================================================================
    # 6. Global feature importance
    # =========================================================================
    _banner("STEP 5: Feature Importance")

    evaluation_config = config.get("evaluation", {})
    importance_report = extract_feature_importance(
        trainer,
        trainer.model_type,
        question_set=question_set,
        top_k=evaluation_config.get("top_k", 10),
        n_repeats=evaluation_config.get("permutation_repeats", 5)
    )
    artifact_manager.save_feature_importance(importance_report, "risk_model")
    logger.info("\n" + importance_report.summary())

    # =========================================================================
    # 7. Save model and metadata
    # =========================================================================
    trainer.data_signature = {"question_set": question_set.name, **synthesis_config.to_dict()}
    model_key = config.get("persistence", {}).get("model_key", "relationship-model")
    model_path = artifact_manager.save_model(trainer, model_key)

    metadata = {
        "pipeline_version": __version__,
        "run_timestamp": datetime.now().isoformat(),
        "config_path": config_path,
        "random_seed": random_seed,
        "question_set": question_set.name,
        "n_questions": len(question_set),
        "n_samples": dataset.n_samples,
        "label_policy": synthesis_config.label_policy,
        "divorce_count": statistics.divorce_count,
        "stay_count": statistics.stay_count,
        "model_type": trainer.model_type,
        "model_path": str(model_path),
        "test_accuracy": report.classification.accuracy,
    }
    artifact_manager.save_metadata(metadata)
    artifact_manager.save_yaml_config(config, "config_used")

    # =========================================================================
    # Summary
    # =========================================================================
    _banner("PIPELINE COMPLETE")

    artifacts = artifact_manager.list_artifacts()
    logger.info("Artifacts saved:")
    for category, files in artifacts.items():
        logger.info(f"  {category}/")
        for f in files:
            logger.info(f"    - {f}")

    return {
        "success": True,
        "output_dir": str(artifact_manager.output_dir),
        "artifacts": artifacts,
        "metadata": metadata
    }


def main(argv=None):
    """Main entry point for the pipeline."""
    parser = argparse.ArgumentParser(
        description="Train and evaluate the relationship risk model"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (overrides config)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for artifacts (overrides config)"
    )
    parser.add_argument(
        "--question-set",
        type=str,
        default=None,
        help="Question set to use: core15 or extended54 (overrides config)"
    )

    args = parser.parse_args(argv)

    try:
        result = run_pipeline(
            args.config,
            seed=args.seed,
            output_dir=args.output_dir,
            question_set_name=args.question_set
        )
        if result["success"]:
            logger.info("Pipeline completed successfully!")
            return 0
        else:
            logger.error("Pipeline failed!")
            return 1
    except Exception as e:
        logger.exception(f"Pipeline failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
