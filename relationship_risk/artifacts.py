"""
Artifact management for pipeline outputs.

Layout under the output directory:

    models/      fitted predictors (joblib)
    reports/     evaluation reports, dataset statistics (JSON)
    importance/  global feature importance (CSV)
    configs/     configuration used for the run (YAML)
    metadata.json
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

logger = logging.getLogger(__name__)

SUBDIRECTORIES = ("models", "reports", "importance", "configs")


class ArtifactManager:
    """
    Writes pipeline artifacts into a fixed directory layout.

    Attributes:
        output_dir: Root directory for all artifacts
    """

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)
        for name in SUBDIRECTORIES:
            (self.output_dir / name).mkdir(parents=True, exist_ok=True)

    def model_path(self, model_key: str) -> Path:
        return self.output_dir / "models" / f"{model_key}.joblib"

    def save_model(self, trainer, model_key: str) -> Path:
        """Persist a fitted RiskModelTrainer."""
        path = self.model_path(model_key)
        trainer.save(str(path))
        return path

    def save_feature_importance(self, report, name: str) -> Path:
        """Save a FeatureImportanceReport as CSV."""
        path = self.output_dir / "importance" / f"{name}_importance.csv"
        report.save_csv(str(path))
        return path

    def save_statistics(self, statistics, name: str = "dataset") -> Path:
        """Save DatasetStatistics as JSON."""
        path = self.output_dir / "reports" / f"{name}_statistics.json"
        with open(path, "w") as f:
            json.dump(statistics.to_dict(), f, indent=2)
        logger.info(f"Saved dataset statistics to {path}")
        return path

    def save_evaluation_report(self, report, name: str) -> Path:
        """Save an EvaluationReport as JSON."""
        path = self.output_dir / "reports" / f"{name}_evaluation.json"
        report.save(str(path))
        return path

    def save_metadata(self, metadata: Dict[str, Any]) -> Path:
        path = self.output_dir / "metadata.json"
        with open(path, "w") as f:
            json.dump(metadata, f, indent=2, default=str)
        logger.info(f"Saved metadata to {path}")
        return path

    def save_yaml_config(self, config: Dict[str, Any], name: str) -> Path:
        path = self.output_dir / "configs" / f"{name}.yaml"
        with open(path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)
        logger.info(f"Saved config to {path}")
        return path

    def list_artifacts(self) -> Dict[str, List[str]]:
        """
        List saved files grouped by subdirectory.

        Returns:
            Mapping of subdirectory name to sorted file names; files at the
            root are listed under "."
        """
        artifacts: Dict[str, List[str]] = {}
        root_files = sorted(p.name for p in self.output_dir.iterdir() if p.is_file())
        if root_files:
            artifacts["."] = root_files
        for name in SUBDIRECTORIES:
            files = sorted(p.name for p in (self.output_dir / name).iterdir() if p.is_file())
            if files:
                artifacts[name] = files
        return artifacts
