#!/usr/bin/env python3
"""
Model Persistence and Artifact Management

Saves the final fitted model with its selected configuration, cross-validated
error and test metrics, so a report's outcome can be reloaded and reused.

Usage:
    from accident_modeling.utils.persistence import save_model_artifact, load_model_artifact

    artifact_path = save_model_artifact(
        model=final_model,
        feature_cols=ACCIDENT_NUMERIC_FEATURES + ACCIDENT_CATEGORICAL_FEATURES,
        config={'lambda': 0.01},
        cv_score=0.142,
        metrics={'test_sensitivity': 0.21},
        model_name='lasso_logistic'
    )

    model, metadata = load_model_artifact(artifact_path)
    predictions = model.predict(X_new)
"""

import joblib
import json
import sklearn
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional, Tuple, List


def _json_safe(value):
    if hasattr(value, 'item'):
        return value.item()
    return value


def save_model_artifact(
    model,
    feature_cols: List[str],
    config: Dict[str, Any],
    cv_score: Optional[float],
    metrics: Dict[str, float],
    model_name: str,
    output_dir='models/artifacts',
    verbose: bool = True
) -> Path:
    """
    Save fitted model and metadata together

    Args:
        model: Fitted model (anything joblib can pickle)
        feature_cols: Feature column names used
        config: Selected hyperparameter configuration
        cv_score: Cross-validated misclassification rate of `config`
        metrics: Held-out metrics (e.g., {'test_sensitivity': 0.21})
        model_name: Human-readable model name
        output_dir: Directory to save artifacts

    Returns:
        Path to saved model artifact directory
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    artifact_dir = output_dir / f'{model_name}_{timestamp}'
    artifact_dir.mkdir(parents=True, exist_ok=True)

    model_path = artifact_dir / 'model.pkl'
    joblib.dump(model, model_path)

    metadata = {
        'timestamp': timestamp,
        'model_name': model_name,
        'model_type': type(model).__name__,
        'feature_cols': list(feature_cols),
        'n_features': len(feature_cols),
        'config': {k: _json_safe(v) for k, v in config.items()},
        'cv_mmce': _json_safe(cv_score),
        'metrics': {k: _json_safe(v) for k, v in metrics.items()},
        'sklearn_version': sklearn.__version__,
    }

    metadata_path = artifact_dir / 'metadata.json'
    with open(metadata_path, 'w') as f:
        json.dump(metadata, f, indent=2)

    readme_path = artifact_dir / 'README.md'
    with open(readme_path, 'w') as f:
        f.write(f"# {model_name}\n\n")
        f.write(f"**Created**: {timestamp}\n\n")
        f.write(f"**Model**: {metadata['model_type']}\n\n")
        f.write(f"**Features**: {len(feature_cols)}\n\n")
        f.write("## Selected configuration\n\n")
        for param, value in metadata['config'].items():
            f.write(f"- {param}: {value}\n")
        if cv_score is not None:
            f.write(f"\nCross-validated mmce: {cv_score:.4f}\n")
        f.write("\n## Metrics\n\n")
        for metric_name, metric_value in metrics.items():
            f.write(f"- {metric_name}: {metric_value}\n")
        f.write("\n## Usage\n\n")
        f.write("```python\n")
        f.write("from accident_modeling.utils.persistence import load_model_artifact\n\n")
        f.write(f"model, metadata = load_model_artifact('{artifact_dir}')\n")
        f.write("predictions = model.predict(X_new)\n")
        f.write("```\n")

    if verbose:
        print(f'\n✓ Saved model artifact to {artifact_dir}/')
        print(f'  - model.pkl ({model_path.stat().st_size / 1024:.1f} KB)')
        print(f'  - metadata.json')
        print(f'  - README.md')

    return artifact_dir


def load_model_artifact(artifact_path) -> Tuple[Any, Dict]:
    """
    Load a saved model artifact

    Args:
        artifact_path: Path to artifact directory

    Returns:
        Tuple of (model, metadata_dict)
    """
    artifact_path = Path(artifact_path)

    if not artifact_path.exists():
        raise FileNotFoundError(f"Artifact not found: {artifact_path}")

    model_path = artifact_path / 'model.pkl'
    if not model_path.exists():
        raise FileNotFoundError(f"Model not found: {model_path}")

    model = joblib.load(model_path)

    metadata_path = artifact_path / 'metadata.json'
    if metadata_path.exists():
        with open(metadata_path, 'r') as f:
            metadata = json.load(f)
    else:
        metadata = {}

    return model, metadata


def find_latest_artifact(model_name: str, artifacts_dir='models/artifacts') -> Optional[Path]:
    """
    Find the most recent artifact for a given model name

    Returns:
        Path to latest artifact, or None if not found
    """
    artifacts_dir = Path(artifacts_dir)

    if not artifacts_dir.exists():
        return None

    matching = sorted(artifacts_dir.glob(f'{model_name}_*'), reverse=True)
    return matching[0] if matching else None
