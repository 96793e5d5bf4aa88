"""
Accident Modeling Module

Model selection and evaluation for UK road accidents: did a police officer attend the scene?

Modules:
- selection: Folds, hyperparameter grids, cross-validated grid search, confusion metrics
- preprocessing: Fixed feature space and sklearn preprocessing pipelines
- models: Majority baseline, LASSO logistic regression, gradient boosting
- evaluation: Test-set evaluation and information-gain feature ranking
- utils: Model artifacts and MLflow tracking
- run_report: The end-to-end selection report
"""

__version__ = "1.0.0"
