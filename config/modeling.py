"""
Model Selection Settings

Defaults for the police attendance report. Every search space here can be
overridden from the command line (--lasso-grid, --gbm-grid) or a JSON file
(--grid-file).
"""

# Reproducibility
RANDOM_STATE = 42

# Resampling
CV_FOLDS = 5
STRATIFY_FOLDS = True
TEST_FRACTION = 0.25

# LASSO penalty on the glmnet scale (penalty per record); large values
# shrink everything to the intercept
LASSO_SEARCH_SPACE = {
    'lambda': [0.1, 0.03, 0.01, 0.003, 0.001, 0.0003],
}

# Gradient boosting (gbm vocabulary, mapped onto xgboost)
GBM_SEARCH_SPACE = {
    'n_trees': [100, 300],
    'shrinkage': [0.1, 0.05],
    'interaction_depth': [2, 4],
}

# Parallelism and deadline for each grid search
N_JOBS = 1
TUNING_TIMEOUT_SECONDS = None

# MLflow
EXPERIMENT_NAME = 'police_attendance_selection'
