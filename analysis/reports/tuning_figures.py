#!/usr/bin/env python3
"""
Model Selection Figures

- Cross-validated error across the hyperparameter grid (one panel per model)
- Held-out confusion matrix heatmap
- Information-gain feature ranking

Usage:
    from analysis.reports.tuning_figures import plot_tuning_curve, plot_confusion

    plot_tuning_curve(result, 'lambda', output_dir / 'lasso_tuning.png')
    plot_confusion(counts, 'LASSO', output_dir / 'lasso_confusion.png')
"""

from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

sns.set_style('whitegrid')


def plot_tuning_curve(result, x_param, output_path, hue_param=None, baseline_error=None):
    """
    Plot mean CV misclassification error against one hyperparameter

    Args:
        result: TuningResult
        x_param: Hyperparameter on the x axis
        output_path: PNG file to write
        hue_param: Optional second hyperparameter drawn as separate lines
        baseline_error: Optional majority-rule error drawn as a reference line

    Returns:
        Path to the written figure
    """
    table = result.score_table().dropna(subset=['mmce'])
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(8, 5))
    if hue_param is not None and hue_param in table.columns:
        table = table.assign(**{hue_param: table[hue_param].astype(str)})
        sns.lineplot(data=table, x=x_param, y='mmce', hue=hue_param, marker='o',
                     errorbar=None, ax=ax)
    else:
        sns.lineplot(data=table, x=x_param, y='mmce', marker='o', errorbar=None, ax=ax)

    if baseline_error is not None:
        ax.axhline(baseline_error, color='coral', linestyle='--', label='Majority baseline')
        ax.legend()

    x_values = table[x_param]
    # Log axis once values span two decades
    if pd.api.types.is_numeric_dtype(x_values) and (x_values > 0).all() \
            and x_values.max() / x_values.min() >= 100:
        ax.set_xscale('log')

    ax.set_title(f'{result.learner}: CV error by {x_param}', fontsize=13, fontweight='bold')
    ax.set_xlabel(x_param)
    ax.set_ylabel('Mean misclassification error')

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def plot_confusion(counts, model_label, output_path, positive_label='Y', negative_label='N'):
    """Heatmap of a ConfusionCounts (rows = truth, columns = prediction)"""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    matrix = np.array([
        [counts.true_negative, counts.false_positive],
        [counts.false_negative, counts.true_positive],
    ])

    fig, ax = plt.subplots(figsize=(5, 4))
    sns.heatmap(matrix, annot=True, fmt=',d', cmap='Blues', cbar=False,
                xticklabels=[negative_label, positive_label],
                yticklabels=[negative_label, positive_label], ax=ax)
    ax.set_xlabel('Predicted')
    ax.set_ylabel('Actual')
    ax.set_title(f'{model_label}: test confusion matrix', fontsize=12, fontweight='bold')

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


def plot_feature_ranking(ranking, output_path, top_n=15):
    """Horizontal bar chart of information gain"""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    top = ranking.head(top_n).sort_values(ascending=True)
    fig, ax = plt.subplots(figsize=(8, max(3, 0.4 * len(top))))
    ax.barh(range(len(top)), top.values, color='steelblue', alpha=0.8)
    ax.set_yticks(range(len(top)))
    ax.set_yticklabels(top.index, fontsize=10)
    ax.set_xlabel('Information gain (bits)', fontsize=11, fontweight='bold')
    ax.set_title('Feature ranking', fontsize=13, fontweight='bold')

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path
