"""Misclassification rate and confusion-matrix metrics"""

import pytest

from accident_modeling.selection import (
    ConfusionCounts,
    DivisionUndefined,
    InvalidConfiguration,
    confusion_matrix,
    format_metric,
    majority_error_rate,
    misclassification_rate
)
from accident_modeling.evaluation import metrics_record


def test_confusion_matrix_counts_and_rates():
    predictions = ['Y', 'Y', 'N', 'N', 'Y']
    truths = ['Y', 'N', 'N', 'N', 'Y']

    counts = confusion_matrix(predictions, truths, positive_class='Y')

    assert counts.as_dict() == {
        'true_positive': 2,
        'false_positive': 1,
        'true_negative': 2,
        'false_negative': 0,
    }
    assert counts.sensitivity() == 1.0
    assert counts.specificity() == pytest.approx(2 / 3)
    assert counts.negative_predictive_value() == 1.0
    assert counts.positive_predictive_value() == pytest.approx(2 / 3)
    assert counts.accuracy() == pytest.approx(0.8)


def test_zero_denominator_raises():
    # Nothing predicted positive and nothing actually positive
    counts = confusion_matrix(['N', 'N'], ['N', 'N'], positive_class='Y')

    with pytest.raises(DivisionUndefined) as excinfo:
        counts.sensitivity()
    assert excinfo.value.metric == 'sensitivity'
    with pytest.raises(ZeroDivisionError):
        counts.positive_predictive_value()
    assert counts.specificity() == 1.0


def test_undefined_metrics_are_reported_not_zeroed():
    counts = ConfusionCounts(true_positive=0, false_positive=0, true_negative=5, false_negative=0)

    assert format_metric(counts.sensitivity) == 'undefined'
    assert format_metric(counts.specificity) == '1.0000'
    assert counts.derived()['sensitivity'] is None

    record = metrics_record(counts)
    assert 'test_sensitivity' not in record
    assert record['test_specificity'] == 1.0
    assert record['test_true_negative'] == 5


def test_misclassification_rate():
    assert misclassification_rate(['Y', 'N', 'N', 'Y'], ['Y', 'Y', 'N', 'N']) == 0.5


def test_length_mismatch_rejected():
    with pytest.raises(InvalidConfiguration):
        confusion_matrix(['Y'], ['Y', 'N'], positive_class='Y')
    with pytest.raises(InvalidConfiguration):
        misclassification_rate(['Y'], [])


def test_majority_error_rate(imbalanced_labels):
    assert majority_error_rate(imbalanced_labels) == pytest.approx(0.15)
    with pytest.raises(DivisionUndefined):
        majority_error_rate([])
