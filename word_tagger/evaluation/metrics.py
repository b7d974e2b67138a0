"""
Evaluation metrics for word tagging experiments.

This module centralizes the computation of the multiclass metrics reported
after training:

- micro accuracy (fraction of correctly tagged words)
- macro accuracy (mean per-tag recall)
- top-k accuracy for every k, from the classifier's decision scores
- per-tag precision and recall
- confusion matrix

All values are computed with sklearn.metrics; `format_metrics_report`
renders them as a text block for the training log.
"""

from __future__ import annotations

from typing import Dict, Any, List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    confusion_matrix,
    precision_recall_fscore_support,
    top_k_accuracy_score,
)


ArrayLike = Union[Sequence[Any], np.ndarray]


def compute_multiclass_metrics(
    y_true: ArrayLike,
    y_pred: ArrayLike,
    class_names: Sequence[Any],
    scores: Optional[np.ndarray] = None,
) -> Dict[str, Any]:
    """
    Compute multiclass classification metrics for a predicted tag set.

    Parameters
    ----------
    y_true : ArrayLike
        Ground-truth tags.
    y_pred : ArrayLike
        Predicted tags, same shape as y_true.
    class_names : Sequence[Any]
        All tags known to the model, in the column order of `scores`.
    scores : Optional[np.ndarray]
        Decision scores of shape (n_samples, n_classes). Top-k accuracy is
        only reported when given and there are more than two classes.

    Returns
    -------
    Dict[str, Any]
        Dictionary with the keys:
            - "micro_accuracy"
            - "macro_accuracy"
            - "top_k_accuracy": list, entry k-1 holds top-k accuracy (or None)
            - "per_class": {tag: {"precision": ..., "recall": ..., "support": ...}}
            - "class_names"
            - "confusion_matrix": 2D list, rows = true tags, columns = predicted
    """
    y_true_arr = np.asarray(y_true)
    y_pred_arr = np.asarray(y_pred)
    labels = list(class_names)

    micro = accuracy_score(y_true_arr, y_pred_arr)
    macro = balanced_accuracy_score(y_true_arr, y_pred_arr)

    precision, recall, _, support = precision_recall_fscore_support(
        y_true_arr,
        y_pred_arr,
        labels=labels,
        average=None,
        zero_division=0,
    )

    top_k: Optional[List[float]] = None
    if scores is not None and len(labels) > 2:
        # Tags the model never saw cannot be ranked; they count as misses.
        known = np.isin(y_true_arr, labels)
        fraction_known = float(known.mean()) if len(known) else 0.0
        top_k = []
        for k in range(1, len(labels) + 1):
            if not known.any():
                top_k.append(0.0)
                continue
            score = top_k_accuracy_score(
                y_true_arr[known], np.asarray(scores)[known], k=k, labels=labels
            )
            top_k.append(float(score) * fraction_known)

    cm = confusion_matrix(y_true_arr, y_pred_arr, labels=labels)

    return {
        "micro_accuracy": float(micro),
        "macro_accuracy": float(macro),
        "top_k_accuracy": top_k,
        "per_class": {
            str(label): {
                "precision": float(p),
                "recall": float(r),
                "support": int(s),
            }
            for label, p, r, s in zip(labels, precision, recall, support)
        },
        "class_names": [str(label) for label in labels],
        "confusion_matrix": cm.tolist(),
    }


def format_confusion_matrix(metrics: Dict[str, Any]) -> str:
    names = metrics["class_names"]
    df = pd.DataFrame(
        metrics["confusion_matrix"],
        index=pd.Index(names, name="truth \\ predicted"),
        columns=names,
    )
    with pd.option_context("display.max_rows", None, "display.max_columns", None, "display.width", 200):
        return df.to_string()


def format_metrics_report(metrics: Dict[str, Any]) -> str:
    """
    Render the metrics dictionary as a human-readable report.

    Parameters
    ----------
    metrics : Dict[str, Any]
        Output of `compute_multiclass_metrics`.

    Returns
    -------
    str
        Multi-line report.
    """
    lines = [
        "*" * 60,
        "*    Metrics for multi-class classification model",
        "*" + "-" * 59,
        f"Accuracy (micro-avg):   {metrics['micro_accuracy']:.4f}   # 0..1, higher is better",
        f"Accuracy (macro):       {metrics['macro_accuracy']:.4f}   # 0..1, higher is better",
    ]

    top_k = metrics.get("top_k_accuracy")
    if top_k:
        formatted = ", ".join(f"{a:.4f}" for a in top_k)
        lines.append(f"Top-K accuracy:         [{formatted}]   # 0..1, higher is better")
    else:
        lines.append("Top-K accuracy:         n/a (needs scores and more than two tags)")

    lines.append("")
    lines.append("Per class metrics")
    for i, (name, values) in enumerate(metrics["per_class"].items()):
        lines.append(
            f"Precision for class {i} ({name + '):':<11} {values['precision']:.4f}"
            f"   Recall {values['recall']:.4f}   Support {values['support']}"
        )

    lines.append("")
    lines.append(format_confusion_matrix(metrics))
    lines.append("*" * 60)
    return "\n".join(lines)
