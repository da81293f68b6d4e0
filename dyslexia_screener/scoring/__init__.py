"""
Risk scoring: pure functions, no DB or I/O.

Modules
-------
engine         : weight table, tier thresholds, compute_risk(): the weighted
                 cognitive risk score, tier and concern areas.
checklist      : category_score() / checklist_channel_score(): direct,
                 age-group-filtered checklist percentages.
overall        : compute_overall_risk(): mean over the cognitive, checklist
                 and handwriting channels that have data.
interpretation : interpret_score() / attach_interpretations(): per-test labels.
"""
