"""
Experiment runners for the two walkthroughs.

This module provides:
- cv_comparison: linear vs smooth vs wiggly models under repeated CV
- regression_walkthrough: factors, interactions, by-group and mixed models
"""
