"""
Relationship Risk Assessment

This package implements a multiple-choice relationship questionnaire scored by a
small neural network trained on synthetic survey data, with a closed-form
weighted-average fallback when the network is unavailable.

Key Design Decisions:
- Questions carry explicit metadata (category, polarity, weight)
- Training data is synthesized from three latent relationship archetypes
- The scorer exposes a single predict(responses) -> probability contract
- Explanations come from counterfactual perturbation of one answer at a time
"""

__version__ = "1.0.0"
