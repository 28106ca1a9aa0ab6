"""Domain layer: models and statutory calculators."""
